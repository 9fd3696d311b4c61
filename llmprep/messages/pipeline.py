"""Chat message preparation pipeline.

Stages run in a fixed order, each returning new messages:

1. normalize        strip string content
2. fit to context   trim to the estimated character budget
3. reasoning        fold reasoning blocks into content (or drop them)
4. system           relocate system prompt + GUIDELINES
5. empty guard      replace empty content with a sentinel
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from llmprep.config.schema import PipelineConfig
from llmprep.logging import get_logger, preview
from llmprep.messages.empty import ensure_non_empty
from llmprep.messages.fit import fit_into_context
from llmprep.messages.normalize import normalize_messages
from llmprep.messages.reasoning import project_reasoning
from llmprep.messages.system import add_system_instructions
from llmprep.messages.types import ROLE_USER, Message, SystemMessageMode

if TYPE_CHECKING:
    from llmprep.capabilities import ModelCapabilities

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Prepared messages plus the system prompt for APIs that take it separately."""

    messages: list[Message] = field(default_factory=list)
    separate_system_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": self.messages,
            "separate_system_message": self.separate_system_message,
        }


def _last_user_text(messages: list[Message]) -> str:
    for msg in reversed(messages):
        if msg.get("role") == ROLE_USER and isinstance(msg.get("content"), str):
            return msg["content"]
    return ""


def prepare_messages(
    messages: list[dict[str, Any]],
    *,
    ai_instructions: str,
    supports_system_message: SystemMessageMode,
    supports_anthropic_reasoning_signature: bool,
    context_window: int,
    max_output_tokens: int | None,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Run the full preparation pipeline over a raw conversation.

    Args:
        messages: Raw ``{"role", "content"}`` dicts; assistant messages may
            carry a ``reasoning`` list. Never mutated.
        ai_instructions: Standing user instructions appended under GUIDELINES.
        supports_system_message: Where the model takes its system prompt.
        supports_anthropic_reasoning_signature: Whether reasoning blocks may be
            sent back verbatim.
        context_window: Model input window in tokens.
        max_output_tokens: Tokens reserved for the reply; None uses the
            configured default.
        config: Pipeline tunables; defaults when omitted.

    Returns:
        PipelineResult with the prepared messages and, for ``"separated"``
        models, the out-of-band system prompt.
    """
    cfg = config or PipelineConfig()
    if max_output_tokens is None:
        max_output_tokens = cfg.default_max_output_tokens

    normalized = normalize_messages(messages)
    fitted = fit_into_context(
        normalized,
        context_window=context_window,
        max_output_tokens=max_output_tokens,
        chars_per_token=cfg.chars_per_token,
        trim_to_len=cfg.trim_to_len,
        max_iterations=cfg.max_trim_iterations,
    )
    projected = project_reasoning(
        fitted,
        supports_anthropic_reasoning_signature=supports_anthropic_reasoning_signature,
    )
    placed, separate_system_message = add_system_instructions(
        projected,
        ai_instructions=ai_instructions,
        supports_system_message=supports_system_message,
    )
    final = ensure_non_empty(placed, sentinel=cfg.empty_message)

    logger.debug(
        "messages_prepared",
        input_count=len(messages),
        output_count=len(final),
        system_mode=supports_system_message or "inline",
        separated=separate_system_message is not None,
        last_user=preview(_last_user_text(final)),
    )
    return PipelineResult(messages=final, separate_system_message=separate_system_message)


def prepare_messages_for_model(
    messages: list[dict[str, Any]],
    capabilities: ModelCapabilities,
    *,
    ai_instructions: str = "",
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Run ``prepare_messages`` with flags taken from *capabilities*."""
    return prepare_messages(
        messages,
        ai_instructions=ai_instructions,
        supports_system_message=capabilities.supports_system_message,
        supports_anthropic_reasoning_signature=capabilities.supports_anthropic_reasoning_signature,
        context_window=capabilities.context_window,
        max_output_tokens=capabilities.max_output_tokens,
        config=config,
    )
