"""Model capability flags consumed by the pipeline.

Capability data itself comes from outside this package. ``ModelCapabilities``
is the shape the pipeline reads; ``capabilities_from_litellm`` fills it from
litellm's bundled model metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import litellm

from llmprep.logging import get_logger
from llmprep.messages.types import DEFAULT_MAX_OUTPUT_TOKENS, SystemMessageMode

logger = get_logger(__name__)

DEFAULT_CONTEXT_WINDOW = 32_000

# Providers that carry the system prompt outside the message list
_SEPARATED_SYSTEM_PROVIDERS = frozenset({"anthropic", "bedrock", "vertex_ai-anthropic_models"})
# OpenAI reasoning models take instructions as a developer message
_DEVELOPER_ROLE_PREFIXES = ("o1", "o3", "o4")
# Reasoning models that reject both system and developer messages
_NO_SYSTEM_MODEL_PREFIXES = ("o1-mini",)


@dataclass(frozen=True)
class ModelCapabilities:
    """Static flags describing what a model accepts."""

    context_window: int = DEFAULT_CONTEXT_WINDOW
    max_output_tokens: int | None = DEFAULT_MAX_OUTPUT_TOKENS
    supports_system_message: SystemMessageMode = False
    supports_anthropic_reasoning_signature: bool = False


def _system_message_mode(model: str, info: dict[str, Any]) -> SystemMessageMode:
    if info.get("supports_system_messages") is False:
        return False
    provider = str(info.get("litellm_provider") or "").lower()
    if provider in _SEPARATED_SYSTEM_PROVIDERS:
        return "separated"
    bare = model.split("/")[-1].lower()
    if bare.startswith(_NO_SYSTEM_MODEL_PREFIXES):
        return False
    if provider in ("openai", "azure") and bare.startswith(_DEVELOPER_ROLE_PREFIXES):
        return "developer-role"
    return "system-role"


def capabilities_from_litellm(model: str) -> ModelCapabilities:
    """Map litellm's model info for *model* onto ModelCapabilities.

    Unknown models resolve to the defaults; lookup errors are logged, not raised.
    """
    try:
        info = litellm.get_model_info(model)
    except Exception as e:
        logger.warning("capabilities_lookup_failed", model=model, error=str(e))
        return ModelCapabilities()

    context_window = info.get("max_input_tokens") or DEFAULT_CONTEXT_WINDOW
    provider = str(info.get("litellm_provider") or "").lower()
    caps = ModelCapabilities(
        context_window=int(context_window),
        max_output_tokens=info.get("max_output_tokens"),
        supports_system_message=_system_message_mode(model, info),
        supports_anthropic_reasoning_signature=bool(info.get("supports_reasoning")) and provider == "anthropic",
    )
    logger.debug(
        "capabilities_resolved",
        model=model,
        context_window=caps.context_window,
        max_output_tokens=caps.max_output_tokens,
        system_mode=caps.supports_system_message or "inline",
    )
    return caps
