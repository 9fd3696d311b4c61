"""Place system prompt and standing instructions where the model expects them."""

from __future__ import annotations

import copy

from llmprep.logging import get_logger
from llmprep.messages.types import (
    ROLE_DEVELOPER,
    ROLE_SYSTEM,
    ROLE_USER,
    SYSTEM_MESSAGE_MODES,
    Message,
    SystemMessageMode,
    text_block,
)

logger = get_logger(__name__)

GUIDELINES_HEADER = "GUIDELINES"
SYSTEM_TAG_OPEN = "<SYSTEM_MESSAGE>"
SYSTEM_TAG_CLOSE = "</SYSTEM_MESSAGE>"


def combine_system_text(messages: list[Message], ai_instructions: str) -> str | None:
    """Join system-role contents and append the GUIDELINES section.

    Returns None when there is neither system content nor instructions.
    """
    system_parts = [
        m["content"] for m in messages
        if m.get("role") == ROLE_SYSTEM and isinstance(m.get("content"), str)
    ]
    combined = "\n".join(system_parts) or None
    if ai_instructions:
        head = f"{combined}\n\n" if combined else ""
        combined = f"{head}{GUIDELINES_HEADER}\n{ai_instructions}"
    return combined


def wrap_system_text(system_text: str) -> str:
    return f"{SYSTEM_TAG_OPEN}\n{system_text}\n{SYSTEM_TAG_CLOSE}\n"


def _inline_into_first(messages: list[Message], system_text: str) -> list[Message]:
    wrapped = wrap_system_text(system_text)
    if not messages:
        return [{"role": ROLE_USER, "content": wrapped}]

    first = messages[0]
    content = first.get("content", "")
    if isinstance(content, list):
        merged: Message = {"role": ROLE_USER, "content": [text_block(wrapped), *content]}
    else:
        merged = {"role": ROLE_USER, "content": wrapped + content}
    return [merged, *messages[1:]]


def add_system_instructions(
    messages: list[Message],
    *,
    ai_instructions: str,
    supports_system_message: SystemMessageMode,
) -> tuple[list[Message], str | None]:
    """Relocate the system prompt according to *supports_system_message*.

    Returns ``(messages, separate_system_message)``. All system-role messages
    are removed; their joined text (plus GUIDELINES) is then either returned
    out-of-band (``"separated"``), prepended as a ``system`` or ``developer``
    message, or wrapped in ``<SYSTEM_MESSAGE>`` tags and prefixed onto the
    first message when the model has no system slot at all (``False``).
    """
    if supports_system_message not in SYSTEM_MESSAGE_MODES:
        raise ValueError(f"Unknown system message mode: {supports_system_message!r}")

    system_text = combine_system_text(messages, ai_instructions)
    remaining = [copy.deepcopy(m) for m in messages if m.get("role") != ROLE_SYSTEM]

    if not system_text:
        return remaining, None

    logger.debug(
        "system_instructions_injected",
        mode=supports_system_message or "inline",
        chars=len(system_text),
        has_guidelines=bool(ai_instructions),
    )

    if supports_system_message == "separated":
        return remaining, system_text
    if supports_system_message == "system-role":
        return [{"role": ROLE_SYSTEM, "content": system_text}, *remaining], None
    if supports_system_message == "developer-role":
        return [{"role": ROLE_DEVELOPER, "content": system_text}, *remaining], None
    return _inline_into_first(remaining, system_text), None
