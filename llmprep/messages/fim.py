"""Fill-in-the-middle request preparation."""

from __future__ import annotations

from llmprep.messages.types import FIM_COMMENT_MARKER, FIM_MAX_TOKENS, FIMMessage, PreparedFIM

FIM_INSTRUCTIONS_HEADER = "Instructions:"
FIM_DEFAULT_RULE = (
    "Do not output an explanation. Try to avoid outputting comments. "
    "Only output the middle code."
)


def instruction_comment_block(ai_instructions: str, comment_marker: str = FIM_COMMENT_MARKER) -> str:
    """Render standing instructions as a block of source comments."""
    lines = [
        f"{comment_marker} {FIM_INSTRUCTIONS_HEADER}",
        f"{comment_marker} {FIM_DEFAULT_RULE}",
        *(f"{comment_marker}{line}" for line in ai_instructions.split("\n")),
    ]
    return "\n".join(lines)


def prepare_fim_message(
    message: FIMMessage,
    *,
    ai_instructions: str,
    comment_marker: str = FIM_COMMENT_MARKER,
    max_tokens: int = FIM_MAX_TOKENS,
) -> PreparedFIM:
    """Prefix the FIM prompt with commented instructions and fix max_tokens.

    FIM payloads are small by construction, so no context fitting happens
    here; callers bound prefix/suffix size themselves.
    """
    prefix = message["prefix"]
    if ai_instructions:
        prefix = f"{instruction_comment_block(ai_instructions, comment_marker)}\n\n{prefix}"
    return {
        "prefix": prefix,
        "suffix": message["suffix"],
        "stop_tokens": list(message.get("stop_tokens") or []),
        "max_tokens": max_tokens,
    }
