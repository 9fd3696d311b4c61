"""Canonical message shapes and pipeline constants."""

from __future__ import annotations

from typing import Any, Literal, NotRequired, TypeAlias, TypedDict

CHARS_PER_TOKEN = 4
TRIM_TO_LEN = 60
MAX_TRIM_ITERATIONS = 100
# Messages at index >= N - PROTECTED_RECENT count as recent context
PROTECTED_RECENT = 4
DEFAULT_MAX_OUTPUT_TOKENS = 4096
FIM_MAX_TOKENS = 300
FIM_COMMENT_MARKER = "//"
EMPTY_MESSAGE = "(empty message)"
TRIM_ELLIPSIS = "..."

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_DEVELOPER = "developer"

Role: TypeAlias = Literal["system", "user", "assistant", "developer"]
SystemMessageMode: TypeAlias = Literal[False, "system-role", "developer-role", "separated"]

SYSTEM_MESSAGE_MODES: tuple[SystemMessageMode, ...] = (
    False,
    "system-role",
    "developer-role",
    "separated",
)


class TextBlock(TypedDict):
    type: Literal["text"]
    text: str


# Reasoning blocks are opaque provider payloads (e.g. Anthropic "thinking"
# blocks with a signature); only their "type" key is inspected.
ReasoningBlock: TypeAlias = dict[str, Any]
ContentBlock: TypeAlias = TextBlock | ReasoningBlock
Content: TypeAlias = str | list[ContentBlock]


class Message(TypedDict):
    role: Role
    content: Content
    reasoning: NotRequired[list[ReasoningBlock] | None]


class FIMMessage(TypedDict):
    prefix: str
    suffix: str
    stop_tokens: list[str]


class PreparedFIM(FIMMessage):
    max_tokens: int


def text_block(text: str) -> TextBlock:
    return {"type": "text", "text": text}


def is_text_block(block: Any) -> bool:
    return isinstance(block, dict) and block.get("type") == "text"
