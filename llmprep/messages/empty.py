"""Final guard against empty message content."""

from __future__ import annotations

import copy

from llmprep.messages.types import EMPTY_MESSAGE, Message, is_text_block, text_block


def ensure_non_empty(messages: list[Message], sentinel: str = EMPTY_MESSAGE) -> list[Message]:
    """Return a copy where no message or text block is empty.

    Most provider APIs reject empty content, so empty strings and empty text
    blocks become *sentinel*, and an empty block list gets one sentinel block.
    """
    guarded: list[Message] = []
    for msg in copy.deepcopy(messages):
        content = msg.get("content")
        if isinstance(content, list):
            for block in content:
                if is_text_block(block) and not block.get("text"):
                    block["text"] = sentinel
            if not content:
                msg["content"] = [text_block(sentinel)]
        else:
            msg["content"] = content or sentinel
        guarded.append(msg)
    return guarded
