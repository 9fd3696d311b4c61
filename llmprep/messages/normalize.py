"""Canonicalize a raw conversation before it enters the pipeline."""

from __future__ import annotations

import copy
from typing import Any

from llmprep.messages.types import Message


def normalize_messages(messages: list[dict[str, Any]]) -> list[Message]:
    """Return a deep copy of *messages* with string content stripped.

    Every message is kept, in order. Adjacent messages with the same role are
    not merged.
    """
    normalized: list[Message] = []
    for msg in copy.deepcopy(messages):
        content = msg.get("content")
        if isinstance(content, str):
            msg["content"] = content.strip()
        elif content is None:
            msg["content"] = ""
        normalized.append(msg)
    return normalized
