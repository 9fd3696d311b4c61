"""Fold assistant reasoning blocks into message content."""

from __future__ import annotations

import copy

from llmprep.messages.types import ROLE_ASSISTANT, Message, text_block


def project_reasoning(
    messages: list[Message],
    *,
    supports_anthropic_reasoning_signature: bool,
) -> list[Message]:
    """Replace the side-channel ``reasoning`` key with canonical content.

    When the destination accepts signed reasoning blocks back, an assistant
    message becomes ``[*reasoning, text]`` (the text block only when there is
    text). Otherwise the reasoning is dropped and the plain string stays.
    """
    projected: list[Message] = []
    for msg in messages:
        if msg.get("role") != ROLE_ASSISTANT:
            projected.append(copy.deepcopy(msg))
            continue

        reasoning = msg.get("reasoning") or []
        content = msg.get("content", "")
        if supports_anthropic_reasoning_signature and reasoning:
            blocks = copy.deepcopy(list(reasoning))
            if content:
                if isinstance(content, str):
                    blocks.append(text_block(content))
                else:
                    blocks.extend(copy.deepcopy(content))
            projected.append({"role": ROLE_ASSISTANT, "content": blocks})
        else:
            projected.append({"role": ROLE_ASSISTANT, "content": copy.deepcopy(content)})
    return projected
