"""Trim conversation content to fit an estimated character budget.

The budget is ``(context_window - max_output_tokens) * chars_per_token``.
When the conversation is longer, messages are cut one at a time, always
picking the message with the highest trim weight:

- system messages weigh 0 and are never cut
- older messages weigh up to 2x more than recent ones
- assistant text weighs 10x more than user text
- the first message, the last ``PROTECTED_RECENT`` messages and anything
  already cut once are scaled down to 5%
- messages already at or under ``trim_to_len`` are left alone

A picked message is cut to ``trim_to_len`` characters (ending in ``...``)
unless a smaller cut from its end finishes the job. The loop is capped, so a
conversation can still come out over budget; the provider decides what to do
with it.
"""

from __future__ import annotations

import copy

from llmprep.logging import get_logger
from llmprep.messages.types import (
    CHARS_PER_TOKEN,
    MAX_TRIM_ITERATIONS,
    PROTECTED_RECENT,
    ROLE_SYSTEM,
    ROLE_USER,
    TRIM_ELLIPSIS,
    TRIM_TO_LEN,
    Message,
)

logger = get_logger(__name__)

_ASSISTANT_MULTIPLIER = 10
_PROTECTED_MULTIPLIER = 0.05


def _content_len(msg: Message) -> int:
    content = msg.get("content")
    return len(content) if isinstance(content, str) else 0


def trim_weight(
    messages: list[Message],
    idx: int,
    trimmed: set[int],
    trim_to_len: int = TRIM_TO_LEN,
) -> float:
    """Return how strongly message *idx* should be picked for trimming."""
    msg = messages[idx]
    if msg.get("role") == ROLE_SYSTEM:
        return 0
    # Content at or under the floor has nothing left to give
    if _content_len(msg) <= trim_to_len:
        return 0

    n = len(messages)
    multiplier = 1 + (n - 1 - idx) / n
    if msg.get("role") != ROLE_USER:
        multiplier *= _ASSISTANT_MULTIPLIER
    if idx == 0 or idx >= n - PROTECTED_RECENT or idx in trimmed:
        multiplier *= _PROTECTED_MULTIPLIER
    return _content_len(msg) * multiplier


def _pick_victim(messages: list[Message], trimmed: set[int], trim_to_len: int) -> int | None:
    # Strict ">" keeps the first maximum on ties
    best_idx: int | None = None
    best_weight = 0.0
    for idx in range(len(messages)):
        weight = trim_weight(messages, idx, trimmed, trim_to_len)
        if weight > best_weight:
            best_weight = weight
            best_idx = idx
    return best_idx


def fit_into_context(
    messages: list[Message],
    *,
    context_window: int,
    max_output_tokens: int,
    chars_per_token: int = CHARS_PER_TOKEN,
    trim_to_len: int = TRIM_TO_LEN,
    max_iterations: int = MAX_TRIM_ITERATIONS,
) -> list[Message]:
    """Return a copy of *messages* trimmed to the context budget."""
    fitted = copy.deepcopy(messages)

    total_len = sum(_content_len(m) for m in fitted)
    budget = (context_window - max_output_tokens) * chars_per_token
    remaining = total_len - budget
    if remaining <= 0:
        return fitted

    trimmed: set[int] = set()
    iterations = 0
    while remaining > 0:
        iterations += 1
        if iterations > max_iterations:
            break

        idx = _pick_victim(fitted, trimmed, trim_to_len)
        if idx is None:
            break
        msg = fitted[idx]
        content: str = msg["content"]  # type: ignore[assignment]

        will_trim = len(content) - trim_to_len
        if will_trim > remaining:
            msg["content"] = content[: len(content) - remaining]
            remaining = 0
            break

        remaining -= will_trim
        msg["content"] = content[: trim_to_len - len(TRIM_ELLIPSIS)] + TRIM_ELLIPSIS
        trimmed.add(idx)

    if remaining > 0:
        logger.warning(
            "context_fit_incomplete",
            budget_chars=budget,
            total_chars=total_len,
            over_by=remaining,
            iterations=min(iterations, max_iterations),
        )
    else:
        logger.debug(
            "context_trimmed",
            budget_chars=budget,
            total_chars=total_len,
            messages_cut=len(trimmed),
            iterations=iterations,
        )
    return fitted
