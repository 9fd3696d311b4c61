"""Tests for context fitting: budget, victim weighting, trim floor, iteration cap."""

import copy

from llmprep.messages.fit import fit_into_context, trim_weight
from llmprep.messages.types import TRIM_TO_LEN


def _msg(role: str, char: str, n: int) -> dict:
    return {"role": role, "content": char * n}


def _long_conversation() -> list[dict]:
    return [
        _msg("user", "a", 1000),
        _msg("assistant", "b", 3000),
        _msg("user", "c", 3000),
        _msg("assistant", "d", 1000),
        _msg("user", "e", 1000),
        _msg("assistant", "f", 1000),
        _msg("user", "g", 1000),
    ]


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------

class TestBudget:
    def test_under_budget_is_noop(self):
        # 250 chars against a 280-char budget
        messages = [_msg("system", "s", 50), _msg("user", "u", 100), _msg("assistant", "a", 100)]
        fitted = fit_into_context(messages, context_window=100, max_output_tokens=30)
        assert fitted == messages
        assert fitted is not messages

    def test_exactly_at_budget_is_noop(self):
        messages = [_msg("user", "u", 200)]
        fitted = fit_into_context(messages, context_window=100, max_output_tokens=50)
        assert fitted == messages

    def test_input_not_mutated(self):
        messages = _long_conversation()
        before = copy.deepcopy(messages)
        fit_into_context(messages, context_window=100, max_output_tokens=50)
        assert messages == before

    def test_chars_per_token_scales_budget(self):
        messages = [_msg("user", "u", 300)]
        fitted = fit_into_context(messages, context_window=100, max_output_tokens=0, chars_per_token=3)
        assert fitted == messages


# ---------------------------------------------------------------------------
# Victim selection
# ---------------------------------------------------------------------------

class TestVictimSelection:
    def test_exact_remainder_cut_from_end(self):
        messages = [
            _msg("user", "u", 100),
            _msg("assistant", "x", 1000),
            _msg("user", "q", 100),
            _msg("assistant", "r", 100),
            _msg("user", "s", 100),
            _msg("assistant", "t", 100),
        ]
        # total 1500, budget 1200 -> cut 300 from the heaviest message
        fitted = fit_into_context(messages, context_window=400, max_output_tokens=100)
        assert fitted[1]["content"] == "x" * 700
        for i in (0, 2, 3, 4, 5):
            assert fitted[i] == messages[i]

    def test_assistant_preferred_over_user(self):
        messages = [
            _msg("user", "a", 50),
            _msg("user", "u", 500),
            _msg("assistant", "b", 500),
            *[_msg("user", "z", 10) for _ in range(4)],
        ]
        fitted = fit_into_context(messages, context_window=1000, max_output_tokens=10, chars_per_token=1)
        assert fitted[1]["content"] == "u" * 500
        assert fitted[2]["content"] == "b" * 400

    def test_tie_goes_to_first_message(self):
        messages = [
            _msg("user", "a", 10),
            _msg("assistant", "x", 1300),
            _msg("assistant", "y", 1400),
            *[_msg("user", "z", 10) for _ in range(5)],
        ]
        assert trim_weight(messages, 1, set()) == trim_weight(messages, 2, set())

        fitted = fit_into_context(messages, context_window=2700, max_output_tokens=40, chars_per_token=1)
        assert fitted[1]["content"] == "x" * 1200
        assert fitted[2]["content"] == "y" * 1400

    def test_system_weight_is_zero(self):
        messages = [_msg("system", "s", 10_000), _msg("user", "u", 100)]
        assert trim_weight(messages, 0, set()) == 0

    def test_first_and_recent_messages_are_protected(self):
        messages = [_msg("user", "u", 1000) for _ in range(10)]
        plain = trim_weight(messages, 3, set())
        assert trim_weight(messages, 0, set()) < plain
        assert trim_weight(messages, 6, set()) < plain
        assert trim_weight(messages, 3, {3}) < plain

    def test_short_messages_are_never_picked(self):
        messages = [_msg("assistant", "a", TRIM_TO_LEN), _msg("user", "u", 10)]
        assert trim_weight(messages, 0, set()) == 0


# ---------------------------------------------------------------------------
# Trimming loop
# ---------------------------------------------------------------------------

class TestTrimLoop:
    def test_system_message_never_trimmed(self):
        system = "S" * 5000
        messages = [{"role": "system", "content": system}, *_long_conversation()]
        fitted = fit_into_context(messages, context_window=100, max_output_tokens=50)
        assert fitted[0]["content"] == system

    def test_trimmed_messages_end_with_ellipsis_at_floor(self):
        fitted = fit_into_context(_long_conversation(), context_window=100, max_output_tokens=50)
        for msg in fitted:
            assert len(msg["content"]) == TRIM_TO_LEN
            assert msg["content"].endswith("...")

    def test_over_budget_result_is_accepted(self):
        # Seven messages cannot go below 7 * 60 chars, budget is 200
        fitted = fit_into_context(_long_conversation(), context_window=100, max_output_tokens=50)
        assert sum(len(m["content"]) for m in fitted) == 7 * TRIM_TO_LEN

    def test_ten_thousand_chars_into_tiny_window(self):
        messages = [_msg("user" if i % 2 == 0 else "assistant", "m", 1000) for i in range(10)]
        fitted = fit_into_context(messages, context_window=100, max_output_tokens=50)
        assert [len(m["content"]) for m in fitted] == [TRIM_TO_LEN] * 10
        assert [m["role"] for m in fitted] == [m["role"] for m in messages]

    def test_iteration_cap(self):
        fitted = fit_into_context(
            _long_conversation(), context_window=100, max_output_tokens=50, max_iterations=1,
        )
        cut = [i for i, m in enumerate(fitted) if m["content"].endswith("...")]
        assert cut == [1]

    def test_no_message_cut_below_floor(self):
        messages = [_msg("user", "u", 100), _msg("assistant", "a", 70), _msg("user", "v", 65)]
        fitted = fit_into_context(messages, context_window=10, max_output_tokens=0, chars_per_token=1)
        for msg in fitted:
            assert len(msg["content"]) >= TRIM_TO_LEN

    def test_block_content_is_skipped(self):
        messages = [
            {"role": "assistant", "content": [{"type": "text", "text": "x" * 500}]},
            _msg("user", "u", 500),
        ]
        fitted = fit_into_context(messages, context_window=50, max_output_tokens=0)
        assert fitted[0] == messages[0]

    def test_stops_when_nothing_is_trimmable(self):
        # Over budget, but only system text and messages already at the floor
        messages = [_msg("system", "s", 500), _msg("user", "u", 60), _msg("assistant", "a", 40)]
        fitted = fit_into_context(messages, context_window=10, max_output_tokens=0, chars_per_token=1)
        assert fitted == messages
