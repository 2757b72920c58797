import pytest

from coaching_tracker.identity import (
    clamp_int,
    is_finite_number,
    normalize_agent_name,
    normalize_header,
    parse_legacy_line,
    safe_json_parse,
    strip_score_prefix,
    uid,
)


class TestUid:
    def test_unique_across_many_calls(self):
        ids = {uid() for _ in range(2000)}
        assert len(ids) == 2000

    def test_shape(self):
        stamp, _, tail = uid().partition("_")
        assert stamp and len(tail) == 7
        assert tail.isalnum() and tail == tail.lower()

    def test_keeps_no_registry_of_issued_ids(self):
        from coaching_tracker import identity
        uid()
        assert not any(isinstance(v, set) for v in vars(identity).values())


class TestParseLegacyLine:
    def test_splits_on_first_colon(self):
        assert parse_legacy_line("2/1/2026: good call") == ("2/1/2026", "good call")

    def test_no_colon_is_all_notes(self):
        assert parse_legacy_line("no colon here") == ("", "no colon here")

    def test_only_first_colon_splits(self):
        assert parse_legacy_line(" 2/1 : met at 10:30 ") == ("2/1", "met at 10:30")


@pytest.mark.parametrize("raw,expected", [
    ("Score: 88", "88"),
    ("score:pass", "pass"),
    ("  SCORE:  91 ", "91"),
    ("Pass", "Pass"),
    ("88", "88"),
])
def test_strip_score_prefix(raw, expected):
    assert strip_score_prefix(raw) == expected


def test_clamp_int():
    assert clamp_int(150, 0, 99) == 99
    assert clamp_int(-3, 0, 99) == 0
    assert clamp_int(7, 0, 99) == 7


@pytest.mark.parametrize("value,expected", [
    (3, True), (2.5, True), (float("nan"), False), (float("inf"), False),
    (True, False), ("3", False), (None, False),
])
def test_is_finite_number(value, expected):
    assert is_finite_number(value) is expected


def test_safe_json_parse():
    assert safe_json_parse(None) is None
    assert safe_json_parse("") is None
    assert safe_json_parse("{not json") is None
    assert safe_json_parse("[1, 2]") == [1, 2]


class TestNormalizeAgentName:
    def test_last_comma_first(self):
        assert normalize_agent_name("Smith, John") == "John Smith"

    def test_multiple_first_names(self):
        assert normalize_agent_name("Garcia,  Mary Ann ") == "Mary Ann Garcia"

    def test_plain_name_trimmed(self):
        assert normalize_agent_name("  Jane Doe ") == "Jane Doe"


def test_normalize_header_handles_nbsp_and_case():
    assert normalize_header("Agent\u00a0Name\u00a0") == "agent name"
