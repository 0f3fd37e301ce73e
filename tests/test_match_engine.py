import pytest

from logic.match_engine import MatchEngine, format_line_label


DOCUMENT = [
    "INFO start",
    "ERROR disk full",
    "WARNING low memory",
    "error lowercase",
    "ERROR and WARNING together",
]


def test_or_semantics_and_order():
    matched = MatchEngine(max_workers=2).filter(DOCUMENT, ["ERROR", "WARNING"])
    assert [m.line_number for m in matched] == [2, 3, 5]
    assert [m.text for m in matched] == [DOCUMENT[1], DOCUMENT[2], DOCUMENT[4]]


def test_case_sensitive_substring():
    matched = MatchEngine(max_workers=1).filter(DOCUMENT, ["error"])
    assert [m.text for m in matched] == ["error lowercase"]


@pytest.mark.parametrize("terms", [[], [""], ["   ", ""], None])
def test_blank_terms_match_nothing(terms):
    assert MatchEngine(max_workers=1).filter(DOCUMENT, terms) == []


def test_line_not_duplicated_when_several_terms_match():
    matched = MatchEngine(max_workers=1).filter(["abc"], ["a", "b", "c"])
    assert len(matched) == 1


def test_large_snapshot_keeps_order():
    engine = MatchEngine(max_workers=4)
    lines = [f"line {i} {'HIT' if i % 7 == 0 else 'miss'}" for i in range(5000)]
    matched = engine.filter(lines, ["HIT"])
    expected = [i + 1 for i in range(5000) if i % 7 == 0]
    assert [m.line_number for m in matched] == expected
    assert all("HIT" in m.text for m in matched)
    assert all(lines[m.line_number - 1] == m.text for m in matched)
    assert engine.get_last_search_time() >= 0


def test_format_line_label():
    assert format_line_label(12) == "      12: "
