import pytest

from shared.exceptions.table import ReconciliationError
from shared.services.delimited_text import (
    COMMA,
    NO_VALID_DATA,
    TAB,
    clean_cell,
    detect_delimiter,
    parse_block,
    split_lines,
)


def test_split_lines_discards_blank_lines():
    assert split_lines("a,b\r\n\n  \nc,d\n") == ["a,b", "c,d"]


def test_split_lines_of_nothing():
    assert split_lines("") == []
    assert split_lines(None) == []


def test_delimiter_is_sniffed_from_first_line():
    assert detect_delimiter("a\tb,c") == TAB
    assert detect_delimiter("a,b") == COMMA
    assert detect_delimiter("single") == COMMA


@pytest.mark.parametrize(
    "raw,expected",
    [('  "quoted"  ', "quoted"), ('"open', "open"), ('close"', "close"), ('""', ""), ('"a"b"', 'a"b'), ("plain", "plain")],
)
def test_clean_cell(raw, expected):
    assert clean_cell(raw) == expected


def test_parse_block_applies_first_line_delimiter_to_all_lines():
    block = parse_block("a\tb\nc,d\te")
    assert block.delimiter == TAB
    assert block.lines == [["a", "b"], ["c,d", "e"]]


def test_quoted_comma_still_splits():
    block = parse_block('"Smith, John",42')
    assert block.lines == [["Smith", "John", "42"]]


def test_counts():
    block = parse_block("1,2,3\n4,5")
    assert block.line_count == 2
    assert block.cell_count == 5


def test_empty_text_is_a_reconciliation_error():
    with pytest.raises(ReconciliationError) as exc_info:
        parse_block("\n \n")
    assert exc_info.value.message == NO_VALID_DATA


def test_line_cap():
    text = "\n".join(["x"] * 3)
    assert parse_block(text, max_lines=3).line_count == 3
    with pytest.raises(ReconciliationError) as exc_info:
        parse_block(text, max_lines=2)
    assert exc_info.value.message == "You can paste up to 2 rows at once."
    assert exc_info.value.details["line_count"] == 3
