"""Unit tests for the block parser."""

from __future__ import annotations

import pytest

from contracts.errors import BlockSyntaxError
from pipeline.blocks import BlockParser, parse_blocks, parse_number


def _lines(text: str) -> list[str]:
    return text.split("\n")


def test_two_blocks_separated_by_blank_line() -> None:
    records = parse_blocks(_lines("a: 1\nb: 2\n\na: 3\n"))
    assert records == [{"a": 1.0, "b": 2.0}, {"a": 3.0}]


def test_trailing_block_without_blank_line_is_emitted() -> None:
    records = parse_blocks(["a: 1", "", "b: 2"])
    assert records == [{"a": 1.0}, {"b": 2.0}]


def test_runs_of_blank_lines_never_emit_empty_records() -> None:
    records = parse_blocks(["", "", "a: 1", "", "", "", "a: 2", "", ""])
    assert records == [{"a": 1.0}, {"a": 2.0}]


def test_block_with_only_unparseable_lines_is_discarded() -> None:
    records = parse_blocks(["foo: notanumber", "just text", "", "a: 1"])
    assert records == [{"a": 1.0}]


def test_empty_input_yields_no_records() -> None:
    assert parse_blocks([]) == []


def test_line_with_two_separators_raises_with_line_number() -> None:
    with pytest.raises(BlockSyntaxError) as excinfo:
        parse_blocks(["x:1:2"])
    assert excinfo.value.line_number == 1
    assert excinfo.value.lineno == 1
    assert "@1" in str(excinfo.value)


def test_syntax_error_reports_later_line_number() -> None:
    with pytest.raises(BlockSyntaxError) as excinfo:
        parse_blocks(["a: 1", "", "b: 2", "time: 12:30:00"])
    assert excinfo.value.line_number == 4


def test_syntax_error_is_a_python_syntax_error() -> None:
    with pytest.raises(SyntaxError):
        parse_blocks(["a:b:c"])


def test_syntax_error_carries_filename() -> None:
    with pytest.raises(BlockSyntaxError) as excinfo:
        BlockParser(filename="doc.txt").parse(["a: 1", "a:b:c"])
    assert excinfo.value.filename == "doc.txt"
    assert "doc.txt" in str(excinfo.value)


def test_unparseable_value_is_skipped_silently() -> None:
    records = parse_blocks(["foo: notanumber"])
    assert records == []


def test_line_without_separator_is_ignored() -> None:
    records = parse_blocks(["trial 7", "a: 1"])
    assert records == [{"a": 1.0}]


def test_duplicate_key_in_block_last_value_wins() -> None:
    records = parse_blocks(["a: 1", "a: 5"])
    assert records == [{"a": 5.0}]


def test_key_and_value_are_trimmed() -> None:
    records = parse_blocks(["   heart rate   :   72.5   "])
    assert records == [{"heart rate": 72.5}]


def test_trailing_separators_are_dropped() -> None:
    # "k:" has a single field and "x:1:" has two once trailing empties go.
    records = parse_blocks(["k:", "x:1:", "y:2::"])
    assert records == [{"x": 1.0, "y": 2.0}]


def test_separator_only_line_closes_block() -> None:
    records = parse_blocks(["a: 1", ":", "a: 2"])
    assert records == [{"a": 1.0}, {"a": 2.0}]


def test_whitespace_only_line_does_not_close_block() -> None:
    records = parse_blocks(["a: 1", "   ", "b: 2"])
    assert records == [{"a": 1.0, "b": 2.0}]


def test_empty_key_is_skipped() -> None:
    records = parse_blocks([": 5", "a: 1"])
    assert records == [{"a": 1.0}]


def test_line_terminators_are_ignored() -> None:
    records = parse_blocks(["a: 1\n", "\n", "a: 2\r\n"])
    assert records == [{"a": 1.0}, {"a": 2.0}]


def test_records_are_read_only() -> None:
    records = parse_blocks(["a: 1"])
    with pytest.raises(TypeError):
        records[0]["a"] = 2.0  # type: ignore[index]


def test_parse_stats_are_recorded() -> None:
    parser = BlockParser()
    parser.parse(["a: 1", "note", "b: x", "", "a: 2"])
    assert parser.stats.lines == 5
    assert parser.stats.records == 2
    assert parser.stats.ignored_lines == 1
    assert parser.stats.skipped_values == 1


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1", 1.0),
        ("-2.5", -2.5),
        ("+3", 3.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("2.5E-2", 0.025),
        ("  7  ", 7.0),
    ],
)
def test_parse_number_accepts_decimal_notation(text: str, expected: float) -> None:
    assert parse_number(text) == expected


@pytest.mark.parametrize(
    "text", ["", "abc", "nan", "NaN", "inf", "-Infinity", "1_000", "1e999", "1,5", "0x10", "\u0663", "1\u0660"]
)
def test_parse_number_rejects_non_finite_and_non_decimal(text: str) -> None:
    assert parse_number(text) is None
