"""Tests for the document-level correlation step."""

from __future__ import annotations

from pathlib import Path

import pytest

from contracts.errors import BlockSyntaxError, DocumentError
from contracts.observations import CorrelationMode
from pipeline.correlation.correlate_document import read_document, run_correlation, run_correlation_from_path
from tests.correlation._harness import SENSOR_DOCUMENT, write_document


def test_run_correlation_returns_records_table_and_stats() -> None:
    run = run_correlation(SENSOR_DOCUMENT.splitlines(), mode="equal-length")

    assert len(run.records) == 5
    assert run.table.mode is CorrelationMode.EQUAL_LENGTH
    assert run.parse_stats.records == 5
    assert run.stats.keys == 4
    assert run.stats.pairs_emitted == len(run.table)


def test_syntax_error_propagates_with_filename(tmp_path: Path) -> None:
    doc = write_document(tmp_path, "a: 1\n\nb: 1:2\n")

    with pytest.raises(BlockSyntaxError) as excinfo:
        run_correlation_from_path(doc)
    assert excinfo.value.line_number == 3
    assert excinfo.value.filename == str(doc)


def test_empty_document_yields_empty_table(tmp_path: Path) -> None:
    doc = write_document(tmp_path, "")
    run = run_correlation_from_path(doc, mode=CorrelationMode.INTERSECTION)

    assert run.records == []
    assert len(run.table) == 0


def test_read_document_strips_line_terminators(tmp_path: Path) -> None:
    doc = tmp_path / "crlf.txt"
    doc.write_bytes(b"a: 1\r\n\r\na: 2\r\n")

    assert read_document(doc) == ["a: 1", "", "a: 2"]


def test_read_document_wraps_os_errors(tmp_path: Path) -> None:
    with pytest.raises(DocumentError):
        read_document(tmp_path / "missing.txt")


def test_read_document_wraps_decode_errors(tmp_path: Path) -> None:
    doc = tmp_path / "binary.txt"
    doc.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(DocumentError):
        read_document(doc)


def test_read_document_splits_on_newlines_only(tmp_path: Path) -> None:
    doc = write_document(tmp_path, "a: 1\x0cb: 2\nc: 3 d: 4\n")

    assert read_document(doc) == ["a: 1\x0cb: 2", "c: 3 d: 4"]


def test_form_feed_does_not_start_a_new_line(tmp_path: Path) -> None:
    doc = write_document(tmp_path, "a: 1\x0cb: 2\n")

    with pytest.raises(BlockSyntaxError) as excinfo:
        run_correlation_from_path(doc)
    assert excinfo.value.line_number == 1
