"""Unit tests for the Parquet writer."""

from __future__ import annotations

import math
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from contracts.observations import CorrelationMode
from contracts.schema import CORRELATION_TABLE_SCHEMA
from pipeline.correlation.engine import correlate
from pipeline.writer_parquet import CorrelationParquetWriter, ParquetWriteError, ParquetWriterConfig, write_correlation_parquet
from version import ENGINE_NAME, ENGINE_VERSION


def _table():
    recs = [{"a": 1.0, "b": 2.0}, {"a": 2.0, "b": 4.0}, {"a": 3.0, "c": 1.0}]
    return correlate(recs, CorrelationMode.INTERSECTION)


def test_writes_one_row_per_pair(tmp_path: Path) -> None:
    table = _table()
    path = write_correlation_parquet(table, str(tmp_path / "out" / "table.parquet"))

    written = pq.read_table(path)
    assert written.schema.names == CORRELATION_TABLE_SCHEMA.names
    assert written.schema.field("r").type == pa.float64()
    assert written.num_rows == len(table)

    rows = written.to_pylist()
    assert [(r["first"], r["second"]) for r in rows] == [(p.first, p.second) for p in table]
    by_label = {r["label"]: r["r"] for r in rows}
    assert by_label["a -> b"] == pytest.approx(1.0, abs=1e-9)
    # NaN coefficients are stored as null
    assert by_label["a -> c"] is None
    assert math.isnan(table.coefficient("a", "c"))


def test_file_metadata_records_engine_and_mode(tmp_path: Path) -> None:
    path = write_correlation_parquet(_table(), str(tmp_path / "table.parquet"), compression="snappy")

    meta = pq.read_schema(path).metadata
    assert meta[b"engine_name"] == ENGINE_NAME.encode()
    assert meta[b"engine_version"] == ENGINE_VERSION.encode()
    assert meta[b"mode"] == b"intersection"
    assert not (tmp_path / "table.parquet.tmp").exists()


def test_empty_table_writes_empty_file(tmp_path: Path) -> None:
    path = write_correlation_parquet(correlate([], CorrelationMode.EQUAL_LENGTH), str(tmp_path / "empty.parquet"))
    assert pq.read_table(path).num_rows == 0


def test_unwritable_target_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    writer = CorrelationParquetWriter(ParquetWriterConfig(path=str(blocker / "table.parquet")))
    with pytest.raises(ParquetWriteError):
        writer.write(_table())
