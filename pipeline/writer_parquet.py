"""Parquet writer for correlation tables.

Writes one row per ordered key pair using
:data:`contracts.schema.CORRELATION_TABLE_SCHEMA`. Engine identity and the
alignment mode are stored as file metadata so an archived table can be traced
back to how it was produced.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import pyarrow as pa
import pyarrow.parquet as pq

from contracts.errors import ExportError
from contracts.observations import CorrelationTable
from contracts.schema import (
    CORRELATION_TABLE_SCHEMA,
    META_ENGINE_NAME,
    META_ENGINE_VERSION,
    META_MODE,
    META_SCHEMA_VERSION,
)
from version import ENGINE_NAME, ENGINE_VERSION, SCHEMA_VERSION


class ParquetWriteError(ExportError):
    """Raised when Parquet writing fails."""


@dataclass
class ParquetWriterConfig:
    path: str
    compression: str = "zstd"
    use_dictionary: bool = True


class CorrelationParquetWriter:
    """
    Writes a correlation table to a single Parquet file.

    The file is replaced atomically: data goes to ``<path>.tmp`` first and is
    renamed once the write succeeded.
    """

    def __init__(self, config: ParquetWriterConfig) -> None:
        self._cfg = config

    def write(self, table: CorrelationTable) -> str:
        rows = table.to_rows()
        try:
            arrow_table = pa.Table.from_pylist(rows, schema=CORRELATION_TABLE_SCHEMA)
        except (pa.ArrowInvalid, pa.ArrowTypeError) as exc:
            raise ParquetWriteError(f"Cannot build Arrow table: {exc}") from exc

        arrow_table = arrow_table.replace_schema_metadata(
            {
                META_ENGINE_NAME: ENGINE_NAME.encode("utf-8"),
                META_ENGINE_VERSION: ENGINE_VERSION.encode("utf-8"),
                META_MODE: table.mode.value.encode("utf-8"),
                META_SCHEMA_VERSION: str(SCHEMA_VERSION).encode("utf-8"),
            }
        )

        path = self._cfg.path
        parent = os.path.dirname(path)
        tmp_path = f"{path}.tmp"
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            pq.write_table(
                arrow_table,
                tmp_path,
                compression=self._cfg.compression,
                use_dictionary=self._cfg.use_dictionary,
            )
            os.replace(tmp_path, path)
        except (OSError, pa.ArrowException) as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ParquetWriteError(f"Parquet write failed for {path}: {exc}") from exc
        return path


def write_correlation_parquet(table: CorrelationTable, path: str, *, compression: str = "zstd") -> str:
    return CorrelationParquetWriter(ParquetWriterConfig(path=path, compression=compression)).write(table)


__all__ = [
    "CorrelationParquetWriter",
    "ParquetWriteError",
    "ParquetWriterConfig",
    "write_correlation_parquet",
]
