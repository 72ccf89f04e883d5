# pipeline/correlation/correlate_document.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from contracts.errors import DocumentError
from contracts.observations import CorrelationMode, CorrelationTable, ObservationRecord
from pipeline.blocks import BlockParser, ParseStats
from pipeline.correlation.engine import CorrelationEngine, CorrelationStats

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationRun:
    records: list[ObservationRecord]
    table: CorrelationTable
    parse_stats: ParseStats
    stats: CorrelationStats


def read_document(path: str | Path, *, encoding: str = "utf-8") -> list[str]:
    """Read every line of a document, without line terminators."""
    p = Path(path)
    try:
        text = p.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Error reading contents of {p}: {exc}") from exc
    # read_text folds "\r\n" and "\r" into "\n"; form feeds and Unicode
    # separators stay part of the line.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def run_correlation(
    lines: Iterable[str],
    *,
    mode: CorrelationMode | str = CorrelationMode.INTERSECTION,
    filename: str | None = None,
) -> CorrelationRun:
    """
    Pipeline step: parse blocks, then correlate every pair of keys.

    BlockSyntaxError propagates unchanged; nothing is returned for a document
    that fails to parse.
    """
    parser = BlockParser(filename=filename)
    records = parser.parse(lines)

    engine = CorrelationEngine(mode)
    table, stats = engine.run(records)

    if not records:
        LOG.warning("No observation records found%s", f" in {filename}" if filename else "")

    return CorrelationRun(records=records, table=table, parse_stats=parser.stats, stats=stats)


def run_correlation_from_path(
    path: str | Path,
    *,
    mode: CorrelationMode | str = CorrelationMode.INTERSECTION,
) -> CorrelationRun:
    """Read a document from disk and run :func:`run_correlation` on it."""
    lines = read_document(path)
    LOG.info("Loaded document %s (%d lines)", path, len(lines))
    return run_correlation(lines, mode=mode, filename=str(path))


__all__ = ["CorrelationRun", "read_document", "run_correlation", "run_correlation_from_path"]
