"""
pipeline/correlation/engine.py

Pairwise correlation engine over sparse observation records.

Design goals
------------
- Pure: the engine reads records and returns a fresh table; nothing is cached
  between runs and nothing is mutated.
- Complete: every ordered pair of the key universe is considered, including a
  key paired with itself.
- Explicit alignment policy (:class:`CorrelationMode`):

  INTERSECTION
    For (k1, k2), walk the records in order and keep those that contain both
    keys. Value i of each sample comes from the same record. Every pair is
    emitted; pairs with fewer than two shared records carry NaN.

  EQUAL_LENGTH
    Each key gets its own value list (every record where it is present).
    (k1, k2) is emitted only when both lists have the same length, and values
    are paired by position even when they come from different records.

Determinism
-----------
Key order is first-discovery order and samples follow record order, so the
summations always run in the same order for the same input.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from time import perf_counter

from contracts.observations import (
    CorrelationMode,
    CorrelationTable,
    KeyPair,
    ObservationRecord,
    key_universe,
)

from .pearson import pearson

LOG = logging.getLogger(__name__)


@dataclass
class CorrelationStats:
    mode: str = ""
    records: int = 0
    keys: int = 0
    pairs_total: int = 0
    pairs_emitted: int = 0
    pairs_nan: int = 0
    pairs_omitted: int = 0
    timings_ms: dict[str, float] = field(default_factory=dict)


def _shared_samples(
    records: Sequence[ObservationRecord], first: str, second: str
) -> tuple[list[float], list[float]]:
    a: list[float] = []
    b: list[float] = []
    for record in records:
        if first in record and second in record:
            a.append(record[first])
            b.append(record[second])
    return a, b


def _values_by_key(records: Sequence[ObservationRecord], keys: Sequence[str]) -> dict[str, list[float]]:
    values: dict[str, list[float]] = {k: [] for k in keys}
    for record in records:
        for key, value in record.items():
            values[key].append(value)
    return values


# -------------------------------
# Engine
# -------------------------------


class CorrelationEngine:
    """
    Mode-driven correlation engine.

    One instance can be reused; ``run`` keeps no state between calls.
    """

    def __init__(self, mode: CorrelationMode | str = CorrelationMode.INTERSECTION) -> None:
        self._mode = CorrelationMode.parse(mode)

    @property
    def mode(self) -> CorrelationMode:
        return self._mode

    def run(self, records: Sequence[ObservationRecord]) -> tuple[CorrelationTable, CorrelationStats]:
        stats = CorrelationStats(mode=self._mode.value, records=len(records))

        t0 = perf_counter()
        keys = key_universe(records)
        stats.keys = len(keys)
        stats.pairs_total = len(keys) * len(keys)

        if self._mode is CorrelationMode.INTERSECTION:
            entries = self._intersection(records, keys)
        else:
            entries = self._equal_length(records, keys)

        stats.pairs_emitted = len(entries)
        stats.pairs_omitted = stats.pairs_total - stats.pairs_emitted
        stats.pairs_nan = sum(1 for r in entries.values() if math.isnan(r))
        stats.timings_ms["correlate_ms"] = (perf_counter() - t0) * 1000.0

        LOG.info(
            "Correlation complete: mode=%s records=%d keys=%d emitted=%d nan=%d omitted=%d",
            stats.mode,
            stats.records,
            stats.keys,
            stats.pairs_emitted,
            stats.pairs_nan,
            stats.pairs_omitted,
        )
        return CorrelationTable(entries, mode=self._mode), stats

    @staticmethod
    def _intersection(records: Sequence[ObservationRecord], keys: Sequence[str]) -> dict[KeyPair, float]:
        entries: dict[KeyPair, float] = {}
        for first in keys:
            for second in keys:
                a, b = _shared_samples(records, first, second)
                entries[KeyPair(first, second)] = pearson(a, b)
        return entries

    @staticmethod
    def _equal_length(records: Sequence[ObservationRecord], keys: Sequence[str]) -> dict[KeyPair, float]:
        values = _values_by_key(records, keys)
        entries: dict[KeyPair, float] = {}
        for first in keys:
            a = values[first]
            for second in keys:
                b = values[second]
                if len(a) != len(b):
                    continue
                entries[KeyPair(first, second)] = pearson(a, b)
        return entries


def correlate(
    records: Sequence[ObservationRecord],
    mode: CorrelationMode | str = CorrelationMode.INTERSECTION,
) -> CorrelationTable:
    """Compute the correlation table for ``records`` under ``mode``."""
    table, _ = CorrelationEngine(mode).run(records)
    return table


__all__ = ["CorrelationEngine", "CorrelationStats", "correlate"]
