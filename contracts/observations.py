"""Observation records and correlation table types.

An *observation record* is one block of ``key: value`` lines from a document.
Records are sparse: a key may be missing from any given record.

The correlation table is keyed by a structured :class:`KeyPair` rather than by
a formatted label, so keys that contain the label arrow cannot collide.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import NamedTuple

# One parsed block. The parser hands out read-only views.
ObservationRecord = Mapping[str, float]

PAIR_LABEL_ARROW = " -> "


class KeyPair(NamedTuple):
    """Ordered pair of measurement keys."""

    first: str
    second: str

    @property
    def label(self) -> str:
        return f"{self.first}{PAIR_LABEL_ARROW}{self.second}"


class CorrelationMode(str, Enum):
    """How values of two keys are aligned before computing a coefficient.

    INTERSECTION pairs the values of the i-th record that holds *both* keys.
    EQUAL_LENGTH pairs the i-th value of each key's own value list and only
    emits a pair when both lists have the same length. The two can disagree
    on the same data.
    """

    INTERSECTION = "intersection"
    EQUAL_LENGTH = "equal-length"

    @classmethod
    def parse(cls, value: str | CorrelationMode) -> CorrelationMode:
        if isinstance(value, CorrelationMode):
            return value
        text = str(value or "").strip().lower().replace("_", "-")
        if text in {"equallength", "equal"}:
            text = cls.EQUAL_LENGTH.value
        for mode in cls:
            if mode.value == text:
                return mode
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"unknown correlation mode {value!r} (expected one of: {allowed})")


def key_universe(records: Sequence[ObservationRecord]) -> list[str]:
    """Return every distinct key in first-discovery order."""
    seen: dict[str, None] = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)
    return list(seen)


class CorrelationTable(Mapping[KeyPair, float]):
    """
    Immutable mapping of ``KeyPair -> coefficient``.

    Values are in [-1, 1] or NaN. Iteration follows insertion order, which the
    engine makes row-major over the key universe.
    """

    __slots__ = ("_entries", "_mode")

    def __init__(self, entries: Mapping[KeyPair, float], *, mode: CorrelationMode) -> None:
        self._entries: dict[KeyPair, float] = dict(entries)
        self._mode = mode

    @property
    def mode(self) -> CorrelationMode:
        return self._mode

    def __getitem__(self, pair: KeyPair) -> float:
        return self._entries[pair]

    def __iter__(self) -> Iterator[KeyPair]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CorrelationTable(mode={self._mode.value!r}, pairs={len(self._entries)})"

    def keys_seen(self) -> list[str]:
        """Distinct keys that appear in at least one pair, in table order."""
        seen: dict[str, None] = {}
        for pair in self._entries:
            seen.setdefault(pair.first, None)
            seen.setdefault(pair.second, None)
        return list(seen)

    def coefficient(self, first: str, second: str) -> float:
        return self._entries[KeyPair(first, second)]

    def labels(self) -> dict[str, float]:
        """
        Render the table with ``"k1 -> k2"`` string keys.

        Keys containing the arrow can render to the same label; the later pair
        wins in that case. Use the structured table when that matters.
        """
        return {pair.label: r for pair, r in self._entries.items()}

    def to_rows(self) -> list[dict[str, object]]:
        """One JSON-friendly row per pair; NaN becomes None."""
        return [
            {
                "first": pair.first,
                "second": pair.second,
                "label": pair.label,
                "r": None if math.isnan(r) else r,
            }
            for pair, r in self._entries.items()
        ]

    def nan_pairs(self) -> list[KeyPair]:
        return [pair for pair, r in self._entries.items() if math.isnan(r)]


__all__ = [
    "CorrelationMode",
    "CorrelationTable",
    "KeyPair",
    "ObservationRecord",
    "PAIR_LABEL_ARROW",
    "key_universe",
]
