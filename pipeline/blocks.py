"""Block parser: document lines -> observation records.

A document is a sequence of blocks separated by blank lines. Each block holds
``key: value`` lines and becomes one observation record:

    temperature: 21.5
    pressure: 1013

    temperature: 22.0

Rules
-----
- A line is split on ``:`` and trailing empty fields are dropped, so
  ``"key:"`` has one field and ``":"`` has none.
- Empty line (or a line made only of separators): closes the current block.
- One field: not a measurement, ignored.
- Two fields: key and value, both trimmed. Values that are not finite numbers
  and empty keys are skipped without error. A repeated key in the same block
  overwrites the earlier value.
- Three or more fields: :class:`BlockSyntaxError` naming the 1-based line.

Empty blocks are never emitted.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from contracts.errors import BlockSyntaxError
from contracts.observations import ObservationRecord

LOG = logging.getLogger(__name__)

SEPARATOR = ":"

# Plain ASCII decimal / scientific notation. Rejects "nan", "inf", "1_000" and
# non-ASCII digits, which float() would otherwise accept.
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass
class ParseStats:
    lines: int = 0
    records: int = 0
    ignored_lines: int = 0
    skipped_values: int = 0


def _split_fields(line: str) -> list[str]:
    parts = line.split(SEPARATOR)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def parse_number(text: str) -> float | None:
    """Parse a measurement value, returning None when it is not a finite number."""
    candidate = text.strip()
    if not _NUMBER_RE.fullmatch(candidate):
        return None
    value = float(candidate)
    if not math.isfinite(value):
        # Overflow, e.g. "1e999".
        return None
    return value


class BlockParser:
    """
    Stateless-per-call parser; ``stats`` describes the last ``parse`` call.
    """

    def __init__(self, *, filename: str | None = None) -> None:
        self._filename = filename
        self.stats = ParseStats()

    def parse(self, lines: Iterable[str]) -> list[ObservationRecord]:
        stats = ParseStats()
        records: list[ObservationRecord] = []
        current: dict[str, float] = {}

        def _close() -> None:
            nonlocal current
            if current:
                records.append(MappingProxyType(current))
            current = {}

        for line_number, raw in enumerate(lines, start=1):
            stats.lines = line_number
            line = raw.rstrip("\r\n")
            parts = _split_fields(line)

            if not line or not parts:
                _close()
            elif len(parts) == 1:
                stats.ignored_lines += 1
            elif len(parts) == 2:
                key = parts[0].strip()
                value = parse_number(parts[1])
                if not key or value is None:
                    stats.skipped_values += 1
                    continue
                current[key] = value
            else:
                raise BlockSyntaxError(line_number, text=line, filename=self._filename)

        _close()
        stats.records = len(records)
        self.stats = stats

        LOG.debug(
            "Parsed blocks: lines=%d records=%d ignored_lines=%d skipped_values=%d",
            stats.lines,
            stats.records,
            stats.ignored_lines,
            stats.skipped_values,
        )
        return records


def parse_blocks(lines: Iterable[str], *, filename: str | None = None) -> list[ObservationRecord]:
    """Parse document lines into observation records (source order)."""
    return BlockParser(filename=filename).parse(lines)


__all__ = ["BlockParser", "ParseStats", "SEPARATOR", "parse_blocks", "parse_number"]
