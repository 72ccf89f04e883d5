"""JSON export of a correlation table.

NaN is not valid JSON, so undefined coefficients are written as ``null``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from contracts.errors import ExportError
from contracts.observations import CorrelationTable
from version import ENGINE_NAME, ENGINE_VERSION, SCHEMA_VERSION

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportConfig:
    path: str
    indent: int = 2


def table_to_payload(table: CorrelationTable) -> Dict[str, Any]:
    correlations = table.to_rows()
    return {
        "engine_name": ENGINE_NAME,
        "engine_version": ENGINE_VERSION,
        "schema_version": SCHEMA_VERSION,
        "mode": table.mode.value,
        "keys": table.keys_seen(),
        "correlations": correlations,
    }


def export_table_json(table: CorrelationTable, cfg: ExportConfig) -> Path:
    path = Path(cfg.path)
    payload = table_to_payload(table)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=cfg.indent, ensure_ascii=False, allow_nan=False)
    except OSError as exc:
        raise ExportError(f"JSON export failed for {path}: {exc}") from exc
    LOG.info("Wrote %s (%d pairs)", path, len(payload["correlations"]))
    return path


__all__ = ["ExportConfig", "export_table_json", "table_to_payload"]
