"""Contracts and canonical schema.

The contracts package defines:
- observation records, key pairs and the correlation table
- the correlation alignment modes
- the error taxonomy
- the Arrow schema used for Parquet export (``contracts.schema``)
"""

from contracts.errors import BlockSyntaxError, DocumentError, ExportError
from contracts.observations import (
    CorrelationMode,
    CorrelationTable,
    KeyPair,
    ObservationRecord,
    key_universe,
)

__all__ = [
    "BlockSyntaxError",
    "CorrelationMode",
    "CorrelationTable",
    "DocumentError",
    "ExportError",
    "KeyPair",
    "ObservationRecord",
    "key_universe",
]
