import pyarrow as pa

# -----------------------------
# Correlation table storage schema
# -----------------------------

# One row per ordered key pair. "r" is null where the coefficient is NaN
# (fewer than two paired samples or zero variance).
CORRELATION_TABLE_SCHEMA = pa.schema([
    pa.field("first", pa.string(), nullable=False),
    pa.field("second", pa.string(), nullable=False),
    pa.field("label", pa.string(), nullable=False),   # "first -> second"
    pa.field("r", pa.float64(), nullable=True),
])

# File-level metadata keys
META_ENGINE_NAME = b"engine_name"
META_ENGINE_VERSION = b"engine_version"
META_MODE = b"mode"
META_SCHEMA_VERSION = b"schema_version"
