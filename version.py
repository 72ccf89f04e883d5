"""Project version constants.

These constants are used in logs and embedded in exported correlation tables
(JSON and Parquet) so that an archived table can be traced back to a specific
engine and schema version.
"""

ENGINE_NAME: str = "keycorr"
ENGINE_VERSION: str = "0.1.0"

SCHEMA_VERSION: int = 1
