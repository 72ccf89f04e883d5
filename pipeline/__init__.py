"""Pipeline components.

This package contains the block parser, the pairwise correlation engine, and
the JSON / Parquet exporters for correlation tables.
"""
