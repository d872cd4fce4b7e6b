"""Utility helpers for IO and timestamps."""

from .io import ensure_directory, write_parquet, write_table
from .time import format_timestamp, parse_timestamp

__all__ = [
    "ensure_directory",
    "write_parquet",
    "write_table",
    "format_timestamp",
    "parse_timestamp",
]
