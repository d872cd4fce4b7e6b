"""Filesystem utilities for exported tables."""
from __future__ import annotations

from pathlib import Path

import pandas as pd


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist and return the path."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def write_parquet(df: pd.DataFrame, path: Path) -> None:
    """Write a DataFrame to Parquet, ensuring parent directories exist."""

    ensure_directory(path.parent)
    df.to_parquet(path, index=True)


def write_table(df: pd.DataFrame, path: Path, index: bool = False) -> Path:
    """Write a DataFrame as CSV or Parquet depending on the file suffix."""

    suffix = path.suffix.lower()
    if suffix == ".parquet":
        write_parquet(df, path)
        return path
    if suffix in {".csv", ".txt"}:
        ensure_directory(path.parent)
        df.to_csv(path, index=index, encoding="utf-8")
        return path
    raise ValueError(f"Unsupported table format: {path}")
