"""Reader for validation CSV exports."""
from __future__ import annotations

import csv
from pathlib import Path

import pandas as pd


class LoadError(ValueError):
    """Raised when an input file cannot be turned into validation rows."""


def read_validation_csv(path: Path, encoding: str = "utf-8-sig") -> pd.DataFrame:
    """Read a validation export with every column kept as text.

    The delimiter is sniffed from the file, a leading byte-order mark is
    dropped and blank lines are skipped. A file
    with only a header yields an empty dataframe.
    """

    if not path.exists():
        raise LoadError(f"Input file not found: {path}")
    try:
        return pd.read_csv(
            path,
            sep=None,
            engine="python",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError as err:
        raise LoadError(f"Input file is empty: {path}") from err
    except (pd.errors.ParserError, csv.Error, UnicodeDecodeError) as err:
        raise LoadError(f"Could not parse {path}: {err}") from err
