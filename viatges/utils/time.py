"""Datetime helpers for validation timestamps."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

_YEAR = re.compile(r"\d{4}")


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse a validation timestamp, returning ``None`` when it is unusable.

    The date and time may be separated by a space instead of ``T``. Non-ISO
    text is read day-first (``01/03/2024 08:00`` is the 1st of March). Aware
    values are converted to UTC and returned naive so that every parsed
    timestamp is comparable with every other. Text without a four-digit year
    is rejected rather than completed with the current date.
    """

    if not text:
        return None
    candidate = text.replace(" ", "T", 1)
    try:
        ts = datetime.fromisoformat(candidate)
    except ValueError:
        if _YEAR.search(text) is None:
            return None
        parsed = pd.to_datetime(text, errors="coerce", format="mixed", dayfirst=True)
        if pd.isna(parsed):
            return None
        ts = parsed.to_pydatetime()
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def format_timestamp(ts: Optional[datetime]) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS`` (empty for ``None``)."""

    if ts is None:
        return ""
    return ts.strftime(DISPLAY_FORMAT)
