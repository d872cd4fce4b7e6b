"""Normalization of raw validation rows into typed events."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Union

import pandas as pd

from viatges.config import ColumnNames, NormalizationConfig
from viatges.utils.time import parse_timestamp

logger = logging.getLogger(__name__)

_LEADING_INTEGER = re.compile(r"[+-]?\d+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Rows = Union[pd.DataFrame, Iterable[Mapping[str, object]]]


@dataclass(frozen=True)
class ValidationEvent:
    """A single card tap that survived normalization."""

    transaction_number: Optional[int]
    timestamp: datetime
    agency: str
    operation: str
    transaction_type: str
    station: str
    raw_timestamp: str = ""


def normalize_rows(
    rows: Rows,
    columns: ColumnNames | None = None,
    config: NormalizationConfig | None = None,
) -> List[ValidationEvent]:
    """Convert raw rows into validation events, silently dropping unusable rows.

    Parameters
    ----------
    rows:
        A dataframe or an iterable of mappings keyed by the export's column
        names. Missing columns read as empty text.
    columns:
        Column names of the export; defaults to the standard headers.
    config:
        Accepted transaction types and excluded operations.

    Returns
    -------
    list[ValidationEvent]
        Events in input order. A row is dropped when its timestamp cannot be
        parsed, its transaction type is empty or not accepted, or its
        operation is excluded.
    """

    cols = columns or ColumnNames()
    cfg = config or NormalizationConfig()
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict(orient="records")

    events: List[ValidationEvent] = []
    seen = 0
    for row in rows:
        seen += 1
        event = _normalize_row(row, cols)
        if event is None:
            continue
        if not event.transaction_type or event.transaction_type not in cfg.accepted_transaction_types:
            continue
        if event.operation in cfg.excluded_operations:
            continue
        events.append(event)
    logger.debug("Normalized %d of %d rows (%d dropped)", len(events), seen, seen - len(events))
    return events


def parse_transaction_number(text: str) -> Optional[int]:
    """Read the leading integer of ``text``; ``None`` when there is none or it exceeds 64 bits."""

    match = _LEADING_INTEGER.match(text)
    if match is None:
        return None
    value = int(match.group(0))
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _normalize_row(row: Mapping[str, object], cols: ColumnNames) -> Optional[ValidationEvent]:
    raw_timestamp = _text(row.get(cols.timestamp))
    timestamp = parse_timestamp(raw_timestamp)
    if timestamp is None:
        return None
    return ValidationEvent(
        transaction_number=parse_transaction_number(_text(row.get(cols.transaction_number))),
        timestamp=timestamp,
        agency=_text(row.get(cols.agency)),
        operation=_text(row.get(cols.operation)),
        transaction_type=_text(row.get(cols.transaction_type)),
        station=_text(row.get(cols.station)),
        raw_timestamp=raw_timestamp,
    )


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()
