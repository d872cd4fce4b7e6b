"""Trip reconstruction from normalized validation events."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence

from viatges.config import ReconstructionConfig
from viatges.trips.events import ValidationEvent
from viatges.utils.time import format_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trip:
    """A reconstructed ride.

    Exit fields and duration are only set for trips produced by pairing an
    entry with an exit; every other trip is entry-only.
    """

    agency: str
    entry_transaction_number: Optional[int]
    entry_time: datetime
    entry_station: str
    exit_transaction_number: Optional[int] = None
    exit_time: Optional[datetime] = None
    exit_station: Optional[str] = None
    duration_minutes: Optional[float] = None

    @property
    def is_paired(self) -> bool:
        return self.exit_time is not None

    @property
    def start_label(self) -> str:
        return format_timestamp(self.entry_time)

    def as_record(self) -> Dict[str, object]:
        return {
            "agency": self.agency,
            "entry_transaction_number": self.entry_transaction_number,
            "entry_time": self.entry_time,
            "entry_station": self.entry_station,
            "exit_transaction_number": self.exit_transaction_number,
            "exit_time": self.exit_time,
            "exit_station": self.exit_station,
            "duration_minutes": self.duration_minutes,
        }


def reconstruct_trips(
    events: Iterable[ValidationEvent],
    config: ReconstructionConfig | None = None,
) -> List[Trip]:
    """Build trips from validation events.

    Entries and exits of the paired agency are matched by scanning the
    time-sorted sequence once; every entry of any other agency becomes an
    entry-only trip. Paired trips come first, followed by the entry-only
    trips, each group in its own scan order.
    """

    cfg = config or ReconstructionConfig()
    events = list(events)
    paired = pair_entry_exit_events(
        [
            ev
            for ev in events
            if ev.agency == cfg.paired_agency and ev.operation in (cfg.entry_operation, cfg.exit_operation)
        ],
        cfg,
    )
    singles = [
        _entry_only_trip(ev)
        for ev in events
        if ev.agency != cfg.paired_agency and ev.operation == cfg.entry_operation
    ]
    logger.info("Reconstructed %d paired and %d entry-only trips", len(paired), len(singles))
    return paired + singles


def pair_entry_exit_events(events: Sequence[ValidationEvent], config: ReconstructionConfig) -> List[Trip]:
    """Pair each entry with the exit immediately following it in time order.

    Nothing is consumed: the scan always advances by one position, so an exit
    is considered only as the second half of a pair. Entries without an
    acceptable following exit are dropped.
    """

    ordered = sort_events(events)
    trips: List[Trip] = []
    for ev, nxt in zip(ordered, ordered[1:]):
        if ev.operation != config.entry_operation or nxt.operation != config.exit_operation:
            continue
        if nxt.timestamp < ev.timestamp:
            continue
        diff_minutes = (nxt.timestamp - ev.timestamp).total_seconds() / 60.0
        if diff_minutes < 0 or diff_minutes > config.max_trip_minutes:
            continue
        if config.require_consecutive_numbers and not _numbers_consecutive(ev, nxt):
            continue
        trips.append(
            Trip(
                agency=ev.agency,
                entry_transaction_number=ev.transaction_number,
                entry_time=ev.timestamp,
                entry_station=ev.station,
                exit_transaction_number=nxt.transaction_number,
                exit_time=nxt.timestamp,
                exit_station=nxt.station,
                duration_minutes=diff_minutes,
            )
        )
    return trips


def sort_events(events: Iterable[ValidationEvent]) -> List[ValidationEvent]:
    """Stable sort by timestamp; equal timestamps fall back to transaction number when both have one."""

    return sorted(events, key=cmp_to_key(_compare_events))


def _compare_events(a: ValidationEvent, b: ValidationEvent) -> int:
    if a.timestamp != b.timestamp:
        return -1 if a.timestamp < b.timestamp else 1
    if a.transaction_number is not None and b.transaction_number is not None:
        return (a.transaction_number > b.transaction_number) - (a.transaction_number < b.transaction_number)
    return 0


def _numbers_consecutive(ev: ValidationEvent, nxt: ValidationEvent) -> bool:
    return (
        ev.transaction_number is not None
        and nxt.transaction_number is not None
        and nxt.transaction_number == ev.transaction_number + 1
    )


def _entry_only_trip(ev: ValidationEvent) -> Trip:
    return Trip(
        agency=ev.agency,
        entry_transaction_number=ev.transaction_number,
        entry_time=ev.timestamp,
        entry_station=ev.station,
    )
