"""Sortable, filterable and paginated trip listings."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from viatges.trips.aggregates import DEFAULT_UNKNOWN_AGENCY, station_sort_key
from viatges.trips.inference import Trip

SORT_KEYS: Dict[str, Callable[[Trip], object]] = {
    "start_time": lambda trip: trip.entry_time,
    "agency": lambda trip: station_sort_key(trip.agency),
    "origin": lambda trip: station_sort_key(trip.entry_station),
    "destination": lambda trip: None if trip.exit_station is None else station_sort_key(trip.exit_station),
    "duration": lambda trip: trip.duration_minutes,
}


@dataclass(frozen=True)
class ViewPage:
    """The rendered slice of a trip listing."""

    rows: Tuple[Trip, ...]
    truncated: bool
    total: int


class TripView:
    """Working copy of a trip subset with its own ordering and filters.

    Rows whose sort value is missing (no duration, no destination) are kept
    at the end in both directions, in their current relative order.
    """

    def __init__(
        self,
        trips: Iterable[Trip],
        max_rows: int = 200,
        unknown_agency_label: str = DEFAULT_UNKNOWN_AGENCY,
    ) -> None:
        self._source: Tuple[Trip, ...] = tuple(trips)
        self._rows: List[Trip] = list(self._source)
        self._max_rows = max_rows
        self._unknown_agency_label = unknown_agency_label
        self._agencies: Optional[frozenset] = None
        self.sort_key: Optional[str] = None
        self.descending = False

    @property
    def rows(self) -> Tuple[Trip, ...]:
        return tuple(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def sort_by(self, key: str, descending: Optional[bool] = None) -> "TripView":
        """Sort by ``key``; selecting the active key again flips the direction."""

        if key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{key}'. Expected one of: {', '.join(SORT_KEYS)}")
        if descending is not None:
            self.descending = descending
        elif key == self.sort_key:
            self.descending = not self.descending
        else:
            self.descending = False
        self.sort_key = key
        self._rows = self._sorted(self._rows)
        return self

    def filter_agencies(self, agencies: Optional[Iterable[str]]) -> "TripView":
        """Keep only trips of ``agencies``; ``None`` shows every agency again.

        The unknown-agency label selects trips whose agency is blank.
        """

        self._agencies = None if agencies is None else frozenset(agencies)
        rows = [trip for trip in self._source if self._agencies is None or self._agency_label(trip) in self._agencies]
        self._rows = self._sorted(rows) if self.sort_key else rows
        return self

    def page(self, max_rows: Optional[int] = None) -> ViewPage:
        limit = self._max_rows if max_rows is None else max_rows
        if limit < 1:
            raise ValueError("max_rows must be at least 1")
        return ViewPage(rows=tuple(self._rows[:limit]), truncated=len(self._rows) > limit, total=len(self._rows))

    def _agency_label(self, trip: Trip) -> str:
        return trip.agency or self._unknown_agency_label

    def _sorted(self, rows: List[Trip]) -> List[Trip]:
        extract = SORT_KEYS[self.sort_key]
        present = [trip for trip in rows if extract(trip) is not None]
        missing = [trip for trip in rows if extract(trip) is None]
        return sorted(present, key=extract, reverse=self.descending) + missing
