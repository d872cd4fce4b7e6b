"""Application context holding the currently loaded trip set."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd

from viatges.config import AppConfig
from viatges.loaders import LoadError, read_validation_csv
from viatges.trips import (
    RouteStats,
    StationStats,
    Trip,
    TripView,
    build_station_registry,
    compute_route_stats,
    compute_station_stats,
    normalize_rows,
    reconstruct_trips,
)
from viatges.trips.events import Rows

logger = logging.getLogger(__name__)


class TripSession:
    """One loaded validation export and the queries run against it.

    Loading replaces the trip set and the station registry together. A failed
    load leaves the previous state in place.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()
        self._trips: Tuple[Trip, ...] = ()
        self._stations: Tuple[str, ...] = ()
        self._loaded = False

    @property
    def trips(self) -> Tuple[Trip, ...]:
        return self._trips

    @property
    def stations(self) -> Tuple[str, ...]:
        return self._stations

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load_rows(self, rows: Rows) -> List[Trip]:
        """Normalize and reconstruct ``rows``, then make them the current trip set."""

        rows = rows.to_dict(orient="records") if isinstance(rows, pd.DataFrame) else list(rows)
        if not rows:
            raise LoadError("The input has no rows or no header.")
        events = normalize_rows(rows, self.config.columns, self.config.normalization)
        trips = reconstruct_trips(events, self.config.reconstruction)
        stations = build_station_registry(trips)
        self._trips, self._stations = tuple(trips), tuple(stations)
        self._loaded = True
        logger.info("Loaded %d rows into %d trips across %d stations", len(rows), len(trips), len(stations))
        return trips

    def load_csv(self, path: Path) -> List[Trip]:
        return self.load_rows(read_validation_csv(path))

    def station_stats(self, station: str) -> StationStats:
        return compute_station_stats(self._trips, station, self.config.view.unknown_agency_label)

    def route_stats(
        self,
        origins: Union[str, Iterable[str]],
        destination: str,
        bidirectional: bool = False,
    ) -> Optional[RouteStats]:
        return compute_route_stats(
            self._trips,
            origins,
            destination,
            bidirectional=bidirectional,
            unknown_label=self.config.view.unknown_agency_label,
        )

    def route_view(
        self,
        origins: Union[str, Iterable[str]],
        destination: str,
        bidirectional: bool = False,
    ) -> Optional[TripView]:
        """A fresh listing of the trips matched by a route query, or ``None``."""

        stats = self.route_stats(origins, destination, bidirectional)
        if stats is None:
            return None
        return self._view(stats.trips)

    def trip_view(self) -> TripView:
        return self._view(self._trips)

    def _view(self, trips: Iterable[Trip]) -> TripView:
        return TripView(
            trips,
            max_rows=self.config.view.max_rows,
            unknown_agency_label=self.config.view.unknown_agency_label,
        )
