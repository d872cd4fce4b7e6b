"""Trip reconstruction and aggregation utilities."""

from .events import ValidationEvent, normalize_rows
from .inference import Trip, reconstruct_trips, sort_events
from .aggregates import (
    RouteStats,
    StationStats,
    build_duration_distribution,
    build_od_matrix,
    build_station_activity,
    build_station_registry,
    compute_route_stats,
    compute_station_stats,
    group_by_agency,
    trips_to_frame,
)
from .view import SORT_KEYS, TripView, ViewPage

__all__ = [
    "ValidationEvent",
    "normalize_rows",
    "Trip",
    "reconstruct_trips",
    "sort_events",
    "RouteStats",
    "StationStats",
    "build_duration_distribution",
    "build_od_matrix",
    "build_station_activity",
    "build_station_registry",
    "compute_route_stats",
    "compute_station_stats",
    "group_by_agency",
    "trips_to_frame",
    "SORT_KEYS",
    "TripView",
    "ViewPage",
]
