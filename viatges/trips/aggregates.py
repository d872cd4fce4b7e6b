"""Aggregations over reconstructed trips."""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from viatges.trips.inference import Trip

DEFAULT_UNKNOWN_AGENCY = "Desconocida"

TRIP_COLUMNS = [
    "agency",
    "entry_transaction_number",
    "entry_time",
    "entry_station",
    "exit_transaction_number",
    "exit_time",
    "exit_station",
    "duration_minutes",
]


@dataclass(frozen=True)
class StationStats:
    """Entries and exits recorded at one station."""

    entries_count: int
    exits_count: int
    entries_by_agency: Dict[str, int] = field(default_factory=dict)
    exits_by_agency: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteStats:
    """Summary of the trips matching an origin/destination query."""

    count: int
    avg_duration: Optional[float]
    min_duration: Optional[float]
    max_duration: Optional[float]
    total_minutes: float
    by_agency: Dict[str, int]
    trips: Tuple[Trip, ...]


def station_sort_key(label: str) -> Tuple[str, str]:
    """Collation key ignoring case and accents, with the raw label as tiebreak."""

    decomposed = unicodedata.normalize("NFKD", label)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), label


def build_station_registry(trips: Iterable[Trip]) -> List[str]:
    """Return every non-empty entry or exit station, collated."""

    stations = set()
    for trip in trips:
        if trip.entry_station:
            stations.add(trip.entry_station)
        if trip.exit_station:
            stations.add(trip.exit_station)
    return sorted(stations, key=station_sort_key)


def group_by_agency(trips: Iterable[Trip], unknown_label: str = DEFAULT_UNKNOWN_AGENCY) -> Dict[str, int]:
    """Count trips per agency in first-seen order."""

    counts: Dict[str, int] = {}
    for trip in trips:
        key = trip.agency or unknown_label
        counts[key] = counts.get(key, 0) + 1
    return counts


def compute_station_stats(
    trips: Sequence[Trip],
    station: str,
    unknown_label: str = DEFAULT_UNKNOWN_AGENCY,
) -> StationStats:
    """Count entries and exits at ``station``. Unknown stations yield zeros."""

    entries = [trip for trip in trips if trip.entry_station == station]
    exits = [trip for trip in trips if trip.exit_station == station]
    return StationStats(
        entries_count=len(entries),
        exits_count=len(exits),
        entries_by_agency=group_by_agency(entries, unknown_label),
        exits_by_agency=group_by_agency(exits, unknown_label),
    )


def compute_route_stats(
    trips: Sequence[Trip],
    origins: Union[str, Iterable[str]],
    destination: str,
    bidirectional: bool = False,
    unknown_label: str = DEFAULT_UNKNOWN_AGENCY,
) -> Optional[RouteStats]:
    """Summarise trips from any of ``origins`` to ``destination``.

    With ``bidirectional`` the reverse direction is included as well. Returns
    ``None`` when no trip matches. Duration figures only consider trips with a
    known duration; entry-only trips still count towards ``count`` and
    ``by_agency``.
    """

    origin_set = {origins} if isinstance(origins, str) else set(origins)
    matched = tuple(
        trip
        for trip in trips
        if (trip.entry_station in origin_set and trip.exit_station == destination)
        or (bidirectional and trip.exit_station in origin_set and trip.entry_station == destination)
    )
    if not matched:
        return None

    durations = np.array(
        [trip.duration_minutes for trip in matched if _is_number(trip.duration_minutes)],
        dtype=float,
    )
    if durations.size:
        avg: Optional[float] = float(durations.mean())
        low: Optional[float] = float(durations.min())
        high: Optional[float] = float(durations.max())
    else:
        avg = low = high = None
    return RouteStats(
        count=len(matched),
        avg_duration=avg,
        min_duration=low,
        max_duration=high,
        total_minutes=float(durations.sum()),
        by_agency=group_by_agency(matched, unknown_label),
        trips=matched,
    )


def trips_to_frame(trips: Iterable[Trip]) -> pd.DataFrame:
    """Tabulate trips with one row per trip."""

    records = [trip.as_record() for trip in trips]
    if not records:
        return pd.DataFrame(columns=TRIP_COLUMNS)
    frame = pd.DataFrame.from_records(records, columns=TRIP_COLUMNS)
    frame["entry_transaction_number"] = frame["entry_transaction_number"].astype("Int64")
    frame["exit_transaction_number"] = frame["exit_transaction_number"].astype("Int64")
    frame["entry_time"] = pd.to_datetime(frame["entry_time"])
    frame["exit_time"] = pd.to_datetime(frame["exit_time"])
    frame["duration_minutes"] = pd.to_numeric(frame["duration_minutes"], errors="coerce")
    return frame


def build_od_matrix(trips: Iterable[Trip]) -> pd.DataFrame:
    """Create an entry x exit station matrix of paired-trip counts."""

    frame = trips_to_frame(trips)
    frame = frame.loc[frame["exit_station"].notna()]
    if frame.empty:
        return pd.DataFrame()
    matrix = frame.pivot_table(
        index="entry_station",
        columns="exit_station",
        values="agency",
        aggfunc="count",
        fill_value=0,
    )
    return matrix.sort_index().sort_index(axis=1)


def build_duration_distribution(trips: Iterable[Trip]) -> pd.DataFrame:
    """Compute hourly duration quantiles and averages of paired trips."""

    columns = ["hour", "trip_count", "mean_minutes", "p50", "p80", "p95"]
    frame = trips_to_frame(trips).dropna(subset=["duration_minutes"])
    if frame.empty:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame({"hour": frame["entry_time"].dt.hour, "duration": frame["duration_minutes"]})

    def _quantile(series: pd.Series, q: float) -> float:
        clean = series.dropna()
        if clean.empty:
            return float("nan")
        return float(np.percentile(clean, q))

    distribution = df.groupby("hour").agg(
        trip_count=("duration", "count"),
        mean_minutes=("duration", "mean"),
        p50=("duration", lambda s: _quantile(s, 50)),
        p80=("duration", lambda s: _quantile(s, 80)),
        p95=("duration", lambda s: _quantile(s, 95)),
    ).reset_index()
    return distribution.sort_values("hour").reset_index(drop=True)[columns]


def build_station_activity(trips: Iterable[Trip], unknown_label: str = DEFAULT_UNKNOWN_AGENCY) -> pd.DataFrame:
    """Count entries and exits per station and agency."""

    columns = ["station", "agency", "entries", "exits"]
    frame = trips_to_frame(trips)
    if frame.empty:
        return pd.DataFrame(columns=columns)
    frame["agency"] = frame["agency"].replace("", unknown_label)
    entries = (
        frame.loc[frame["entry_station"] != ""]
        .groupby(["entry_station", "agency"])
        .size()
        .rename("entries")
        .rename_axis(["station", "agency"])
    )
    exits = (
        frame.loc[frame["exit_station"].notna() & (frame["exit_station"] != "")]
        .groupby(["exit_station", "agency"])
        .size()
        .rename("exits")
        .rename_axis(["station", "agency"])
    )
    activity = pd.concat([entries, exits], axis=1).fillna(0).astype(int).reset_index()
    activity["_key"] = activity["station"].map(station_sort_key)
    activity = activity.sort_values(["_key", "agency"]).drop(columns="_key").reset_index(drop=True)
    return activity[columns]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not np.isnan(value)
