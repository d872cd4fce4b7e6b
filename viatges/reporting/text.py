"""Plain-text rendering of query results."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from viatges.trips import RouteStats, StationStats, ViewPage

TABLE_HEADER = ("Start", "Agency", "Origin", "Destination", "Minutes")


def render_station_stats(station: str, stats: StationStats) -> str:
    lines = [
        station,
        f"{stats.entries_count} entries | {stats.exits_count} exits",
        "By agency (entries):",
        _render_breakdown(stats.entries_by_agency, "entries", "No entries recorded."),
        "By agency (exits):",
        _render_breakdown(stats.exits_by_agency, "exits", "No exits recorded."),
    ]
    return "\n".join(lines)


def render_route_stats(
    origins: Union[str, Iterable[str]],
    destination: str,
    stats: Optional[RouteStats],
    bidirectional: bool = False,
) -> str:
    """Summarise a route query; ``None`` stats render as a no-data message."""

    origin_label = origins if isinstance(origins, str) else ", ".join(origins)
    direction = "between" if bidirectional else "from"
    joiner = "and" if bidirectional else "to"
    if stats is None:
        suffix = "" if bidirectional else " (in that direction)"
        return f"No trips found {direction} {origin_label} {joiner} {destination}{suffix}."
    parts = [f"{stats.count} trips {direction} {origin_label} {joiner} {destination}"]
    for label, value in (("Mean", stats.avg_duration), ("Min", stats.min_duration), ("Max", stats.max_duration)):
        if value is not None:
            parts.append(f"{label}: {value:.1f} min")
    lines = [" | ".join(parts), _render_breakdown(stats.by_agency, "trips", "")]
    return "\n".join(line for line in lines if line)


def render_trip_page(page: ViewPage) -> str:
    """Render a listing slice as an aligned table."""

    rows: List[tuple] = [TABLE_HEADER]
    for trip in page.rows:
        rows.append(
            (
                trip.start_label,
                trip.agency,
                trip.entry_station,
                trip.exit_station or "",
                "" if trip.duration_minutes is None else f"{trip.duration_minutes:.1f}",
            )
        )
    widths = [max(len(row[idx]) for row in rows) for idx in range(len(TABLE_HEADER))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    if page.truncated:
        lines.append(f"Showing only the first {len(page.rows)} of {page.total} trips...")
    return "\n".join(lines)


def _render_breakdown(counts: Dict[str, int], noun: str, empty: str) -> str:
    if not counts:
        return empty
    return "  ".join(f"[{agency}: {count} {noun}]" for agency, count in counts.items())
