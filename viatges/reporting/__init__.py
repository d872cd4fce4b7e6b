"""Text and plot reporting of query results."""

from .plots import plot_route_durations, plot_station_activity
from .text import render_route_stats, render_station_stats, render_trip_page

__all__ = [
    "plot_route_durations",
    "plot_station_activity",
    "render_route_stats",
    "render_station_stats",
    "render_trip_page",
]
