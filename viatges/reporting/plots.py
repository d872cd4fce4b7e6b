"""Plotting helpers for station and route results."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from viatges.trips import RouteStats, StationStats


def plot_route_durations(stats: RouteStats, output_path: Optional[Path] = None) -> plt.Figure:
    """Histogram of known trip durations on a route, split by agency."""

    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))
    data = pd.DataFrame(
        {
            "agency": [trip.agency for trip in stats.trips if trip.duration_minutes is not None],
            "duration_minutes": [trip.duration_minutes for trip in stats.trips if trip.duration_minutes is not None],
        }
    )
    if data.empty:
        ax.text(0.5, 0.5, "No trip durations available", ha="center", va="center", transform=ax.transAxes)
    else:
        sns.histplot(data=data, x="duration_minutes", hue="agency", multiple="stack", binwidth=5, ax=ax)
        if stats.avg_duration is not None:
            ax.axvline(stats.avg_duration, color="black", linestyle="--", linewidth=1)
    ax.set_xlabel("Duration (minutes)")
    ax.set_ylabel("Trips")
    ax.set_title(f"Trip durations ({stats.count} trips)")
    plt.tight_layout()
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
    return fig


def plot_station_activity(station: str, stats: StationStats, output_path: Optional[Path] = None) -> plt.Figure:
    """Bar chart of entries and exits per agency at one station."""

    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))
    records = [
        {"agency": agency, "direction": "entries", "count": count}
        for agency, count in stats.entries_by_agency.items()
    ] + [
        {"agency": agency, "direction": "exits", "count": count}
        for agency, count in stats.exits_by_agency.items()
    ]
    if records:
        data = pd.DataFrame.from_records(records)
        sns.barplot(data=data, x="agency", y="count", hue="direction", palette="viridis", ax=ax)
        for container in ax.containers:
            ax.bar_label(container, fmt="%.0f", padding=3)
    else:
        ax.text(0.5, 0.5, "No activity recorded", ha="center", va="center", transform=ax.transAxes)
    ax.set_xlabel("Agency")
    ax.set_ylabel("Validations")
    ax.set_title(station)
    plt.tight_layout()
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
    return fig
