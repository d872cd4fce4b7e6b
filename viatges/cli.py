"""Command-line interface for trip reconstruction and queries."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from viatges import config as cfg
from viatges.loaders import LoadError
from viatges.reporting import (
    plot_route_durations,
    plot_station_activity,
    render_route_stats,
    render_station_stats,
    render_trip_page,
)
from viatges.session import TripSession
from viatges.trips import (
    SORT_KEYS,
    TripView,
    build_duration_distribution,
    build_od_matrix,
    build_station_activity,
    trips_to_frame,
)
from viatges.utils import write_table

app = typer.Typer(add_completion=False)

CONFIG_HELP = "Path to config JSON/YAML."
SORT_HELP = f"Sort key: {', '.join(SORT_KEYS)}."


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")) -> None:
    """Reconstruct trips from card validation exports and query them."""

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


@app.command()
def stations(
    input_path: Path = typer.Argument(..., help="Validation CSV export."),
    config_path: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """List every station seen as a trip origin or destination."""

    session = _load_session(input_path, config_path)
    for station in session.stations:
        typer.echo(station)


@app.command()
def reconstruct(
    input_path: Path = typer.Argument(..., help="Validation CSV export."),
    output_path: Path = typer.Option(Path("trips.csv"), "--output", help="Trips table (.csv or .parquet)."),
    od_matrix_path: Optional[Path] = typer.Option(None, "--od-matrix", help="Optional station x station count table."),
    durations_path: Optional[Path] = typer.Option(None, "--durations", help="Optional hourly duration table."),
    activity_path: Optional[Path] = typer.Option(
        None, "--station-activity", help="Optional per-station, per-agency entry/exit table."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Reconstruct trips and export them with optional aggregates."""

    session = _load_session(input_path, config_path)
    trips = session.trips
    paired = sum(1 for trip in trips if trip.is_paired)
    typer.echo(f"Reconstructed trips: {len(trips)} ({paired} paired, {len(trips) - paired} entry-only)")
    write_table(trips_to_frame(trips), output_path)
    typer.echo(f"Trips saved to {output_path}")
    if od_matrix_path is not None:
        write_table(build_od_matrix(trips), od_matrix_path, index=True)
        typer.echo(f"OD matrix saved to {od_matrix_path}")
    if durations_path is not None:
        write_table(build_duration_distribution(trips), durations_path)
        typer.echo(f"Duration distribution saved to {durations_path}")
    if activity_path is not None:
        write_table(build_station_activity(trips, session.config.view.unknown_agency_label), activity_path)
        typer.echo(f"Station activity saved to {activity_path}")


@app.command()
def station(
    input_path: Path = typer.Argument(..., help="Validation CSV export."),
    name: str = typer.Argument(..., help="Station label, exactly as in the export."),
    plot_path: Optional[Path] = typer.Option(None, "--plot", help="Write an activity chart to this file."),
    config_path: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Show entries and exits recorded at one station."""

    session = _load_session(input_path, config_path)
    stats = session.station_stats(name)
    typer.echo(render_station_stats(name, stats))
    if plot_path is not None:
        plot_station_activity(name, stats, plot_path)
        typer.echo(f"Plot saved to {plot_path}")


@app.command()
def route(
    input_path: Path = typer.Argument(..., help="Validation CSV export."),
    origins: List[str] = typer.Option(..., "--from", help="Origin station; repeat for several."),
    destination: str = typer.Option(..., "--to", help="Destination station."),
    bidirectional: bool = typer.Option(False, "--bidirectional", help="Also count trips in the reverse direction."),
    sort_key: Optional[str] = typer.Option(None, "--sort", help=SORT_HELP),
    descending: bool = typer.Option(False, "--descending", help="Sort in descending order."),
    max_rows: Optional[int] = typer.Option(None, "--max-rows", min=1, help="Rows to list."),
    plot_path: Optional[Path] = typer.Option(None, "--plot", help="Write a duration histogram to this file."),
    config_path: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Summarise trips between origin and destination stations."""

    session = _load_session(input_path, config_path)
    stats = session.route_stats(origins, destination, bidirectional)
    typer.echo(render_route_stats(origins, destination, stats, bidirectional))
    if stats is None:
        return
    _echo_view(session.route_view(origins, destination, bidirectional), sort_key, descending, max_rows)
    if plot_path is not None:
        plot_route_durations(stats, plot_path)
        typer.echo(f"Plot saved to {plot_path}")


@app.command()
def trips(
    input_path: Path = typer.Argument(..., help="Validation CSV export."),
    agencies: Optional[List[str]] = typer.Option(None, "--agency", help="Only list these agencies."),
    sort_key: Optional[str] = typer.Option(None, "--sort", help=SORT_HELP),
    descending: bool = typer.Option(False, "--descending", help="Sort in descending order."),
    max_rows: Optional[int] = typer.Option(None, "--max-rows", min=1, help="Rows to list."),
    config_path: Optional[Path] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """List reconstructed trips."""

    session = _load_session(input_path, config_path)
    view = session.trip_view()
    if agencies:
        view.filter_agencies(agencies)
    _echo_view(view, sort_key, descending, max_rows)


def _load_session(input_path: Path, config_path: Optional[Path]) -> TripSession:
    session = TripSession(cfg.load_config(config_path))
    try:
        session.load_csv(input_path)
    except LoadError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(code=1) from err
    return session


def _echo_view(view: TripView, sort_key: Optional[str], descending: bool, max_rows: Optional[int]) -> None:
    if sort_key is not None:
        if sort_key not in SORT_KEYS:
            raise typer.BadParameter(SORT_HELP, param_hint="--sort")
        view.sort_by(sort_key, descending=descending)
    typer.echo(render_trip_page(view.page(max_rows)))


if __name__ == "__main__":
    app()
