from pathlib import Path

import pandas as pd
import pytest

from viatges.config import AppConfig, ViewConfig
from viatges.loaders import LoadError, read_validation_csv
from viatges.session import TripSession


def test_load_rows_builds_trips_and_stations(validation_rows):
    session = TripSession()
    assert not session.is_loaded
    trips = session.load_rows(validation_rows)
    assert session.is_loaded
    assert len(trips) == 4
    assert session.trips == tuple(trips)
    assert [trip.is_paired for trip in session.trips] == [True, True, False, False]
    assert session.stations == ("Diagonal", "Provença", "Sarrià")


def test_station_stats(validation_rows):
    session = TripSession()
    session.load_rows(validation_rows)
    stats = session.station_stats("Provença")
    assert stats.entries_count == 2
    assert stats.entries_by_agency == {"FGC": 1, "TMB": 1}
    assert stats.exits_count == 1
    assert session.station_stats("Nowhere").entries_count == 0


def test_route_queries(validation_rows):
    session = TripSession()
    session.load_rows(validation_rows)
    one_way = session.route_stats("Sarrià", "Provença")
    assert one_way.count == 1
    assert one_way.avg_duration == pytest.approx(20.0)
    both = session.route_stats({"Sarrià"}, "Provença", bidirectional=True)
    assert both.count == 2
    assert both.avg_duration == pytest.approx(25.0)
    assert session.route_stats("Diagonal", "Sarrià") is None
    assert session.route_view("Diagonal", "Sarrià") is None
    view = session.route_view("Sarrià", "Provença", bidirectional=True)
    assert len(view) == 2


def test_empty_load_keeps_previous_state(validation_rows):
    session = TripSession()
    session.load_rows(validation_rows)
    before = session.trips
    with pytest.raises(LoadError):
        session.load_rows([])
    with pytest.raises(LoadError):
        session.load_rows(pd.DataFrame(columns=["Data"]))
    assert session.trips is before
    assert session.is_loaded


def test_new_load_replaces_state(validation_rows):
    session = TripSession()
    session.load_rows(validation_rows)
    session.load_rows(validation_rows[2:3])
    assert len(session.trips) == 1
    assert session.stations == ("Diagonal",)


def test_views_use_configured_row_limit(validation_rows):
    session = TripSession(AppConfig(view=ViewConfig(max_rows=3)))
    session.load_rows(validation_rows)
    page = session.trip_view().page()
    assert len(page.rows) == 3
    assert page.truncated
    assert page.total == 4


def test_load_csv(validation_csv):
    session = TripSession()
    trips = session.load_csv(validation_csv)
    assert len(trips) == 4


def test_read_semicolon_csv(tmp_path: Path):
    path = tmp_path / "export.csv"
    path.write_text(
        "Num.Transacción;Data;Agència;Operació;Transacció;Estació Fix\n"
        "1;2024-03-01 08:00:00;FGC;Validació d'entrada;Validació correcta;Sarrià\n"
        "\n"
        "2;2024-03-01 08:12:00;FGC;Validació de Sortida;Validació correcta;Gràcia\n",
        encoding="utf-8",
    )
    frame = read_validation_csv(path)
    assert len(frame) == 2
    assert frame.loc[1, "Estació Fix"] == "Gràcia"
    session = TripSession()
    trips = session.load_csv(path)
    assert len(trips) == 1
    assert trips[0].duration_minutes == pytest.approx(12.0)


def test_header_only_csv_is_a_load_failure(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text("Num.Transacción,Data,Agència,Operació,Transacció,Estació Fix\n", encoding="utf-8")
    session = TripSession()
    with pytest.raises(LoadError):
        session.load_csv(path)
    assert not session.is_loaded


def test_missing_or_blank_file(tmp_path: Path):
    with pytest.raises(LoadError):
        read_validation_csv(tmp_path / "missing.csv")
    blank = tmp_path / "blank.csv"
    blank.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        read_validation_csv(blank)


def test_load_csv_with_byte_order_mark(tmp_path: Path):
    path = tmp_path / "excel_export.csv"
    path.write_text(
        "Num.Transacción,Data,Agència,Operació,Transacció,Estació Fix\n"
        "8,2024-03-01 08:00:00,FGC,Validació de Sortida,Validació correcta,Gràcia\n"
        "7,2024-03-01 08:00:00,FGC,Validació d'entrada,Validació correcta,Sarrià\n",
        encoding="utf-8-sig",
    )
    frame = read_validation_csv(path)
    assert list(frame.columns)[0] == "Num.Transacción"
    trips = TripSession().load_csv(path)
    assert len(trips) == 1
    assert trips[0].entry_transaction_number == 7
    assert trips[0].exit_transaction_number == 8


def test_views_filter_configured_unknown_agency(validation_rows):
    rows = [dict(row) for row in validation_rows]
    rows[2]["Agència"] = ""
    session = TripSession(AppConfig(view=ViewConfig(unknown_agency_label="Sense agència")))
    session.load_rows(rows)
    view = session.trip_view().filter_agencies(["Sense agència"])
    assert [trip.entry_station for trip in view.rows] == ["Diagonal"]
