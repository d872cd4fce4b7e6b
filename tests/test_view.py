from datetime import datetime, timedelta

import pytest

from viatges.trips import Trip, TripView

T0 = datetime(2024, 3, 1, 8, 0)


def _trip(start, agency, origin, destination=None, minutes=None) -> Trip:
    entry = T0 + timedelta(minutes=start)
    return Trip(
        agency=agency,
        entry_transaction_number=None,
        entry_time=entry,
        entry_station=origin,
        exit_time=None if minutes is None else entry + timedelta(minutes=minutes),
        exit_station=destination,
        duration_minutes=None if minutes is None else float(minutes),
    )


def _sample():
    return [
        _trip(30, "FGC", "Sarrià", "Provença", 25),
        _trip(0, "TMB", "Diagonal"),
        _trip(10, "FGC", "Àngel", "Sarrià", 5),
        _trip(20, "Renfe", "Bonanova"),
        _trip(5, "FGC", "Provença", "Àngel", 40),
    ]


def test_view_keeps_input_order_until_sorted():
    trips = _sample()
    view = TripView(trips)
    assert list(view.rows) == trips
    assert len(view) == 5


def test_sort_by_start_time_and_toggle():
    view = TripView(_sample())
    view.sort_by("start_time")
    ascending = [trip.entry_time for trip in view.rows]
    assert ascending == sorted(ascending)
    assert view.descending is False
    view.sort_by("start_time")
    assert view.descending is True
    assert [trip.entry_time for trip in view.rows] == list(reversed(ascending))


def test_new_key_starts_ascending():
    view = TripView(_sample()).sort_by("start_time").sort_by("start_time")
    view.sort_by("origin")
    assert view.descending is False
    assert [trip.entry_station for trip in view.rows] == ["Àngel", "Bonanova", "Diagonal", "Provença", "Sarrià"]


def test_missing_durations_stay_last_in_both_directions():
    view = TripView(_sample()).sort_by("duration")
    assert [trip.duration_minutes for trip in view.rows] == [5.0, 25.0, 40.0, None, None]
    view.sort_by("duration")
    assert [trip.duration_minutes for trip in view.rows] == [40.0, 25.0, 5.0, None, None]


def test_missing_destinations_stay_last():
    view = TripView(_sample()).sort_by("destination", descending=True)
    assert [trip.exit_station for trip in view.rows] == ["Sarrià", "Provença", "Àngel", None, None]


def test_agency_sort_is_stable():
    view = TripView(_sample()).sort_by("agency")
    assert [(trip.agency, trip.entry_station) for trip in view.rows] == [
        ("FGC", "Sarrià"),
        ("FGC", "Àngel"),
        ("FGC", "Provença"),
        ("Renfe", "Bonanova"),
        ("TMB", "Diagonal"),
    ]


def test_unknown_sort_key():
    with pytest.raises(ValueError):
        TripView(_sample()).sort_by("price")


def test_filter_agencies_keeps_sort():
    view = TripView(_sample()).sort_by("duration", descending=True)
    view.filter_agencies(["FGC"])
    assert [trip.duration_minutes for trip in view.rows] == [40.0, 25.0, 5.0]
    view.filter_agencies(None)
    assert len(view) == 5
    assert view.rows[0].duration_minutes == 40.0


def test_page_truncation_does_not_touch_rows():
    trips = [_trip(idx, "TMB", f"S{idx}") for idx in range(250)]
    view = TripView(trips)
    page = view.page()
    assert len(page.rows) == 200
    assert page.truncated is True
    assert page.total == 250
    assert len(view) == 250

    small = view.page(max_rows=300)
    assert small.truncated is False
    assert len(small.rows) == 250

    with pytest.raises(ValueError):
        view.page(max_rows=0)


def test_view_is_independent_from_source_list():
    trips = _sample()
    view = TripView(trips).sort_by("start_time")
    trips.clear()
    assert len(view) == 5


def test_filter_by_unknown_agency_label_selects_blank_agencies():
    trips = [_trip(0, "", "Diagonal"), _trip(5, "TMB", "Sarrià"), _trip(10, "", "Gràcia")]
    view = TripView(trips).filter_agencies(["Desconocida"])
    assert [trip.entry_station for trip in view.rows] == ["Diagonal", "Gràcia"]

    custom = TripView(trips, unknown_agency_label="?").filter_agencies(["?", "TMB"])
    assert len(custom) == 3
    assert len(TripView(trips, unknown_agency_label="?").filter_agencies(["Desconocida"])) == 0
