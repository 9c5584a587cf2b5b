"""Providers over a fake connection; repository calls are monkeypatched."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

import psycopg2
import pytest

from db.repositories import settings_repo, tour_repo
from modules.composition.errors import FetchError, ValidationError
from modules.providers.catalog import CatalogProvider, TourQuote
from modules.providers.settings import SettingsProvider
from schemas.tour import DistanceUnit, PredefinedTour

SETTINGS_ROW = {
    "id": 1, "max_points": 5, "max_people": 12,
    "start_fee": Decimal("50.00"), "per_distance_rate": Decimal("3.00"),
    "distance_unit": "km", "currency_code": "EUR",
    "max_distance_radius": Decimal("30.00"), "distance_radius_unit": "miles",
    "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
    "updated_at": datetime(2024, 5, 2, tzinfo=timezone.utc),
}


@contextmanager
def fake_conn():
    yield object()


@contextmanager
def broken_conn():
    raise psycopg2.OperationalError("could not connect to server")
    yield  # pragma: no cover


def test_get_configuration(monkeypatch):
    monkeypatch.setattr(settings_repo, "get_settings", lambda conn, sid: SETTINGS_ROW)
    s = SettingsProvider(conn_factory=fake_conn).get_configuration()

    assert s.start_fee == 50.0
    assert s.distance_radius_unit is DistanceUnit.MILES
    assert s.updated_at == "2024-05-02T00:00:00+00:00"


def test_missing_settings_row_is_a_fetch_error(monkeypatch):
    monkeypatch.setattr(settings_repo, "get_settings", lambda conn, sid: None)
    with pytest.raises(FetchError):
        SettingsProvider(conn_factory=fake_conn).get_configuration()


def test_database_failure_is_a_fetch_error():
    with pytest.raises(FetchError) as exc_info:
        SettingsProvider(conn_factory=broken_conn).get_configuration()
    assert isinstance(exc_info.value.__cause__, psycopg2.Error)


def test_update_configuration_normalises(monkeypatch):
    seen = {}

    def _update(conn, values, sid):
        seen.update(values)
        return {**SETTINGS_ROW, **values}

    monkeypatch.setattr(settings_repo, "update_settings", _update)
    s = SettingsProvider(conn_factory=fake_conn).update_configuration({
        "max_points": 3, "max_people": 6, "start_fee": 40, "per_distance_rate": 2.5,
        "distance_unit": "miles", "currency_code": "usd",
        "max_distance_radius": 0, "distance_radius_unit": "kilometers",
    })

    assert seen["currency_code"] == "USD"
    assert seen["distance_radius_unit"] == "km"
    assert s.max_points == 3
    assert s.distance_unit is DistanceUnit.MILES


def test_invalid_settings_never_reach_the_database(monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("database must not be called")

    monkeypatch.setattr(settings_repo, "update_settings", _boom)
    with pytest.raises(ValidationError):
        SettingsProvider(conn_factory=fake_conn).update_configuration({"max_points": 0})


def test_list_tours(monkeypatch):
    rows = [
        {"id": "b", "name": "Newer", "description": None,
         "route_coordinates": [[43.5, 16.4], [43.4, 16.3]],
         "display_price": Decimal("45.50"), "display_duration": "4h"},
        {"id": "a", "name": "Older", "description": "x",
         "route_coordinates": [[43.5, 16.4]], "display_price": None, "display_duration": None},
    ]
    monkeypatch.setattr(tour_repo, "list_tours", lambda conn: rows)
    tours = CatalogProvider(conn_factory=fake_conn).list_tours()

    assert [t.name for t in tours] == ["Newer", "Older"]
    assert tours[0].route_coordinates == [(43.5, 16.4), (43.4, 16.3)]
    assert tours[0].display_price == 45.5
    assert tours[0].description == ""


def test_catalog_failure_is_a_fetch_error():
    with pytest.raises(FetchError):
        CatalogProvider(conn_factory=broken_conn).list_tours()


def test_create_tour_validates_before_insert(monkeypatch):
    calls = []
    monkeypatch.setattr(tour_repo, "insert_tour", lambda conn, rec: calls.append(rec))

    with pytest.raises(ValidationError):
        CatalogProvider(conn_factory=fake_conn).create_tour(
            {"name": "Bad", "route_coordinates": "not json"}
        )
    assert calls == []


def test_create_tour_parses_form_text(monkeypatch):
    def _insert(conn, rec):
        return {"id": "new", **rec}

    monkeypatch.setattr(tour_repo, "insert_tour", _insert)
    tour = CatalogProvider(conn_factory=fake_conn).create_tour({
        "name": "  Blue Cave ", "route_coordinates": "[[43.0, 16.2], [42.9, 16.1]]",
        "display_price": "70",
    })

    assert tour.name == "Blue Cave"
    assert tour.route_coordinates == [(43.0, 16.2), (42.9, 16.1)]
    assert tour.display_price == 70.0


def test_quote_multiplies_display_price():
    priced = PredefinedTour(id="a", route_coordinates=[(1.0, 1.0)] * 3, display_price=25.0)
    unpriced = PredefinedTour(id="b", route_coordinates=[(1.0, 1.0)])

    assert TourQuote.for_tour(priced, 4) == TourQuote("a", 4, 3, 100.0)
    assert TourQuote.for_tour(unpriced, 4).total_price is None
