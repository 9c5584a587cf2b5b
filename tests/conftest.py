"""Shared fixtures: settings snapshots, fake providers and an API client."""

from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from api import deps
from api.server import app
from modules.auth import AuthState
from modules.composition.engine import TourComposer
from modules.composition.errors import FetchError
from modules.composition.session_store import InMemorySessionStore
from modules.observability.logger import StructuredLogger
from modules.providers.catalog import CatalogProvider
from modules.validation import require_valid, validate_settings
from schemas.tour import PredefinedTour, TourSettings

ORIGIN = (43.5081, 16.4402)
ADMIN_TOKEN = "admin-token"


@pytest.fixture
def settings() -> TourSettings:
    """Scenario settings: two points, no geofence."""
    return TourSettings(max_points=2, start_fee=50.0, per_distance_rate=3.0, max_distance_radius=0.0)


@pytest.fixture
def event_log(tmp_path) -> StructuredLogger:
    return StructuredLogger(logs_dir=tmp_path / "logs", enabled=True)


@pytest.fixture
def make_composer(event_log):
    def _make(settings: TourSettings, **kwargs: Any) -> TourComposer:
        counter = itertools.count(1)
        kwargs.setdefault("id_factory", lambda: f"wp{next(counter)}")
        return TourComposer(settings, origin=ORIGIN, event_log=event_log, **kwargs)
    return _make


# ── fake collaborators ─────────────────────────────────────────────────────────

class FakeSettingsProvider:
    def __init__(self, settings: TourSettings, fail: bool = False) -> None:
        self.settings = settings
        self.fail = fail
        self.updates: list[dict] = []

    def get_configuration(self) -> TourSettings:
        if self.fail:
            raise FetchError("Failed to load tour settings. Please try again.")
        return self.settings

    def update_configuration(self, values: dict) -> TourSettings:
        require_valid(validate_settings(values))
        self.updates.append(values)
        self.settings = TourSettings.from_row({**self.settings.to_dict(), **values})
        return self.settings


class FakeCatalogProvider(CatalogProvider):
    """Real validation path, in-memory rows."""

    def __init__(self, tours: Optional[list[PredefinedTour]] = None, fail: bool = False) -> None:
        self.tours = list(tours or [])
        self.fail = fail
        self._ids = itertools.count(100)

    def list_tours(self) -> list[PredefinedTour]:
        if self.fail:
            raise FetchError("Failed to load tours. Please try again.")
        return list(self.tours)

    def get_tour(self, tour_id: str) -> Optional[PredefinedTour]:
        return next((t for t in self.tours if t.id == tour_id), None)

    def create_tour(self, values: dict) -> PredefinedTour:
        record = self._clean(values)
        tour = PredefinedTour(id=f"t{next(self._ids)}", **record)
        self.tours.insert(0, tour)
        return tour

    def update_tour(self, tour_id: str, values: dict) -> Optional[PredefinedTour]:
        record = self._clean(values)
        for i, t in enumerate(self.tours):
            if t.id == tour_id:
                self.tours[i] = replace(t, **record)
                return self.tours[i]
        return None

    def delete_tour(self, tour_id: str) -> bool:
        before = len(self.tours)
        self.tours = [t for t in self.tours if t.id != tour_id]
        return len(self.tours) != before


class FakeAuthClient:
    def __init__(self) -> None:
        self.signed_out: list[str] = []

    def sign_in(self, email: str, password: str) -> Optional[AuthState]:
        if password != "secret":
            return None
        return AuthState(user_id="u1", email=email, access_token=ADMIN_TOKEN, refresh_token="r1")

    def get_user(self, access_token: str) -> Optional[AuthState]:
        if access_token != ADMIN_TOKEN:
            return None
        return AuthState(user_id="u1", email="admin@example.com", access_token=access_token)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


@pytest.fixture
def catalog() -> FakeCatalogProvider:
    return FakeCatalogProvider([
        PredefinedTour(
            id="t2", name="Blue Lagoon", description="Islands west of Trogir",
            route_coordinates=[(43.5081, 16.4402), (43.4900, 16.2000)],
            display_price=60.0, display_duration="6 hours",
        ),
        PredefinedTour(
            id="t1", name="Sunset Cruise", description="",
            route_coordinates=[(43.5081, 16.4402)],
        ),
    ])


@pytest.fixture
def settings_provider() -> FakeSettingsProvider:
    return FakeSettingsProvider(TourSettings())


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(ttl=600, clock=clock)


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def client(settings_provider, catalog, event_log, auth_client, session_store):
    app.dependency_overrides[deps.get_settings_provider] = lambda: settings_provider
    app.dependency_overrides[deps.get_catalog_provider] = lambda: catalog
    app.dependency_overrides[deps.get_session_store] = lambda: session_store
    app.dependency_overrides[deps.get_event_log] = lambda: event_log
    app.dependency_overrides[deps.get_auth_client] = lambda: auth_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
