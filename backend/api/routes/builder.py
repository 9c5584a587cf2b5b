"""
api/routes/builder.py
----------------------
Custom tour building — the map UI's backend.

Flow:
  1. POST   /v1/builder/sessions                      → enter build mode
  2. POST   /v1/builder/sessions/{sid}/waypoints      → map click (lat, lng)
  3. DELETE /v1/builder/sessions/{sid}/waypoints/{id} → marker click (remove)
  4. PUT    /v1/builder/sessions/{sid}/people         → people selector
  5. GET    /v1/builder/sessions/{sid}                → re-render
  6. DELETE /v1/builder/sessions/{sid}                → navigate away

Every successful call returns the full state the map needs: origin,
numbered waypoints, path, geofence overlay, distance and price.
Rejected clicks answer 422 (outside radius, non-finite coordinates) or
409 (limit reached) and leave the session untouched. Edits run under the
store's per-session lock.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

import config
from api.deps import get_event_log, get_session_store, get_settings_provider
from api.errors import to_http
from modules.composition.engine import TourComposer
from modules.composition.errors import TourError
from modules.composition.modes import open_build
from modules.composition.session_store import SessionStore
from modules.observability.logger import StructuredLogger
from modules.providers.settings import SettingsProvider

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class WaypointRequest(BaseModel):
    lat: float = Field(..., allow_inf_nan=False, description="Latitude in decimal degrees")
    lng: float = Field(..., allow_inf_nan=False, description="Longitude in decimal degrees")


class PeopleRequest(BaseModel):
    people: int


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_state(composer: TourComposer) -> dict:
    s = composer.settings
    route = composer.compute_route()
    price = composer.price_breakdown()
    return {
        "session_id": composer.session_id,
        "mode": "build",
        "origin": {
            "name": config.ORIGIN_NAME,
            "lat":  composer.origin[0],
            "lng":  composer.origin[1],
        },
        "waypoints": [
            {"number": i, **wp.to_dict()}
            for i, wp in enumerate(composer.waypoints, start=1)
        ],
        "path": [list(p) for p in route.path] if len(route.path) > 1 else [],
        "geofence": composer.geofence(),
        "limits": {
            "max_points": s.max_points,
            "max_people": s.max_people,
            "points_used": len(composer.waypoints),
        },
        "people": composer.people,
        "distance": {
            "total":   route.total_distance,
            "display": f"{route.total_distance:.1f}",
            "unit":    route.unit.value,
        },
        "price": {
            "start_fee":    price.start_fee,
            "distance_fee": price.distance_fee,
            "total":        price.total,
            "display":      f"{price.total:.2f}",
            "currency":     price.currency,
        },
        "bookable": composer.bookable,
    }


def _load(store: SessionStore, session_id: str) -> TourComposer:
    composer = store.load(session_id)
    if composer is None:
        raise HTTPException(
            status_code=404,
            detail=f"Build session '{session_id}' not found. Start a new one.",
        )
    return composer


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/sessions", status_code=201, summary="Enter build mode")
def open_session(
    settings_provider: SettingsProvider = Depends(get_settings_provider),
    store: SessionStore = Depends(get_session_store),
    event_log: StructuredLogger = Depends(get_event_log),
) -> dict:
    """Fetch the settings snapshot and open an empty custom tour."""
    try:
        mode = open_build(settings_provider, event_log=event_log)
    except TourError as exc:
        raise to_http(exc) from exc
    store.save(mode.composer)
    return _ser_state(mode.composer)


@router.get("/sessions/{session_id}", summary="Current build state")
def get_state(session_id: str, store: SessionStore = Depends(get_session_store)) -> dict:
    return _ser_state(_load(store, session_id))


@router.post("/sessions/{session_id}/waypoints", summary="Propose a waypoint")
def propose_waypoint(
    session_id: str,
    req: WaypointRequest,
    store: SessionStore = Depends(get_session_store),
) -> dict:
    try:
        with store.lock(session_id):
            composer = _load(store, session_id)
            composer.propose_waypoint(req.lat, req.lng)
            store.save(composer)
    except TourError as exc:
        raise to_http(exc) from exc
    return _ser_state(composer)


@router.delete("/sessions/{session_id}/waypoints/{waypoint_id}", summary="Remove a waypoint")
def remove_waypoint(
    session_id: str,
    waypoint_id: str,
    store: SessionStore = Depends(get_session_store),
) -> dict:
    """Unknown waypoint ids are ignored."""
    try:
        with store.lock(session_id):
            composer = _load(store, session_id)
            composer.remove_waypoint(waypoint_id)
            store.save(composer)
    except TourError as exc:
        raise to_http(exc) from exc
    return _ser_state(composer)


@router.put("/sessions/{session_id}/people", summary="Select number of people")
def set_people(
    session_id: str,
    req: PeopleRequest,
    store: SessionStore = Depends(get_session_store),
) -> dict:
    try:
        with store.lock(session_id):
            composer = _load(store, session_id)
            composer.set_people(req.people)
            store.save(composer)
    except TourError as exc:
        raise to_http(exc) from exc
    return _ser_state(composer)


@router.delete("/sessions/{session_id}", status_code=204, summary="Leave build mode")
def close_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    event_log: StructuredLogger = Depends(get_event_log),
) -> None:
    try:
        with store.lock(session_id):
            deleted = store.delete(session_id)
    except TourError as exc:
        raise to_http(exc) from exc
    if deleted:
        event_log.log(session_id, "SESSION_CLOSE", {})
