"""
api/routes/admin.py
--------------------
Administrative surface. Everything except login requires a bearer token
issued by the hosted auth API.

  POST   /v1/admin/login           → access token
  POST   /v1/admin/logout
  GET    /v1/admin/settings        → current settings for the edit form
  PUT    /v1/admin/settings        → full settings update
  GET    /v1/admin/tours           → catalog with route JSON for the edit form
  POST   /v1/admin/tours           → create
  PUT    /v1/admin/tours/{id}      → update
  DELETE /v1/admin/tours/{id}      → delete
"""

from __future__ import annotations

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.deps import get_auth_client, get_catalog_provider, get_settings_provider, require_admin
from api.errors import to_http
from modules.auth import AuthClient, AuthState
from modules.composition.errors import TourError
from modules.providers.catalog import CatalogProvider
from modules.providers.settings import SettingsProvider
from modules.validation import dump_route_coordinates

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: str
    password: str


class SettingsRequest(BaseModel):
    """The whole settings record; a PUT replaces every field."""
    max_points: int
    max_people: int
    start_fee: float
    per_distance_rate: float
    distance_unit: str
    currency_code: str
    max_distance_radius: float
    distance_radius_unit: str


class TourRequest(BaseModel):
    name: str
    description: str = ""
    # JSON text from the form textarea, or an already-decoded array
    route_coordinates: Union[str, list[Any]] = Field(
        ..., description="JSON array of [latitude, longitude] pairs",
    )
    display_price: Optional[float] = None
    display_duration: Optional[str] = None


# ── Auth ───────────────────────────────────────────────────────────────────────

@router.post("/login", summary="Admin sign-in")
def login(req: LoginRequest, auth: AuthClient = Depends(get_auth_client)) -> dict:
    try:
        state = auth.sign_in(req.email, req.password)
    except TourError as exc:
        raise to_http(exc) from exc
    if state is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return {
        "access_token": state.access_token,
        "refresh_token": state.refresh_token,
        "expires_in": state.expires_in,
        "token_type": "bearer",
        "user": {"id": state.user_id, "email": state.email},
    }


@router.post("/logout", status_code=204, summary="Admin sign-out")
def logout(
    admin: AuthState = Depends(require_admin),
    auth: AuthClient = Depends(get_auth_client),
) -> None:
    try:
        auth.sign_out(admin.access_token)
    except TourError as exc:
        raise to_http(exc) from exc


# ── Settings ───────────────────────────────────────────────────────────────────

@router.get("/settings", summary="Current settings for the edit form")
def read_settings(
    admin: AuthState = Depends(require_admin),
    provider: SettingsProvider = Depends(get_settings_provider),
) -> dict:
    try:
        return provider.get_configuration().to_dict()
    except TourError as exc:
        raise to_http(exc) from exc


@router.put("/settings", summary="Update tour settings")
def update_settings(
    req: SettingsRequest,
    admin: AuthState = Depends(require_admin),
    provider: SettingsProvider = Depends(get_settings_provider),
) -> dict:
    try:
        settings = provider.update_configuration(req.model_dump())
    except TourError as exc:
        raise to_http(exc) from exc
    return {"message": "Settings saved successfully!", "settings": settings.to_dict()}


# ── Catalog ────────────────────────────────────────────────────────────────────

@router.get("/tours", summary="Catalog for the admin table")
def admin_list_tours(
    admin: AuthState = Depends(require_admin),
    catalog: CatalogProvider = Depends(get_catalog_provider),
) -> list[dict]:
    try:
        tours = catalog.list_tours()
    except TourError as exc:
        raise to_http(exc) from exc
    return [
        {**t.to_dict(), "route_json": dump_route_coordinates(t.route_coordinates)}
        for t in tours
    ]


@router.post("/tours", status_code=201, summary="Create a predefined tour")
def create_tour(
    req: TourRequest,
    admin: AuthState = Depends(require_admin),
    catalog: CatalogProvider = Depends(get_catalog_provider),
) -> dict:
    try:
        return catalog.create_tour(req.model_dump()).to_dict()
    except TourError as exc:
        raise to_http(exc) from exc


@router.put("/tours/{tour_id}", summary="Update a predefined tour")
def update_tour(
    tour_id: str,
    req: TourRequest,
    admin: AuthState = Depends(require_admin),
    catalog: CatalogProvider = Depends(get_catalog_provider),
) -> dict:
    try:
        tour = catalog.update_tour(tour_id, req.model_dump())
    except TourError as exc:
        raise to_http(exc) from exc
    if tour is None:
        raise HTTPException(status_code=404, detail=f"Tour '{tour_id}' not found")
    return tour.to_dict()


@router.delete("/tours/{tour_id}", status_code=204, summary="Delete a predefined tour")
def delete_tour(
    tour_id: str,
    admin: AuthState = Depends(require_admin),
    catalog: CatalogProvider = Depends(get_catalog_provider),
) -> None:
    try:
        deleted = catalog.delete_tour(tour_id)
    except TourError as exc:
        raise to_http(exc) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Tour '{tour_id}' not found")
