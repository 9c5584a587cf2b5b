"""
api/routes/tours.py
--------------------
Browse mode and the public settings read.

  GET /v1/tours?people=N   → predefined tours (newest first) + price per group
  GET /v1/tours/{tour_id}  → one predefined tour
  GET /v1/settings         → the tour settings the builder page displays
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

import config
from api.deps import get_catalog_provider, get_settings_provider
from api.errors import to_http
from modules.composition.errors import TourError
from modules.composition.modes import open_browse
from modules.providers.catalog import CatalogProvider, TourQuote
from modules.providers.settings import SettingsProvider
from schemas.tour import PredefinedTour

router = APIRouter()

# The browse page offers 1..12 people regardless of the builder's limit
_BROWSE_MAX_PEOPLE = 12


def _ser_tour(tour: PredefinedTour, quote: TourQuote | None = None) -> dict:
    data = tour.to_dict()
    data["stops"] = tour.stops
    if quote is not None:
        data["quote"] = {
            "people": quote.people,
            "total_price": quote.total_price,
            "display": f"{quote.total_price:.2f}" if quote.total_price is not None else None,
        }
    return data


@router.get("/tours", summary="Browse predefined tours")
def list_tours(
    people: int = Query(1, ge=1, le=_BROWSE_MAX_PEOPLE),
    catalog: CatalogProvider = Depends(get_catalog_provider),
) -> dict:
    try:
        mode = open_browse(catalog, people=people)
    except TourError as exc:
        raise to_http(exc) from exc
    return {
        "mode": mode.kind,
        "people": mode.people,
        "tours": [_ser_tour(t, q) for t, q in zip(mode.tours, mode.quotes())],
    }


@router.get("/tours/{tour_id}", summary="One predefined tour")
def get_tour(tour_id: str, catalog: CatalogProvider = Depends(get_catalog_provider)) -> dict:
    try:
        tour = catalog.get_tour(tour_id)
    except TourError as exc:
        raise to_http(exc) from exc
    if tour is None:
        raise HTTPException(status_code=404, detail=f"Tour '{tour_id}' not found")
    return _ser_tour(tour)


@router.get("/settings", summary="Public tour settings")
def get_settings(provider: SettingsProvider = Depends(get_settings_provider)) -> dict:
    try:
        settings = provider.get_configuration()
    except TourError as exc:
        raise to_http(exc) from exc
    return {
        **settings.to_dict(),
        "origin": {"name": config.ORIGIN_NAME, "lat": config.ORIGIN_LAT, "lng": config.ORIGIN_LON},
    }
