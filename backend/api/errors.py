"""
api/errors.py
-------------
Maps the tour error taxonomy onto HTTP responses.

  OutOfRangeError   → 422  (detail carries distance / limit / unit)
  LimitReachedError → 409
  ValidationError   → 422  (detail carries every reason)
  FetchError        → 503  (retryable: the client shows "Try again")
"""

from __future__ import annotations

from fastapi import HTTPException

from modules.composition.errors import (
    FetchError,
    LimitReachedError,
    OutOfRangeError,
    TourError,
    ValidationError,
)


def to_http(exc: TourError) -> HTTPException:
    if isinstance(exc, OutOfRangeError):
        return HTTPException(status_code=422, detail={
            "error":    "out_of_range",
            "message":  str(exc),
            "distance": round(exc.distance, 3),
            "limit":    exc.limit,
            "unit":     exc.unit,
        })
    if isinstance(exc, LimitReachedError):
        return HTTPException(status_code=409, detail={
            "error":   "limit_reached",
            "message": str(exc),
            "limit":   exc.limit,
            "what":    exc.what,
        })
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail={
            "error":   "validation",
            "message": str(exc),
            "errors":  exc.errors,
        })
    if isinstance(exc, FetchError):
        return HTTPException(status_code=503, detail={
            "error":     "fetch",
            "message":   str(exc),
            "retryable": True,
        })
    return HTTPException(status_code=400, detail={"error": "tour", "message": str(exc)})
