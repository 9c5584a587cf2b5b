"""
api/deps.py
-----------
FastAPI dependency providers. Every collaborator a route needs (providers,
session store, event log, auth) is injected through these functions, so
tests swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.errors import to_http
from modules.auth import AuthClient, AuthState
from modules.composition.errors import FetchError
from modules.composition.session_store import SessionStore, build_session_store
from modules.observability.logger import StructuredLogger
from modules.providers.catalog import CatalogProvider
from modules.providers.settings import SettingsProvider

_bearer = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_event_log() -> StructuredLogger:
    return StructuredLogger()


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return build_session_store(event_log=get_event_log())


@lru_cache(maxsize=1)
def get_settings_provider() -> SettingsProvider:
    return SettingsProvider()


@lru_cache(maxsize=1)
def get_catalog_provider() -> CatalogProvider:
    return CatalogProvider()


@lru_cache(maxsize=1)
def get_auth_client() -> AuthClient:
    return AuthClient()


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthState:
    """Resolve the bearer token to a signed-in user or answer 401."""
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Sign in required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        state = auth.get_user(credentials.credentials)
    except FetchError as exc:
        raise to_http(exc) from exc
    if state is None:
        raise HTTPException(
            status_code=401,
            detail="Session expired or invalid. Please sign in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return state
