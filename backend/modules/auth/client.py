"""
modules/auth/client.py
-----------------------
Thin wrapper over the hosted auth REST API (GoTrue endpoints under
``{SUPABASE_URL}/auth/v1``).

  sign_in(email, password) → AuthState | None   POST /token?grant_type=password
  get_user(access_token)   → AuthState | None   GET  /user
  sign_out(access_token)   → None               POST /logout

Every request carries the project's anon key in the ``apikey`` header;
user-scoped calls add ``Authorization: Bearer <access_token>``.

Rejected credentials / tokens come back as None: presence or absence of an
AuthState is the only signal the admin routes consume. Transport failures
raise FetchError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

import config
from modules.composition.errors import FetchError

logger = logging.getLogger(__name__)

# Status codes the auth API uses for bad credentials / expired tokens
_REJECTED = (400, 401, 403, 422)


@dataclass(frozen=True)
class AuthState:
    """A signed-in administrator, passed explicitly to admin operations."""
    user_id: str
    email: str
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class AuthClient:
    def __init__(
        self,
        base_url: str = config.SUPABASE_URL,
        anon_key: str = config.SUPABASE_ANON_KEY,
        timeout: int = config.AUTH_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = f"{base_url.rstrip('/')}/auth/v1"
        self.anon_key = anon_key
        self.timeout = timeout
        self._http = session or requests.Session()

    # ── public API ────────────────────────────────────────────────────────

    def sign_in(self, email: str, password: str) -> Optional[AuthState]:
        resp = self._request(
            "POST", "token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code in _REJECTED:
            logger.info("Sign-in rejected for %s", email)
            return None
        body = self._json(resp)
        if not body.get("access_token"):
            logger.error("Sign-in response without access_token (HTTP %s)", resp.status_code)
            raise FetchError("Authentication service returned an unexpected response.")
        user = body.get("user") or {}
        return AuthState(
            user_id=str(user.get("id", "")),
            email=user.get("email", email),
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
        )

    def get_user(self, access_token: str) -> Optional[AuthState]:
        """Resolve a bearer token to the signed-in user, or None."""
        resp = self._request("GET", "user", token=access_token)
        if resp.status_code in _REJECTED:
            return None
        user = self._json(resp)
        return AuthState(
            user_id=str(user.get("id", "")),
            email=user.get("email", ""),
            access_token=access_token,
        )

    def sign_out(self, access_token: str) -> None:
        resp = self._request("POST", "logout", token=access_token)
        if resp.status_code not in _REJECTED:
            self._json(resp)

    # ── internals ─────────────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> requests.Response:
        headers = {"apikey": self.anon_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return self._http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Auth service unreachable (%s %s): %s", method, path, exc)
            raise FetchError("Authentication service unavailable. Please try again.") from exc

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise FetchError(f"Authentication service error: HTTP {resp.status_code}") from exc
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError("Authentication service returned an unexpected response.") from exc
        if not isinstance(data, dict):
            raise FetchError("Authentication service returned an unexpected response.")
        return data
