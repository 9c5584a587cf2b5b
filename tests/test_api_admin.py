"""Admin surface: sign-in, settings edit and catalog management."""

from __future__ import annotations

import pytest

SETTINGS_FORM = {
    "max_points": 3, "max_people": 8, "start_fee": 40, "per_distance_rate": 2.5,
    "distance_unit": "miles", "currency_code": "EUR",
    "max_distance_radius": 20, "distance_radius_unit": "km",
}


def test_login(client):
    resp = client.post("/v1/admin/login", json={"email": "admin@example.com", "password": "secret"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["access_token"] == "admin-token"
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "admin@example.com"


def test_login_bad_password(client):
    resp = client.post("/v1/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401


@pytest.mark.parametrize("method,path", [
    ("get", "/v1/admin/settings"),
    ("put", "/v1/admin/settings"),
    ("get", "/v1/admin/tours"),
    ("post", "/v1/admin/tours"),
    ("delete", "/v1/admin/tours/t1"),
    ("post", "/v1/admin/logout"),
])
def test_admin_routes_require_token(client, method, path):
    assert getattr(client, method)(path).status_code == 401


def test_invalid_token_is_rejected(client):
    resp = client.get("/v1/admin/settings", headers={"Authorization": "Bearer stale"})
    assert resp.status_code == 401


def test_logout(client, admin_headers, auth_client):
    assert client.post("/v1/admin/logout", headers=admin_headers).status_code == 204
    assert auth_client.signed_out == ["admin-token"]


# ── settings ──────────────────────────────────────────────────────────────────

def test_read_settings(client, admin_headers):
    body = client.get("/v1/admin/settings", headers=admin_headers).json()
    assert body["max_people"] == 12
    assert body["currency_code"] == "EUR"


def test_update_settings_applies_to_new_sessions_only(client, admin_headers):
    sid = client.post("/v1/builder/sessions").json()["session_id"]

    resp = client.put("/v1/admin/settings", json=SETTINGS_FORM, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Settings saved successfully!"
    assert resp.json()["settings"]["max_points"] == 3

    assert client.get(f"/v1/builder/sessions/{sid}").json()["limits"]["max_points"] == 5
    fresh = client.post("/v1/builder/sessions").json()
    assert fresh["limits"]["max_points"] == 3
    assert fresh["distance"]["unit"] == "miles"


def test_update_settings_rejects_bad_values(client, admin_headers, settings_provider):
    form = {**SETTINGS_FORM, "max_points": 0, "currency_code": "EURO"}

    resp = client.put("/v1/admin/settings", json=form, headers=admin_headers)

    assert resp.status_code == 422
    assert len(resp.json()["detail"]["errors"]) == 2
    assert settings_provider.updates == []


def test_partial_settings_update_is_rejected(client, admin_headers, settings_provider):
    # Leaving out the radius must not silently switch the geofence off
    form = {k: v for k, v in SETTINGS_FORM.items() if k != "max_distance_radius"}

    resp = client.put("/v1/admin/settings", json=form, headers=admin_headers)

    assert resp.status_code == 422
    assert settings_provider.updates == []
    assert settings_provider.settings.max_distance_radius == 30.0


def test_currency_must_be_offered(client, admin_headers):
    jpy = client.put("/v1/admin/settings", json={**SETTINGS_FORM, "currency_code": "JPY"},
                     headers=admin_headers)
    gbp = client.put("/v1/admin/settings", json={**SETTINGS_FORM, "currency_code": "GBP"},
                     headers=admin_headers)

    assert jpy.status_code == 422
    assert "JPY" in jpy.json()["detail"]["errors"][0]
    assert gbp.status_code == 200


# ── catalog ───────────────────────────────────────────────────────────────────

def test_admin_list_includes_route_json(client, admin_headers):
    tours = client.get("/v1/admin/tours", headers=admin_headers).json()

    assert tours[0]["id"] == "t2"
    assert tours[0]["route_json"].startswith("[\n")


def test_create_tour_from_form_text(client, admin_headers):
    form = {
        "name": "Blue Cave",
        "description": "Biševo",
        "route_coordinates": "[[43.5081, 16.4402], [42.9826, 16.0161]]",
        "display_price": 95,
        "display_duration": "10 hours",
    }

    resp = client.post("/v1/admin/tours", json=form, headers=admin_headers)

    assert resp.status_code == 201
    created = resp.json()
    assert created["route_coordinates"][1] == [42.9826, 16.0161]
    assert client.get("/v1/tours").json()["tours"][0]["name"] == "Blue Cave"


def test_create_tour_rejects_malformed_route(client, admin_headers, catalog):
    form = {"name": "Broken", "route_coordinates": "[[43.5, 16.4]"}

    resp = client.post("/v1/admin/tours", json=form, headers=admin_headers)

    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == ["Invalid JSON format for route coordinates"]
    assert len(catalog.tours) == 2


def test_update_tour(client, admin_headers):
    form = {"name": "Sunset Cruise", "route_coordinates": [[43.5081, 16.4402], [43.45, 16.5]],
            "display_price": 30}

    resp = client.put("/v1/admin/tours/t1", json=form, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["display_price"] == 30.0
    assert client.get("/v1/tours/t1").json()["stops"] == 2


def test_update_missing_tour(client, admin_headers):
    form = {"name": "Ghost", "route_coordinates": "[[43.5, 16.4]]"}
    assert client.put("/v1/admin/tours/nope", json=form, headers=admin_headers).status_code == 404


def test_delete_tour(client, admin_headers):
    assert client.delete("/v1/admin/tours/t1", headers=admin_headers).status_code == 204
    assert client.delete("/v1/admin/tours/t1", headers=admin_headers).status_code == 404
    assert [t["id"] for t in client.get("/v1/tours").json()["tours"]] == ["t2"]
