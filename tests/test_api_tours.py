from __future__ import annotations


def test_browse_lists_tours_with_group_price(client):
    resp = client.get("/v1/tours", params={"people": 3})

    assert resp.status_code == 200
    body = resp.json()
    assert body["mode"] == "explore"
    assert body["people"] == 3
    assert [t["name"] for t in body["tours"]] == ["Blue Lagoon", "Sunset Cruise"]

    lagoon, sunset = body["tours"]
    assert lagoon["stops"] == 2
    assert lagoon["quote"] == {"people": 3, "total_price": 180.0, "display": "180.00"}
    assert lagoon["display_duration"] == "6 hours"
    assert sunset["quote"]["total_price"] is None


def test_browse_defaults_to_one_person(client):
    tours = client.get("/v1/tours").json()["tours"]
    assert tours[0]["quote"]["total_price"] == 60.0


def test_browse_people_bounds(client):
    assert client.get("/v1/tours", params={"people": 0}).status_code == 422
    assert client.get("/v1/tours", params={"people": 13}).status_code == 422


def test_browse_fetch_failure(client, catalog):
    catalog.fail = True
    resp = client.get("/v1/tours")

    assert resp.status_code == 503
    assert resp.json()["detail"]["retryable"] is True


def test_get_tour(client):
    tour = client.get("/v1/tours/t2").json()
    assert tour["route_coordinates"] == [[43.5081, 16.4402], [43.49, 16.2]]
    assert client.get("/v1/tours/missing").status_code == 404


def test_public_settings(client):
    body = client.get("/v1/settings").json()

    assert body["max_points"] == 5
    assert body["distance_unit"] == "km"
    assert body["origin"]["name"].startswith("Split")
    assert body["origin"]["lat"] == 43.5081


def test_public_settings_fetch_failure(client, settings_provider):
    settings_provider.fail = True
    assert client.get("/v1/settings").status_code == 503


def test_health(client):
    assert client.get("/v1/health").json()["status"] == "ok"
