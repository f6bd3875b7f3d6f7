import pytest


pytestmark = pytest.mark.asyncio


async def test_categories_are_public(client):
    resp = await client.get("/api/service/categories")
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["total"] == 8
    assert data["categories"][0]["id"] == "healthcare"
    assert "demo" in data["note"]


async def test_search_shapes_results_from_query(client):
    resp = await client.post(
        "/api/service/search",
        json={"location": "Springfield", "category": "Dental", "radius": 4, "rating": 4.9, "priceRange": "$$"},
    )
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["totalResults"] == 3
    assert data["centerLocation"] == "Springfield, CA"
    assert data["searchRadius"] == 4
    assert data["searchQuery"]["location"] == "Springfield"
    assert data["results"][2]["name"] == "Springfield Family Clinic"
    for service in data["results"]:
        assert service["category"] == "Dental"
        assert service["rating"] == 4.9
        assert service["priceRange"] == "$$"
        assert 0 <= service["distance"] <= 4


async def test_search_validation(client):
    resp = await client.post("/api/service/search", json={"location": "NY", "radius": 80, "priceRange": "$$$$$"})
    assert resp.status_code == 400
    paths = {d["path"] for d in resp.json()["details"]}
    assert {"location", "radius", "priceRange"} <= paths


async def test_featured(client):
    data = (await client.get("/api/service/featured")).json()["data"]
    assert data["featured"] is True
    assert data["total"] == len(data["services"])


async def test_nearby_scatters_around_point(client):
    resp = await client.get("/api/service/nearby/34.05/-118.24", params={"limit": 4, "category": "Cafes"})
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["center"] == {"latitude": 34.05, "longitude": -118.24}
    assert data["totalResults"] == 4
    for service in data["services"]:
        coords = service["location"]["coordinates"]
        assert abs(coords["lat"] - 34.05) <= 0.005
        assert abs(coords["lng"] + 118.24) <= 0.005
        assert service["category"] == "Cafes"


async def test_nearby_rejects_bad_coordinates(client):
    resp = await client.get("/api/service/nearby/north/west")
    assert resp.status_code == 400


async def test_detail_echoes_id(client):
    resp = await client.get("/api/service/abc123")
    service = resp.json()["data"]["service"]
    assert service["id"] == "abc123"
    assert len(service["hours"]) == 7
    assert service["hours"][-1] == {"day": "Sunday", "hours": "Closed"}
