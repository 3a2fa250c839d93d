"""Tests for the food API endpoints."""

from fastapi.testclient import TestClient

from food_resolver.api.app import create_app
from tests.conftest import make_candidate


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_resolve_endpoint_returns_food(container) -> None:
    container.external_catalog.responses["apple"] = [
        make_candidate(
            "Apple, raw", calories=52, protein=0.3, carbs=14, fat=0.2, standardized=True
        )
    ]
    client = TestClient(create_app(container))

    response = client.get(
        "/foods/resolve", params={"name": "apple", "detected_by_ai": "true"}
    )

    assert response.status_code == 200
    food = response.json()["food"]
    assert food["name"] == "Apple, raw"
    assert food["source"] == "external_catalog"
    assert food["detected_by_ai"] is True
    assert food["calories"] == 52


def test_resolve_endpoint_not_found_is_null(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/foods/resolve", params={"name": "widget"})

    assert response.status_code == 200
    assert response.json() == {"food": None}


def test_resolve_batch_endpoint(container) -> None:
    container.external_catalog.responses["rice"] = [
        make_candidate("Rice, white, cooked", calories=130, protein=2.7, carbs=28, fat=0.3)
    ]
    client = TestClient(create_app(container))

    response = client.post("/foods/resolve-batch", json={"names": ["rice", "widget"]})

    assert response.status_code == 200
    foods = response.json()["foods"]
    assert foods["rice"]["name"] == "Rice, white, cooked"
    assert foods["widget"] is None


def test_correction_then_resolve(container) -> None:
    client = TestClient(create_app(container))

    learned = client.post(
        "/foods/corrections",
        json={
            "ai_detected_name": "chiken",
            "user_corrected_name": "Chicken Breast, Grilled",
            "nutrition": {"calories": 165, "protein": 31, "fat": 3.6},
        },
    )
    resolved = client.get("/foods/resolve", params={"name": "chiken"})

    assert learned.status_code == 200
    assert learned.json()["food"]["source"] == "user_correction"
    assert resolved.json()["food"]["name"] == "Chicken Breast, Grilled"
    assert resolved.json()["food"]["source"] == "local_catalog"
    assert container.external_catalog.queries == []


def test_correction_rejects_negative_values(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/foods/corrections",
        json={
            "ai_detected_name": "x",
            "user_corrected_name": "y",
            "nutrition": {"calories": -1},
        },
    )

    assert response.status_code == 422


def test_manual_entry_and_popular(container) -> None:
    client = TestClient(create_app(container))

    client.post(
        "/foods/manual",
        json={
            "name": "Pan con palta",
            "nutrition": {"calories": 320, "protein": 8, "carbs": 38, "fat": 16},
        },
    )
    response = client.get("/foods/popular", params={"limit": 5})

    assert response.status_code == 200
    foods = response.json()["foods"]
    assert foods[0]["name"] == "Pan con palta"
    assert foods[0]["source"] == "manual_entry"


def test_storage_error_maps_to_503(container, food_repository) -> None:
    food_repository.fail_reads = True
    client = TestClient(create_app(container))

    response = client.get("/foods/resolve", params={"name": "apple"})

    assert response.status_code == 503
