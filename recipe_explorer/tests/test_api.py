from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recipe_explorer import data_store
from recipe_explorer.app import app
from recipe_explorer.tests.sample_data import QUERY_TITLE, TWIN_TITLE

client = TestClient(app)


@pytest.fixture(autouse=True)
def _synthetic_store(recipes, artifact_cache):
    data_store.use_dataframe(recipes, cache=artifact_cache)
    yield
    data_store.reset()


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata(recipes):
    body = client.get("/metadata").json()
    assert body["recipes"] == len(recipes)
    assert "summer" in body["ingredients"]
    assert body["linkage_methods"] == ["complete", "average", "ward"]


def test_metadata_does_not_build_distances(artifact_cache):
    client.get("/metadata")
    assert data_store._engine is None
    assert artifact_cache.stats()["misses"] == 0


def test_recommendations_returns_ranked_results():
    resp = client.post("/recommendations", json={"title": QUERY_TITLE})
    assert resp.status_code == 200
    body = resp.json()
    assert body["query"] == QUERY_TITLE
    assert len(body["recommendations"]) == 10
    assert body["recommendations"][0]["recipe"]["title"] == TWIN_TITLE
    distances = [item["distance"] for item in body["recommendations"]]
    assert distances == sorted(distances)


def test_recommendations_filters_by_min_rating():
    resp = client.post("/recommendations", json={"title": QUERY_TITLE, "min_rating": 4.0})
    body = resp.json()
    assert body["recommendations"]
    for item in body["recommendations"]:
        assert item["recipe"]["rating"] >= 4.0


def test_recommendations_filters_by_ingredients_and_calories():
    resp = client.post(
        "/recommendations",
        json={
            "title": QUERY_TITLE,
            "required_ingredients": ["garlic"],
            "calorie_range": [100, 600],
            "limit": 50,
        },
    )
    body = resp.json()
    assert body["total_candidates"] > 0
    for item in body["recommendations"]:
        assert "garlic" in item["recipe"]["ingredients"]
        assert 100 <= item["recipe"]["calories"] <= 600


def test_recommendations_unknown_title_returns_404():
    resp = client.post("/recommendations", json={"title": "Nonexistent12345"})
    assert resp.status_code == 404


def test_recommendations_unknown_ingredient_returns_422():
    resp = client.post(
        "/recommendations",
        json={"title": QUERY_TITLE, "required_ingredients": ["unobtainium"]},
    )
    assert resp.status_code == 422


def test_recommendations_validation_rejects_bad_rating():
    resp = client.post("/recommendations", json={"title": QUERY_TITLE, "min_rating": 6.0})
    assert resp.status_code == 422


def test_recommendations_validation_rejects_inverted_calorie_range():
    resp = client.post("/recommendations", json={"title": QUERY_TITLE, "calorie_range": [800, 100]})
    assert resp.status_code == 422


def test_clusters_returns_partition(recipes):
    resp = client.get("/clusters", params={"method": "average", "k": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["k"] == 3
    assert sorted(set(body["assignments"].values())) == [1, 2, 3]
    assert sum(c["size"] for c in body["clusters"]) == len(body["assignments"])


def test_clusters_rejects_bad_request():
    assert client.get("/clusters", params={"method": "centroid", "k": 3}).status_code == 422
    assert client.get("/clusters", params={"method": "ward", "k": 0}).status_code == 422


def test_cache_stats_counts_reuse():
    client.post("/recommendations", json={"title": QUERY_TITLE})
    client.get("/clusters", params={"method": "ward", "k": 2})
    client.get("/clusters", params={"method": "ward", "k": 4})
    body = client.get("/cache/stats").json()
    assert body["misses"] >= 3
    assert "hit_rate" in body
