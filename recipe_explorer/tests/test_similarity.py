import numpy as np
import pandas as pd
import pytest

from recipe_explorer.data_ingestion.config import DEFAULT_INGESTION_CONFIG
from recipe_explorer.data_ingestion.ingest import clean_recipes, load_raw_recipes
from recipe_explorer.similarity.distance import attribute_matrix, build_distance_matrix
from recipe_explorer.similarity.engine import (
    RecipeNotFoundError,
    SimilarityEngine,
    UnknownAttributeError,
)
from recipe_explorer.similarity.models import RecommendationRequest
from recipe_explorer.tests.sample_data import QUERY_TITLE, TWIN_TITLE


def _tiny_frame() -> pd.DataFrame:
    raw = pd.DataFrame({
        "title": ["Query", "Near A", "Near B", "Far"],
        "rating": [4.0, 3.0, 5.0, 2.0],
        "calories": [300.0, 400.0, 500.0, 600.0],
        "protein": [10.0, 20.0, 30.0, 40.0],
        "fat": [1.0, 2.0, 3.0, 4.0],
        "sodium": [100.0, 200.0, 300.0, 400.0],
        "egg": [1, 1, 1, 0],
        "milk": [1, 0, 0, 0],
        "flour": [0, 0, 0, 1],
    })
    return clean_recipes(raw)


def test_identical_vectors_have_zero_distance(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    query = engine.index_of(QUERY_TITLE)
    twin = engine.index_of(TWIN_TITLE)
    assert engine.distances[query, twin] == 0.0


def test_distance_matrix_is_symmetric_with_zero_diagonal(recipes):
    distances = build_distance_matrix(attribute_matrix(recipes))
    assert distances.shape == (len(recipes), len(recipes))
    assert np.array_equal(distances, distances.T)
    assert np.all(np.diag(distances) == 0.0)


def test_distance_matrix_is_float32(recipes):
    distances = build_distance_matrix(attribute_matrix(recipes))
    assert distances.dtype == np.float32
    assert build_distance_matrix(attribute_matrix(recipes.head(1))).dtype == np.float32


def test_distance_is_euclidean_over_attributes_only():
    df = _tiny_frame()
    engine = SimilarityEngine.from_frame(df)
    # Query vs Far differ in all three attributes despite different nutrition
    assert engine.distances[0, 3] == pytest.approx(np.sqrt(3))
    assert engine.distances[0, 1] == pytest.approx(1.0)


def test_query_results_sorted_by_distance(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    ranked = engine.query(QUERY_TITLE)
    distances = [d for _, d in ranked]
    assert distances == sorted(distances)
    assert len(ranked) == len(recipes) - 1


def test_query_never_returns_itself(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    ranked = engine.query(QUERY_TITLE)
    assert QUERY_TITLE not in [title for title, _ in ranked]
    assert ranked[0] == (TWIN_TITLE, 0.0)


def test_ties_keep_table_order():
    engine = SimilarityEngine.from_frame(_tiny_frame())
    assert [title for title, _ in engine.query("Query")] == ["Near A", "Near B", "Far"]


def test_min_rating_filter(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    ranked = engine.query(QUERY_TITLE, min_rating=3.75)
    ratings = recipes.set_index("title")["rating"]
    assert ranked
    assert all(ratings[title] >= 3.75 for title, _ in ranked)


def test_required_ingredients_filter(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    ranked = engine.query(QUERY_TITLE, required_ingredients=["tomato", "basil"])
    by_title = recipes.set_index("title")
    assert ranked
    for title, _ in ranked:
        assert by_title.loc[title, "tomato"] == 1
        assert by_title.loc[title, "basil"] == 1


def test_calorie_range_filter_uses_kcal(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    ranked = engine.query(QUERY_TITLE, calorie_range=(200, 400))
    calories = recipes.set_index("title")["raw_calories"]
    assert ranked
    assert all(200 <= calories[title] <= 400 for title, _ in ranked)


def test_filters_combine():
    engine = SimilarityEngine.from_frame(_tiny_frame())
    ranked = engine.query("Query", required_ingredients=["egg"], min_rating=4.0)
    assert ranked == [("Near B", 1.0)]


def test_query_limit(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    assert len(engine.query(QUERY_TITLE, limit=5)) == 5


def test_unknown_title_is_not_found(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    with pytest.raises(RecipeNotFoundError):
        engine.query("No Such Recipe")


def test_title_lookup_is_exact_and_case_sensitive(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    with pytest.raises(RecipeNotFoundError):
        engine.query(QUERY_TITLE.lower())
    with pytest.raises(RecipeNotFoundError):
        engine.query("Lentil, Apple")


def test_unknown_ingredient_is_rejected(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    with pytest.raises(UnknownAttributeError) as excinfo:
        engine.query(QUERY_TITLE, required_ingredients=["apple", "unobtainium"])
    assert excinfo.value.names == ["unobtainium"]


def test_inverted_calorie_range_is_rejected(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    with pytest.raises(ValueError):
        engine.query(QUERY_TITLE, calorie_range=(500, 100))


def test_recommend_builds_response(recipes):
    engine = SimilarityEngine.from_frame(recipes)
    response = engine.recommend(RecommendationRequest(title=QUERY_TITLE, limit=3, min_rating=1.0))
    assert response.query == QUERY_TITLE
    assert len(response.recommendations) == 3
    assert response.total_candidates >= 3
    top = response.recommendations[0].recipe
    assert top.title == TWIN_TITLE
    assert {"apple", "lentil", "turkey"} <= set(top.ingredients)


def test_distance_matrix_is_cached(recipes, artifact_cache):
    first = SimilarityEngine.from_frame(recipes, cache=artifact_cache)
    second = SimilarityEngine.from_frame(recipes, cache=artifact_cache)
    assert second.distances is first.distances
    assert not first.distances.flags.writeable
    assert artifact_cache.stats()["misses"] == 1


@pytest.mark.skipif(
    not DEFAULT_INGESTION_CONFIG.raw_path.is_file(),
    reason="Epicurious dataset not available",
)
def test_lentil_wrap_does_not_recommend_itself():
    df = clean_recipes(load_raw_recipes(DEFAULT_INGESTION_CONFIG.raw_path))
    engine = SimilarityEngine.from_frame(df)
    ranked = engine.query(QUERY_TITLE, limit=5)
    assert ranked[0][0] != QUERY_TITLE
