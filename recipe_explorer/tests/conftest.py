from __future__ import annotations

import pandas as pd
import pytest

from recipe_explorer.artifacts.cache import ArtifactCache
from recipe_explorer.artifacts.config import CacheConfig
from recipe_explorer.data_ingestion.ingest import clean_recipes
from recipe_explorer.tests.sample_data import make_raw_recipes


@pytest.fixture
def raw_recipes() -> pd.DataFrame:
    return make_raw_recipes()


@pytest.fixture
def recipes(raw_recipes: pd.DataFrame) -> pd.DataFrame:
    return clean_recipes(raw_recipes)


@pytest.fixture
def artifact_cache(tmp_path) -> ArtifactCache:
    return ArtifactCache(CacheConfig(cache_dir=tmp_path / "artifacts"))
