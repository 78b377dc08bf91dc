"""
Process-wide store for the cleaned table and the artifacts built from it.

Everything is built lazily on first use and then only read.
"""
from __future__ import annotations

import pandas as pd

from .artifacts.cache import ArtifactCache
from .clustering.hierarchy import IngredientClustering
from .data_ingestion.ingest import load_processed_recipes
from .similarity.engine import SimilarityEngine

_df: pd.DataFrame | None = None
_cache: ArtifactCache | None = None
_engine: SimilarityEngine | None = None
_clustering: IngredientClustering | None = None


def get_cache() -> ArtifactCache:
    global _cache
    if _cache is None:
        _cache = ArtifactCache()
    return _cache


def get_dataframe() -> pd.DataFrame:
    """Return the cleaned recipe DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = load_processed_recipes()
    return _df


def get_engine() -> SimilarityEngine:
    global _engine
    if _engine is None:
        _engine = SimilarityEngine.from_frame(get_dataframe(), cache=get_cache())
    return _engine


def get_clustering() -> IngredientClustering:
    global _clustering
    if _clustering is None:
        _clustering = IngredientClustering.from_frame(get_dataframe(), cache=get_cache())
    return _clustering


def use_dataframe(df: pd.DataFrame, cache: ArtifactCache | None = None) -> None:
    """Replace the cleaned table (and optionally the cache); derived artifacts are rebuilt lazily."""
    global _df, _cache, _engine, _clustering
    _df = df
    if cache is not None:
        _cache = cache
    _engine = None
    _clustering = None


def reset() -> None:
    global _df, _cache, _engine, _clustering
    _df = None
    _cache = None
    _engine = None
    _clustering = None
