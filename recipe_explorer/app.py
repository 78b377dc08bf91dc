from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from .clustering.hierarchy import LINKAGE_METHODS, InvalidClusterRequest
from .clustering.models import ClusterResponse
from .data_ingestion.ingest import attribute_columns
from .data_store import get_cache, get_clustering, get_dataframe, get_engine
from .similarity.engine import RecipeNotFoundError, UnknownAttributeError
from .similarity.models import RecommendationRequest, RecommendationResponse

app = FastAPI(title="Recipe Explorer API", version="1.0.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    df = get_dataframe()
    return {
        "recipes": len(df),
        "ingredients": attribute_columns(df),
        "linkage_methods": list(LINKAGE_METHODS),
    }


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(body: RecommendationRequest) -> RecommendationResponse:
    try:
        return get_engine().recommend(body)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UnknownAttributeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/clusters", response_model=ClusterResponse)
def clusters(
    method: str = Query(default="ward"),
    k: int = Query(default=8),
) -> ClusterResponse:
    try:
        return get_clustering().describe(method, k)
    except InvalidClusterRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache().stats()
