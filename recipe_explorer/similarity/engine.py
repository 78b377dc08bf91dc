from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from ..artifacts.cache import ARRAY, ArtifactCache, dataset_fingerprint
from ..data_ingestion.ingest import (
    RATING_COLUMN,
    RAW_CALORIES_COLUMN,
    TITLE_COLUMN,
    attribute_columns,
)
from .distance import attribute_matrix, build_distance_matrix
from .models import (
    RecipeOut,
    RecommendationItem,
    RecommendationRequest,
    RecommendationResponse,
)

logger = logging.getLogger(__name__)


class RecipeNotFoundError(LookupError):
    """Raised when no recipe has exactly the requested title."""

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Recipe not found: {title!r}")


class UnknownAttributeError(ValueError):
    """Raised when a filter names an ingredient/tag that is not a column."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Unknown ingredients: {', '.join(names)}")


class SimilarityEngine:
    """
    Nearest-neighbour lookup over the cleaned recipe table.

    The distance matrix is built once and never written to afterwards; a
    query only slices one row of it.
    """

    def __init__(self, df: pd.DataFrame, distances: np.ndarray) -> None:
        if distances.shape != (len(df), len(df)):
            raise ValueError(
                f"Distance matrix shape {distances.shape} does not match {len(df)} recipes"
            )
        self._df = df.reset_index(drop=True)
        self._distances = distances
        self._attributes = attribute_columns(self._df)
        self._positions: dict[str, int] = {
            title: pos for pos, title in enumerate(self._df[TITLE_COLUMN])
        }

    @classmethod
    def from_frame(cls, df: pd.DataFrame, cache: ArtifactCache | None = None) -> "SimilarityEngine":
        def _build() -> np.ndarray:
            return build_distance_matrix(attribute_matrix(df))

        if cache is None:
            distances = _build()
        else:
            distances = cache.build_or_load(
                "recipe_distances",
                {"dataset": dataset_fingerprint(df), "metric": "euclidean"},
                _build,
                kind=ARRAY,
            )
        return cls(df, distances)

    @property
    def distances(self) -> np.ndarray:
        return self._distances

    @property
    def attributes(self) -> list[str]:
        return list(self._attributes)

    def titles(self) -> list[str]:
        return self._df[TITLE_COLUMN].tolist()

    def index_of(self, title: str) -> int:
        try:
            return self._positions[title]
        except KeyError:
            raise RecipeNotFoundError(title) from None

    def _filter_mask(
        self,
        required_ingredients: Iterable[str] | None,
        min_rating: float | None,
        calorie_range: tuple[float, float] | None,
    ) -> np.ndarray:
        mask = np.ones(len(self._df), dtype=bool)

        if required_ingredients:
            required = list(dict.fromkeys(required_ingredients))
            unknown = [name for name in required if name not in self._attributes]
            if unknown:
                raise UnknownAttributeError(unknown)
            mask &= (self._df[required].to_numpy() == 1).all(axis=1)

        if min_rating is not None:
            mask &= self._df[RATING_COLUMN].to_numpy() >= min_rating

        if calorie_range is not None:
            low, high = calorie_range
            if low > high:
                raise ValueError(f"Invalid calorie range [{low}, {high}]")
            calories = self._df[RAW_CALORIES_COLUMN].to_numpy()
            mask &= (calories >= low) & (calories <= high)

        return mask

    def query(
        self,
        title: str,
        required_ingredients: Iterable[str] | None = None,
        min_rating: float | None = None,
        calorie_range: tuple[float, float] | None = None,
        limit: int | None = None,
    ) -> list[tuple[str, float]]:
        """
        Rank the other recipes by distance to ``title``.

        Returns (title, distance) pairs in ascending distance order; equal
        distances keep table order. Only recipes passing every supplied
        filter are returned, and never the query recipe itself.
        """
        position = self.index_of(title)
        mask = self._filter_mask(required_ingredients, min_rating, calorie_range)
        mask[position] = False

        row = self._distances[position]
        candidates = np.flatnonzero(mask)
        order = candidates[np.argsort(row[candidates], kind="stable")]
        if limit is not None:
            order = order[:limit]

        titles = self._df[TITLE_COLUMN].to_numpy()
        return [(str(titles[i]), float(row[i])) for i in order]

    def _recipe_out(self, position: int) -> RecipeOut:
        record = self._df.iloc[position]
        ingredients = [name for name in self._attributes if record[name] == 1]
        return RecipeOut(
            title=str(record[TITLE_COLUMN]),
            rating=float(record[RATING_COLUMN]),
            calories=float(record[RAW_CALORIES_COLUMN]),
            ingredients=ingredients,
        )

    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        ranked = self.query(
            request.title,
            required_ingredients=request.required_ingredients,
            min_rating=request.min_rating,
            calorie_range=request.calorie_range,
        )
        logger.info("Recommendation for %r: %d candidates", request.title, len(ranked))

        items: list[RecommendationItem] = []
        for title, distance in ranked[: request.limit]:
            items.append(RecommendationItem(
                recipe=self._recipe_out(self._positions[title]),
                distance=round(distance, 4),
            ))

        return RecommendationResponse(
            query=request.title,
            recommendations=items,
            total_candidates=len(ranked),
        )
