from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import cut_tree, linkage
from scipy.spatial.distance import pdist

from ..artifacts.cache import ARRAY, ArtifactCache, dataset_fingerprint
from ..data_ingestion.ingest import attribute_columns
from .models import ClusterOut, ClusterResponse

logger = logging.getLogger(__name__)

LINKAGE_METHODS = ("complete", "average", "ward")


class InvalidClusterRequest(ValueError):
    """Raised for an unknown linkage method or an out-of-range cluster count."""


def validate_request(method: str, k: int, n_attributes: int) -> None:
    if method not in LINKAGE_METHODS:
        raise InvalidClusterRequest(
            f"Unknown linkage method {method!r}; expected one of {', '.join(LINKAGE_METHODS)}"
        )
    if k <= 0 or k > n_attributes:
        raise InvalidClusterRequest(
            f"Cluster count must be between 1 and {n_attributes}, got {k}"
        )


def build_attribute_distances(df: pd.DataFrame) -> np.ndarray:
    """Condensed Euclidean distances between attribute columns (recipes as dimensions)."""
    matrix = df[attribute_columns(df)].to_numpy(dtype=np.float64).T
    return pdist(matrix, metric="euclidean")


class IngredientClustering:
    """
    Hierarchical clustering of ingredients/tags.

    The attribute distance vector is computed once. Each linkage method is
    run at most once; cutting at a different ``k`` only re-reads the tree.
    """

    def __init__(
        self,
        distances: np.ndarray,
        attributes: list[str],
        cache: ArtifactCache | None = None,
        dataset: str | None = None,
    ) -> None:
        self._distances = distances
        self._attributes = list(attributes)
        self._cache = cache
        self._dataset = dataset
        self._linkages: dict[str, np.ndarray] = {}

    @classmethod
    def from_frame(cls, df: pd.DataFrame, cache: ArtifactCache | None = None) -> "IngredientClustering":
        attributes = attribute_columns(df)
        if cache is None:
            return cls(build_attribute_distances(df), attributes)

        dataset = dataset_fingerprint(df)
        distances = cache.build_or_load(
            "attribute_distances",
            {"dataset": dataset, "metric": "euclidean"},
            lambda: build_attribute_distances(df),
            kind=ARRAY,
        )
        return cls(distances, attributes, cache=cache, dataset=dataset)

    @property
    def attributes(self) -> list[str]:
        return list(self._attributes)

    @property
    def distances(self) -> np.ndarray:
        return self._distances

    def linkage_matrix(self, method: str) -> np.ndarray:
        if method not in LINKAGE_METHODS:
            raise InvalidClusterRequest(f"Unknown linkage method {method!r}")
        if method not in self._linkages:
            def _build() -> np.ndarray:
                return linkage(np.array(self._distances), method=method)

            if self._cache is None:
                self._linkages[method] = _build()
            else:
                self._linkages[method] = self._cache.build_or_load(
                    "attribute_linkage",
                    {"dataset": self._dataset, "method": method},
                    _build,
                    kind=ARRAY,
                )
        return self._linkages[method]

    def cut(self, method: str, k: int) -> dict[str, int]:
        """Return attribute -> cluster id (1..k) for the given linkage and count."""
        validate_request(method, k, len(self._attributes))
        if k == 1:
            return {name: 1 for name in self._attributes}

        tree = np.array(self.linkage_matrix(method))
        labels = cut_tree(tree, n_clusters=k).ravel() + 1
        logger.info("Cut %s linkage into %d clusters", method, k)
        return {name: int(label) for name, label in zip(self._attributes, labels)}

    def describe(self, method: str, k: int) -> ClusterResponse:
        assignments = self.cut(method, k)
        table = cluster_table(assignments)
        clusters = [
            ClusterOut(cluster_id=int(row.cluster_id), size=int(row.size), attributes=list(row.attributes))
            for row in table.itertuples(index=False)
        ]
        return ClusterResponse(method=method, k=k, assignments=assignments, clusters=clusters)


def cluster_table(assignments: dict[str, int]) -> pd.DataFrame:
    """One row per cluster with its size and member attributes."""
    members: dict[int, list[str]] = {}
    for name, cluster_id in assignments.items():
        members.setdefault(cluster_id, []).append(name)

    rows = [
        {"cluster_id": cid, "size": len(names), "attributes": names}
        for cid, names in sorted(members.items())
    ]
    return pd.DataFrame(rows, columns=["cluster_id", "size", "attributes"])
