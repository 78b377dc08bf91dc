from __future__ import annotations

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform

from ..data_ingestion.ingest import attribute_columns


def attribute_matrix(df: pd.DataFrame) -> np.ndarray:
    """Return the recipes x attributes 0/1 matrix used for distances."""
    return df[attribute_columns(df)].to_numpy(dtype=np.float64)


def build_distance_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Pairwise Euclidean distances between the rows of ``matrix``.

    Built from the condensed form, so the result is exactly symmetric and
    its diagonal is exactly zero. Stored as float32 to halve the N x N
    footprint on the full dataset.
    """
    n = matrix.shape[0]
    if n < 2:
        return np.zeros((n, n), dtype=np.float32)
    return squareform(pdist(matrix, metric="euclidean").astype(np.float32))
