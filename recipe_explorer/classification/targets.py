from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..data_ingestion.ingest import (
    NUTRITION_COLUMNS,
    RAW_CALORIES_COLUMN,
    TITLE_COLUMN,
)

logger = logging.getLogger(__name__)

CALORIE_FLOOR = 0.0
CALORIE_CEILING = 10_000.0
LOW_CALORIE_LIMIT = 250.0
HIGH_CALORIE_LIMIT = 500.0
CALORIE_CLASSES = ["low", "mid", "high"]

SUMMER_COLUMN = "summer"
SEASON_COLUMNS = ["spring", "summer", "fall", "winter"]


def bucket_calories(calories: pd.Series) -> pd.Series:
    """
    Map kcal values to ``low`` (<250), ``mid`` (250-500) or ``high`` (>500).

    Values outside (0, 10000] are data errors and map to NaN.
    """
    values = calories.astype(float)
    buckets = np.select(
        [values < LOW_CALORIE_LIMIT, values <= HIGH_CALORIE_LIMIT],
        ["low", "mid"],
        default="high",
    )
    result = pd.Series(buckets, index=calories.index, dtype=object)
    valid = (values > CALORIE_FLOOR) & (values <= CALORIE_CEILING)
    return result.where(valid)


def calorie_training_frame(df: pd.DataFrame) -> tuple[pd.DataFrame, pd.Series]:
    """Features and 3-class calorie target; other nutrition fields are left out."""
    target = bucket_calories(df[RAW_CALORIES_COLUMN])
    valid = target.notna()
    excluded = int((~valid).sum())
    if excluded:
        logger.warning(
            "Excluding %d recipes with calories outside (%g, %g] from calorie training data",
            excluded,
            CALORIE_FLOOR,
            CALORIE_CEILING,
        )

    leaky = [TITLE_COLUMN, RAW_CALORIES_COLUMN, *NUTRITION_COLUMNS]
    features = df.loc[valid].drop(columns=[c for c in leaky if c in df.columns])
    return features, target.loc[valid].astype(str)


def summer_training_frame(df: pd.DataFrame) -> tuple[pd.DataFrame, pd.Series]:
    """Features and binary summer target; the other season tags are left out."""
    if SUMMER_COLUMN not in df.columns:
        raise KeyError(f"Column {SUMMER_COLUMN!r} is required for the summer classifier")

    target = df[SUMMER_COLUMN].astype(int)
    leaky = [TITLE_COLUMN, RAW_CALORIES_COLUMN, *SEASON_COLUMNS]
    features = df.drop(columns=[c for c in leaky if c in df.columns])
    return features, target
