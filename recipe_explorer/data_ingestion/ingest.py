from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

TITLE_COLUMN = "title"
RATING_COLUMN = "rating"
RAW_CALORIES_COLUMN = "raw_calories"
NUTRITION_COLUMNS: List[str] = ["calories", "protein", "fat", "sodium"]


class SchemaError(ValueError):
    """Raised when the recipe table lacks columns the analysis depends on."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Recipe table is missing required columns: {', '.join(missing)}")


def _check_schema(df: pd.DataFrame, nutrition_columns: list[str]) -> None:
    required = [TITLE_COLUMN, RATING_COLUMN, *nutrition_columns]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise SchemaError(missing)


def load_raw_recipes(path: Path, separator: str = ",") -> pd.DataFrame:
    """Read the raw recipe table as delivered, without any cleaning."""
    df = pd.read_csv(path, sep=separator)
    logger.info("Loaded %d raw recipes with %d columns from %s", len(df), df.shape[1], path)
    return df


def attribute_columns(df: pd.DataFrame) -> list[str]:
    """Return the one-hot ingredient/tag columns, in table order."""
    excluded = {TITLE_COLUMN, RATING_COLUMN, RAW_CALORIES_COLUMN, *NUTRITION_COLUMNS}
    return [col for col in df.columns if col not in excluded]


def clean_recipes(
    raw: pd.DataFrame,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> pd.DataFrame:
    """
    Turn the raw table into the cleaned table every analysis shares.

    Steps:
    - Strip whitespace around titles so lookups can use exact matching.
    - Drop the configured uninformative columns.
    - Drop rows with missing values, exact duplicates, then repeated titles.
    - Keep the unscaled calories in ``raw_calories``.
    - Rescale nutrition fields into [0, 1].
    """
    nutrition = list(config.nutrition_columns)
    _check_schema(raw, nutrition)

    df = raw.copy()
    df[TITLE_COLUMN] = df[TITLE_COLUMN].astype("string").str.strip()

    dropped = [col for col in config.dropped_columns if col in df.columns]
    df = df.drop(columns=dropped)

    before = len(df)
    df = df.dropna()
    after_missing = len(df)
    df = df.drop_duplicates()
    after_dupes = len(df)
    df = df.drop_duplicates(subset=TITLE_COLUMN, keep="first")
    logger.info(
        "Cleaning dropped %d incomplete rows, %d duplicate rows, %d repeated titles",
        before - after_missing,
        after_missing - after_dupes,
        after_dupes - len(df),
    )

    df = df.reset_index(drop=True)
    df[TITLE_COLUMN] = df[TITLE_COLUMN].astype(str)
    df[RAW_CALORIES_COLUMN] = df["calories"].astype(float)
    df[nutrition] = MinMaxScaler().fit_transform(df[nutrition].astype(float))

    attrs = attribute_columns(df)
    df[attrs] = df[attrs].astype(np.uint8)
    return df


def write_processed_recipes(
    cleaned: pd.DataFrame,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> Path:
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)
    output_path = config.processed_path
    cleaned.to_csv(output_path, index=False)
    return output_path


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the ingestion pipeline.

    Steps:
    - Read the raw delimited file.
    - Clean it into the shared recipe table.
    - Persist the cleaned table as CSV for downstream use.
    """
    raw = load_raw_recipes(config.raw_path, separator=config.separator)
    return write_processed_recipes(clean_recipes(raw, config), config)


def load_processed_recipes(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> pd.DataFrame:
    """
    Read the cleaned table written by ``run_ingestion``.

    Dtypes and float values come back exactly as ``clean_recipes`` produced
    them, so the dataset fingerprint survives the CSV round trip.
    """
    df = pd.read_csv(
        config.processed_path,
        dtype={TITLE_COLUMN: str},
        keep_default_na=False,
        float_precision="round_trip",
    )
    float_columns = [RATING_COLUMN, RAW_CALORIES_COLUMN, *config.nutrition_columns]
    df[float_columns] = df[float_columns].astype(float)
    attrs = attribute_columns(df)
    df[attrs] = df[attrs].astype(np.uint8)
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = run_ingestion()
    print(f"Ingestion complete. Processed data saved to: {path}")
