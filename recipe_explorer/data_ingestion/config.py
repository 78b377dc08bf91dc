"""
Configuration for loading and cleaning the recipe table.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the ingestion pipeline.

    ``dropped_columns`` are tag columns that carry no information about the
    recipe itself and are removed by name before anything else sees them.
    """

    raw_path: Path = Path(os.getenv("RECIPE_DATA_PATH", str(_DATA_DIR / "raw" / "epi_r.csv")))
    processed_data_dir: Path = _DATA_DIR / "processed"
    processed_filename: str = "recipes.csv"
    separator: str = ","
    dropped_columns: tuple[str, ...] = ("#cakeweek", "#wasteless")
    nutrition_columns: tuple[str, ...] = ("calories", "protein", "fat", "sodium")

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
