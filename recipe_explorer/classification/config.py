from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ClassifierConfig:
    test_size: float = 0.25
    random_state: int = int(os.getenv("RECIPE_RANDOM_STATE", "42"))
    criterion: str = "gini"
    max_depth: int | None = 8
    min_samples_leaf: int = 20
    top_features: int = 15


DEFAULT_CLASSIFIER_CONFIG = ClassifierConfig()
