from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ReportConfig:
    output_dir: Path = Path(
        os.getenv("RECIPE_REPORT_DIR", str(Path(__file__).resolve().parent.parent / "data" / "report"))
    )
    sample_recipe: str = "Lentil, Apple, and Turkey Wrap"
    recommendation_count: int = 10
    linkage_method: str = "ward"
    cluster_count: int = 8
    dpi: int = 150


DEFAULT_REPORT_CONFIG = ReportConfig()
