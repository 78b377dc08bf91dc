from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CacheConfig:
    cache_dir: Path = Path(
        os.getenv(
            "RECIPE_CACHE_DIR",
            str(Path(__file__).resolve().parent.parent / "data" / "artifacts"),
        )
    )
    persist: bool = True


DEFAULT_CACHE_CONFIG = CacheConfig()
