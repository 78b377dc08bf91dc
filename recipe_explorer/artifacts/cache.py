from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable

import joblib
import numpy as np
import pandas as pd

from .config import DEFAULT_CACHE_CONFIG, CacheConfig

logger = logging.getLogger(__name__)

ARRAY = "array"
OBJECT = "object"


def make_key(params: dict) -> str:
    normalized = json.dumps(params, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def dataset_fingerprint(df: pd.DataFrame) -> str:
    """Return a short content hash identifying this version of the table."""
    digest = hashlib.sha256()
    digest.update("|".join(map(str, df.columns)).encode())
    digest.update(pd.util.hash_pandas_object(df, index=False).to_numpy().tobytes())
    return digest.hexdigest()[:16]


class ArtifactCache:
    """
    Explicit build-or-load store for derived artifacts.

    Entries are addressed by a name plus the parameters that produced them,
    so a new dataset fingerprint, linkage method or tree setting lands on a
    different key. Arrays are stored as ``.npy``, fitted models and other
    objects through joblib.
    """

    def __init__(self, config: CacheConfig = DEFAULT_CACHE_CONFIG) -> None:
        self.config = config
        self._memory: dict[str, Any] = {}
        self._hits = 0
        self._misses = 0

    def _path(self, name: str, key: str, kind: str) -> Path:
        suffix = ".npy" if kind == ARRAY else ".joblib"
        return self.config.cache_dir / f"{name}-{key}{suffix}"

    def _read(self, path: Path, kind: str) -> Any:
        if kind == ARRAY:
            return np.load(path)
        return joblib.load(path)

    def _write(self, path: Path, kind: str, value: Any) -> None:
        # Readers only ever see a complete file
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                if kind == ARRAY:
                    np.save(f, value)
                else:
                    joblib.dump(value, f)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load_persisted(self, name: str, path: Path, kind: str) -> tuple[bool, Any]:
        if not (self.config.persist and path.is_file()):
            return False, None
        try:
            value = self._read(path, kind)
        except Exception:
            logger.warning("Discarding unreadable cached %s at %s", name, path, exc_info=True)
            path.unlink(missing_ok=True)
            return False, None
        logger.info("Loaded cached %s from %s", name, path)
        return True, value

    def build_or_load(
        self,
        name: str,
        params: dict,
        builder: Callable[[], Any],
        kind: str = OBJECT,
    ) -> Any:
        key = make_key({"name": name, **params})
        memory_key = f"{name}-{key}"
        if memory_key in self._memory:
            self._hits += 1
            return self._memory[memory_key]

        path = self._path(name, key, kind)
        found, value = self._load_persisted(name, path, kind)
        if found:
            self._hits += 1
        else:
            logger.info("Building %s (%s)", name, key)
            value = builder()
            self._misses += 1
            if self.config.persist:
                self._write(path, kind, value)

        if kind == ARRAY:
            value.setflags(write=False)
        self._memory[memory_key] = value
        return value

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._memory),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }

    def clear(self) -> None:
        """Forget in-memory entries and counters; files on disk are kept."""
        self._memory.clear()
        self._hits = 0
        self._misses = 0
