"""Key-value stores for cluster assignment tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Protocol, runtime_checkable

import joblib
import pandas as pd

from docketcluster.data.types import ASSIGNMENT_COLUMNS

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path('artifacts')


@runtime_checkable
class ClusterCache(Protocol):
    def exists(self, key: str) -> bool:
        ...

    def read(self, key: str) -> pd.DataFrame:
        ...

    def write(self, key: str, frame: pd.DataFrame) -> None:
        ...


def _safe_key(key: str) -> str:
    return str(key).replace('/', '_').replace(' ', '_')


class CsvClusterCache:
    """One ``clusters_<key>.csv`` file per model under ``directory``."""

    def __init__(self, directory: Path | str = DEFAULT_CACHE_DIR) -> None:
        self.directory = Path(directory)

    def path(self, key: str) -> Path:
        return self.directory / f'clusters_{_safe_key(key)}.csv'

    def exists(self, key: str) -> bool:
        return self.path(key).exists()

    def read(self, key: str) -> pd.DataFrame:
        path = self.path(key)
        if not path.exists():
            raise KeyError(key)
        return pd.read_csv(path, dtype={'docid': str})

    def write(self, key: str, frame: pd.DataFrame) -> None:
        path = self.path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path, index=False, columns=ASSIGNMENT_COLUMNS)
        logger.info('Wrote %d cluster assignments -> %s', len(frame), path)


class MemoryClusterCache:
    def __init__(self) -> None:
        self._store: Dict[str, pd.DataFrame] = {}

    def exists(self, key: str) -> bool:
        return key in self._store

    def read(self, key: str) -> pd.DataFrame:
        return self._store[key].copy()

    def write(self, key: str, frame: pd.DataFrame) -> None:
        self._store[key] = frame.copy()

    def __len__(self) -> int:
        return len(self._store)


def content_key(model: str, docids, columns, values, **params) -> str:
    """Model name suffixed with a digest of the clustering inputs."""
    digest = joblib.hash({
        'docids': list(docids),
        'columns': list(columns),
        'values': values,
        'params': params,
    })
    return f'{model}-{digest[:16]}'


__all__ = ['ClusterCache', 'CsvClusterCache', 'MemoryClusterCache', 'content_key', 'DEFAULT_CACHE_DIR']
