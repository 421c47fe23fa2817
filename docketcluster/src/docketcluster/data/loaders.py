from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from docketcluster.data.types import Document
from docketcluster.errors import InputSchemaError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'.csv', '.json', '.jsonl', '.parquet'}
REQUIRED_COLUMNS = ('docid', 'text_data')
OPTIONAL_COLUMNS = ('dupe_count', 'level_0', 'is_astroturf')
SAMPLE_FILENAME = 'sample.csv'


def read_table(path: Path | str) -> pd.DataFrame:
    path = Path(path)
    if path.suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(f'Unsupported file type: {path.suffix}')
    if path.suffix == '.parquet':
        return pd.read_parquet(path)
    if path.suffix == '.csv':
        return pd.read_csv(path, dtype={'docid': str})
    if path.suffix == '.jsonl':
        return pd.read_json(path, lines=True, dtype={'docid': str})
    return pd.read_json(path, dtype={'docid': str})


def validate_columns(
    frame: pd.DataFrame,
    required: Sequence[str] = REQUIRED_COLUMNS,
    *,
    source: str = 'document table',
) -> None:
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise InputSchemaError(missing, source=source)


def _optional(value):
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _document_from_record(record: dict) -> Document:
    dupe_count = _optional(record.get('dupe_count'))
    level_0 = _optional(record.get('level_0'))
    is_astroturf = _optional(record.get('is_astroturf'))
    if is_astroturf is not None and not isinstance(is_astroturf, str):
        is_astroturf = bool(is_astroturf)
    return Document(
        docid=record['docid'],
        text_data=_optional(record.get('text_data')) or '',
        dupe_count=int(dupe_count) if dupe_count is not None else None,
        level_0=str(level_0) if level_0 is not None else None,
        is_astroturf=is_astroturf,
    )


def load_documents(source: Union[Path, str, pd.DataFrame], *, limit: Optional[int] = None) -> List[Document]:
    """Read comments into ``Document`` records, failing fast on a bad schema."""
    frame = source if isinstance(source, pd.DataFrame) else read_table(source)
    validate_columns(frame)
    if limit is not None:
        frame = frame.head(limit)
    return [_document_from_record(record) for record in frame.to_dict(orient='records')]


def documents_to_frame(documents: Iterable[Document]) -> pd.DataFrame:
    records = [document.model_dump() for document in documents]
    return pd.DataFrame(records, columns=[*REQUIRED_COLUMNS, *OPTIONAL_COLUMNS])


def sample_documents(frame: pd.DataFrame, n: int, seed: int) -> pd.DataFrame:
    """Draw ``n`` comments reproducibly; the whole table is kept when it is smaller."""
    if n < 1:
        raise ValueError(f'Sample size must be positive, got {n}')
    validate_columns(frame)
    if n >= len(frame):
        return frame.reset_index(drop=True)
    return frame.sample(n=n, random_state=seed).reset_index(drop=True)


def sample_dir(root: Path | str, n: int, seed: int) -> Path:
    return Path(root) / f'{n}_{seed}'


def write_sample(frame: pd.DataFrame, directory: Path | str) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / SAMPLE_FILENAME
    frame.to_csv(path, index=False)
    return path


def load_sample(directory: Path | str) -> pd.DataFrame:
    frame = read_table(Path(directory) / SAMPLE_FILENAME)
    validate_columns(frame, source=str(directory))
    return frame


def load_or_create_sample(
    frame: pd.DataFrame,
    root: Path | str,
    n: int,
    seed: int,
) -> pd.DataFrame:
    directory = sample_dir(root, n, seed)
    if (directory / SAMPLE_FILENAME).exists():
        logger.info('Reusing sample %s', directory)
        return load_sample(directory)
    sampled = sample_documents(frame, n, seed)
    path = write_sample(sampled, directory)
    logger.info('Sampled %d of %d comments -> %s', len(sampled), len(frame), path)
    return sampled


__all__ = [
    'SUPPORTED_EXTENSIONS',
    'REQUIRED_COLUMNS',
    'OPTIONAL_COLUMNS',
    'SAMPLE_FILENAME',
    'read_table',
    'validate_columns',
    'load_documents',
    'documents_to_frame',
    'sample_documents',
    'sample_dir',
    'write_sample',
    'load_sample',
    'load_or_create_sample',
]
