from __future__ import annotations

import logging
from typing import List, Tuple, Union

import numpy as np
import pandas as pd

from docketcluster.clustering.cache import ClusterCache, content_key
from docketcluster.data.loaders import validate_columns
from docketcluster.data.types import ASSIGNMENT_COLUMNS, NOISE_LABEL, ClusterAssignment
from docketcluster.errors import DegenerateInputError
from docketcluster.vectorize.matrix import DocumentNgramMatrix

try:  # pragma: no cover - heavy optional dependency
    import hdbscan
except Exception:
    hdbscan = None

logger = logging.getLogger(__name__)

DEFAULT_MIN_CLUSTER_SIZE = 5

FeatureSource = Union[DocumentNgramMatrix, pd.DataFrame]


def cache_key(model: str) -> str:
    return str(model)


def _features(matrix: FeatureSource) -> Tuple[List[str], List[str], np.ndarray]:
    if isinstance(matrix, DocumentNgramMatrix):
        return list(matrix.docids), list(matrix.grams), matrix.values.toarray()
    validate_columns(matrix, ['docid'], source='feature matrix')
    feature_columns = [column for column in matrix.columns if column != 'docid']
    docids = [str(docid) for docid in matrix['docid']]
    if len(set(docids)) != len(docids):
        raise ValueError('docid values must be unique')
    values = matrix[feature_columns].to_numpy(dtype=np.float64)
    return docids, feature_columns, values


def _run_hdbscan(values: np.ndarray, min_cluster_size: int, metric: str):
    if hdbscan is None:
        raise RuntimeError('hdbscan is required for clustering')
    clusterer = hdbscan.HDBSCAN(min_cluster_size=min_cluster_size, metric=metric)
    labels = clusterer.fit_predict(values)
    return labels, clusterer.probabilities_, clusterer.outlier_scores_


def _assemble(docids: List[str], labels, probabilities, outlier_scores) -> pd.DataFrame:
    outlier_scores = np.nan_to_num(np.asarray(outlier_scores, dtype=np.float64), nan=0.0)
    return pd.DataFrame({
        'docid': docids,
        'cluster': np.asarray(labels, dtype=np.int64),
        'membership_prob': np.clip(np.asarray(probabilities, dtype=np.float64), 0.0, 1.0),
        'outlier_scores': np.clip(outlier_scores, 0.0, None),
    }, columns=ASSIGNMENT_COLUMNS)


def run_clustering(
    matrix: FeatureSource,
    model: str,
    *,
    cache: ClusterCache,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
    content_addressed: bool = False,
    metric: str = 'euclidean',
) -> pd.DataFrame:
    """Cluster documents with HDBSCAN and persist one assignment row per document.

    A table already stored under the model's key is returned as-is without
    clustering again, even if ``matrix`` differs from the one it was computed
    from. Pass ``content_addressed=True`` to key the cache on the inputs too.

    Noise points carry ``cluster == -1``.
    """
    if min_cluster_size < 2:
        raise ValueError(f'min_cluster_size must be at least 2, got {min_cluster_size}')
    docids, columns, values = _features(matrix)
    if content_addressed:
        key = content_key(model, docids, columns, values, min_cluster_size=min_cluster_size, metric=metric)
    else:
        key = cache_key(model)

    if cache.exists(key):
        cached = cache.read(key)
        if cached['docid'].astype(str).tolist() != docids:
            logger.warning('Cached clusters for %r do not match the input documents; returning cached result', key)
        else:
            logger.info('Loaded cached clusters for %r', key)
        return cached

    if not docids:
        raise DegenerateInputError(f'No documents to cluster for {model!r}')
    if not columns:
        raise DegenerateInputError(f'Feature matrix for {model!r} has no columns; every gram was filtered out')

    logger.info('Clustering %d documents x %d features for %r', len(docids), len(columns), key)
    labels, probabilities, outlier_scores = _run_hdbscan(values, min_cluster_size, metric)
    result = _assemble(docids, labels, probabilities, outlier_scores)
    n_clusters = len(set(result['cluster']) - {NOISE_LABEL})
    logger.info('Found %d clusters, %d noise points', n_clusters, int((result['cluster'] == NOISE_LABEL).sum()))
    cache.write(key, result)
    return result


def to_assignments(frame: pd.DataFrame) -> List[ClusterAssignment]:
    validate_columns(frame, ASSIGNMENT_COLUMNS, source='cluster table')
    return [
        ClusterAssignment(
            docid=record['docid'],
            cluster=int(record['cluster']),
            membership_prob=float(record['membership_prob']),
            outlier_score=float(record['outlier_scores']),
        )
        for record in frame.to_dict(orient='records')
    ]


__all__ = ['run_clustering', 'to_assignments', 'cache_key', 'DEFAULT_MIN_CLUSTER_SIZE']
