"""Sample -> vectorize -> cluster -> evaluate for one parameter set."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import pandas as pd

from docketcluster.clustering.cache import ClusterCache, CsvClusterCache
from docketcluster.clustering.runner import run_clustering
from docketcluster.config import PipelineConfig
from docketcluster.data.loaders import load_or_create_sample
from docketcluster.eval.metrics import ClusterEvaluation, evaluate_clusters
from docketcluster.text.pos import PosTagger
from docketcluster.vectorize.matrix import DocumentNgramMatrix, build_document_ngram_matrix

logger = logging.getLogger(__name__)

Tagger = Callable[[str], Sequence[str]]


@dataclass
class PipelineResult:
    config: PipelineConfig
    sample: pd.DataFrame
    matrix: DocumentNgramMatrix
    assignments: pd.DataFrame
    evaluation: Optional[ClusterEvaluation] = None

    @property
    def model(self) -> str:
        return self.config.model_name


def has_ground_truth(frame: pd.DataFrame) -> bool:
    return any(column in frame.columns and frame[column].notna().any() for column in ('is_astroturf', 'level_0'))


def vectorize(config: PipelineConfig, sample: pd.DataFrame, *, tagger: Optional[Tagger] = None) -> DocumentNgramMatrix:
    if config.vectorizer == 'pos':
        # Tags are never stop words.
        return build_document_ngram_matrix(
            sample,
            config.ngram,
            n_min=config.ngram_min,
            measure=config.measure,
            threshold=config.threshold,
            tokenizer=tagger or PosTagger(),
            stop_words=frozenset(),
        )
    return build_document_ngram_matrix(
        sample,
        config.ngram,
        n_min=config.ngram_min,
        measure=config.measure,
        threshold=config.threshold,
    )


def run_pipeline(
    config: PipelineConfig,
    documents: pd.DataFrame,
    *,
    cache: Optional[ClusterCache] = None,
    tagger: Optional[Tagger] = None,
) -> PipelineResult:
    sample = load_or_create_sample(documents, config.artifacts_dir, config.sample_size, config.seed)
    matrix = vectorize(config, sample, tagger=tagger)
    cache = cache if cache is not None else CsvClusterCache(config.sample_dir)
    assignments = run_clustering(
        matrix,
        config.model_name,
        cache=cache,
        min_cluster_size=config.min_cluster_size,
        content_addressed=config.content_addressed_cache,
    )
    evaluation = evaluate_clusters(assignments, sample) if has_ground_truth(sample) else None
    if evaluation is None:
        logger.info('No ground truth labels in sample %s; skipping evaluation', config.sample_dir_name)
    return PipelineResult(
        config=config,
        sample=sample,
        matrix=matrix,
        assignments=assignments,
        evaluation=evaluation,
    )


__all__ = ['PipelineResult', 'run_pipeline', 'vectorize', 'has_ground_truth']
