"""Density-based clustering commands."""

import click
import pandas as pd

from docketcluster.clustering.cache import CsvClusterCache
from docketcluster.clustering.runner import run_clustering
from docketcluster.data.types import NOISE_LABEL

from . import pipeline_errors


@click.command()
@click.option('--matrix', 'matrix_path', type=click.Path(exists=True), required=True,
              help='Wide document x n-gram CSV with a docid column')
@click.option('--model', required=True, help='Model name used as cache key, e.g. word_2_tfidf')
@click.option('--cache-dir', type=click.Path(), required=True,
              help='Directory holding clusters_<model>.csv files')
@click.option('--min-size', type=int, default=5, show_default=True, help='Minimum cluster size (minPts)')
@click.option('--content-addressed', is_flag=True,
              help='Key the cache on the matrix contents as well as the model name')
def cluster(matrix_path, model, cache_dir, min_size, content_addressed):
    """Cluster a document x n-gram matrix with HDBSCAN."""
    matrix = pd.read_csv(matrix_path, dtype={'docid': str})
    click.echo(f"Loaded {len(matrix)} documents x {len(matrix.columns) - 1} features")
    cache = CsvClusterCache(cache_dir)
    with pipeline_errors():
        assignments = run_clustering(matrix, model, cache=cache, min_cluster_size=min_size,
                                     content_addressed=content_addressed)

    labels = assignments['cluster']
    n_clusters = labels[labels != NOISE_LABEL].nunique()
    n_noise = int((labels == NOISE_LABEL).sum())
    click.echo(f"{model}: {n_clusters} clusters, {n_noise} noise documents")
    if not content_addressed:
        click.echo(f"Assignments saved to {cache.path(model)}")
