"""Document x n-gram matrix commands."""

from pathlib import Path

import click

from docketcluster.config import PipelineConfig
from docketcluster.data.loaders import read_table
from docketcluster.pipeline import vectorize as build_matrix

from . import pipeline_errors


@click.command()
@click.option('--sample', 'sample_path', type=click.Path(exists=True), required=True,
              help='Sampled comments (sample.csv)')
@click.option('--vectorizer', type=click.Choice(['word', 'pos']), default='word', show_default=True)
@click.option('--ngram', type=int, default=2, show_default=True, help='Maximum n-gram order')
@click.option('--ngram-min', type=int, help='Minimum n-gram order (defaults to --ngram)')
@click.option('--measure', type=click.Choice(['tf', 'idf', 'tfidf']), default='tfidf', show_default=True)
@click.option('--threshold', type=float, default=0.05, show_default=True,
              help='Keep cells whose weight exceeds this value')
@click.option('--out', type=click.Path(), required=True, help='Output CSV for the wide matrix')
def vectorize(sample_path, vectorizer, ngram, ngram_min, measure, threshold, out):
    """Build the document x n-gram matrix for a sample."""
    try:
        config = PipelineConfig(vectorizer=vectorizer, ngram=ngram, ngram_min=ngram_min,
                                measure=measure, threshold=threshold)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    with pipeline_errors():
        frame = read_table(sample_path)
        matrix = build_matrix(config, frame)

    Path(out).parent.mkdir(parents=True, exist_ok=True)
    matrix.to_frame().to_csv(out, index=False)
    click.echo(f"{config.model_name}: {matrix.shape[0]} documents x {matrix.n_grams} grams -> {out}")
    if matrix.is_empty:
        click.echo("Warning: every gram was filtered out; clustering this matrix will fail", err=True)
