"""Ground truth comparison commands."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from docketcluster.data.loaders import read_table
from docketcluster.eval.metrics import ClusterEvaluation, evaluate_clusters

from . import pipeline_errors

console = Console()


def print_evaluation(model: str, evaluation: ClusterEvaluation, *, top: int = 20) -> None:
    console.print(f'[bold]{model}[/bold] ({evaluation.n_documents} labelled comments, '
                  f'{evaluation.n_clusters} clusters, {evaluation.noise_fraction:.1%} noise)')
    console.print(f'precision={evaluation.precision:.3f} recall={evaluation.recall:.3f} f1={evaluation.f1:.3f}')

    confusion = Table(title='Confusion matrix')
    confusion.add_column('truth \\ predicted')
    confusion.add_column('organic', justify='right')
    confusion.add_column('astroturf', justify='right')
    for label, row in zip(['organic', 'astroturf'], evaluation.confusion):
        confusion.add_row(label, *(str(int(value)) for value in row))
    console.print(confusion)

    clusters = Table(title=f'Largest clusters (top {top})')
    for column in evaluation.per_cluster.columns:
        clusters.add_column(str(column), justify='right')
    for record in evaluation.per_cluster.head(top).itertuples(index=False):
        clusters.add_row(*(f'{value:.3f}' if isinstance(value, float) else str(value) for value in record))
    console.print(clusters)


@click.command()
@click.option('--clusters', 'clusters_path', type=click.Path(exists=True), required=True,
              help='clusters_<model>.csv produced by the cluster command')
@click.option('--documents', type=click.Path(exists=True), required=True,
              help='Comments with is_astroturf or level_0 ground truth')
@click.option('--out', type=click.Path(), help='Optional JSON output for summary metrics')
def evaluate(clusters_path, documents, out):
    """Compare cluster assignments with the astroturf labelling."""
    assignments = read_table(clusters_path)
    with pipeline_errors():
        evaluation = evaluate_clusters(assignments, read_table(documents))

    model = Path(clusters_path).stem.removeprefix('clusters_')
    print_evaluation(model, evaluation)
    if out:
        Path(out).parent.mkdir(parents=True, exist_ok=True)
        Path(out).write_text(json.dumps({'model': model, **evaluation.as_dict()}, indent=2), encoding='utf-8')
        click.echo(f"Metrics saved to {out}")
