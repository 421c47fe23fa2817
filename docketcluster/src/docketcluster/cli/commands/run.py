"""End-to-end pipeline execution commands."""

import click

from docketcluster.config import load_pipeline_config
from docketcluster.data.loaders import read_table
from docketcluster.pipeline import run_pipeline

from . import pipeline_errors
from .evaluate import print_evaluation


@click.command()
@click.option('--config', 'config_path', type=click.Path(exists=True), required=True,
              help='Pipeline configuration YAML')
@click.option('--input', 'input_path', type=click.Path(exists=True), required=True,
              help='Comment dataset (CSV/JSON/Parquet)')
@click.option('--artifacts', type=click.Path(), help='Override artifacts_dir from the config')
def run(config_path, input_path, artifacts):
    """Sample, vectorize, cluster and evaluate for one parameter set."""
    config = load_pipeline_config(config_path)
    if artifacts:
        config = config.replace(artifacts_dir=artifacts)

    click.echo(f"Running {config.model_name} on sample {config.sample_dir_name}")
    with pipeline_errors():
        documents = read_table(input_path)
        result = run_pipeline(config, documents)

    click.echo(f"Matrix: {result.matrix.shape[0]} documents x {result.matrix.n_grams} grams")
    click.echo(f"Assignments: {len(result.assignments)} rows in {config.sample_dir}")
    if result.evaluation is not None:
        print_evaluation(config.model_name, result.evaluation)
    else:
        click.echo("No ground truth labels; skipped evaluation")
