"""Comment sampling commands."""

import click

from docketcluster.data.loaders import load_or_create_sample, read_table, sample_dir

from . import pipeline_errors


@click.command()
@click.option('--input', 'input_path', type=click.Path(exists=True), required=True,
              help='Comment dataset (CSV/JSON/Parquet) with docid and text_data columns')
@click.option('--size', type=int, required=True, help='Number of comments to sample')
@click.option('--seed', type=int, default=42, show_default=True, help='Random seed for the sample')
@click.option('--artifacts', type=click.Path(), default='artifacts', show_default=True,
              help='Root directory for <size>_<seed> sample directories')
def sample(input_path, size, seed, artifacts):
    """Draw a reproducible sample of comments into <artifacts>/<size>_<seed>/."""
    with pipeline_errors():
        frame = read_table(input_path)
        click.echo(f"Loaded {len(frame)} comments from {input_path}")
        sampled = load_or_create_sample(frame, artifacts, size, seed)
    click.echo(f"Sample of {len(sampled)} comments -> {sample_dir(artifacts, size, seed)}")
