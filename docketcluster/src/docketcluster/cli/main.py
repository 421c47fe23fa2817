"""docketcluster CLI - n-gram vectorization and density clustering of docket comments."""

import logging

import click
from dotenv import load_dotenv

from .commands.cluster import cluster
from .commands.evaluate import evaluate
from .commands.run import run
from .commands.sample import sample
from .commands.vectorize import vectorize


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log debug output')
def cli(verbose):
    """docketcluster - cluster public comments and compare with astroturf labels."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )


cli.add_command(sample)
cli.add_command(vectorize)
cli.add_command(cluster)
cli.add_command(evaluate)
cli.add_command(run)


if __name__ == '__main__':
    cli()


__all__ = ['cli']
