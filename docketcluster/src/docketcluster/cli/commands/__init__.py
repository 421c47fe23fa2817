from contextlib import contextmanager

import click

from docketcluster.errors import DocketClusterError


@contextmanager
def pipeline_errors():
    """Report pipeline failures and rejected inputs as click errors (exit code 1)."""
    try:
        yield
    except (DocketClusterError, ValueError) as error:
        raise click.ClickException(str(error)) from error
