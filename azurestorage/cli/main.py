# azurestorage CLI — main entry point
"""azurestorage CLI — run one service-broker operation against Azure Storage."""

from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from .. import __version__
from ..common import die, init_logging
from ..config import get_settings
from ..dispatcher import BrokerRequest, dispatch
from ..errors import AzureStorageError


@click.command(context_settings={"ignore_unknown_options": True})
@click.version_option(__version__, prog_name="azurestorage")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(verbose: bool, args: tuple[str, ...]) -> None:
    """Manage an Azure Storage service instance for a service broker.

    \b
    Usage:
        azurestorage ENVIRONMENT OPERATION PARAMETERS

    \b
    OPERATION is one of Catalog, Provision, Poll, Bind, Unbind, Deprovision.
    PARAMETERS is the service instance as JSON, e.g. '{"id": "..."}'.
    Catalog, Poll and Bind print one line of output; the others print nothing.

    \b
    Examples:
        azurestorage AzureCloud Catalog '{}'
        azurestorage AzureCloud Provision '{"id": "abcd1234-ef56-7890-ab12-cd34ef567890"}'
        azurestorage AzureCloud Poll '{"id": "abcd1234-ef56-7890-ab12-cd34ef567890"}'
    """
    if len(args) != 3 or not args[1]:
        sys.exit(1)

    try:
        settings = get_settings()
    except ValidationError as e:
        die(f"Error: invalid configuration: {e}")
    try:
        init_logging(log_dir=settings.log_dir, verbose=verbose or settings.verbose)
    except OSError as e:
        die(f"Error: cannot write log file in {settings.log_dir}: {e}")

    environment, operation, parameters = args
    try:
        output = dispatch(BrokerRequest(environment, operation, parameters), settings)
    except AzureStorageError as e:
        die(f"Error: {e}")

    if output is not None:
        click.echo(output, nl=not output.endswith("\n"))


if __name__ == "__main__":
    cli()
