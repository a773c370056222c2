"""Command-line interface for blob-inventory.

Commands:
    - list: Write one CSV per container listing every blob it holds

Targets come either from --account/--container or, when both are omitted,
from JSON lines on stdin::

    {"account": "myaccount", "container": "images"}
    {"account": "myaccount", "container": "logs"}
"""

import dataclasses
import sys
from typing import Annotated, Iterable, Optional

import pydantic
import typer

from . import __version__
from .core import settings
from .core.exceptions import AuthenticationError
from .inventory import run_inventory
from .listing_config import ListingConfig
from .objectstorage import acquire_token
from .schemas import RunSummary, Target
from .targets import TargetStream

app = typer.Typer(
    name="blob-inventory",
    help="Inventory every blob of Azure Blob Storage containers into CSV files.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"blob-inventory {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Blob-Inventory: concurrent container listings to CSV.

    Authentication uses the Azure default credential chain.
    """
    pass


def _print_summary(summary: RunSummary) -> None:
    for result in summary.results:
        if result.ok:
            typer.echo(f"✓ {result.target}: {result.record_count:,} blobs")
        else:
            error = result.error
            reason = f"{error.code}: {error.message}" if error else "failed"
            typer.echo(
                f"✗ {result.target}: {reason} "
                f"({result.record_count:,} blobs written)",
                err=True,
            )
    for invalid in summary.invalid_lines:
        typer.echo(
            f"✗ input line {invalid.line_number} skipped: {invalid.reason}", err=True
        )
    typer.echo(
        f"{len(summary.succeeded)} of {len(summary.results)} containers listed, "
        f"{summary.total_records:,} blobs total"
    )


@app.command("list")
def list_cmd(
    account: Annotated[
        Optional[str],
        typer.Option("--account", "-a", help="Storage account (requires --container)"),
    ] = None,
    container: Annotated[
        Optional[str],
        typer.Option(
            "--container", "-c", help="Container to list (requires --account)"
        ),
    ] = None,
    prefix: Annotated[
        str, typer.Option("--prefix", "-p", help="Path prefixed to output CSVs")
    ] = settings.output_prefix,
    threads: Annotated[
        int,
        typer.Option(
            "--threads", "-t", min=1, help="Number of containers listed concurrently"
        ),
    ] = settings.max_in_flight,
    max_results: Annotated[
        Optional[int],
        typer.Option("--max-results", min=1, help="Blobs requested per page"),
    ] = None,
    fail_on_error: Annotated[
        bool,
        typer.Option(
            "--fail-on-error", help="Exit with code 1 if any container failed"
        ),
    ] = False,
) -> None:
    """
    List every blob of one or more containers into <prefix><account>-<container>.csv.

    Examples:
        Single: blob-inventory list --account myaccount --container images
        Stream: cat targets.jsonl | blob-inventory list --threads 8 --prefix out/
    """
    targets: Iterable[Target]
    if account is not None or container is not None:
        if account is None or container is None:
            typer.echo(
                "Error: please specify both --account and --container when using "
                "options",
                err=True,
            )
            raise typer.Exit(1)
        try:
            targets = [Target(account=account, container=container)]
        except pydantic.ValidationError as e:
            typer.echo(f"Error: invalid target: {e}", err=True)
            raise typer.Exit(1)
    else:
        if sys.stdin.isatty():
            typer.echo(
                "Error: specify --account and --container, or pipe JSON lines "
                "to stdin",
                err=True,
            )
            raise typer.Exit(1)
        targets = TargetStream(sys.stdin)

    config = ListingConfig.from_settings(settings)
    if max_results is not None:
        config = dataclasses.replace(config, max_results=max_results)

    try:
        token = acquire_token(settings.token_scope)
    except AuthenticationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    summary = run_inventory(
        targets,
        token.secret,
        prefix=prefix,
        max_in_flight=threads,
        config=config,
    )

    if not summary.results and not summary.invalid_lines:
        typer.echo("Error: no targets were supplied on stdin", err=True)
        raise typer.Exit(1)

    _print_summary(summary)

    if fail_on_error and (summary.failed or summary.invalid_lines):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
