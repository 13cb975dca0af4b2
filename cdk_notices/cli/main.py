"""Main CLI interface for cdk-notices."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..config import NoticesConfig, build_data_source
from ..notices import NoticesContext, display_notices, refresh_notices
from ..output.formatters import ConsoleFormatter
from ..utils.logging import get_logger, setup_logging
from ..version import version_number

app = typer.Typer(
    name="cdk-notices",
    help="Show known issues affecting this tool and the libraries your app uses",
    add_completion=False
)

console = Console(stderr=True)
logger = get_logger("CLI")


def _load_config(**overrides) -> NoticesConfig:
    try:
        return NoticesConfig.from_env(**overrides)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def show(
    outdir: Optional[Path] = typer.Option(
        Path("cdk.out"),
        "--outdir",
        "-o",
        help="Cloud assembly directory of the synthesized app"
    ),
    acknowledged: Optional[List[int]] = typer.Option(
        None,
        "--acknowledged",
        "-a",
        help="Issue number of an acknowledged notice (repeatable)"
    ),
    show_all: bool = typer.Option(
        False,
        "--all",
        help="Show notices even if they were acknowledged"
    ),
    ignore_cache: bool = typer.Option(
        False,
        "--ignore-cache",
        help="Fetch notices from the website even if the cache is fresh"
    ),
    cache_ttl: Optional[float] = typer.Option(
        None,
        "--cache-ttl",
        help="Seconds a downloaded catalog stays valid"
    ),
    cli_version: Optional[str] = typer.Option(
        None,
        "--cli-version",
        help="Tool version to check notices against"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Show the notices relevant to this tool and app."""
    setup_logging(verbose=verbose)

    config = _load_config(ignore_cache=ignore_cache or None, cache_ttl=cache_ttl)
    context = NoticesContext(
        outdir=outdir,
        acknowledged_issue_numbers=[] if show_all else list(acknowledged or []),
        cli_version=cli_version or version_number(),
    )

    asyncio.run(display_notices(context, build_data_source(config), ConsoleFormatter(console)))


@app.command()
def refresh(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Download the catalog even if the cache is fresh"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Refresh the local notices cache."""
    setup_logging(verbose=verbose)

    config = _load_config(ignore_cache=force or None)
    notices = asyncio.run(refresh_notices(build_data_source(config)))

    ConsoleFormatter(console).print_info(f"{len(notices)} notices cached in {config.cache_file}")


@app.command()
def version() -> None:
    """Show the tool version."""
    typer.echo(version_number())


def main() -> None:
    """Main entry point for the cdk-notices CLI."""
    app()


if __name__ == "__main__":
    main()
