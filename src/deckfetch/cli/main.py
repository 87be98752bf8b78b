"""deckfetch command line entry point."""

import click

from deckfetch import __version__
from deckfetch.cli.common import ProgressPrinter, exit_with_message
from deckfetch.cli.handlers import handle_download_deck, handle_plan_deck
from deckfetch.core.logging import setup_logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.command()
@click.argument("deck_path")
@click.option(
    "--output-root",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to create the deck directory in (default: DF_OUTPUT_ROOT or .)",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(1, 32),
    default=None,
    help="Cards to download concurrently (default: DF_MAX_DOWNLOAD_WORKERS or 1)",
)
@click.option(
    "--keep-going",
    is_flag=True,
    default=False,
    help="Skip images that fail and report them at the end",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="List the images that would be downloaded without fetching them",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Console log level (default: DF_LOG_LEVEL or INFO)",
)
@click.version_option(__version__, prog_name="deckfetch")
def cli(deck_path, output_root, workers, keep_going, dry_run, log_level):
    """Download every card image of the deck described in DECK_PATH."""
    setup_logging(log_level)

    if dry_run:
        result = handle_plan_deck(deck_path, output_root=output_root)
        if not result["ok"]:
            exit_with_message(result["error"], code=1)
        for planned in result["value"]:
            click.echo(f"{planned.directory / planned.side.label}: {planned.url}")
        return

    progress = ProgressPrinter()
    result = handle_download_deck(
        deck_path,
        output_root=output_root,
        max_workers=workers,
        fail_fast=False if keep_going else None,
        on_progress=progress.card_started,
    )
    progress.close()

    if not result["ok"]:
        exit_with_message(result["error"], code=1)

    summary = result["value"]
    if not summary.ok:
        lines = [f"{summary.failed} image(s) failed:"]
        lines.extend(
            f"  {failure.index} - {failure.card_name} ({failure.side.label}): "
            f"{failure.error}"
            for failure in summary.failures
        )
        exit_with_message("\n".join(lines), code=1)

    click.echo(f"Saved {summary.saved} images to {summary.output_dir}")


if __name__ == "__main__":
    cli()
