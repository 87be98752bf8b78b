"""CLI command handlers.

Each handler takes plain parameters and returns a Result, so the click
command stays a thin dispatcher and handlers are testable without a CLI
context.
"""

from pathlib import Path
from typing import Callable, Optional, Union

import click
import requests

from deckfetch.config import settings as settings_module
from deckfetch.deck.extractor import load_deck
from deckfetch.net.http import build_session
from deckfetch.result import Result, try_operation
from deckfetch.services.download import (
    DeckDownloader,
    ProgressCallback,
    plan_downloads,
)


def handle_download_deck(
    deck_path: Union[str, Path],
    output_root: Union[str, Path, None] = None,
    max_workers: Optional[int] = None,
    fail_fast: Optional[bool] = None,
    on_progress: Optional[ProgressCallback] = None,
    session_factory: Optional[Callable[[], requests.Session]] = None,
) -> Result:
    """Handle the deck download command.

    The deck is fully extracted before the first request is made, so a
    malformed document fails without any network activity.

    Args:
        deck_path: Path to the deck JSON document
        output_root: Directory to create the deck directory in
        max_workers: Cards downloaded concurrently
        fail_fast: Abort on first failed image
        on_progress: Called as each card starts
        session_factory: Builds the HTTP session for each card (default
            ``build_session``)

    Returns:
        Result containing the DownloadSummary
    """

    def run_download():
        deck = load_deck(deck_path)
        click.echo(f"Found: {deck.card_count} cards in `{deck.name}`")

        downloader = DeckDownloader(
            output_root=output_root,
            max_workers=max_workers,
            fail_fast=fail_fast,
            session_factory=session_factory or build_session,
            on_progress=on_progress,
        )
        return downloader.download(deck)

    return try_operation(run_download)


def handle_plan_deck(
    deck_path: Union[str, Path], output_root: Union[str, Path, None] = None
) -> Result:
    """Handle a dry run: list what would be downloaded, and where.

    Returns:
        Result containing the list of PlannedAsset
    """

    def run_plan():
        deck = load_deck(deck_path)
        click.echo(f"Found: {deck.card_count} cards in `{deck.name}`")
        click.echo(f"{deck.image_count} images to download")
        if output_root is None:
            return plan_downloads(deck, settings_module.settings.output_root)
        return plan_downloads(deck, output_root)

    return try_operation(run_plan)
