"""Deck Download Service

Lays a Deck out on disk: one directory for the deck, one sub-directory per
card (``"{index} - {card name}"``) and one file per present card side.

Cards are independent jobs. With one worker they run strictly in deck order;
with more they run on a thread pool. Each job has its own HTTP session and
its own directory, so no state is shared between cards.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

import requests

from deckfetch.config import settings as settings_module
from deckfetch.core.logging import get_logger, log_operation
from deckfetch.deck.models import Card, Deck
from deckfetch.errors import AssetError, DeckFetchError
from deckfetch.fetch.asset_resolver import CardSide, FetchedAsset, resolve_and_fetch
from deckfetch.net.http import build_session

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, Card], None]


def sanitize_card_name(name: str) -> str:
    """Make a card name usable as a single path component."""
    return name.replace("/", "(slash)")


def card_directory_name(index: int, card: Card) -> str:
    """Directory name for the card at ``index`` in deck order.

    Examples:
        >>> card_directory_name(3, Card(name="Fire/Ice"))
        '3 - Fire(slash)Ice'
    """
    return f"{index} - {sanitize_card_name(card.name)}"


@dataclass(frozen=True)
class PlannedAsset:
    """One image a download of the deck would fetch."""

    index: int
    directory: Path
    side: CardSide
    url: str


@dataclass
class SavedFile:
    """An image written to disk."""

    index: int
    side: CardSide
    url: str
    path: Path
    size: int


@dataclass
class SideFailure:
    """A card side that could not be downloaded (keep-going mode only)."""

    index: int
    card_name: str
    side: CardSide
    url: str
    error: str


@dataclass
class DownloadSummary:
    """Summary of a deck download."""

    deck_name: str
    output_dir: Path
    cards: int
    saved_files: List[SavedFile] = field(default_factory=list)
    failures: List[SideFailure] = field(default_factory=list)

    @property
    def saved(self) -> int:
        return len(self.saved_files)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def total_size_bytes(self) -> int:
        return sum(saved.size for saved in self.saved_files)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class _CardOutcome:
    saved_files: List[SavedFile] = field(default_factory=list)
    failures: List[SideFailure] = field(default_factory=list)


def _is_contained_name(name: str) -> bool:
    path = Path(name)
    return bool(name) and not path.is_absolute() and ".." not in path.parts


def deck_directory(output_root: Union[str, Path], deck_name: str) -> Path:
    """Directory the deck is laid out in, always inside ``output_root``.

    Raises:
        AssetError: If the deck name is absolute or climbs out of the root
    """
    if not _is_contained_name(deck_name):
        raise AssetError(f"Deck name cannot be used as a directory: {deck_name!r}")
    return Path(output_root) / deck_name


def plan_downloads(deck: Deck, output_root: Union[str, Path]) -> List[PlannedAsset]:
    """List every image a download would fetch, in download order.

    Touches neither the network nor the filesystem.
    """
    deck_dir = deck_directory(output_root, deck.name)
    planned: List[PlannedAsset] = []
    for index, card in enumerate(deck.cards):
        directory = deck_dir / card_directory_name(index, card)
        for side in CardSide:
            url = side.url_for(card)
            if url is not None:
                planned.append(PlannedAsset(index, directory, side, url))
    return planned


def write_asset(directory: Path, asset: FetchedAsset) -> Path:
    """Write a fetched image into ``directory`` under its resolved filename.

    Raises:
        AssetError: If the filename would land outside ``directory`` or the
            file cannot be written
    """
    if not _is_contained_name(asset.filename):
        raise AssetError(
            f"Refusing filename {asset.filename!r} from {asset.url}: "
            f"not inside {directory}"
        )
    path = directory / asset.filename
    try:
        with open(path, "wb") as f:
            f.write(asset.content)
    except OSError as error:
        raise AssetError(f"Could not write {path}: {error}")
    return path


class DeckDownloader:
    """Downloads every card image of a deck into a fresh directory tree."""

    def __init__(
        self,
        output_root: Union[str, Path, None] = None,
        max_workers: Optional[int] = None,
        fail_fast: Optional[bool] = None,
        timeout: Optional[float] = None,
        session_factory: Callable[[], requests.Session] = build_session,
        on_progress: Optional[ProgressCallback] = None,
    ):
        settings = settings_module.settings
        self.output_root = Path(
            output_root if output_root is not None else settings.output_root
        )
        self.max_workers = max_workers or settings.max_download_workers
        self.fail_fast = settings.fail_fast if fail_fast is None else fail_fast
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.session_factory = session_factory
        self.on_progress = on_progress

    def download(self, deck: Deck) -> DownloadSummary:
        """Download the whole deck.

        Raises:
            AssetError: The deck directory already exists or cannot be created
            DeckFetchError: The first failed asset, when ``fail_fast`` is set
        """
        deck_dir = self._create_directory(
            deck_directory(self.output_root, deck.name), parents=True
        )
        summary = DownloadSummary(
            deck_name=deck.name, output_dir=deck_dir, cards=deck.card_count
        )

        with log_operation("Downloading deck", deck=deck.name, cards=deck.card_count):
            if self.max_workers <= 1:
                outcomes = [
                    self._download_card(deck_dir, index, card, deck.card_count)
                    for index, card in enumerate(deck.cards)
                ]
            else:
                outcomes = self._download_concurrently(deck_dir, deck)

        for outcome in outcomes:
            summary.saved_files.extend(outcome.saved_files)
            summary.failures.extend(outcome.failures)

        if summary.failures:
            logger.warning(
                "{} of {} images failed for '{}':",
                summary.failed,
                summary.saved + summary.failed,
                deck.name,
            )
            for failure in summary.failures:
                logger.warning(
                    "  card {} ({}) {}: {}",
                    failure.index,
                    failure.card_name,
                    failure.side.label,
                    failure.error,
                )
        else:
            logger.info(
                "Saved {} images ({:.1f} MB) to {}",
                summary.saved,
                summary.total_size_bytes / 1_000_000,
                deck_dir,
            )

        return summary

    def _download_concurrently(
        self, deck_dir: Path, deck: Deck
    ) -> List[_CardOutcome]:
        total = deck.card_count
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._download_card, deck_dir, index, card, total)
                for index, card in enumerate(deck.cards)
            ]

            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            failed = [future for future in done if future.exception() is not None]
            if failed:
                for future in futures:
                    future.cancel()
                raise failed[0].exception()

        # Keep deck order regardless of completion order
        return [future.result() for future in futures]

    def _download_card(
        self, deck_dir: Path, index: int, card: Card, total: int
    ) -> _CardOutcome:
        if self.on_progress is not None:
            self.on_progress(index, total, card)

        card_dir = self._create_directory(deck_dir / card_directory_name(index, card))
        outcome = _CardOutcome()

        with self.session_factory() as session:
            for side in CardSide:
                url = side.url_for(card)
                if url is None:
                    continue
                try:
                    asset = resolve_and_fetch(
                        url, side.default_filename, session, timeout=self.timeout
                    )
                    path = write_asset(card_dir, asset)
                except DeckFetchError as error:
                    if self.fail_fast:
                        raise
                    logger.error(
                        "Card {} ({}) {} failed: {}",
                        index,
                        card.name,
                        side.label,
                        error,
                    )
                    outcome.failures.append(
                        SideFailure(index, card.name, side, url, str(error))
                    )
                    continue

                logger.debug("Saved {}", path)
                outcome.saved_files.append(
                    SavedFile(index, side, url, path, asset.size)
                )

        return outcome

    @staticmethod
    def _create_directory(path: Path, parents: bool = False) -> Path:
        try:
            path.mkdir(parents=parents)
        except FileExistsError:
            raise AssetError(f"Output directory already exists: {path}")
        except OSError as error:
            raise AssetError(f"Could not create directory {path}: {error}")
        return path


def download_deck(deck: Deck, **options) -> DownloadSummary:
    """Download a deck with settings defaults; ``options`` go to DeckDownloader."""
    return DeckDownloader(**options).download(deck)
