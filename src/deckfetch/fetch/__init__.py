"""Asset resolution - fetch one image and work out its filename."""

from deckfetch.fetch.asset_resolver import (
    CardSide,
    FetchedAsset,
    resolve_and_fetch,
    resolve_filename,
    sanitize_filename,
)

__all__ = [
    "CardSide",
    "FetchedAsset",
    "resolve_and_fetch",
    "resolve_filename",
    "sanitize_filename",
]
