"""HTTP utilities for image downloads."""

from deckfetch.net.http import build_session, http_get

__all__ = [
    "build_session",
    "http_get",
]
