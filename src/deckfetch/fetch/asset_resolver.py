"""Asset resolution: fetch one card image and name it after the server.

The saved filename comes from the response's ``content-disposition``
header, taken verbatim after the first ``filename=`` marker. Quotes are
stripped and ``*`` is spelled out so the name is safe on every filesystem.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

import requests
from requests.structures import CaseInsensitiveDict

from deckfetch.core.logging import get_logger
from deckfetch.errors import InvalidHeaderError, MissingHeaderError
from deckfetch.net.http import build_session, http_get

logger = get_logger(__name__)

CONTENT_DISPOSITION = "content-disposition"
FILENAME_MARKER = "filename="


class CardSide(Enum):
    """A card face, with the filename used when the server's name is unreadable."""

    FRONT = ("front", "front.jpg")
    BACK = ("back", "back.jpg")

    def __init__(self, label: str, default_filename: str):
        self.label = label
        self.default_filename = default_filename

    def url_for(self, card) -> Optional[str]:
        """Return this side's image URL on ``card`` (None if absent)."""
        return card.front_url if self is CardSide.FRONT else card.back_url


@dataclass(frozen=True)
class FetchedAsset:
    """A downloaded image and the filename it should be saved under."""

    url: str
    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def decode_header_value(value: Union[str, bytes]) -> str:
    """Decode a raw header value as text.

    Only visible ASCII, space and tab count as text. ``requests`` hands
    header values over as latin-1 decoded strings, so text values are
    re-encoded to recover the bytes on the wire.

    Raises:
        UnicodeError: If the value holds any other byte
    """
    raw = value if isinstance(value, bytes) else value.encode("latin-1")
    for position, byte in enumerate(raw):
        if byte != 0x09 and not 0x20 <= byte <= 0x7E:
            raise UnicodeDecodeError(
                "ascii", raw, position, position + 1, "not a visible ASCII character"
            )
    return raw.decode("ascii")


def sanitize_filename(filename: str) -> str:
    """Strip ``"`` and replace ``*`` with ``(asterisk)``.

    Examples:
        >>> sanitize_filename('"Foo*.png"')
        'Foo(asterisk).png'
    """
    return filename.replace('"', "").replace("*", "(asterisk)")


def parse_content_disposition(
    value: Union[str, bytes],
    default_filename: str,
    headers: Optional[Mapping[str, str]] = None,
    url: Optional[str] = None,
) -> str:
    """Return the raw filename named by a ``content-disposition`` value.

    Undecodable values fall back to ``default_filename``. Otherwise the text
    immediately after the first ``filename=`` is returned as-is.

    Raises:
        InvalidHeaderError: If the value has no ``filename=`` marker
    """
    try:
        text = decode_header_value(value)
    except UnicodeError:
        logger.warning(
            "Undecodable {} header, using default filename {}",
            CONTENT_DISPOSITION,
            default_filename,
        )
        return default_filename

    segments = text.split(FILENAME_MARKER)
    if len(segments) < 2:
        raise InvalidHeaderError(
            CONTENT_DISPOSITION,
            headers if headers is not None else {CONTENT_DISPOSITION: text},
            url=url,
        )
    return segments[1]


def resolve_filename(
    headers: Mapping[str, str], default_filename: str, url: Optional[str] = None
) -> str:
    """Work out the sanitized filename for a response.

    Raises:
        MissingHeaderError: No ``content-disposition`` header
        InvalidHeaderError: The header names no filename
    """
    value = CaseInsensitiveDict(headers).get(CONTENT_DISPOSITION)
    if value is None:
        raise MissingHeaderError(CONTENT_DISPOSITION, headers, url=url)

    filename = parse_content_disposition(value, default_filename, headers, url=url)
    return sanitize_filename(filename)


def resolve_and_fetch(
    url: str,
    default_filename: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> FetchedAsset:
    """Download ``url`` and resolve the filename to save it under.

    Front and back images go through this same routine with their own
    ``default_filename`` (see ``CardSide``).

    Args:
        url: Canonical image URL
        default_filename: Name used when the header cannot be decoded
        session: HTTP session (a fresh one is created if None)
        timeout: Per-request timeout in seconds

    Returns:
        FetchedAsset with the sanitized filename and body bytes

    Raises:
        NetworkError: Transport failure or non-success status
        MissingHeaderError: No ``content-disposition`` header
        InvalidHeaderError: The header names no filename
    """
    if session is None:
        with build_session() as own_session:
            return resolve_and_fetch(url, default_filename, own_session, timeout)

    response = http_get(session, url, timeout=timeout)
    filename = resolve_filename(response.headers, default_filename, url=url)
    content = response.content

    logger.debug("Resolved {} -> {} ({} bytes)", url, filename, len(content))
    return FetchedAsset(url=url, filename=filename, content=content)
