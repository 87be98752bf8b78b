"""Exception hierarchy for deckfetch.

Provides structured error handling with specific exception types
for the different failure modes of a deck download.
"""

from typing import Any, Mapping, Optional


def _short_repr(value: Any, limit: int = 200) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def format_headers(headers: Mapping[str, str]) -> str:
    """Render a header set one ``name: value`` pair per line."""
    return "\n".join(f"  {name}: {value}" for name, value in headers.items())


class DeckFetchError(Exception):
    """Base exception for all deckfetch errors.

    All custom exceptions inherit from this base class for easy catching.
    """

    pass


class ValidationError(DeckFetchError):
    """Validation errors (invalid input, malformed data)."""

    pass


class DeckParsingError(ValidationError):
    """Deck document shape errors (missing key, wrong type).

    Attributes:
        field: Dotted path of the offending field, e.g. ``entries.main[0].count``
        value: The value found at that path (``None`` if missing)
        expected: Human readable name of the expected type, if any
    """

    def __init__(
        self,
        field: str,
        value: Any = None,
        expected: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.field = field
        self.value = value
        self.expected = expected
        if message is None and expected:
            message = f"Expected {expected} at '{field}', got {_short_repr(value)}"
        elif message is None:
            message = f"Invalid value at '{field}': {_short_repr(value)}"
        super().__init__(message)


class DanglingSectionError(DeckParsingError):
    """A section name with no matching key in ``entries``."""

    def __init__(self, field: str, section: str):
        self.section = section
        super().__init__(
            field,
            section,
            message=f"Section '{section}' listed at '{field}' has no entries",
        )


class NetworkError(DeckFetchError):
    """Network-related errors (connection, timeout, non-success status)."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class HeaderError(NetworkError):
    """A response header the download depends on is unusable."""

    reason = "Unusable header"

    def __init__(
        self, header: str, headers: Mapping[str, str], url: Optional[str] = None
    ):
        self.header = header
        self.headers = dict(headers)
        super().__init__(
            f"{self.reason} '{header}' in response headers:\n"
            f"{format_headers(self.headers)}",
            url=url,
        )


class MissingHeaderError(HeaderError):
    """The response carries no ``content-disposition`` header."""

    reason = "Missing header"


class InvalidHeaderError(HeaderError):
    """The ``content-disposition`` header names no filename."""

    reason = "Invalid header"


class AssetError(DeckFetchError):
    """Filesystem errors (directory collisions, failed writes)."""

    pass
