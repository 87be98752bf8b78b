"""HTTP session handling for image downloads.

One GET per image, no retries. Every ``requests`` failure surfaces as
``NetworkError`` so callers only deal with deckfetch exceptions.
"""

from typing import Optional

import requests

from deckfetch.config import settings as settings_module
from deckfetch.core.logging import get_logger
from deckfetch.errors import NetworkError

logger = get_logger(__name__)


def build_session(user_agent: Optional[str] = None) -> requests.Session:
    """Create a session with deckfetch's default headers.

    Args:
        user_agent: User-Agent header value (defaults to ``settings.user_agent``)
    """
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": user_agent or settings_module.settings.user_agent,
            "Accept": "*/*",
        }
    )
    return session


def http_get(
    session: requests.Session, url: str, timeout: Optional[float] = None
) -> requests.Response:
    """GET ``url`` and check for a 2XX response.

    Args:
        session: Session to issue the request on
        url: URL to fetch
        timeout: Per-request timeout in seconds (defaults to ``settings.http_timeout``)

    Returns:
        The response, body already read

    Raises:
        NetworkError: Connection failure, timeout or non-success status
    """
    if timeout is None:
        timeout = settings_module.settings.http_timeout

    logger.debug("GET {}", url)
    try:
        response = session.get(url, timeout=timeout)
        # Check for 2XX response code
        response.raise_for_status()
    except requests.Timeout as error:
        raise NetworkError(
            f"Timed out after {timeout}s fetching {url}: {error}", url=url
        )
    except requests.HTTPError as error:
        raise NetworkError(f"HTTP error fetching {url}: {error}", url=url)
    except requests.RequestException as error:
        raise NetworkError(f"Request failed for {url}: {error}", url=url)

    return response
