"""Test doubles and deck document builders shared by the test modules."""

from typing import Dict, List, Optional

import requests
from requests.structures import CaseInsensitiveDict


class FakeResponse:
    """Just enough of ``requests.Response`` for the asset resolver."""

    def __init__(
        self,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        status_code: int = 200,
    ):
        self.content = content
        self.headers = CaseInsensitiveDict(headers or {})
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class FakeSession:
    """Serves canned responses by URL and records every request."""

    def __init__(self, responses: Dict[str, FakeResponse]):
        self.responses = responses
        self.requests: List[str] = []
        self.closed = False

    def get(self, url: str, timeout=None) -> FakeResponse:
        self.requests.append(url)
        if url not in self.responses:
            raise requests.ConnectionError(f"no route to {url}")
        return self.responses[url]

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def image_response(filename: str, content: bytes = b"\x89PNG") -> FakeResponse:
    return FakeResponse(
        content=content,
        headers={"content-disposition": f'attachment; filename="{filename}"'},
    )


def digest(name: str, front: Optional[str] = None, back: Optional[str] = None) -> Dict:
    image_uris = {}
    if front is not None:
        image_uris["front"] = front
    if back is not None:
        image_uris["back"] = back
    return {"name": name, "image_uris": image_uris}


def deck_document(
    entries: Dict[str, list],
    primary: Optional[List[str]] = None,
    secondary: Optional[List[str]] = None,
    name: str = "Test Deck",
) -> Dict:
    return {
        "name": name,
        "sections": {
            "primary": list(entries) if primary is None else primary,
            "secondary": [] if secondary is None else secondary,
        },
        "entries": entries,
    }
