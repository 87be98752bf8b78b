"""Unit tests for the asset resolver (fetch + filename resolution)."""

from unittest.mock import Mock, patch

import pytest
import requests

from deckfetch.deck.models import Card
from deckfetch.errors import (
    HeaderError,
    InvalidHeaderError,
    MissingHeaderError,
    NetworkError,
)
from deckfetch.fetch.asset_resolver import (
    CardSide,
    FetchedAsset,
    decode_header_value,
    parse_content_disposition,
    resolve_and_fetch,
    resolve_filename,
    sanitize_filename,
)
from deckfetch.net.http import build_session, http_get
from helpers import FakeResponse, FakeSession, image_response

URL = "https://cards.example/png/front/a/b/abc.png"


class TestSanitizeFilename:
    """Tests for sanitize_filename()."""

    def test_strips_quotes(self):
        assert sanitize_filename('"Bolt.png"') == "Bolt.png"

    def test_replaces_asterisks(self):
        assert sanitize_filename("A*B*.png") == "A(asterisk)B(asterisk).png"


class TestDecodeHeaderValue:
    """Tests for decode_header_value()."""

    def test_ascii_text(self):
        assert decode_header_value('attachment; filename="a.png"') == (
            'attachment; filename="a.png"'
        )

    def test_tab_allowed(self):
        assert decode_header_value("a\tb") == "a\tb"

    def test_ascii_bytes(self):
        assert decode_header_value(b"inline") == "inline"

    @pytest.mark.parametrize(
        "value",
        [
            b"attachment; filename=\xe9t\xe9.png",
            "attachment; filename=\xe9t\xe9.png",
            "attachment; filename=日.png",
            b"a\x00b",
        ],
    )
    def test_non_text_raises(self, value):
        with pytest.raises(UnicodeError):
            decode_header_value(value)


class TestParseContentDisposition:
    """Tests for parse_content_disposition()."""

    def test_takes_segment_after_first_marker(self):
        value = 'attachment; filename="Bolt.png"'

        assert parse_content_disposition(value, "front.jpg") == '"Bolt.png"'

    def test_keeps_trailing_parameters(self):
        """Only the literal ``filename=`` marker is understood."""
        value = "attachment; filename=a.png; size=10"

        assert parse_content_disposition(value, "front.jpg") == "a.png; size=10"

    def test_stops_at_second_marker(self):
        value = "filename=a.png filename=b.png"

        assert parse_content_disposition(value, "front.jpg") == "a.png "

    def test_undecodable_uses_default(self):
        value = "attachment; filename=\xe9.png"

        assert parse_content_disposition(value, "back.jpg") == "back.jpg"

    def test_no_marker_is_invalid(self):
        headers = {"content-disposition": "inline", "content-type": "image/png"}

        with pytest.raises(InvalidHeaderError) as excinfo:
            parse_content_disposition("inline", "front.jpg", headers)

        assert excinfo.value.header == "content-disposition"
        assert excinfo.value.headers == headers
        assert "content-type: image/png" in str(excinfo.value)


class TestResolveFilename:
    """Tests for resolve_filename()."""

    def test_quoted_filename_with_asterisk(self):
        headers = {"content-disposition": 'attachment; filename="Foo*.png"'}

        assert resolve_filename(headers, "front.jpg") == "Foo(asterisk).png"

    def test_header_lookup_is_case_insensitive(self):
        headers = {"Content-Disposition": "attachment; filename=Bolt.png"}

        assert resolve_filename(headers, "front.jpg") == "Bolt.png"

    def test_missing_header(self):
        headers = {"content-type": "image/png", "content-length": "10"}

        with pytest.raises(MissingHeaderError) as excinfo:
            resolve_filename(headers, "front.jpg")

        assert excinfo.value.headers == headers
        assert "content-length: 10" in str(excinfo.value)

    def test_undecodable_header_falls_back_to_default(self):
        headers = {"content-disposition": "attachment; filename=\xff\xfe.png"}

        assert resolve_filename(headers, "back.jpg") == "back.jpg"

    def test_header_errors_are_network_errors(self):
        assert issubclass(MissingHeaderError, HeaderError)
        assert issubclass(InvalidHeaderError, NetworkError)


class TestResolveAndFetch:
    """Tests for resolve_and_fetch()."""

    def test_returns_filename_and_bytes(self):
        session = FakeSession({URL: image_response("Bolt*.png", b"PNGDATA")})

        asset = resolve_and_fetch(URL, "front.jpg", session)

        assert asset == FetchedAsset(URL, "Bolt(asterisk).png", b"PNGDATA")
        assert asset.size == 7
        assert session.requests == [URL]

    def test_missing_header_fails(self):
        session = FakeSession({URL: FakeResponse(b"x", {"content-type": "image/png"})})

        with pytest.raises(MissingHeaderError):
            resolve_and_fetch(URL, "front.jpg", session)

    def test_invalid_header_fails(self):
        response = FakeResponse(b"x", {"content-disposition": "inline"})
        session = FakeSession({URL: response})

        with pytest.raises(InvalidHeaderError):
            resolve_and_fetch(URL, "front.jpg", session)

    def test_undecodable_header_uses_side_default(self):
        headers = {"content-disposition": "attachment; filename=\xe9"}
        response = FakeResponse(b"x", headers)
        session = FakeSession({URL: response})

        asset = resolve_and_fetch(URL, CardSide.BACK.default_filename, session)

        assert asset.filename == "back.jpg"

    def test_http_error_status(self):
        session = FakeSession({URL: FakeResponse(b"", status_code=404)})

        with pytest.raises(NetworkError) as excinfo:
            resolve_and_fetch(URL, "front.jpg", session)

        assert excinfo.value.url == URL

    def test_connection_error(self):
        session = FakeSession({})

        with pytest.raises(NetworkError, match="Request failed"):
            resolve_and_fetch(URL, "front.jpg", session)

    def test_creates_session_when_none_given(self):
        session = FakeSession({URL: image_response("a.png")})

        with patch(
            "deckfetch.fetch.asset_resolver.build_session", return_value=session
        ):
            asset = resolve_and_fetch(URL, "front.jpg")

        assert asset.filename == "a.png"
        assert session.closed is True


class TestCardSide:
    """Tests for the CardSide enum."""

    def test_default_filenames(self):
        assert CardSide.FRONT.default_filename == "front.jpg"
        assert CardSide.BACK.default_filename == "back.jpg"

    def test_front_then_back(self):
        assert list(CardSide) == [CardSide.FRONT, CardSide.BACK]

    def test_url_for(self):
        card = Card("Delver", front_url="f", back_url=None)

        assert CardSide.FRONT.url_for(card) == "f"
        assert CardSide.BACK.url_for(card) is None


class TestHttpGet:
    """Tests for the HTTP helpers."""

    def test_build_session_sets_user_agent(self):
        session = build_session(user_agent="tester/1.0")

        assert session.headers["User-Agent"] == "tester/1.0"
        assert session.headers["Accept"] == "*/*"
        session.close()

    def test_passes_timeout(self):
        session = Mock()
        session.get.return_value = FakeResponse(b"ok")

        http_get(session, URL, timeout=5)

        session.get.assert_called_once_with(URL, timeout=5)

    def test_timeout_is_network_error(self):
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(NetworkError, match="Timed out"):
            http_get(session, URL, timeout=1)
