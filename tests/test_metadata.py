"""
Tests for turning fetched metadata documents into descriptor results.
"""

import asyncio

import aiohttp
import pytest

from webmap_harvester.tiles.metadata import MetadataFetcher

GOOD_URL = "https://api.mapbox.com/v4/propublica.abc.json"
STYLE_URL = "https://api.mapbox.com/styles/v1/propublica/style.json"
DOWN_URL = "https://api.mapbox.com/v4/unreachable.json"

DOCUMENTS = {
    GOOD_URL: {
        "bounds": [-1, -1, 0, 0],
        "minzoom": 0,
        "maxzoom": 1,
        "tiles": ["https://x/{z}/{x}/{y}.pbf"],
    },
    STYLE_URL: {"version": 8, "layers": []},
}


def test_fetch_descriptors(monkeypatch):
    """Each URL yields one result, in order; failures are kept as errors."""
    fetcher = MetadataFetcher()

    async def fake_fetch(url):
        return DOCUMENTS.get(url)

    monkeypatch.setattr(fetcher, "fetch", fake_fetch)
    results = asyncio.run(fetcher.fetch_descriptors([STYLE_URL, DOWN_URL, GOOD_URL]))

    assert [r.source for r in results] == [STYLE_URL, DOWN_URL, GOOD_URL]
    assert [r.ok for r in results] == [False, False, True]
    assert "could not be fetched" in str(results[1].error)
    assert results[2].descriptor.source_url == GOOD_URL


def test_no_urls():
    """Nothing observed, nothing fetched."""
    assert asyncio.run(MetadataFetcher().fetch_descriptors([])) == []


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self.body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def read(self):
        return self.body


class FakeClientSession:
    """Stands in for aiohttp.ClientSession, answering from a routes dict."""

    routes: dict = {}

    def __init__(self, timeout=None):
        self.timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def get(self, url):
        answer = self.routes[url]
        if isinstance(answer, BaseException):
            raise answer
        status, body = answer
        return FakeResponse(status, body)


@pytest.fixture
def serve(monkeypatch):
    """Route aiohttp requests made by the fetcher to canned answers."""
    def install(routes):
        monkeypatch.setattr(FakeClientSession, "routes", routes)
        monkeypatch.setattr("webmap_harvester.tiles.metadata.aiohttp.ClientSession", FakeClientSession)
    return install


def test_fetch_parses_json(serve):
    """A 200 response with a JSON body becomes a dict."""
    serve({GOOD_URL: (200, b'{"minzoom": 0}')})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) == {"minzoom": 0}


def test_fetch_non_200(serve, capsys):
    """Any status other than 200 gives None and is logged."""
    serve({GOOD_URL: (404, b'{"message": "Not Found"}')})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) is None
    assert "404" in capsys.readouterr().out


def test_fetch_invalid_json(serve, capsys):
    """A body that is not JSON gives None."""
    serve({GOOD_URL: (200, b'<html>rate limited</html>')})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) is None
    assert "Invalid JSON" in capsys.readouterr().out


def test_fetch_invalid_utf8(serve, capsys):
    """Undecodable bytes give None instead of a UnicodeDecodeError."""
    serve({GOOD_URL: (200, b'{"a": "\xff\xfe\xfa"}')})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) is None
    assert "Invalid JSON" in capsys.readouterr().out


def test_fetch_timeout(serve, capsys):
    """A timed-out request gives None."""
    serve({GOOD_URL: asyncio.TimeoutError()})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) is None
    assert "Timeout" in capsys.readouterr().out


def test_fetch_client_error(serve, capsys):
    """Connection-level failures give None."""
    serve({GOOD_URL: aiohttp.ClientConnectionError("connection refused")})
    assert asyncio.run(MetadataFetcher().fetch(GOOD_URL)) is None
    assert "connection refused" in capsys.readouterr().out


def test_fetch_passes_timeout(serve, monkeypatch):
    """The configured timeout is handed to the client session."""
    sessions = []

    class RecordingSession(FakeClientSession):
        def __init__(self, timeout=None):
            super().__init__(timeout)
            sessions.append(self)

    serve({GOOD_URL: (200, b'{}')})
    monkeypatch.setattr("webmap_harvester.tiles.metadata.aiohttp.ClientSession", RecordingSession)
    asyncio.run(MetadataFetcher(timeout=5).fetch(GOOD_URL))

    assert sessions[0].timeout.total == 5


def test_bad_document_does_not_stop_later_ones(serve):
    """One unreadable document fails alone; the rest are still parsed."""
    serve({
        DOWN_URL: (200, b'\xff\xfe\xfa'),
        STYLE_URL: asyncio.TimeoutError(),
        GOOD_URL: (200, b'{"bounds": [-1, -1, 0, 0], "minzoom": 0, "maxzoom": 1,'
                        b' "tiles": ["https://x/{z}/{x}/{y}.pbf"]}'),
    })
    results = asyncio.run(MetadataFetcher().fetch_descriptors([DOWN_URL, STYLE_URL, GOOD_URL]))

    assert [r.ok for r in results] == [False, False, True]
    assert results[2].descriptor.min_zoom == 0
