"""
Tests for observed-URL classification and metadata collection.
"""

import pytest

from webmap_harvester.capture.collector import (
    MetadataCollector,
    RequestClassifier,
    RequestType,
    extract_access_token,
)

TILEJSON_URL = "https://api.mapbox.com/v4/mapbox.mapbox-streets-v8.json?secure&access_token=pk.first"
GLYPH_URL = (
    "https://api.mapbox.com/fonts/v1/propublica/"
    "DIN%20Offc%20Pro%20Medium,Arial%20Unicode%20MS%20Regular/0-255.pbf?access_token=pk.first"
)
TILE_URL = "https://a.tiles.mapbox.com/v4/mapbox.mapbox-streets-v8/14/4823/6160.vector.pbf?access_token=pk.first"


@pytest.mark.parametrize("url,expected", [
    (TILEJSON_URL, RequestType.TILESET_METADATA),
    ("https://example.com/data/tiles.json", RequestType.TILESET_METADATA),
    (GLYPH_URL, RequestType.GLYPH),
    ("https://tiles.example.com/glyphs/Noto%20Sans/256-511.pbf", RequestType.GLYPH),
    (TILE_URL, RequestType.OTHER),
    ("https://example.com/app.js", RequestType.OTHER),
    ("https://example.com/page?format=.json", RequestType.OTHER),
])
def test_classification(url, expected):
    """URLs are classified by path, not query string."""
    assert RequestClassifier().classify(url) == expected


def test_extract_access_token():
    """Everything after access_token= is the token."""
    assert extract_access_token(TILEJSON_URL) == "pk.first"
    assert extract_access_token("https://example.com/app.js") == ""
    assert extract_access_token("https://x/a.json?access_token=") == ""


def test_collect_splits_by_type():
    """Metadata and glyph URLs are gathered separately, in arrival order."""
    second_json = "https://api.mapbox.com/v4/propublica.abc.json?secure"
    collected = MetadataCollector().collect([
        "https://example.com/index.html",
        TILEJSON_URL,
        GLYPH_URL,
        TILE_URL,
        second_json,
    ])

    assert collected.metadata_urls == [TILEJSON_URL, second_json]
    assert collected.font_shard_urls == [GLYPH_URL]
    assert collected.observed_count == 5


def test_first_credential_wins():
    """Later tokens never replace the first non-empty one."""
    collected = MetadataCollector().collect([
        "https://example.com/index.html",
        "https://x/a.json?access_token=",
        "https://x/b.json?access_token=pk.first",
        "https://x/c.json?access_token=pk.second",
    ])
    assert collected.credential == "pk.first"


def test_no_credential_is_valid():
    """Pages that embed no token still collect."""
    collected = MetadataCollector().collect(["https://x/tiles.json"])
    assert collected.credential == ""
    assert collected.metadata_urls == ["https://x/tiles.json"]


def test_duplicates_collected_once():
    """The same request observed twice is enumerated once."""
    collected = MetadataCollector().collect([GLYPH_URL, GLYPH_URL, TILEJSON_URL, TILEJSON_URL])
    assert collected.font_shard_urls == [GLYPH_URL]
    assert collected.metadata_urls == [TILEJSON_URL]


def test_collectors_do_not_share_state():
    """Each run gets its own collector."""
    MetadataCollector().collect([TILEJSON_URL])
    assert MetadataCollector().collect([]).metadata_urls == []
