"""
Tests for structural tile URL templates.
"""

from webmap_harvester.config import DEFAULT_TILE_PATH
from webmap_harvester.tiles.coverage import TileCoord
from webmap_harvester.tiles.templates import Placeholder, TileUrlTemplate


def test_parse_and_expand():
    """Placeholders are replaced by the tile coordinate."""
    template = TileUrlTemplate.parse("https://x/{z}/{x}/{y}.pbf")
    assert template.placeholders == {Placeholder.Z, Placeholder.X, Placeholder.Y}
    assert template.expand(TileCoord(z=3, x=5, y=2)) == "https://x/3/5/2.pbf"


def test_unknown_tokens_are_literal():
    """Only x, y and z are substituted."""
    template = TileUrlTemplate.parse("https://h/{prefix}/{z}/{x}/{y}{ratio}.png")
    assert template.expand(TileCoord(z=1, x=0, y=1)) == "https://h/{prefix}/1/0/1{ratio}.png"


def test_str_round_trip():
    """Rendering a parsed template gives back the original string."""
    raw = "https://a.tiles.mapbox.com/v4/mapbox.streets/{z}/{x}/{y}.vector.pbf?access_token=pk.1"
    assert str(TileUrlTemplate.parse(raw)) == raw


def test_template_without_placeholders():
    """A template with nothing to substitute expands to itself."""
    template = TileUrlTemplate.parse("https://h/static.png")
    assert template.placeholders == set()
    assert template.expand(TileCoord(z=0, x=0, y=0)) == "https://h/static.png"


def test_for_host_interpolates_path():
    """Static tilesets are built by host plus interpolated path."""
    template = TileUrlTemplate.for_host("a.tiles.mapbox.com", DEFAULT_TILE_PATH, tileset="mapbox.streets")
    assert template.expand(TileCoord(z=1, x=2, y=3)) == (
        "https://a.tiles.mapbox.com/v4/mapbox.streets/1/2/3.vector.pbf"
    )


def test_with_query_param():
    """Query parameters are appended with the right separator."""
    plain = TileUrlTemplate.parse("https://h/{z}/{x}/{y}.pbf")
    assert str(plain.with_query_param("access_token", "tok")) == "https://h/{z}/{x}/{y}.pbf?access_token=tok"

    with_query = TileUrlTemplate.parse("https://h/{z}/{x}/{y}.pbf?style=1")
    assert str(with_query.with_query_param("access_token", "tok")) == (
        "https://h/{z}/{x}/{y}.pbf?style=1&access_token=tok"
    )

    ends_in_placeholder = TileUrlTemplate.parse("https://h/{z}/{x}/{y}")
    expanded = ends_in_placeholder.with_query_param("access_token", "tok").expand(TileCoord(z=1, x=1, y=0))
    assert expanded == "https://h/1/1/0?access_token=tok"


def test_with_empty_query_value_is_noop():
    """An empty credential leaves the template untouched."""
    template = TileUrlTemplate.parse("https://h/{z}/{x}/{y}.pbf")
    assert template.with_query_param("access_token", "") is template
