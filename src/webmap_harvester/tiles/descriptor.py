"""
Tileset descriptors.

A descriptor is everything needed to enumerate a tileset's address space:
bounds, zoom range and URL templates. Descriptors come from TileJSON
documents observed during page load, or from static configuration.

Parsing never raises: the outcome is a DescriptorResult carrying either a
descriptor or the MetadataParseError explaining why there is none.
"""

from dataclasses import dataclass

from ..errors import ConfigurationGap, MetadataParseError
from .coverage import GeoBounds
from .templates import TileUrlTemplate


@dataclass(frozen=True)
class TilesetDescriptor:
    """Bounds, zoom range and URL templates of one tileset."""
    bounds: GeoBounds
    min_zoom: int
    max_zoom: int
    url_templates: tuple[TileUrlTemplate, ...]
    name: str = ''
    source_url: str = ''


@dataclass
class DescriptorResult:
    """Result of building a descriptor from one source."""
    source: str
    descriptor: TilesetDescriptor | None = None
    error: MetadataParseError | None = None

    @property
    def ok(self) -> bool:
        return self.descriptor is not None


def _require_int(document: dict, key: str, source_url: str) -> int | MetadataParseError:
    value = document.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MetadataParseError(source_url, f"'{key}' missing or not a number")
    return int(value)


def parse_tilejson(document, source_url: str) -> DescriptorResult:
    """
    Build a descriptor from a TileJSON document.

    Requires ``bounds`` (4 numbers), ``minzoom``, ``maxzoom`` and a non-empty
    ``tiles`` list of template strings. Style documents, sprite indexes and
    anything else without these fields come back as failed results.
    """
    if not isinstance(document, dict):
        return DescriptorResult(
            source=source_url,
            error=MetadataParseError(source_url, "document is not a JSON object"),
        )

    raw_bounds = document.get('bounds')
    if not isinstance(raw_bounds, (list, tuple)) or len(raw_bounds) != 4:
        return DescriptorResult(
            source=source_url,
            error=MetadataParseError(source_url, "'bounds' missing or not [west, south, east, north]"),
        )
    try:
        bounds = GeoBounds.from_list(raw_bounds)
    except (TypeError, ValueError):
        return DescriptorResult(
            source=source_url,
            error=MetadataParseError(source_url, "'bounds' contains non-numeric values"),
        )

    min_zoom = _require_int(document, 'minzoom', source_url)
    if isinstance(min_zoom, MetadataParseError):
        return DescriptorResult(source=source_url, error=min_zoom)
    max_zoom = _require_int(document, 'maxzoom', source_url)
    if isinstance(max_zoom, MetadataParseError):
        return DescriptorResult(source=source_url, error=max_zoom)

    tiles = document.get('tiles')
    if (
        not isinstance(tiles, list)
        or not tiles
        or not all(isinstance(t, str) for t in tiles)
    ):
        return DescriptorResult(
            source=source_url,
            error=MetadataParseError(source_url, "'tiles' missing or not a list of URL templates"),
        )

    descriptor = TilesetDescriptor(
        bounds=bounds,
        min_zoom=min_zoom,
        max_zoom=max_zoom,
        url_templates=tuple(TileUrlTemplate.parse(t) for t in tiles),
        name=str(document.get('id') or document.get('name') or ''),
        source_url=source_url,
    )
    return DescriptorResult(source=source_url, descriptor=descriptor)


def descriptors_from_config(config, credential: str = '') -> list[DescriptorResult]:
    """
    Build descriptors for the statically configured tilesets.

    Each tileset id is interpolated into ``config.tile_path`` once per host
    mirror in ``config.tile_hosts``, so every coordinate is requested from
    each mirror. A tileset without bounds or zoom range is reported as a
    ConfigurationGap and produces no URLs.
    """
    results = []
    for tileset in config.tilesets:
        missing = [
            name for name, value in (
                ('bounds', config.bounds),
                ('min_zoom', config.min_zoom),
                ('max_zoom', config.max_zoom),
            )
            if value is None
        ]
        if missing:
            results.append(DescriptorResult(
                source=tileset,
                error=ConfigurationGap(tileset, f"no {', '.join(missing)} configured"),
            ))
            continue

        templates = tuple(
            TileUrlTemplate.for_host(host, config.tile_path, tileset=tileset)
            .with_query_param('access_token', credential)
            for host in config.tile_hosts
        )
        results.append(DescriptorResult(
            source=tileset,
            descriptor=TilesetDescriptor(
                bounds=config.bounds,
                min_zoom=config.min_zoom,
                max_zoom=config.max_zoom,
                url_templates=templates,
                name=tileset,
            ),
        ))
    return results
