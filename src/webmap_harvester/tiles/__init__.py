"""Tile projection, tileset descriptors and tile URL enumeration."""

from .coverage import GeoBounds, TileCoord, TileMath
from .templates import Placeholder, TileUrlTemplate
from .descriptor import (
    DescriptorResult,
    TilesetDescriptor,
    descriptors_from_config,
    parse_tilejson,
)
from .enumerator import TileSpaceEnumerator, coordinate_samples, zoom_levels

__all__ = [
    'GeoBounds',
    'TileCoord',
    'TileMath',
    'Placeholder',
    'TileUrlTemplate',
    'DescriptorResult',
    'TilesetDescriptor',
    'descriptors_from_config',
    'parse_tilejson',
    'TileSpaceEnumerator',
    'coordinate_samples',
    'zoom_levels',
]
