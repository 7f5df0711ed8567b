"""
Geographic coordinates and slippy-map tile projection.

Key requirements:
- Convert longitude/latitude + zoom to XYZ tile indices (spherical Web Mercator)
- Clamp indices to the tile grid, so world bounds
  (lon 180, lat ±90) stay inside [0, 2^zoom - 1]
"""

from dataclasses import dataclass
import math

# Latitude where spherical Web Mercator becomes square; beyond it there are no tiles.
MAX_LATITUDE = 85.0511287798066


@dataclass(frozen=True)
class TileCoord:
    """A single tile's coordinates."""
    z: int
    x: int
    y: int


@dataclass(frozen=True)
class GeoBounds:
    """Geographic bounding box in WGS84."""
    west: float   # min longitude
    south: float  # min latitude
    east: float   # max longitude
    north: float  # max latitude

    @classmethod
    def from_list(cls, values) -> 'GeoBounds':
        """Build from a TileJSON-style [west, south, east, north] list."""
        west, south, east, north = values
        return cls(
            west=float(west),
            south=float(south),
            east=float(east),
            north=float(north),
        )

    @property
    def center(self) -> tuple[float, float]:
        """Return (longitude, latitude) of center."""
        return (
            (self.west + self.east) / 2,
            (self.south + self.north) / 2
        )


class TileMath:
    """Utilities for tile coordinate calculations."""

    @staticmethod
    def lon_to_tile_x(lon: float, zoom: int) -> int:
        """Convert longitude to tile X coordinate, clamped to the grid."""
        max_tile = (1 << zoom) - 1
        x = math.floor((lon + 180.0) / 360.0 * (1 << zoom))
        return max(0, min(max_tile, x))

    @staticmethod
    def lat_to_tile_y(lat: float, zoom: int) -> int:
        """
        Convert latitude to tile Y coordinate (Y increases southward).

        Latitudes beyond MAX_LATITUDE (the poles included) are pulled back
        to it first, so they land on the first or last tile row.
        """
        lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
        lat_rad = math.radians(lat)
        n = 1 << zoom
        y = math.floor(
            (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * n
        )
        return max(0, min(n - 1, y))

    @classmethod
    def to_tile(cls, lon: float, lat: float, zoom: int) -> TileCoord:
        """Project a (longitude, latitude) sample at a zoom level."""
        return TileCoord(
            z=zoom,
            x=cls.lon_to_tile_x(lon, zoom),
            y=cls.lat_to_tile_y(lat, zoom),
        )
