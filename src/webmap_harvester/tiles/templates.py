"""
Tile URL templates.

A template string such as ``https://a.tiles.mapbox.com/v4/{tileset}/{z}/{x}/{y}.vector.pbf``
is parsed once into literal segments and coordinate placeholders, so
substitution never touches text outside the placeholder positions.
"""

from dataclasses import dataclass
from enum import Enum
import re

from .coverage import TileCoord


class Placeholder(Enum):
    """Coordinate placeholders understood in tile templates."""
    Z = 'z'
    X = 'x'
    Y = 'y'


PLACEHOLDER_PATTERN = re.compile(r'\{([xyz])\}')

Segment = str | Placeholder


@dataclass(frozen=True)
class TileUrlTemplate:
    """A parsed tile URL template."""
    segments: tuple[Segment, ...]

    @classmethod
    def parse(cls, template: str) -> 'TileUrlTemplate':
        """
        Split a template string into literal text and placeholders.

        Only ``{x}``, ``{y}`` and ``{z}`` are placeholders; any other brace
        token (``{ratio}``, ``{prefix}``) is kept as literal text.
        """
        segments: list[Segment] = []
        position = 0
        for match in PLACEHOLDER_PATTERN.finditer(template):
            if match.start() > position:
                segments.append(template[position:match.start()])
            segments.append(Placeholder(match.group(1)))
            position = match.end()
        if position < len(template):
            segments.append(template[position:])
        return cls(segments=tuple(segments))

    @classmethod
    def for_host(cls, host: str, path: str, **path_values: str) -> 'TileUrlTemplate':
        """
        Build a template for one tile-serving host by path interpolation.

        ``path`` may reference named values (``{tileset}``) which are filled
        from ``path_values`` before the coordinate placeholders are parsed.
        """
        interpolated = path
        for key, value in path_values.items():
            interpolated = interpolated.replace('{' + key + '}', value)
        if not interpolated.startswith('/'):
            interpolated = '/' + interpolated
        return cls.parse(f"https://{host}{interpolated}")

    @property
    def placeholders(self) -> set[Placeholder]:
        return {s for s in self.segments if isinstance(s, Placeholder)}

    def expand(self, coord: TileCoord) -> str:
        """Substitute a tile coordinate into the template."""
        values = {
            Placeholder.Z: coord.z,
            Placeholder.X: coord.x,
            Placeholder.Y: coord.y,
        }
        return ''.join(
            str(values[s]) if isinstance(s, Placeholder) else s
            for s in self.segments
        )

    def with_query_param(self, key: str, value: str) -> 'TileUrlTemplate':
        """Return a copy with ``key=value`` appended to the query string."""
        if not value:
            return self
        last = self.segments[-1] if self.segments else ''
        joined = ''.join(s for s in self.segments if isinstance(s, str))
        separator = '&' if '?' in joined else '?'
        if isinstance(last, str):
            return TileUrlTemplate(self.segments[:-1] + (f"{last}{separator}{key}={value}",))
        return TileUrlTemplate(self.segments + (f"{separator}{key}={value}",))

    def __str__(self) -> str:
        return ''.join(
            '{' + s.value + '}' if isinstance(s, Placeholder) else s
            for s in self.segments
        )
