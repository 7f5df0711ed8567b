"""
Glyph (font shard) enumeration.

Map styles load glyphs lazily, one 256-codepoint range at a time, so a page
load only ever requests a few ranges per font stack. Observed glyph URLs
are reduced to families (the URL with its range erased) and every family is
expanded back to the full set of ranges:

    .../fonts/v1/{owner}/{fontstack}/0-255.pbf
    .../fonts/v1/{owner}/{fontstack}/256-511.pbf
    ...
    .../fonts/v1/{owner}/{fontstack}/65280-65535.pbf
"""

from dataclasses import dataclass
from typing import Iterable, Iterator
from urllib.parse import quote
import re

GLYPH_RANGE_SIZE = 256
GLYPH_MAX_START = 65280

# Pattern to match the {start}-{end}.pbf range segment
RANGE_PATTERN = re.compile(r'(?<![\d])(\d+)-(\d+)(\.pbf)')


@dataclass(frozen=True)
class FontShardFamily:
    """One font stack's glyph URL with the codepoint range left open."""
    prefix: str
    suffix: str = ''
    literal: bool = False

    @classmethod
    def from_url(cls, url: str) -> 'FontShardFamily':
        """
        Split a glyph URL around its range segment.

        A URL without a recognizable range becomes a literal family that
        expands to itself only.
        """
        matches = list(RANGE_PATTERN.finditer(url))
        if not matches:
            return cls(prefix=url, literal=True)
        match = matches[-1]
        return cls(prefix=url[:match.start()], suffix=match.group(3) + url[match.end():])

    @property
    def template(self) -> str:
        if self.literal:
            return self.prefix
        return f"{self.prefix}{{start}}-{{end}}{self.suffix}"

    def url_for(self, start: int) -> str:
        """URL of the shard beginning at ``start``."""
        return f"{self.prefix}{start}-{start + GLYPH_RANGE_SIZE - 1}{self.suffix}"


def dedupe_families(urls: Iterable[str]) -> list[FontShardFamily]:
    """Collapse glyph URLs into distinct families, first occurrence first."""
    families: dict[str, FontShardFamily] = {}
    for url in urls:
        family = FontShardFamily.from_url(url)
        families.setdefault(family.template, family)
    return list(families.values())


def expand(family: FontShardFamily) -> Iterator[str]:
    """Yield every shard URL of a family, 0-255 through 65280-65535."""
    if family.literal:
        yield family.prefix
        return
    for start in range(0, GLYPH_MAX_START + 1, GLYPH_RANGE_SIZE):
        yield family.url_for(start)


def expand_all(families: Iterable[FontShardFamily]) -> Iterator[str]:
    for family in families:
        yield from expand(family)


def families_from_config(
    font_stacks: Iterable[str],
    glyphs_url: str,
    owner: str = 'mapbox',
    credential: str = '',
) -> list[FontShardFamily]:
    """
    Build families for statically configured font stacks.

    ``glyphs_url`` follows the style-spec form with ``{fontstack}`` and
    ``{range}`` placeholders (``{owner}`` is optional). Font stack names are
    percent-encoded, commas kept, as map libraries request them.
    """
    families = []
    for stack in font_stacks:
        url = (
            glyphs_url
            .replace('{owner}', owner)
            .replace('{fontstack}', quote(stack, safe=','))
        )
        prefix, _, suffix = url.partition('{range}')
        suffix = suffix.removeprefix('.pbf')
        if credential:
            separator = '&' if '?' in url else '?'
            suffix = f"{suffix}{separator}access_token={credential}"
        families.append(FontShardFamily(prefix=prefix, suffix='.pbf' + suffix))
    return families
