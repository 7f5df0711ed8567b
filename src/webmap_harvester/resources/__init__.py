"""Glyph (font shard) enumeration."""

from .glyphs import FontShardFamily, dedupe_families, expand, expand_all, families_from_config
