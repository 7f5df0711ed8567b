"""
Fetch tileset metadata (TileJSON) documents observed during page load.
"""

import aiohttp
import asyncio
import json

from .descriptor import DescriptorResult, parse_tilejson
from ..errors import MetadataParseError


class MetadataFetcher:
    """Fetch and parse TileJSON documents."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch(self, url: str) -> dict | None:
        """Fetch a single metadata document, or None if it can't be read."""
        print(f"[Metadata] Getting JSON for {url}", flush=True)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        print(f"[Metadata] Failed to fetch {url}: {response.status}", flush=True)
                        return None

                    content = await response.read()

                    # Covers JSONDecodeError and UnicodeDecodeError alike
                    try:
                        return json.loads(content)
                    except ValueError as e:
                        print(f"[Metadata] Invalid JSON from {url}: {e}", flush=True)
                        return None
        except asyncio.TimeoutError:
            print(f"[Metadata] Timeout fetching {url}", flush=True)
            return None
        except aiohttp.ClientError as e:
            print(f"[Metadata] Error fetching {url}: {e}", flush=True)
            return None

    async def fetch_descriptors(self, urls: list[str]) -> list[DescriptorResult]:
        """
        Fetch each URL in turn and parse it into a descriptor result.

        Unreachable documents become failed results like unparseable ones.
        """
        results = []
        for url in urls:
            document = await self.fetch(url)
            if document is None:
                results.append(DescriptorResult(
                    source=url,
                    error=MetadataParseError(url, "document could not be fetched"),
                ))
                continue
            results.append(parse_tilejson(document, url))
        return results
