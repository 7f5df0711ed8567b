"""
Classify URLs observed during page load and collect harvest metadata.

Key requirements:
- Pick out tileset metadata documents (TileJSON) and glyph requests
- Pull the access token out of whichever URL carries one first
- Keep arrival order; state lives in one collector per run
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable
from urllib.parse import urlparse
import re


class RequestType(Enum):
    TILESET_METADATA = auto()
    GLYPH = auto()
    OTHER = auto()


# Matches everything after the last access_token= key
ACCESS_TOKEN_PATTERN = re.compile(r'^(.*)access_token=(.*)$')


def extract_access_token(url: str) -> str:
    """Return the access token carried by a URL, or an empty string."""
    match = ACCESS_TOKEN_PATTERN.match(url)
    if not match:
        return ""
    return match.group(2)


class RequestClassifier:
    """Classify observed request URLs by their role in harvesting."""

    # Path patterns with associated types, checked in order
    PATTERNS = [
        (re.compile(r'/fonts/.*\.pbf$', re.IGNORECASE), RequestType.GLYPH),
        (re.compile(r'/\d+-\d+\.pbf$', re.IGNORECASE), RequestType.GLYPH),
        (re.compile(r'\.json$', re.IGNORECASE), RequestType.TILESET_METADATA),
    ]

    def classify(self, url: str) -> RequestType:
        """Classify a single URL by its path (query string ignored)."""
        path = urlparse(url).path
        for pattern, req_type in self.PATTERNS:
            if pattern.search(path):
                return req_type
        return RequestType.OTHER


@dataclass
class CollectedMetadata:
    """What a page load revealed."""
    metadata_urls: list[str] = field(default_factory=list)
    font_shard_urls: list[str] = field(default_factory=list)
    credential: str = ""
    observed_count: int = 0


class MetadataCollector:
    """Accumulate classified URLs for a single harvest run."""

    def __init__(self, classifier: RequestClassifier | None = None):
        self.classifier = classifier or RequestClassifier()
        self._result = CollectedMetadata()
        self._seen: set[str] = set()

    def observe(self, url: str) -> RequestType:
        """Record one observed URL and return its classification."""
        self._result.observed_count += 1

        if not self._result.credential:
            self._result.credential = extract_access_token(url)

        req_type = self.classifier.classify(url)
        if url in self._seen:
            return req_type
        self._seen.add(url)

        if req_type is RequestType.TILESET_METADATA:
            self._result.metadata_urls.append(url)
        elif req_type is RequestType.GLYPH:
            self._result.font_shard_urls.append(url)
        return req_type

    def collect(self, urls: Iterable[str]) -> CollectedMetadata:
        """Observe every URL and return the accumulated metadata."""
        for url in tuple(urls):
            self.observe(url)
        return self._result

    @property
    def result(self) -> CollectedMetadata:
        return self._result
