"""
Exceptions raised while harvesting map resources.

Per-item failures (a bad metadata document, a request with no response) are
recorded and skipped; only collaborator faults escape a harvest run.
"""


class HarvesterError(Exception):
    """Base class for webmap-harvester errors."""
    pass


class MetadataParseError(HarvesterError):
    """A tileset metadata document could not be turned into a descriptor."""

    def __init__(self, source_url: str, reason: str):
        self.source_url = source_url
        self.reason = reason
        super().__init__(f"Unable to parse metadata for {source_url}: {reason}")


class ConfigurationGap(MetadataParseError):
    """A statically configured tileset is missing bounds or zoom range."""

    def __init__(self, tileset: str, reason: str):
        self.source_url = tileset
        self.reason = reason
        HarvesterError.__init__(self, f"Tileset {tileset} is not enumerable: {reason}")


class RequestFailure(HarvesterError):
    """A dispatched request produced no HTTP response at all."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request failed for {url}: {reason}")


class ConfigError(HarvesterError):
    """The configuration file is unreadable or malformed."""
    pass
