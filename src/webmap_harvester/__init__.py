"""
WebMap Harvester - Request every tile and glyph a web map can use.

Usage:
    from webmap_harvester import HarvestSession, HarvestConfig, launch_page

    async with launch_page(config.browser) as page:
        report = await HarvestSession(page, config).run("https://example.com/map")
"""

__version__ = "0.1.0"

# Public API exports
from .config import HarvestConfig, BrowserOptions, load_config
from .errors import (
    HarvesterError,
    MetadataParseError,
    ConfigurationGap,
    RequestFailure,
    ConfigError,
)
from .dispatcher import FetchOutcome, OutcomeKind, PageFetchExecutor, RateLimitedDispatcher
from .session import HarvestSession, HarvestReport
from .capture.browser import BrowserPage, launch_page

__all__ = [
    # Version
    "__version__",
    # Configuration
    "HarvestConfig",
    "BrowserOptions",
    "load_config",
    # Harvesting
    "HarvestSession",
    "HarvestReport",
    "RateLimitedDispatcher",
    "PageFetchExecutor",
    "BrowserPage",
    "launch_page",
    # Result types
    "FetchOutcome",
    "OutcomeKind",
    # Exceptions
    "HarvesterError",
    "MetadataParseError",
    "ConfigurationGap",
    "RequestFailure",
    "ConfigError",
]
