"""
Harvest session orchestration.

Order of a run:
1. Enable network capture on the page
2. Load the page and let it settle
3. Collect metadata URLs, glyph URLs and the access token
4. Optionally interact with the map (zoom) to surface more glyphs
5. Dispatch every glyph shard, then every tile, through the page
"""

from dataclasses import dataclass, field
from collections import Counter
from typing import Optional

from .capture.collector import CollectedMetadata, MetadataCollector
from .config import HarvestConfig
from .dispatcher import FetchOutcome, PageFetchExecutor, RateLimitedDispatcher
from .resources.glyphs import dedupe_families, expand_all, families_from_config
from .tiles.descriptor import DescriptorResult, descriptors_from_config
from .tiles.enumerator import TileSpaceEnumerator
from .tiles.metadata import MetadataFetcher


@dataclass
class HarvestReport:
    """Everything a harvest run produced."""
    url: str
    credential: str = ""
    observed_count: int = 0
    metadata_urls: list[str] = field(default_factory=list)
    font_families: list[str] = field(default_factory=list)
    font_outcomes: list[FetchOutcome] = field(default_factory=list)
    tile_outcomes: list[FetchOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def outcomes(self) -> list[FetchOutcome]:
        return self.font_outcomes + self.tile_outcomes

    def summary(self) -> dict[str, int]:
        """Count outcomes by status code, with failures under 'failed'."""
        counts = Counter(
            str(o.status) if o.status is not None else 'failed'
            for o in self.outcomes
        )
        return dict(sorted(counts.items()))

    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'observedCount': self.observed_count,
            'metadataUrls': self.metadata_urls,
            'fontFamilies': self.font_families,
            'skipped': self.skipped,
            'summary': self.summary(),
            'fonts': [o.to_dict() for o in self.font_outcomes],
            'tiles': [o.to_dict() for o in self.tile_outcomes],
        }


class HarvestSession:
    """Run one harvest against a page."""

    def __init__(
        self,
        page,
        config: Optional[HarvestConfig] = None,
        metadata_fetcher: Optional[MetadataFetcher] = None,
        dispatcher: Optional[RateLimitedDispatcher] = None,
    ):
        """
        Initialize session.

        Args:
            page: A BrowserPage, or any object with the same
                enable_capture/load/freeze/interact/evaluate methods
            config: Harvest settings (defaults used if omitted)
            metadata_fetcher: Fetches TileJSON documents
            dispatcher: Overrides the page-backed dispatcher
        """
        self.page = page
        self.config = config or HarvestConfig()
        self.metadata_fetcher = metadata_fetcher or MetadataFetcher()
        self.dispatcher = dispatcher or RateLimitedDispatcher(
            PageFetchExecutor(page),
            delay_ms=self.config.delay_ms,
        )
        self.enumerator = TileSpaceEnumerator(
            step=self.config.step_degrees,
            verbose=self.config.verbose,
        )

    async def capture(self, url: str, data: Optional[dict] = None) -> CollectedMetadata:
        """Load the page with capture enabled and collect what it requested."""
        await self.page.enable_capture()
        await self.page.load(url, data)
        if self.config.browser.zoom_steps > 0:
            await self.page.interact()
        observed = self.page.freeze()

        collected = MetadataCollector().collect(observed)
        print(
            f"[Session] Observed {collected.observed_count} requests: "
            f"{len(collected.metadata_urls)} metadata, "
            f"{len(collected.font_shard_urls)} glyph, "
            f"access token {'found' if collected.credential else 'not found'}",
            flush=True,
        )
        return collected

    async def harvest_fonts(self, collected: CollectedMetadata, report: HarvestReport) -> None:
        families = dedupe_families(collected.font_shard_urls)
        known = {f.template for f in families}
        for family in families_from_config(
            self.config.font_stacks,
            self.config.glyphs_url,
            owner=self.config.font_owner,
            credential=collected.credential,
        ):
            if family.template not in known:
                known.add(family.template)
                families.append(family)
        report.font_families = [f.template for f in families]
        if not families:
            print("[Glyphs] No glyph requests observed", flush=True)
            return

        print(f"[Glyphs] Expanding {len(families)} font families", flush=True)
        report.font_outcomes = await self.dispatcher.dispatch(expand_all(families))

    async def harvest_tiles(self, collected: CollectedMetadata, report: HarvestReport) -> None:
        results: list[DescriptorResult] = await self.metadata_fetcher.fetch_descriptors(
            collected.metadata_urls
        )
        results.extend(descriptors_from_config(self.config, collected.credential))

        for result in results:
            if not result.ok:
                report.skipped.append(str(result.error))

        report.tile_outcomes = await self.dispatcher.dispatch(
            self.enumerator.enumerate_all(results)
        )

    async def run(self, url: str, data: Optional[dict] = None) -> HarvestReport:
        """
        Capture the page and dispatch every glyph shard and tile.

        Page-level failures (browser crash, navigation timeout) propagate.
        """
        collected = await self.capture(url, data)

        report = HarvestReport(
            url=url,
            credential=collected.credential,
            observed_count=collected.observed_count,
            metadata_urls=list(collected.metadata_urls),
        )

        if self.config.fetch_fonts:
            await self.harvest_fonts(collected, report)
        if self.config.fetch_tiles:
            await self.harvest_tiles(collected, report)

        print(
            f"[Session] Done: {len(report.font_outcomes)} glyph and "
            f"{len(report.tile_outcomes)} tile requests, "
            f"{len(report.skipped)} tilesets skipped",
            flush=True,
        )
        return report
