"""
Browser page collaborator using Pyppeteer.

Owns the page lifecycle the harvester depends on:
1. Enabling request interception and recording every request URL
2. Navigating and waiting for the network to settle
3. Evaluating functions inside the page context (used for in-page fetches)
4. Optionally zooming the map so more glyph requests surface
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from pyppeteer import launch
from pyppeteer.browser import Browser
from pyppeteer.errors import PyppeteerError
from pyppeteer.page import Page

from ..config import BrowserOptions
from ..errors import RequestFailure


# JavaScript that zooms the first map canvas by one wheel notch
ZOOM_IN_SCRIPT = """
() => {
    const canvas = document.querySelector('.mapboxgl-canvas, .maplibregl-canvas, canvas');
    if (!canvas) {
        return false;
    }
    const rect = canvas.getBoundingClientRect();
    canvas.dispatchEvent(new WheelEvent('wheel', {
        deltaY: -240,
        deltaMode: 0,
        clientX: rect.left + rect.width / 2,
        clientY: rect.top + rect.height / 2,
        bubbles: true,
        cancelable: true,
    }));
    return true;
}
"""


class BrowserPage:
    """A single Pyppeteer page with network capture."""

    def __init__(self, page: Page, options: BrowserOptions):
        self.page = page
        self.options = options
        self.observed_urls: list[str] = []
        self._capturing = False

    async def enable_capture(self) -> None:
        """Start recording request URLs. Must be called before load()."""
        if self._capturing:
            return
        await self.page.setRequestInterception(True)

        async def on_request(request):
            """Record and continue requests."""
            if self._capturing:
                self.observed_urls.append(request.url)
            await request.continue_()

        self.page.on('request', lambda req: asyncio.ensure_future(on_request(req)))
        self._capturing = True

    def freeze(self) -> tuple[str, ...]:
        """Stop recording and return everything observed so far."""
        self._capturing = False
        return tuple(self.observed_urls)

    async def load(self, url: str, data: Optional[dict] = None) -> None:
        """
        Navigate to the map page and wait for it to settle.

        ``data`` is accepted for crawler compatibility; extra headers under
        ``data['headers']`` are applied before navigation.
        """
        if data and data.get('headers'):
            await self.page.setExtraHTTPHeaders(data['headers'])

        print(f"[Capture] Navigating to {url}...", flush=True)
        await self.page.goto(url, {
            'waitUntil': self.options.wait_until,
            'timeout': int(self.options.timeout * 1000),
        })

        title = await self.page.title()
        print(f"[Capture] Page loaded: {title}", flush=True)

        if self.options.settle_delay > 0:
            print(f"[Capture] Waiting {self.options.settle_delay}s for map initialization...", flush=True)
            await asyncio.sleep(self.options.settle_delay)

        print(f"[Capture] Requests during load: {len(self.observed_urls)}", flush=True)

    async def interact(self) -> None:
        """Zoom the map in ``zoom_steps`` notches to surface more glyph requests."""
        for step in range(self.options.zoom_steps):
            zoomed = await self.page.evaluate(ZOOM_IN_SCRIPT)
            if not zoomed:
                print("[Capture] No map canvas found to zoom", flush=True)
                return
            print(f"[Capture] Zoom step {step + 1}/{self.options.zoom_steps}", flush=True)
            await asyncio.sleep(1.0)

    async def evaluate(self, fn: str, params: Any = None) -> Any:
        """
        Run a JavaScript function inside the page and return its result.

        Evaluation failures surface as RequestFailure so a dispatcher can
        record them and move on.
        """
        try:
            if params is None:
                return await self.page.evaluate(fn)
            return await self.page.evaluate(fn, params)
        except PyppeteerError as e:
            url = params.get('url', '') if isinstance(params, dict) else ''
            raise RequestFailure(url, str(e)) from e


@asynccontextmanager
async def launch_page(options: BrowserOptions) -> AsyncIterator[BrowserPage]:
    """Launch a headless browser and yield a configured BrowserPage."""
    browser: Optional[Browser] = None
    launch_kwargs = {
        'headless': options.headless,
        'args': [
            '--no-sandbox',
            '--disable-setuid-sandbox',
            '--disable-dev-shm-usage',
            '--disable-gpu',
        ],
        'handleSIGINT': False,
        'handleSIGTERM': False,
        'handleSIGHUP': False,
    }
    if options.executable_path:
        launch_kwargs['executablePath'] = options.executable_path

    try:
        print(f"[Capture] Launching browser (headless={options.headless})...", flush=True)
        browser = await launch(**launch_kwargs)

        page: Page = await browser.newPage()

        # Log console messages for debugging
        page.on('console', lambda msg: print(f"[Browser Console] {msg.text}", flush=True))

        await page.setViewport({
            'width': options.viewport_width,
            'height': options.viewport_height,
        })

        # Set a reasonable user agent
        await page.setUserAgent(
            'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
            '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
        )

        yield BrowserPage(page, options)

    finally:
        if browser:
            await browser.close()
