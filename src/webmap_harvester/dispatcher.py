"""
Rate-limited request dispatch.

Requests go out strictly one at a time: issue, await, record, sleep the
fixed delay, repeat. The upstream host enforces a request-rate ceiling
(Mapbox asks for fewer than 100,000 calls/min), and this loop is how the
harvester stays under it.

Requests run through an executor so they can be issued from inside the
browser page and reuse its cookies, headers and session authorization.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol

from .errors import RequestFailure


class OutcomeKind(str, Enum):
    STATUS = "status"    # an HTTP response arrived, whatever its code
    FAILURE = "failure"  # no response at all


@dataclass
class FetchOutcome:
    """Result of one dispatched request."""
    url: str
    status: int | None = None
    error: str | None = None

    @property
    def kind(self) -> OutcomeKind:
        return OutcomeKind.FAILURE if self.status is None else OutcomeKind.STATUS

    @property
    def success(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    def __str__(self) -> str:
        if self.status is None:
            return f"{self.url} FAILED: {self.error}"
        return f"{self.url} {self.status}"

    def to_dict(self) -> dict:
        return {'url': self.url, 'status': self.status, 'error': self.error}


class FetchExecutor(Protocol):
    """Issues a single request and returns its HTTP status."""

    async def fetch_status(self, url: str) -> int:
        """Raise RequestFailure if no HTTP response is received."""
        ...


# JavaScript run inside the page for each request
PAGE_FETCH_SCRIPT = """
(params) => {
    return fetch(params.url)
        .then(res => ({ status: res.status }))
        .catch(err => ({ error: String(err) }));
}
"""


class PageFetchExecutor:
    """Run fetch() inside a browser page through its evaluate() hook."""

    def __init__(self, page):
        self.page = page

    async def fetch_status(self, url: str) -> int:
        result = await self.page.evaluate(PAGE_FETCH_SCRIPT, {'url': url})
        if not isinstance(result, dict):
            raise RequestFailure(url, f"unexpected evaluation result {result!r}")
        if result.get('status') is None:
            raise RequestFailure(url, result.get('error') or "no response")
        return int(result['status'])


class RateLimitedDispatcher:
    """Dispatch requests sequentially with a fixed delay between them."""

    def __init__(
        self,
        executor: FetchExecutor,
        delay_ms: int = 50,
        on_outcome: Callable[[FetchOutcome], None] | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            executor: Issues each request (normally a PageFetchExecutor)
            delay_ms: Wait after every request, in milliseconds
            on_outcome: Called with each outcome as soon as it is recorded
        """
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        self.executor = executor
        self.delay_ms = delay_ms
        self.on_outcome = on_outcome or self._print_outcome
        self.request_count = 0

    @staticmethod
    def _print_outcome(outcome: FetchOutcome) -> None:
        print(f"[Dispatch] {outcome}", flush=True)

    async def dispatch_one(self, url: str) -> FetchOutcome:
        """Issue one request and record its outcome."""
        self.request_count += 1
        try:
            status = await self.executor.fetch_status(url)
            outcome = FetchOutcome(url=url, status=status)
        except RequestFailure as e:
            outcome = FetchOutcome(url=url, error=e.reason)
        self.on_outcome(outcome)
        return outcome

    async def dispatch(self, urls: Iterable[str]) -> list[FetchOutcome]:
        """
        Dispatch every URL in order.

        Non-2xx statuses are recorded like any other; network failures are
        recorded as FAILURE outcomes and the sequence carries on.
        """
        outcomes = []
        for url in urls:
            outcomes.append(await self.dispatch_one(url))
            await asyncio.sleep(self.delay_ms / 1000.0)
        return outcomes
