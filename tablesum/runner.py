"""Run driver: visits every page, sums page subtotals into a grand total.

Each page is fetched through a ``CellTextSource`` under a per-page time
budget. A page whose fetch fails is reported and contributes zero; the run
always continues with the remaining pages.

Pages are processed one at a time by default. With
``max_concurrent_pages > 1`` fetches overlap, bounded by a semaphore, while
the grand total is still summed in one place, in URL order, from completed
page results.
"""

import asyncio
import time
from collections.abc import Sequence

from pydantic import BaseModel

from config.settings import GlobalConfig, get_config
from tablesum.accumulator import PageTally, tally_page
from tablesum.exceptions import PageTimeoutError, TableSumError
from tablesum.logger import get_logger
from tablesum.source import CellTextSource

log = get_logger(__name__)

BANNER = "=" * 38


class PageResult(PageTally):
    """Outcome of processing one page.

    Carries the page's PageTally counters; they stay zero when the fetch
    failed.

    Attributes:
        url: Page identifier.
        error: Failure message, or None if the page was processed.
        elapsed_sec: Wall-clock time spent on the page.
    """

    url: str
    error: str | None = None
    elapsed_sec: float = 0.0

    @property
    def succeeded(self) -> bool:
        """True when the page's cell texts were fetched."""
        return self.error is None


class RunResult(BaseModel):
    """Ordered page results and the grand total of a run."""

    pages: list[PageResult]
    grand_total: float = 0.0

    @property
    def pages_attempted(self) -> int:
        return len(self.pages)

    @property
    def pages_succeeded(self) -> int:
        return sum(1 for page in self.pages if page.succeeded)

    @property
    def pages_failed(self) -> int:
        return self.pages_attempted - self.pages_succeeded

    @property
    def failed_urls(self) -> list[str]:
        return [page.url for page in self.pages if not page.succeeded]


class TableSumRunner:
    """Drives a run over an ordered list of page URLs.

    Attributes:
        source: Cell text source used to fetch each page.
        config: GlobalConfig with timeouts and concurrency.

    Example:
        runner = TableSumRunner(StaticCellSource({"https://a": ["10", "20"]}))
        result = await runner.run(["https://a"])
        assert result.grand_total == 30
    """

    def __init__(
        self,
        source: CellTextSource,
        config: GlobalConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.source = source
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent_pages)

    async def run(self, urls: Sequence[str] | None = None) -> RunResult:
        """Process every URL and return the run's results.

        Args:
            urls: Pages to visit; defaults to ``config.page_urls``.

        Returns:
            RunResult with one PageResult per URL, in input order.
        """
        urls = list(self.config.page_urls if urls is None else urls)

        log.info(
            "Starting table scraping for {count} URLs",
            count=len(urls),
            source=self.source.name,
            max_concurrent_pages=self.config.max_concurrent_pages,
        )

        if self.config.max_concurrent_pages == 1:
            pages = [await self.process_page(url) for url in urls]
        else:
            pages = list(await asyncio.gather(*(self.process_page(url) for url in urls)))

        grand_total = 0.0
        for page in pages:
            grand_total += page.subtotal

        result = RunResult(pages=pages, grand_total=grand_total)
        self._report(result)
        return result

    async def process_page(self, url: str) -> PageResult:
        """Fetch and sum a single page. Never raises for fetch failures."""
        async with self._semaphore:
            log.info("Visiting {url}", url=url)
            started = time.perf_counter()

            try:
                cell_texts = await asyncio.wait_for(
                    self.source.fetch_cell_texts(url),
                    timeout=self.config.page_timeout_sec,
                )
            except TableSumError as exc:
                return self._failed(url, exc.message, started)
            except TimeoutError:
                timeout = PageTimeoutError(url=url, timeout_sec=self.config.page_timeout_sec)
                return self._failed(url, timeout.message, started)
            except Exception as exc:
                return self._failed(url, str(exc) or type(exc).__name__, started)

        tally = tally_page(cell_texts)
        result = PageResult(
            url=url,
            **tally.model_dump(),
            elapsed_sec=time.perf_counter() - started,
        )

        log.info(
            "Page subtotal for {url}: {subtotal}",
            url=url,
            subtotal=result.subtotal,
            cells=result.cells,
            tokens=result.tokens,
            rejected=result.rejected,
        )
        return result

    def _failed(self, url: str, message: str, started: float) -> PageResult:
        log.error("Error processing {url}: {error}", url=url, error=message)
        return PageResult(
            url=url,
            error=message,
            elapsed_sec=time.perf_counter() - started,
        )

    def _report(self, result: RunResult) -> None:
        log.info(BANNER)
        log.info(
            "GRAND TOTAL (sum of all numbers in all tables across pages): {grand_total}",
            grand_total=result.grand_total,
            pages_attempted=result.pages_attempted,
            pages_failed=result.pages_failed,
        )
        log.info(BANNER)

        if result.pages_failed:
            log.warning(
                "{failed} of {attempted} pages failed",
                failed=result.pages_failed,
                attempted=result.pages_attempted,
                failed_urls=result.failed_urls,
            )
