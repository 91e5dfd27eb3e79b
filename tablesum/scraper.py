"""Browser-backed cell text source.

Loads each page in a fresh Playwright page, gives client-side rendering a
moment to finish, then reads the text of every table cell. Pages without
``<table>`` markup are retried against ARIA grid cells.
"""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from config.settings import GlobalConfig, get_config
from tablesum.browser import BrowserManager
from tablesum.exceptions import ExtractionError
from tablesum.logger import get_logger
from tablesum.source import CellTextSource

CELL_TEXT_SCRIPT = "nodes => nodes.map(n => n.innerText || n.textContent || '')"


class PlaywrightCellSource(CellTextSource):
    """Reads table cell texts from live pages.

    Attributes:
        browser: Initialized BrowserManager.
        config: GlobalConfig with selectors and timing.

    Example:
        async with BrowserManager.create() as browser:
            source = PlaywrightCellSource(browser)
            texts = await source.fetch_cell_texts("https://example.com/seed44")
    """

    def __init__(
        self,
        browser: BrowserManager,
        config: GlobalConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.browser = browser

    @property
    def name(self) -> str:
        """Return source name for logging."""
        return "PlaywrightCellSource"

    async def fetch_cell_texts(self, url: str) -> list[str]:
        """Navigate to ``url`` and return the text of every table cell.

        Raises:
            NavigationError: If the page cannot be loaded.
            ExtractionError: If the cell texts cannot be read.
        """
        page_log = get_logger(__name__, url=url)
        page = await self.browser.new_page()
        try:
            await self.browser.navigate(page, url, wait_until=self.config.wait_until)

            if self.config.settle_delay_ms > 0:
                await page.wait_for_timeout(self.config.settle_delay_ms)

            texts = await self._collect(page, url, self.config.cell_selector)
            if not texts:
                page_log.debug(
                    "No table cells found, trying grid cells",
                    selector=self.config.fallback_cell_selector,
                )
                texts = await self._collect(page, url, self.config.fallback_cell_selector)

            page_log.debug("Cell texts collected", cells=len(texts))
            return texts

        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                page_log.warning("Error closing page", error=str(exc))

    async def _collect(self, page: Page, url: str, selector: str) -> list[str]:
        try:
            texts = await page.eval_on_selector_all(selector, CELL_TEXT_SCRIPT)
        except PlaywrightError as exc:
            raise ExtractionError(selector=selector, url=url, reason=str(exc)) from exc
        return [str(text) for text in texts]
