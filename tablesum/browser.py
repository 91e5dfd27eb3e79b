"""Browser orchestration module.

Thin Playwright wrapper owning the browser lifecycle:
- launch and context creation inside an async context manager
- page creation with configured default timeouts
- navigation with HTTP status and timeout checks mapped to NavigationError

Resources are released in reverse order even when an exception escapes the
``async with`` block.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Self

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config.settings import GlobalConfig, get_config
from tablesum.exceptions import BrowserInitializationError, NavigationError
from tablesum.logger import get_logger

log = get_logger(__name__)

LAUNCH_ARGS: list[str] = [
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]


class BrowserManager:
    """Manages the Playwright browser lifecycle.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        _playwright: Playwright instance (initialized on context entry).
        _browser: Chromium browser instance.
        _context: BrowserContext shared by all pages of a run.

    Example:
        async with BrowserManager.create() as browser:
            page = await browser.new_page()
            await browser.navigate(page, "https://example.com/seed44")
    """

    def __init__(self, config: GlobalConfig) -> None:
        """Initialize BrowserManager with configuration.

        Use ``create()`` rather than instantiating directly.
        """
        self.config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    @classmethod
    @asynccontextmanager
    async def create(
        cls, config: GlobalConfig | None = None
    ) -> AsyncGenerator[Self, None]:
        """Launch a browser for the duration of the ``async with`` block.

        Args:
            config: Optional GlobalConfig. Uses singleton if not provided.

        Yields:
            Initialized BrowserManager instance.

        Raises:
            BrowserInitializationError: If browser launch fails.
        """
        if config is None:
            config = get_config()

        instance = cls(config)
        try:
            await instance._initialize()
            yield instance
        finally:
            await instance._cleanup()

    async def _initialize(self) -> None:
        """Start Playwright, launch Chromium and open a context.

        Raises:
            BrowserInitializationError: If any initialization step fails.
        """
        log.info("Launching browser", headless=self.config.headless)

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=LAUNCH_ARGS,
            )
            self._context = await self._browser.new_context(
                locale="en-US",
                java_script_enabled=True,
            )
        except Exception as exc:
            await self._cleanup()
            raise BrowserInitializationError(
                reason=str(exc), browser_type="chromium"
            ) from exc

        log.info("Browser initialized successfully")

    async def new_page(self) -> Page:
        """Create a new page within the current browser context.

        Returns:
            Playwright Page with configured default timeouts.

        Raises:
            BrowserInitializationError: If context is not initialized.
        """
        if self._context is None:
            raise BrowserInitializationError(
                reason="Browser context not initialized", browser_type="chromium"
            )

        page = await self._context.new_page()
        page.set_default_timeout(self.config.request_timeout_ms)
        page.set_default_navigation_timeout(self.config.request_timeout_ms)
        return page

    async def navigate(
        self,
        page: Page,
        url: str,
        wait_until: str | None = None,
    ) -> None:
        """Navigate to ``url`` and verify the response.

        Args:
            page: Playwright Page instance.
            url: Target URL to navigate to.
            wait_until: Navigation wait condition; defaults to ``config.wait_until``.

        Raises:
            NavigationError: If navigation fails, times out or returns HTTP >= 400.
        """
        wait_until = wait_until or self.config.wait_until
        log.debug("Navigating to URL", url=url, wait_until=wait_until)

        try:
            response = await page.goto(url, wait_until=wait_until)
        except (PlaywrightTimeoutError, TimeoutError) as exc:
            raise NavigationError(
                url=url,
                reason=f"Navigation timeout after {self.config.request_timeout_ms}ms",
            ) from exc
        except Exception as exc:
            raise NavigationError(url=url, reason=str(exc)) from exc

        if response is None:
            raise NavigationError(url=url, reason="No response received")

        if response.status >= 400:
            raise NavigationError(
                url=url,
                reason=f"HTTP {response.status}",
                status_code=response.status,
            )

        log.debug("Navigation successful", url=url, status_code=response.status)

    async def _cleanup(self) -> None:
        """Close context, browser and Playwright in reverse order."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as exc:
                log.warning("Error closing context", error=str(exc))
            self._context = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:
                log.warning("Error closing browser", error=str(exc))
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.warning("Error stopping playwright", error=str(exc))
            self._playwright = None

        log.debug("Browser resources cleaned up")

    @property
    def is_initialized(self) -> bool:
        """Check if browser is fully initialized and ready."""
        return all([
            self._playwright is not None,
            self._browser is not None,
            self._context is not None,
        ])
