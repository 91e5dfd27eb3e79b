"""Cell text sources implementing the Strategy Pattern.

The run driver depends only on ``CellTextSource``: given a page URL, produce
the raw text of every table cell on that page. The browser-backed
implementation lives in ``tablesum.scraper``; ``StaticCellSource`` serves
canned texts so the driver can run without a browser.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from tablesum.exceptions import NavigationError
from tablesum.logger import get_logger

log = get_logger(__name__)


class CellTextSource(ABC):
    """Abstract capability: fetch the cell texts of a page.

    Implementations may raise any exception for a page that cannot be
    fetched; the driver records it as a failed page and moves on.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return human-readable name for this source."""
        ...

    @abstractmethod
    async def fetch_cell_texts(self, url: str) -> list[str]:
        """Return the raw text of every table cell on ``url``.

        Args:
            url: Page identifier.

        Returns:
            Cell texts in document order (possibly empty).
        """
        ...


class StaticCellSource(CellTextSource):
    """Serves pre-recorded cell texts keyed by URL.

    A URL mapped to an exception instance raises that exception when
    fetched. Unknown URLs raise ``NavigationError``.

    Example:
        source = StaticCellSource({
            "https://example.com/a": ["10", "20"],
            "https://example.com/b": NavigationError("https://example.com/b", "HTTP 500"),
        })
    """

    def __init__(self, pages: Mapping[str, Sequence[str] | BaseException]) -> None:
        self._pages = dict(pages)
        self.fetched: list[str] = []

    @property
    def name(self) -> str:
        """Return source name for logging."""
        return "StaticCellSource"

    async def fetch_cell_texts(self, url: str) -> list[str]:
        """Return the canned cell texts for ``url``."""
        self.fetched.append(url)

        if url not in self._pages:
            raise NavigationError(url=url, reason="No canned content for URL")

        entry = self._pages[url]
        if isinstance(entry, BaseException):
            raise entry

        log.debug("Serving canned cell texts", url=url, cells=len(entry))
        return list(entry)
