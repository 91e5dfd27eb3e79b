"""Pytest configuration and shared fixtures for the TableSum test suite.

Guarantees:
- No external network requests or real browsers (Playwright is mocked)
- Isolated configuration (the get_config() cache is cleared around each test)
- Canned cell texts instead of live pages
"""

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest_mock import MockerFixture

from config.settings import GlobalConfig

TEST_URLS = [
    "https://test.example.com/seed44",
    "https://test.example.com/seed45",
]


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GlobalConfig:
    """Provide isolated GlobalConfig with safe test defaults.

    Clears the lru_cache singleton and points all file output at tmp_path.
    """
    from config.settings import get_config

    get_config.cache_clear()

    log_dir = tmp_path / "logs"
    output_dir = tmp_path / "output"
    log_dir.mkdir()
    output_dir.mkdir()

    test_env = {
        "APP_NAME": "TableSum-Test",
        "ENVIRONMENT": "test",
        "DEBUG": "false",
        "HEADLESS": "true",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(log_dir),
        "LOG_ROTATION": "1 day",
        "LOG_RETENTION": "1 day",
        "PAGE_URLS": json.dumps(TEST_URLS),
        "REQUEST_TIMEOUT_MS": "5000",
        "PAGE_TIMEOUT_SEC": "10",
        "SETTLE_DELAY_MS": "250",
        "WAIT_UNTIL": "networkidle",
        "MAX_CONCURRENT_PAGES": "1",
        "EXPORT_REPORTS": "false",
        "OUTPUT_DIR": str(output_dir),
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    config = get_config()

    yield config

    get_config.cache_clear()


@pytest.fixture
def playwright_mocks() -> Callable[[], tuple[MagicMock, MagicMock, MagicMock, MagicMock]]:
    """Factory for the ``async_playwright().start()`` mock chain.

    Returns:
        Callable producing (async_playwright_instance, playwright, browser, context).
    """

    def _create() -> tuple[MagicMock, MagicMock, MagicMock, MagicMock]:
        context_mock = MagicMock()
        context_mock.new_page = AsyncMock(return_value=MagicMock())
        context_mock.close = AsyncMock()

        browser_mock = MagicMock()
        browser_mock.new_context = AsyncMock(return_value=context_mock)
        browser_mock.close = AsyncMock()

        playwright_mock = MagicMock()
        playwright_mock.chromium.launch = AsyncMock(return_value=browser_mock)
        playwright_mock.stop = AsyncMock()

        async_playwright_instance = MagicMock()
        async_playwright_instance.start = AsyncMock(return_value=playwright_mock)

        return async_playwright_instance, playwright_mock, browser_mock, context_mock

    return _create


@pytest.fixture
def mock_page_factory(mocker: MockerFixture) -> Callable[..., MagicMock]:
    """Factory for Playwright Page mocks serving cell texts per selector.

    Example:
        page = mock_page_factory({"table td, table th": ["10", "20"]})
    """

    def _create(
        cells_by_selector: dict[str, list[str]] | None = None,
        status: int = 200,
    ) -> MagicMock:
        cells_by_selector = cells_by_selector or {}

        page = mocker.MagicMock()
        page.url = TEST_URLS[0]
        page.goto = mocker.AsyncMock(return_value=mocker.MagicMock(status=status))
        page.wait_for_timeout = mocker.AsyncMock()
        page.close = mocker.AsyncMock()

        async def _eval_on_selector_all(selector: str, script: str) -> list[str]:
            return list(cells_by_selector.get(selector, []))

        page.eval_on_selector_all = mocker.AsyncMock(side_effect=_eval_on_selector_all)
        return page

    return _create


@pytest.fixture
def sample_pages() -> dict[str, Any]:
    """Canned cell texts resembling a small financial report."""
    return {
        TEST_URLS[0]: ["Item", "Amount", "Revenue: $1,200", "Cost: (300)"],
        TEST_URLS[1]: ["Q1", "1,234.56", "n/a", "(1,234.56)", "€ 12,50"],
    }


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring full stack",
    )
