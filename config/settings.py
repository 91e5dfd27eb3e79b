"""Global configuration management using pydantic-settings.

Values are loaded from environment variables (or a local ``.env`` file)
with strict type validation. ``get_config()`` caches a single instance so
every module sees the same configuration for the lifetime of a run.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PAGE_URLS: list[str] = [
    f"https://example.com/seed{seed}" for seed in range(44, 54)
]


class GlobalConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    Attributes:
        app_name: Application identifier for logging.
        environment: Deployment environment.
        debug: Enable verbose exception diagnostics in the logs.
        headless: Launch the browser without a visible window.
        log_level: Minimum log level for output filtering.
        log_dir: Directory for structured JSON log files.
        log_rotation: Log file rotation interval.
        log_retention: Log file retention period.
        page_urls: Ordered list of pages whose tables are summed.
        request_timeout_ms: Playwright navigation and action timeout.
        page_timeout_sec: Upper bound on the whole fetch of a single page.
        settle_delay_ms: Pause after navigation so dynamic tables can render.
        wait_until: Navigation wait condition passed to ``page.goto``.
        cell_selector: Selector for table cells.
        fallback_cell_selector: Selector used when no table cells are found.
        max_concurrent_pages: Pages fetched at once (1 = strictly sequential).
        export_reports: Write Excel and HTML reports after the run.
        output_dir: Directory for generated reports.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="TableSum", description="Application identifier")
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Browser Configuration
    headless: bool = Field(default=True, description="Run browser in headless mode")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_dir: Path = Field(default=Path("logs"), description="Log output directory")
    log_rotation: str = Field(default="1 week", description="Log rotation interval")
    log_retention: str = Field(default="1 month", description="Log retention period")

    # Target Configuration
    page_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PAGE_URLS),
        description="Ordered list of page URLs to visit",
    )

    # Timing
    request_timeout_ms: int = Field(
        default=30000, ge=1000, le=120000, description="Navigation timeout in milliseconds"
    )
    page_timeout_sec: float = Field(
        default=60.0, ge=1.0, le=600.0, description="Per-page fetch timeout in seconds"
    )
    settle_delay_ms: int = Field(
        default=500, ge=0, le=10000, description="Post-navigation render delay"
    )
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="networkidle", description="Navigation wait condition"
    )

    # Cell Selectors
    cell_selector: str = Field(
        default="table td, table th", description="Table cell selector"
    )
    fallback_cell_selector: str = Field(
        default='[role="table"] [role="cell"], [role="gridcell"]',
        description="ARIA grid cell selector used when no table cells exist",
    )

    # Concurrency
    max_concurrent_pages: int = Field(
        default=1, ge=1, le=10, description="Pages fetched concurrently"
    )

    # Output Configuration
    export_reports: bool = Field(default=False, description="Write Excel/HTML reports")
    output_dir: Path = Field(default=Path("output"), description="Report output directory")

    @field_validator("log_dir", "output_dir", mode="before")
    @classmethod
    def ensure_path(cls, value: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(value) if isinstance(value, str) else value

    @field_validator("page_urls")
    @classmethod
    def validate_page_urls(cls, value: list[str]) -> list[str]:
        """Strip page URLs and reject blank or scheme-less entries."""
        cleaned: list[str] = []
        for raw in value:
            url = raw.strip()
            if not url:
                raise ValueError("page_urls must not contain blank entries")
            if not urlparse(url).scheme:
                raise ValueError(f"page URL '{url}' has no scheme")
            cleaned.append(url)
        return cleaned


@lru_cache(maxsize=1)
def get_config() -> GlobalConfig:
    """Retrieve the singleton GlobalConfig instance.

    Returns:
        GlobalConfig: The validated configuration instance.
    """
    return GlobalConfig()
