"""TableSum entry point.

Bootstrap and orchestration only; all functional code lives in /tablesum.

Responsibilities:
    1. Load and validate configuration
    2. Initialize logging (fail-fast on error)
    3. Run every configured page through the table-summing pipeline
    4. Handle top-level exceptions

The run succeeds once every page has been attempted, whether or not
individual pages failed.

Usage:
    python main.py
    PAGE_URLS='["https://example.com/a", "https://example.com/b"]' python main.py
"""

import asyncio
import sys
from typing import NoReturn

from loguru import logger

from config.settings import GlobalConfig, get_config
from tablesum.browser import BrowserManager
from tablesum.exceptions import (
    LoggingInitializationError,
    ReportGenerationError,
    TableSumError,
)
from tablesum.logger import configure_logging
from tablesum.reporter import ReportGenerator
from tablesum.runner import TableSumRunner
from tablesum.scraper import PlaywrightCellSource


def _validate_startup_requirements(config: GlobalConfig) -> None:
    """Pre-flight checks before the browser is launched.

    Raises:
        SystemExit: If the report output directory cannot be created.
    """
    if not config.page_urls:
        logger.warning("No page URLs configured - the grand total will be 0")

    if config.export_reports:
        try:
            config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.critical(
                "Failed to create output directory",
                output_dir=str(config.output_dir),
                error=str(exc),
            )
            sys.exit(1)

    logger.debug(
        "Startup validation complete",
        pages=len(config.page_urls),
        export_reports=config.export_reports,
    )


async def _run_pipeline(config: GlobalConfig) -> int:
    """Visit every page, log subtotals and the grand total.

    Returns:
        Exit code (0 once all pages have been attempted).
    """
    logger.info(
        "Pipeline execution started",
        app_name=config.app_name,
        environment=config.environment,
        pages=len(config.page_urls),
    )

    async with BrowserManager.create(config) as browser:
        source = PlaywrightCellSource(browser, config)
        runner = TableSumRunner(source, config)
        result = await runner.run(config.page_urls)

    if config.export_reports:
        if result.pages:
            reporter = ReportGenerator(config)
            try:
                reports = reporter.generate_all(result)
            except ReportGenerationError as exc:
                # Reports are optional; the run itself has completed
                logger.error(
                    "Report generation failed: {error}",
                    error=exc.message,
                    context=exc.context,
                )
            else:
                logger.info(
                    "Reports generated successfully",
                    excel_path=str(reports["excel"]),
                    dashboard_path=str(reports["dashboard"]),
                )
        else:
            logger.warning("No pages processed - skipping report generation")

    logger.info(
        "Pipeline execution completed",
        grand_total=result.grand_total,
        pages_failed=result.pages_failed,
    )
    return 0


def _handle_fatal_error(exc: Exception) -> NoReturn:
    """Log a fatal error and exit with status 1."""
    if isinstance(exc, TableSumError):
        logger.critical(
            "Fatal application error",
            error_type=type(exc).__name__,
            message=exc.message,
            context=exc.context,
        )
        sys.exit(1)

    logger.exception("Unexpected fatal error", error=str(exc))
    sys.exit(1)


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    try:
        config = get_config()
    except Exception as exc:
        # Cannot log yet - print to stderr
        print(f"FATAL: Configuration loading failed: {exc}", file=sys.stderr)
        return 1

    try:
        configure_logging(config)
    except LoggingInitializationError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    try:
        _validate_startup_requirements(config)
    except SystemExit:
        raise
    except Exception as exc:
        logger.exception("Startup validation failed", error=str(exc))
        return 1

    try:
        return asyncio.run(_run_pipeline(config))
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user (Ctrl+C)")
        return 130
    except Exception as exc:
        _handle_fatal_error(exc)


if __name__ == "__main__":
    sys.exit(main())
