"""Logging setup for a TableSum run.

The console sink is the run report itself: one line per visited page
(``Visiting ...``, ``Page subtotal for ...`` or ``Error processing ...``)
followed by the grand-total banner. The file sink writes the same records
as JSON lines to ``tablesum_<date>.json`` with the structured counters
(cells, tokens, rejected) attached, so a run can be audited page by page.
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from config.settings import GlobalConfig, get_config
from tablesum.exceptions import LoggingInitializationError

PACKAGE_PREFIX = "tablesum."


def _json_serializer(record: dict[str, Any]) -> str:
    """Render a loguru record as a single JSON line.

    Page-level records carry their ``url`` at the top level so all lines for
    one page can be filtered without digging into ``context``.

    Args:
        record: Loguru record dictionary containing log metadata.

    Returns:
        JSON-formatted string terminated by a newline.
    """
    extra = record["extra"]
    subset = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "component": extra.get("component", record["name"]),
        "function": record["function"],
        "line": record["line"],
    }

    if "url" in extra:
        subset["url"] = extra["url"]

    if record["exception"] is not None:
        subset["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
            "traceback": record["exception"].traceback is not None,
        }

    context = {k: v for k, v in extra.items() if k not in ("serialized", "component")}
    if context:
        subset["context"] = context

    return json.dumps(subset, default=str) + "\n"


def _attach_serialized(record: dict[str, Any]) -> bool:
    record["extra"]["serialized"] = _json_serializer(record)
    return True


def _file_format(record: dict[str, Any]) -> str:
    # Callable formats get no trailing newline or traceback appended by loguru
    return "{extra[serialized]}"


def _validate_log_directory(log_dir: Path) -> None:
    """Ensure the log directory exists and is writable.

    Args:
        log_dir: Path to the log directory.

    Raises:
        LoggingInitializationError: If directory creation or write test fails.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)

        probe = log_dir / ".write_test"
        probe.write_text("write_test")
        probe.unlink()

    except PermissionError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"Permission denied: {exc}",
        ) from exc
    except OSError as exc:
        raise LoggingInitializationError(
            log_dir=str(log_dir),
            reason=f"OS error during directory validation: {exc}",
        ) from exc


def configure_logging(config: GlobalConfig | None = None) -> None:
    """Initialize the console and JSON file sinks.

    Call once during bootstrap, before other modules log.

    Args:
        config: Optional GlobalConfig instance. If None, uses singleton.

    Raises:
        LoggingInitializationError: If log directory validation fails.
    """
    if config is None:
        config = get_config()

    logger.remove()

    _validate_log_directory(config.log_dir)

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=console_format,
        level=config.log_level,
        colorize=True,
        backtrace=config.debug,
        diagnose=config.debug,
    )

    log_file_path = config.log_dir / "tablesum_{time:YYYY-MM-DD}.json"

    logger.add(
        str(log_file_path),
        format=_file_format,
        level=config.log_level,
        rotation=config.log_rotation,
        retention=config.log_retention,
        compression="gz",
        serialize=False,
        filter=_attach_serialized,
    )

    logger.debug(
        "Logging infrastructure initialized",
        app_name=config.app_name,
        environment=config.environment,
        log_level=config.log_level,
        log_dir=str(config.log_dir),
    )


def get_logger(name: str, **context: Any) -> "logger":
    """Get a logger tagged with its component and any fixed context.

    ``name`` is usually ``__name__``; the package prefix is dropped so JSON
    lines read ``"component": "runner"`` rather than ``"tablesum.runner"``.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("Visiting {url}", url="https://example.com/seed44")
        >>> page_log = get_logger(__name__, url="https://example.com/seed44")
    """
    component = name.removeprefix(PACKAGE_PREFIX)
    return logger.bind(component=component, **context)
