"""Centralized logging configuration for Wicketarr.

Call setup_logging() once at application startup. Every other module uses
the standard pattern and prefixes messages with a bracketed tag:

    import logging
    logger = logging.getLogger(__name__)
    logger.info("[TICK] %d tenants processed", count)

The tag is lifted into its own field by the JSON formatter, so log
aggregation can filter on TICK, TENANT, CRICAPI, PUBLISH, DB, etc.

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    LOG_DIR: Directory for log files (default: logs/ beside the database)
    LOG_FORMAT: "text" or "json" (default: text)
    LOG_TO_FILE: "false" to log to the console only (default: true)
    LOG_MAX_MB / LOG_BACKUP_COUNT: rotation of the main log (default: 10 / 5)
"""

import json
import logging
import os
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from wicketarr.config import VERSION, Config, _env_bool, _env_int

_TAG_RE = re.compile(r"^\[([A-Z_]+)\]\s*")

# Libraries that log every request at INFO
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "uvicorn.access",
)

_configured = False


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the bracketed tag as its own field."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        tag = None
        tag_match = _TAG_RE.match(message)
        if tag_match:
            tag = tag_match.group(1)
            message = message[tag_match.end() :]

        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "tag": tag,
            "message": message,
            "thread": record.threadName,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _text_formatter() -> logging.Formatter:
    # threadName separates tick-scheduler output from API workers
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_log_dir() -> Path:
    if env_dir := os.getenv("LOG_DIR"):
        return Path(env_dir)

    return Path(Config.DATABASE_PATH).parent / "logs"


def _build_file_handlers(log_path: Path, formatter: logging.Formatter) -> list[logging.Handler]:
    log_path.mkdir(parents=True, exist_ok=True)

    main_handler = RotatingFileHandler(
        log_path / "wicketarr.log",
        maxBytes=_env_int("LOG_MAX_MB", 10) * 1024 * 1024,
        backupCount=_env_int("LOG_BACKUP_COUNT", 5),
        encoding="utf-8",
    )
    main_handler.setLevel(logging.DEBUG)
    main_handler.setFormatter(formatter)

    # Errors only; survives long after the main log has rotated away
    error_handler = RotatingFileHandler(
        log_path / "wicketarr_errors.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    return [main_handler, error_handler]


def setup_logging(
    log_level: str | None = None,
    log_dir: str | Path | None = None,
    use_json: bool | None = None,
) -> None:
    """Initialize the logging system.

    Safe to call multiple times (subsequent calls are no-ops).

    Args:
        log_level: Override LOG_LEVEL env var
        log_dir: Override LOG_DIR env var
        use_json: Override LOG_FORMAT env var (True for JSON output)
    """
    global _configured
    if _configured:
        return

    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    if use_json is None:
        use_json = os.getenv("LOG_FORMAT", "text").lower() == "json"
    formatter = JSONFormatter() if use_json else _text_formatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    log_path = None
    if _env_bool("LOG_TO_FILE", True):
        log_path = Path(log_dir) if log_dir else _get_log_dir()
        handlers.extend(_build_file_handlers(log_path, formatter))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True

    logger = logging.getLogger("wicketarr")
    logger.info("[STARTUP] Wicketarr %s", VERSION)
    logger.info(
        "[STARTUP] Log level %s, format %s, files %s",
        logging.getLevelName(level),
        "json" if use_json else "text",
        log_path or "disabled",
    )
