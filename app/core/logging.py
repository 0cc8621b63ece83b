"""
Centralized logging configuration for the headline curator.

- Rotating main/debug/error log files under settings.LOG_DIR
- Optional per-run session log, so one ingestion run can be read in isolation
- Quiet console by default (WARNING), raised to INFO with --verbose
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
LOG_FORMAT_SIMPLE = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

# Third-party loggers that drown out pipeline output at DEBUG
QUIET_LOGGERS = ("aiohttp.access", "httpx", "httpcore", "openai", "sqlalchemy.engine", "asyncio")

_initialized = False
_session_log_file: Optional[Path] = None
_root_logger: Optional[logging.Logger] = None


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    enable_console: bool = True,
    enable_file: bool = True,
    enable_session_log: bool = False,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure application-wide logging with console and file handlers.

    Args:
        level: Root logger level
        console_level: Console handler level (default WARNING to reduce noise)
        enable_console: Whether to log to stdout
        enable_file: Whether to log to rotating files
        enable_session_log: Whether to create a timestamped log for this process
        log_dir: Directory for log files (defaults to settings.LOG_DIR)

    Returns:
        The root logger instance
    """
    global _session_log_file, _root_logger, _initialized

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    simple_formatter = logging.Formatter(LOG_FORMAT_SIMPLE, datefmt=DATE_FORMAT)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s | %(name)s | %(message)s"))
        root_logger.addHandler(console_handler)

    directory = Path(log_dir or settings.LOG_DIR)
    if enable_file or enable_session_log:
        directory.mkdir(parents=True, exist_ok=True)

    if enable_file:
        root_logger.addHandler(_rotating_handler(directory / "curator.log", logging.INFO, simple_formatter))
        root_logger.addHandler(_rotating_handler(directory / "curator_debug.log", logging.DEBUG, detailed_formatter))
        root_logger.addHandler(_rotating_handler(directory / "curator_errors.log", logging.ERROR, detailed_formatter))

    if enable_session_log:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _session_log_file = directory / f"session_{timestamp}.log"
        session_handler = logging.FileHandler(_session_log_file, encoding="utf-8")
        session_handler.setLevel(logging.DEBUG)
        session_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(session_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _root_logger = root_logger
    _initialized = True

    _log_session_banner(root_logger, "START")
    return root_logger


def _log_session_banner(logger: logging.Logger, event: str = "START"):
    banner = ("=" if event == "START" else "-") * 70
    logger.info(banner)
    logger.info(f"HEADLINE CURATOR - Session {event}")
    logger.info(f"Timestamp: {datetime.now().isoformat()}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    if _session_log_file:
        logger.info(f"Session log: {_session_log_file.name}")
    logger.info(banner)


def shutdown_logging():
    """Flush handlers and write the closing banner."""
    if _root_logger:
        _log_session_banner(_root_logger, "END")
        logging.shutdown()


def init_logging(verbose: bool = False, session_log: bool = False):
    """Initialize logging once per process."""
    if _initialized:
        return
    setup_logging(
        console_level=logging.INFO if verbose else logging.WARNING,
        enable_session_log=session_log,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a named logger, initializing logging on first use."""
    if not _initialized:
        init_logging()
    return logging.getLogger(name)


def get_session_log_file() -> Optional[Path]:
    return _session_log_file
