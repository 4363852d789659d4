# pricewatch/config/logging_config.py

"""Per-run logging for pricewatch.

One file per process launch, ``logs/run_YYYYMMDD_HHMMSS.log``, receives
every ``pricewatch.*`` record at DEBUG.  Fetches run in worker threads
(``asyncio.to_thread``), so file records carry the thread name next to
the logger name; a cycle can be followed from the scheduler tick through
the fetcher thread to the snapshot swap.  The console only shows records
at ``Settings.CONSOLE_LOG_LEVEL`` and above.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from pricewatch.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)-18s | "
    "%(name)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROOT = "pricewatch"


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int | str,
    fmt: str,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)


def current_log_file() -> Path | None:
    """Path of the run log already attached to the ``pricewatch`` logger."""
    for handler in logging.getLogger(_ROOT).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-log file and console handlers once per process.

    Args:
        logs_dir: Directory for the log file. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        The run log in use.  A repeated call leaves the handlers alone
        and returns the file chosen by the first call.
    """
    root_logger = logging.getLogger(_ROOT)
    root_logger.setLevel(logging.DEBUG)

    existing = current_log_file()
    if existing is not None:
        return existing

    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    _attach(
        root_logger,
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.DEBUG,
        _FILE_FORMAT,
    )
    _attach(
        root_logger,
        logging.StreamHandler(sys.stderr),
        Settings.CONSOLE_LOG_LEVEL.upper(),
        _CONSOLE_FORMAT,
    )

    root_logger.info(
        "Logging to %s (console level %s)",
        log_file,
        Settings.CONSOLE_LOG_LEVEL.upper(),
    )
    return log_file
