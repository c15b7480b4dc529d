"""Logging for the durable-copy entrypoint.

Everything at or above the configured level goes to a rotating log file;
only warnings and errors reach the terminal.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "durable_copy"

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_STDERR_PREFIX = "durable-copy"


def _rotating_handler(log_file: Path, max_bytes: int, backups: int) -> Optional[logging.Handler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as exc:
        # The copy must still run when the log location is unusable.
        print(f"{_STDERR_PREFIX}: WARNING: could not open log file {log_file}: {exc}", file=sys.stderr)
        return None
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def configure(config: Dict[str, Any], *, reconfigure: bool = False) -> logging.Logger:
    """Attach file and stderr handlers described by *config* to the package logger.

    Reads ``log_file``, ``log_max_bytes``, ``log_backups`` and ``debug`` as
    produced by :func:`durable_copy.config.load_config`. A second call is a
    no-op unless *reconfigure* is set, in which case the old handlers are
    closed first.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if pkg_logger.handlers:
        if not reconfigure:
            return pkg_logger
        for old in list(pkg_logger.handlers):
            pkg_logger.removeHandler(old)
            old.close()

    pkg_logger.setLevel(logging.DEBUG if config["debug"] else logging.INFO)
    pkg_logger.propagate = False

    file_handler = _rotating_handler(
        Path(config["log_file"]).expanduser(),
        config["log_max_bytes"],
        config["log_backups"],
    )
    if file_handler is not None:
        pkg_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(f"{_STDERR_PREFIX}: %(levelname)s: %(message)s"))
    pkg_logger.addHandler(console_handler)
    return pkg_logger
