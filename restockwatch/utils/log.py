# restockwatch/utils/log.py
# Logging setup shared by every restockwatch module.
# get_logger(name) configures the root logger once (console, plus a rotating
# file when LOG_TO_FILE=true) and hands back a named logger.

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_INITIALIZED = False

# rotating log file is named after the top-level package
_LOG_FILE = __name__.split(".")[0] + ".log"


def _level_from_env() -> int:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    lvl = getattr(logging, level, None)
    return lvl if isinstance(lvl, int) else logging.INFO


def _init_root() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    lvl = _level_from_env()
    root = logging.getLogger()
    root.setLevel(lvl)

    # Drop handlers left over from a previous init (tests, reloads)
    for h in list(root.handlers):
        root.removeHandler(h)

    formatter = logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if os.getenv("LOG_TO_FILE", "false").lower() == "true":
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_dir / os.getenv("LOG_FILE", _LOG_FILE),
            maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
            backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        )
        fh.setLevel(lvl)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring the root logger on first use.

    Usage:
        from .utils.log import get_logger
        logger = get_logger("restockwatch")
    """
    _init_root()
    return logging.getLogger(name)
