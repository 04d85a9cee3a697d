"""Centralized logging configuration — stdlib only."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    if not _configured:
        configure()
    return logging.getLogger(name)


def configure(level: str | None = None, *, log_dir: Path | None = None) -> None:
    """Install console + daily file handlers, or just re-level them.

    The CLI calls this again with ``--verbose`` after modules have already
    grabbed their loggers.
    """
    global _configured
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    lvl = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(lvl)

    if _configured:
        for handler in root.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(lvl)
        return
    _configured = True

    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(lvl)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    target = log_dir or LOG_DIR
    try:
        target.mkdir(parents=True, exist_ok=True)
        log_file = target / f"autoapply_{datetime.now().strftime('%Y-%m-%d')}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        root.addHandler(fh)
    except OSError:
        pass
