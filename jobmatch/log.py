"""Logging setup for the jobmatch command line.

Library modules only ask for named loggers; handlers are attached by
:func:`configure`, which ``run_match`` calls. That gives a console
handler on stderr (stdout is reserved for the shortlists) and, unless
``JOBMATCH_NO_LOG_FILE`` is set, a daily file under ``logs/``.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR = Path(os.environ.get("JOBMATCH_LOG_DIR") or Path(__file__).resolve().parent.parent / "logs")
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = ("urllib3", "pypdf")
_console: logging.Handler | None = None

logging.getLogger("jobmatch").addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure(level: str | int | None = None) -> None:
    """Attach the console/file handlers, or just change the level if already set up.

    *level* wins over the ``LOG_LEVEL`` env var; both default to INFO.
    """
    global _console
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if _console is not None:
        _console.setLevel(level)
        return

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    _console = logging.StreamHandler(sys.stderr)
    _console.setLevel(level)
    _console.setFormatter(formatter)
    root.addHandler(_console)

    if os.environ.get("JOBMATCH_NO_LOG_FILE"):
        return
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(LOG_DIR / f"jobmatch_{datetime.now():%Y-%m-%d}.log", encoding="utf-8")
    except OSError:
        # read-only install
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    root.addHandler(fh)
