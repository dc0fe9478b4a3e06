"""Logging configuration for slate application."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers owned by third-party libraries that are chatty on the console.
_NOISY_LOGGERS = ("werkzeug", "urllib3")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - our modules log freely
    - Flask's request log (werkzeug) only at WARNING+
    - Python warnings (captured as 'py.warnings') only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        if name.split(".", 1)[0] in _NOISY_LOGGERS:
            return record.levelno >= logging.WARNING

        return True


def setup_logging(
    *,
    log_dir: str | Path,
    filename: str = "slate.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with a filtered console handler and a full file handler.

    Call this ONCE, very early (before first logger.info).

    Returns:
        Path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / filename

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    return log_file
