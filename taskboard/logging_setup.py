from __future__ import annotations

import logging
import sys

_configured = False

class _ThirdPartyFilter(logging.Filter):
    """Keep taskboard logs, only let other libraries through at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskboard"):
            return True
        return record.levelno >= logging.WARNING

def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger with one stderr handler.

    Safe to call more than once (create_app runs per test); only the first
    call installs the handler, later calls just adjust the level.
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
    _configured = True
