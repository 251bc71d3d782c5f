from __future__ import annotations
import logging

from funnel.config import LOG_LEVEL


def setup_console_logging(level: int = LOG_LEVEL) -> None:
    """
    Call once at app or CLI start. Prints logs to console.
    """
    root = logging.getLogger()
    if root.handlers:
        # already configured (uvicorn, pytest)
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)
