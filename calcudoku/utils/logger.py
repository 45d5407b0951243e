"""Logging setup shared by the solver, generator and command line."""

from __future__ import annotations

import logging
from typing import Optional


def configure_logging(level: int = logging.WARNING) -> None:
    """Install a single stream handler on the root logger.

    Hardening runs thousands of solver calls, so per-mutation detail is kept
    at DEBUG and only accepted improvements are reported at INFO.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "calcudoku")
