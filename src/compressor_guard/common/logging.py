"""Logging setup for the ``compressor_guard`` logger tree.

Library modules only call ``logging.getLogger(__name__)`` and never attach
handlers, so ``compressor_guard.ledger.ledger``,
``compressor_guard.storage.snapshot_store`` and the rest stay silent until a
host configures the package root. The CLI does that once at startup via
``setup_logging``; ledger mutations, catch-up and seed fallback records then
reach stdout through the single root handler.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "compressor_guard",
) -> logging.Logger:
    """Attach a stdout handler to ``module_name`` and set its level.

    Module loggers below ``compressor_guard`` propagate to the logger
    configured here.

    Args:
        level: Logging level (default INFO).
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        logger.setLevel(level)
        for existing in logger.handlers:
            existing.setLevel(level)
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
