"""File logging for the console games."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler


def configure_logger(name: str, log_dir: str, filename: str = "app.log") -> logging.Logger:
    """Attach a rotating file handler under ``log_dir`` to the ``name`` logger."""
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    # Ensure fresh handler each launch; closed handlers can block writes.
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    log_path = os.path.join(log_dir, filename)
    handler = RotatingFileHandler(log_path, maxBytes=200_000, backupCount=3, encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def shutdown_logger(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        h.flush()
        h.close()
        logger.removeHandler(h)
