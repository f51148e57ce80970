"""Logging configuration helpers for the web service and the CLI."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s"


def configure_service_logging(log_path: str | Path = "logs/docsum.log", level: str = "INFO") -> logging.Logger:
    """Configure root logging for the web service with rotating file + console handlers."""
    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate handlers on module reloads.
    existing_file = any(
        isinstance(handler, RotatingFileHandler) and getattr(handler, "baseFilename", "") == str(path.resolve())
        for handler in root_logger.handlers
    )
    existing_console = any(
        type(handler) is logging.StreamHandler for handler in root_logger.handlers
    )

    formatter = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if not existing_file:
        file_handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not existing_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    logger = logging.getLogger("docsum.service")
    logger.info("Service logging configured. log_path=%s", path)
    return logger


def configure_cli_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    env_level = os.environ.get("LOG_LEVEL", "").upper()
    if env_level == "DEBUG":
        level = logging.DEBUG
    elif env_level == "WARNING":
        level = logging.WARNING
    elif env_level == "ERROR":
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")
