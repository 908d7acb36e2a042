"""Logging configuration helpers."""

import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_FILE = "beacon-monitor.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _normalise_level(level: Optional[Union[str, int]]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.upper()
        if value.isdigit():
            return int(value)
        mapped = logging.getLevelName(value)
        if isinstance(mapped, int):
            return mapped
    return logging.INFO


def configure_logging(level: Optional[Union[str, int]] = None, log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure root logging to the console and, if log_dir is set, a file.

    Returns the log file path, or None when logging to the console only.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_path = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / DEFAULT_LOG_FILE
        handlers.append(logging.FileHandler(log_path, mode="a", encoding="utf-8"))

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(level=_normalise_level(level), format=LOG_FORMAT, handlers=handlers)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return log_path
