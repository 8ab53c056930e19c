"""Logging utilities for the prompt extractor"""
import logging
from pathlib import Path
from typing import Optional

from .settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(message)s"


def setup_logging(log_file: Optional[Path] = None, level: Optional[str] = None,
                  logger_name: str = "prompt_extract", settings: Optional[Settings] = None) -> logging.Logger:
    """Setup file or console logging for the package logger.

    The level defaults to settings.log_level, which PROMPT_EXTRACT_LOG_LEVEL
    overrides when settings come from Settings.load_from_yaml.
    """
    if level is None:
        level = (settings or get_settings()).log_level

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Remove existing handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.debug(f"Logger initialized. level={level} file={log_file}")

    return logger
