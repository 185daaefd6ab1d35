"""Logging setup.

Components never configure logging themselves; each takes an explicit
``logger`` argument (defaulting to its module logger).  The process entry
points (API factory, CLI) call :func:`configure_logging` once, which attaches
append-only file handlers for the pipeline log and the error log.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from article_parser.config import Settings, settings as default_settings

LOGGER_NAME = "article_parser"

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Attach file and stderr handlers to the package logger.

    Safe to call more than once; handlers are only added the first time.
    """
    settings = settings or default_settings
    root = logging.getLogger(LOGGER_NAME)
    if getattr(root, "_article_parser_configured", False):
        return root

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(_FORMAT)

    parser_handler = logging.FileHandler(settings.parser_log_path, mode="a", encoding="utf-8")
    parser_handler.setLevel(logging.INFO)
    parser_handler.setFormatter(formatter)

    error_handler = logging.FileHandler(settings.error_log_path, mode="a", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))

    root.setLevel(logging.INFO)
    root.addHandler(parser_handler)
    root.addHandler(error_handler)
    root.addHandler(stream_handler)
    root._article_parser_configured = True  # type: ignore[attr-defined]
    return root
