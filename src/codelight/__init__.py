"""codelight - line highlighting for rendered code blocks.

Post-processes the HTML of a static blog/book site: wraps code block lines
in ``<span class="line">`` and highlights the lines a page's
``lines-highlight`` directives select.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from codelight.annotator import annotate
from codelight.page import LineDirective, find_directives, process_page
from codelight.ranges import (
    EmptySpecError,
    InvalidRangeError,
    parse_range_spec,
    sorted_lines,
)

__version__ = "0.1.0"

__all__ = [
    "EmptySpecError",
    "InvalidRangeError",
    "LineDirective",
    "annotate",
    "find_directives",
    "parse_range_spec",
    "process_page",
    "setup_logging",
    "sorted_lines",
]


def setup_logging(log_dir: Path | None = None) -> Path:
    """Configure logging to both console and rotating file.

    Args:
        log_dir: Directory for the log file.  Defaults to
            ``Settings.app.log_dir``.

    Returns:
        Path of the log file.
    """
    if log_dir is None:
        from codelight.config import get_settings

        log_dir = get_settings().app.log_dir

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"codelight.{os.getpid()}.log"

    # Root logger config
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
    return log_file
