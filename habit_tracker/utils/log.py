"""
Logging setup for the habit-tracker CLI.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3
) -> logging.Logger:
    """
    Configure the root logger.

    Verbose mode logs DEBUG to stderr; otherwise only warnings reach the
    terminal. When log_file is given, INFO and above (DEBUG when verbose)
    also go to a rotating file.
    """
    root = logging.getLogger()
    console_level = logging.DEBUG if verbose else logging.WARNING

    existing = list(root.handlers)
    logging.basicConfig(format=LOG_FORMAT)
    for handler in root.handlers:
        if handler not in existing:
            handler.setLevel(console_level)
    root.setLevel(console_level)

    if log_file:
        log_file = os.path.abspath(log_file)
        file_level = logging.DEBUG if verbose else logging.INFO
        already = any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == log_file
            for h in root.handlers
        )
        if not already:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
            handler.setLevel(file_level)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)
        root.setLevel(min(console_level, file_level))

    return root
