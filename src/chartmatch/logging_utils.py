"""Logging setup shared by the command line entry points."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging on stderr and an optional log file.

    stdout is left to the command output so it can be piped.
    Pillow's plugin loader is chatty at DEBUG level, so it is held at INFO.
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
