"""Profiling utilities."""

from __future__ import annotations

import cProfile
import logging
from typing import Optional

from chartmatch.config import Config
from chartmatch.session import ScanSession

logger = logging.getLogger(__name__)


def profile_scan(cfg: Config, reference: str, folder: str, output: Optional[str] = None) -> str:
    session = ScanSession()
    session.select_reference(reference)
    session.select_folder(folder)

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        session.scan(cfg)
    finally:
        profiler.disable()
    out = output or "profile_scan.prof"
    profiler.dump_stats(out)
    logger.info("Wrote scan profile to %s", out)
    return out
