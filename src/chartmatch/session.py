"""Scan state owned by the front end.

``ScanSession`` keeps what a screen needs between user actions: the chosen
reference image and folder, whether a scan is running, and the last results.
The ranking itself stays in :mod:`chartmatch.ranker` and holds no state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from chartmatch.config import Config
from chartmatch.errors import ChartMatchError, InputMissingError, ScanError
from chartmatch.io import iter_image_paths
from chartmatch.ranker import MatchResult, SkippedFile, rank_matches

logger = logging.getLogger(__name__)


@dataclass
class ScanSession:
    reference_path: Optional[str] = None
    folder: Optional[str] = None
    is_scanning: bool = False
    results: List[MatchResult] = field(default_factory=list)
    skipped: List[SkippedFile] = field(default_factory=list)
    last_error: Optional[str] = None

    def select_reference(self, path: str) -> None:
        self.reference_path = path
        self._clear_results()

    def select_folder(self, path: str) -> None:
        self.folder = path
        self._clear_results()

    def scan(self, cfg: Config, cancel_event: Optional[threading.Event] = None) -> List[MatchResult]:
        """Run one scan and store its results on the session.

        Raises InputMissingError before doing any work when the reference or
        folder is missing. Failures during the scan are re-raised as a single
        ScanError carrying the cause. ``is_scanning`` is always reset.
        """
        if not self.reference_path or not self.folder:
            raise InputMissingError("Pick a reference image and a folder first")
        if not Path(self.folder).is_dir():
            raise InputMissingError(f"Folder not found: {self.folder}")

        self.is_scanning = True
        self._clear_results()
        try:
            report = rank_matches(
                self.reference_path,
                iter_image_paths(self.folder),
                cfg.top_k,
                hash_size=cfg.hash_size,
                resample=cfg.resample,
                num_workers=cfg.num_workers,
                progress=cfg.progress,
                cancel_event=cancel_event,
            )
            self.results = report.results
            self.skipped = report.skipped
            return self.results
        except ChartMatchError as exc:
            self.last_error = str(exc)
            raise
        except Exception as exc:
            self.last_error = f"Error: {exc}"
            logger.error("Scan failed: %s", exc)
            raise ScanError(self.last_error) from exc
        finally:
            self.is_scanning = False

    def _clear_results(self) -> None:
        self.results = []
        self.skipped = []
        self.last_error = None
