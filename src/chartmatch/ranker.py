"""Rank candidate images by average-hash similarity to a reference image."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from PIL import Image
from tqdm import tqdm

from chartmatch.config import resolve_resample
from chartmatch.errors import InputMissingError, ReferenceDecodeError, ScanCancelledError
from chartmatch.features.ahash import DEFAULT_HASH_SIZE, Fingerprint, try_fingerprint_file
from chartmatch.io import PathLike
from chartmatch.similarity import MISMATCH_DISTANCE, distance_to_similarity, hamming_distance

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 20


@dataclass(frozen=True)
class MatchResult:
    path: str
    similarity: float
    distance: int


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str


@dataclass
class RankReport:
    results: List[MatchResult] = field(default_factory=list)
    skipped: List[SkippedFile] = field(default_factory=list)
    scanned: int = 0


def rank_matches(
    reference: Optional[PathLike],
    candidates: Optional[Iterable[PathLike]],
    top_k: int = DEFAULT_TOP_K,
    *,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: str = "bilinear",
    num_workers: int = 0,
    progress: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> RankReport:
    """Score every candidate against ``reference`` and keep the best ``top_k``.

    Candidates that fail to decode are left out of the results and listed in
    ``RankReport.skipped``. Results are sorted by similarity, best first; equal
    scores keep the order in which the candidates were given, whether or not
    fingerprinting runs on worker threads.
    """
    if reference is None or str(reference) == "" or candidates is None:
        raise InputMissingError("Pick a reference image and a folder first")
    if not Path(reference).is_file():
        raise InputMissingError(f"Reference image not found: {reference}")
    if top_k < 1:
        raise ValueError("top_k must be at least 1")

    resample_filter = resolve_resample(resample)
    ref_hash, reason = try_fingerprint_file(reference, hash_size, resample_filter)
    if reason is not None:
        raise ReferenceDecodeError(f"Cannot read reference image {reference}: {reason}")

    paths = [str(path) for path in candidates]
    logger.info("Scanning %d candidate(s) against %s", len(paths), reference)

    report = RankReport(scanned=len(paths))
    matches: List[MatchResult] = []
    hashed = _fingerprint_all(paths, hash_size, resample_filter, num_workers, cancel_event)
    for path, candidate_hash, reason in tqdm(hashed, total=len(paths), desc="Scanning", unit="img", disable=not progress):
        if reason is not None:
            logger.debug("Skipping %s: %s", path, reason)
            report.skipped.append(SkippedFile(path=path, reason=reason))
            continue
        dist = hamming_distance(ref_hash, candidate_hash)
        if dist == MISMATCH_DISTANCE:
            logger.warning("Fingerprint length mismatch for %s (%d vs %d)", path, len(candidate_hash), len(ref_hash))
        sim = distance_to_similarity(dist, len(ref_hash))
        matches.append(MatchResult(path=path, similarity=sim, distance=dist))

    matches.sort(key=lambda item: item.similarity, reverse=True)
    report.results = matches[:top_k]
    logger.info(
        "Scan complete: %d scanned, %d skipped, %d returned",
        report.scanned,
        len(report.skipped),
        len(report.results),
    )
    return report


def rank(
    reference: Optional[PathLike],
    candidates: Optional[Iterable[PathLike]],
    top_k: int = DEFAULT_TOP_K,
    **kwargs,
) -> List[MatchResult]:
    return rank_matches(reference, candidates, top_k, **kwargs).results


def _fingerprint_all(
    paths: Sequence[str],
    hash_size: int,
    resample: Image.Resampling,
    num_workers: int,
    cancel_event: Optional[threading.Event],
) -> Iterator[Tuple[str, Fingerprint, Optional[str]]]:
    def work(path: str) -> Tuple[str, Fingerprint, Optional[str]]:
        if cancel_event is not None and cancel_event.is_set():
            raise ScanCancelledError("Scan cancelled")
        fingerprint, reason = try_fingerprint_file(path, hash_size, resample)
        return path, fingerprint, reason

    if num_workers <= 1 or len(paths) < 2:
        for path in paths:
            yield work(path)
        return

    # map() yields in submission order, which keeps tie-breaking deterministic
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        for item in executor.map(work, paths):
            yield item
