"""Similarity metrics between fingerprints."""

from __future__ import annotations

import logging
from typing import Final

from chartmatch.features.ahash import Fingerprint

logger = logging.getLogger(__name__)

# Returned for fingerprints of different lengths; far outside any real distance.
MISMATCH_DISTANCE: Final[int] = 9999


def hamming_distance(a: Fingerprint, b: Fingerprint) -> int:
    if len(a) != len(b):
        return MISMATCH_DISTANCE
    return sum(1 for x, y in zip(a.bits, b.bits) if x != y)


def distance_to_similarity(distance: int, bit_count: int) -> float:
    """Map a Hamming distance to ``1 - distance / bit_count`` clamped to [0, 1]."""
    if bit_count <= 0:
        return 0.0
    score = 1.0 - (distance / bit_count)
    return min(1.0, max(0.0, score))


def fingerprint_similarity(a: Fingerprint, b: Fingerprint) -> float:
    dist = hamming_distance(a, b)
    if dist == MISMATCH_DISTANCE:
        logger.warning("Comparing fingerprints of different length (%d vs %d)", len(a), len(b))
        return 0.0
    return distance_to_similarity(dist, len(a))
