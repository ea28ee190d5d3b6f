"""Perceptual hash (average hash).

The image is shrunk to ``hash_size x hash_size``, converted to ITU-R 601-2
luma via Pillow's ``"L"`` mode, and each pixel becomes one bit: ``1`` when it
is at or above the mean luminance, ``0`` otherwise. Single-channel images
deeper than 8 bits (``I;16``, ``I``, ``F``) are thresholded in their native
range instead. Bits are emitted in row-major order. Reference and candidate hashes are only comparable when they
were computed with the same ``hash_size`` and resampling filter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Optional, Tuple

import numpy as np
from PIL import Image

from chartmatch.errors import DecodeError
from chartmatch.io import PathLike, decode_image, read_image_bytes

logger = logging.getLogger(__name__)

DEFAULT_HASH_SIZE: Final[int] = 8
DEFAULT_RESAMPLE: Final[Image.Resampling] = Image.Resampling.BILINEAR


@dataclass(frozen=True)
class Fingerprint:
    """A string of ``"0"``/``"1"`` symbols. The empty fingerprint marks a failure."""

    bits: str

    def __len__(self) -> int:
        return len(self.bits)

    def __str__(self) -> str:
        return self.bits

    def to_int(self) -> int:
        if not self.bits:
            raise ValueError("Empty fingerprint has no integer value")
        return int(self.bits, 2)

    def to_hex(self) -> str:
        width = (len(self.bits) + 3) // 4
        return f"{self.to_int():0{width}x}"


EMPTY_FINGERPRINT: Final[Fingerprint] = Fingerprint("")


def average_hash(
    image: Image.Image,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> Fingerprint:
    if hash_size < 1:
        raise ValueError("hash_size must be positive")
    if image.mode.startswith("I;16"):
        image = image.convert("I")
    if image.mode in ("I", "F"):
        # single-channel, wider than 8 bits; "L" would clip everything above 255
        small = image.convert("F").resize((hash_size, hash_size), resample=resample)
        pixels = np.asarray(small, dtype=np.float64)
    else:
        small = image.convert("RGB").resize((hash_size, hash_size), resample=resample)
        pixels = np.asarray(small.convert("L"), dtype=np.float64)

    mean = float(pixels.mean())
    bits = pixels.flatten() >= mean
    return Fingerprint("".join("1" if bit else "0" for bit in bits))


def fingerprint_bytes(
    data: bytes,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> Fingerprint:
    """Hash encoded image bytes, returning EMPTY_FINGERPRINT if they do not decode."""
    try:
        image = decode_image(data)
    except DecodeError as exc:
        logger.debug("Undecodable image data: %s", exc)
        return EMPTY_FINGERPRINT
    with image:
        return average_hash(image, hash_size, resample)


def try_fingerprint_file(
    path: PathLike,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> Tuple[Fingerprint, Optional[str]]:
    """Hash the image at ``path``.

    Returns the fingerprint and ``None``, or EMPTY_FINGERPRINT and the reason
    the file could not be decoded. Errors reading the file itself (missing,
    permission denied) are not decode failures and propagate as OSError.
    """
    data = read_image_bytes(path)
    try:
        image = decode_image(data)
    except DecodeError as exc:
        return EMPTY_FINGERPRINT, f"undecodable image: {exc}"
    with image:
        return average_hash(image, hash_size, resample), None


def fingerprint_file(
    path: PathLike,
    hash_size: int = DEFAULT_HASH_SIZE,
    resample: Image.Resampling = DEFAULT_RESAMPLE,
) -> Fingerprint:
    fingerprint, reason = try_fingerprint_file(path, hash_size, resample)
    if reason is not None:
        logger.debug("Skipping %s: %s", path, reason)
    return fingerprint
