"""Folder scanning and image decoding."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterator, Union

from PIL import Image, UnidentifiedImageError

from chartmatch.errors import DecodeError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

PathLike = Union[str, Path]


def iter_image_paths(folder: PathLike) -> Iterator[str]:
    root = Path(folder)
    for path in root.rglob("*"):
        if path.is_file() and path.suffix.lower() in ALLOWED_EXTENSIONS:
            yield str(path)


def read_image_bytes(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def decode_image(data: bytes) -> Image.Image:
    """Decode ``data`` into a fully loaded Pillow image.

    Raises DecodeError for anything Pillow cannot read, including truncated
    files that only fail once pixel data is accessed.
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(str(exc) or exc.__class__.__name__) from exc
    return img
