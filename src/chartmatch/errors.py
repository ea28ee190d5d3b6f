"""Exception types raised by chartmatch."""

from __future__ import annotations


class ChartMatchError(Exception):
    """Base class for chartmatch errors."""


class InputMissingError(ChartMatchError, ValueError):
    """Reference image or candidate folder was not supplied."""


class DecodeError(ChartMatchError, ValueError):
    """Bytes could not be decoded into an image."""


class ScanError(ChartMatchError, RuntimeError):
    """A scan failed as a whole."""


class ReferenceDecodeError(ScanError):
    """The reference image could not be decoded."""


class ScanCancelledError(ScanError):
    """A scan was cancelled before it finished."""
