import pytest

from chartmatch.errors import (
    ChartMatchError,
    DecodeError,
    InputMissingError,
    ReferenceDecodeError,
    ScanCancelledError,
    ScanError,
)


@pytest.mark.parametrize(
    "cls, base",
    [
        (InputMissingError, ValueError),
        (DecodeError, ValueError),
        (ScanError, RuntimeError),
        (ReferenceDecodeError, ScanError),
        (ScanCancelledError, ScanError),
    ],
)
def test_error_hierarchy(cls, base):
    assert issubclass(cls, base)
    assert issubclass(cls, ChartMatchError)
    assert cls.__doc__
