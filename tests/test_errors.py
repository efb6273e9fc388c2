"""Unit tests for banded_ldl.errors."""

from __future__ import annotations

import pytest

from banded_ldl import errors


@pytest.mark.parametrize(
    "exc_type",
    [
        errors.InvalidBandwidthError,
        errors.InvalidDimensionError,
        errors.MatrixPhaseError,
    ],
)
def test_errors_share_package_base(exc_type: type[Exception]) -> None:
    """Every package error derives from BandedLDLError."""
    assert issubclass(exc_type, errors.BandedLDLError)


def test_validation_errors_are_value_errors() -> None:
    """Construction errors can be caught as ValueError."""
    assert issubclass(errors.InvalidBandwidthError, ValueError)
    assert issubclass(errors.InvalidDimensionError, ValueError)
    assert not issubclass(errors.MatrixPhaseError, ValueError)


def test_raise_invalid_bandwidth_message() -> None:
    """The bandwidth message names the value and explains bands = 2*b + 1."""
    with pytest.raises(errors.InvalidBandwidthError) as excinfo:
        errors.raise_invalid_bandwidth(4)

    msg = str(excinfo.value)
    assert "got 4" in msg
    assert "2*b + 1" in msg
    assert "tridiagonal" in msg


def test_raise_invalid_dimension_message() -> None:
    """The dimension message repr()s the rejected value."""
    with pytest.raises(errors.InvalidDimensionError, match=r"got '5'"):
        errors.raise_invalid_dimension("5")


def test_raise_phase_error_message() -> None:
    """The phase message names the operation and both phases."""
    with pytest.raises(errors.MatrixPhaseError) as excinfo:
        errors.raise_phase_error("solve", phase="populating", expected="factored")

    msg = str(excinfo.value)
    assert "solve()" in msg
    assert "while the matrix is populating" in msg
    assert "requires the matrix to be factored" in msg
