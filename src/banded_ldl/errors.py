# src/banded_ldl/errors.py
"""Error types for banded_ldl.

This module centralizes:
- explicit error classes with actionable messages, and
- small helpers that raise them with standardized wording.

Design intent:
- construction is the only validated entry point in release mode
- everything else (index bounds, factor-once, factor-before-solve) is a caller
  contract; MatrixPhaseError is only raised when debug checks are enabled
"""

from __future__ import annotations

from typing import Final

_BANDS_HINT: Final[str] = (
    "bands counts the stored diagonals of the full matrix, bands = 2*b + 1, "
    "where b is the bandwidth (e.g. bands=3 for a tridiagonal matrix)."
)


class BandedLDLError(Exception):
    """Base exception for banded_ldl errors."""


class InvalidBandwidthError(BandedLDLError, ValueError):
    """Raised when bands is not a positive odd integer."""


class InvalidDimensionError(BandedLDLError, ValueError):
    """Raised when dim is not a positive integer."""


class MatrixPhaseError(BandedLDLError, RuntimeError):
    """Raised in debug mode when an operation is used out of order."""


def raise_invalid_bandwidth(bands: object) -> None:
    """Raise a standardized InvalidBandwidthError.

    Args:
        bands: The rejected bands value.

    Raises:
        InvalidBandwidthError: Always.
    """
    msg = f"bands must be a positive, odd integer; got {bands!r}. {_BANDS_HINT}"
    raise InvalidBandwidthError(msg)


def raise_invalid_dimension(dim: object) -> None:
    """Raise a standardized InvalidDimensionError.

    Args:
        dim: The rejected dim value.

    Raises:
        InvalidDimensionError: Always.
    """
    msg = f"dim must be a positive integer; got {dim!r}."
    raise InvalidDimensionError(msg)


def raise_phase_error(operation: str, *, phase: str, expected: str) -> None:
    """Raise a standardized MatrixPhaseError.

    Args:
        operation: Name of the attempted operation (for example, "solve").
        phase: Current matrix phase.
        expected: Phase the operation requires.

    Raises:
        MatrixPhaseError: Always.
    """
    msg = (
        f"Cannot call {operation}() while the matrix is {phase}; "
        f"it requires the matrix to be {expected}. "
        "factor() must be called exactly once, after all entries are set "
        "and before any solve()."
    )
    raise MatrixPhaseError(msg)
