"""Global pytest configuration and shared fixtures for banded_ldl."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np
import pytest

if TYPE_CHECKING:
    from numpy.typing import NDArray

    FloatArray = NDArray[np.float64]

SPDFactory = Callable[[int, int], "FloatArray"]


# -----------------------------------------------------------------------------
# Global markers registration safety (for local pytest runs)
# -----------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used by the test suite."""
    config.addinivalue_line(
        "markers",
        "debug_checks: mark test as exercising MatrixOptions(debug=True)",
    )


# -----------------------------------------------------------------------------
# Random test matrices
# -----------------------------------------------------------------------------


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so failures are reproducible."""
    return np.random.default_rng(20240607)


@pytest.fixture
def make_spd_banded(rng: np.random.Generator) -> SPDFactory:
    """
    Return a factory for dense symmetric positive-definite banded arrays.

    Usage:
        def test_x(make_spd_banded):
            a = make_spd_banded(n, b)
    """

    def _make(n: int, b: int) -> FloatArray:
        a = rng.uniform(-1.0, 1.0, size=(n, n))
        a = 0.5 * (a + a.T)
        rows, cols = np.indices((n, n))
        a[np.abs(rows - cols) > b] = 0.0
        # Strict diagonal dominance with a positive diagonal implies SPD.
        off = np.abs(a).sum(axis=1) - np.abs(np.diag(a))
        a[np.diag_indices(n)] = off + rng.uniform(1.0, 2.0, size=n)
        return a

    return _make
