# src/banded_ldl/matrix.py
"""Compact symmetric banded matrix with an in-place LDL^T factorization.

Storage layout:
    A symmetric matrix of order `dim` with bandwidth `b` (so `bands = 2*b + 1`
    stored diagonals in the full matrix) is kept in a single float64 buffer of
    `dim * (b + 1)` values. The buffer is split into `b + 1` segments of stride
    `dim`; segment `k` holds band `k` (the entries with `|i - j| == k`) in its
    first `dim - k` slots:

        band(k)[m]  <->  A[m + k, m] == A[m, m + k]

    Each symmetric pair therefore owns exactly one slot, which is what makes
    `set(i, j, x)` followed by `get(j, i)` observe `x` with no extra work.

Factorization:
    `factor()` overwrites the buffer with the band-restricted LDL^T factors of
    the current contents: band 0 becomes the diagonal D and band k (k >= 1)
    becomes the k-th subdiagonal of the unit lower-triangular L. The work is
    O(dim * b^2). Afterwards `solve(x)` runs forward, diagonal and backward
    substitution in O(dim * b) per right-hand side.

Caller contract (not checked unless `MatrixOptions(debug=True)`):
    * indices passed to `get`, `set` and `band` are in range and in band;
    * `factor()` is called exactly once, after all entries are populated;
    * nothing is written after `factor()`;
    * `solve(x)` is only called after `factor()`.

    Violations give numerically meaningless results rather than exceptions.
    A zero pivot is not detected either; it propagates as inf/nan.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

import numpy as np

from .errors import raise_invalid_bandwidth, raise_invalid_dimension, raise_phase_error

if TYPE_CHECKING:
    from collections.abc import MutableSequence

    from numpy.typing import NDArray


# Error / message constants -------------------------------------------------

_INDEX_OOB_ERROR = "Index ({i}, {j}) out of range for a matrix of order {dim}"
_INDEX_OUT_OF_BAND_ERROR = "Index ({i}, {j}) lies outside the band (bandwidth {b})"
_BAND_OOB_ERROR = "Band {k} out of range for bandwidth {b}"
_RHS_LENGTH_ERROR = "Right-hand side has length {actual}; expected {expected}"
_PIVOT_WARNING = (
    "Pivot D[{j}] = {d!r} is zero or non-finite; the matrix is not definite "
    "within its band and the factorization is numerically invalid."
)


# Typing helpers ------------------------------------------------------------

MatrixPhase = Literal["populating", "factored"]


@dataclass(slots=True, frozen=True)
class MatrixOptions:
    """Optional configuration for BandedSymmetricMatrix.

    Attributes:
        debug: Enable caller-contract checks. When True, out-of-range or
            out-of-band indices raise IndexError, calling factor/solve/set
            out of order raises MatrixPhaseError, band views returned after
            factor() are read-only (writing to them raises ValueError), and
            zero or non-finite pivots emit a RuntimeWarning. When False
            (default) none of these checks run.
    """

    debug: bool = False


def _is_integer(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _lower_row(
    raw: NDArray[np.float64], dim: int, i: int, lo: int, hi: int
) -> NDArray[np.float64]:
    """Strided view of L[i, k] for k = hi - 1 down to lo (requires hi <= i)."""
    count = hi - lo
    if count <= 0:
        return raw[:0]
    start = (i - hi + 1) * dim + hi - 1
    step = dim - 1
    return raw[start : start + count * step : step]


class BandedSymmetricMatrix:
    """Symmetric banded matrix stored band-major in one float64 buffer."""

    __slots__ = ("_debug", "_dim", "_phase", "_raw")

    def __init__(
        self,
        dim: int,
        bands: int,
        *,
        options: MatrixOptions | None = None,
    ) -> None:
        """
        Allocate a zero matrix of order dim.

        Args:
            dim: Matrix order (the matrix is dim x dim).
            bands: Number of stored diagonals of the full matrix, 2*b + 1.
                Must be a positive odd integer.
            options: Optional MatrixOptions.

        Raises:
            InvalidBandwidthError: If bands is not a positive odd integer.
            InvalidDimensionError: If dim is not a positive integer.
        """
        if not _is_integer(bands) or bands < 1 or bands % 2 == 0:
            raise_invalid_bandwidth(bands)
        if not _is_integer(dim) or dim < 1:
            raise_invalid_dimension(dim)

        opts = options if options is not None else MatrixOptions()

        self._dim = int(dim)
        self._raw = np.zeros(self._dim * ((int(bands) + 1) // 2), dtype=np.float64)
        self._debug = bool(opts.debug)
        self._phase: MatrixPhase = "populating"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dim={self._dim}, bands={self.bands}, "
            f"debug={self._debug})"
        )

    # ------------------------------------------------------------------
    # Shape accessors
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        """Order of the (square) matrix."""
        return self._dim

    @property
    def bandwidth(self) -> int:
        """Largest |i - j| for which entries are stored."""
        return self._raw.size // self._dim - 1

    @property
    def bands(self) -> int:
        """Number of stored diagonals of the full matrix, 2*bandwidth + 1."""
        return 2 * self.bandwidth + 1

    @property
    def debug(self) -> bool:
        """Whether caller-contract checks are enabled."""
        return self._debug

    @property
    def phase(self) -> MatrixPhase:
        """
        Lifecycle phase, tracked only in debug mode.

        In release mode this stays "populating" regardless of factor() calls.
        """
        return self._phase

    # ------------------------------------------------------------------
    # Element and band access
    # ------------------------------------------------------------------

    def band(self, k: int) -> NDArray[np.float64]:
        """
        Return a read-write view of band k.

        Slot m of the view holds A[m + k, m] == A[m, m + k], so the view has
        dim - k elements. No bounds checking is performed outside debug mode.

        Args:
            k: Band index, 0 <= k <= bandwidth. Band 0 is the diagonal.

        Returns:
            A view into the matrix storage; writes go straight to the matrix.
            In debug mode the view is read-only once factor() has run.
        """
        view = self._raw[k * self._dim : (k + 1) * self._dim - k]
        if self._debug:
            self._check_band(k)
            if self._phase == "factored":
                view.flags.writeable = False
        return view

    def _index(self, i: int, j: int) -> int:
        return abs(i - j) * self._dim + min(i, j)

    def get(self, i: int, j: int) -> float:
        """Return A[i, j] == A[j, i]. Bounds checking is left to the caller."""
        if self._debug:
            self._check_index(i, j)
        return float(self._raw[self._index(i, j)])

    def set(self, i: int, j: int, value: float) -> None:
        """Set A[i, j] and A[j, i] to value. Bounds checking is left to the caller."""
        if self._debug:
            self._require_phase("set", "populating")
            self._check_index(i, j)
        self._raw[self._index(i, j)] = value

    # ------------------------------------------------------------------
    # Factorization and solve
    # ------------------------------------------------------------------

    def factor(self) -> None:
        """
        Factor the matrix in place as L * D * L^T.

        Call exactly once, after every entry is set and before any solve().
        The storage is overwritten: band 0 holds D and band k holds the k-th
        subdiagonal of L. The original entries cannot be recovered.

        No pivoting is done and definiteness is not checked. A zero pivot
        silently yields inf/nan in the factors.
        """
        if self._debug:
            self._require_phase("factor", "populating")

        dim = self._dim
        b = self.bandwidth
        raw = self._raw

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for j in range(dim):
                lo = max(0, j - b)
                # L[j, k] * D[k] for k = j-1 down to lo
                l_row = _lower_row(raw, dim, j, lo, j)
                ld_row = l_row * raw[lo:j][::-1]

                d = raw[j] - np.dot(l_row, ld_row)
                raw[j] = d

                if self._debug:
                    self._check_pivot(j, float(d))

                # Column j of L, bottom of the band upward
                for i in range(min(dim - 1, j + b), j, -1):
                    n_terms = j - max(0, i - b)
                    l_i = _lower_row(raw, dim, i, j - n_terms, j)
                    slot = (i - j) * dim + j
                    raw[slot] = (raw[slot] - np.dot(l_i, ld_row[:n_terms])) / d

        if self._debug:
            self._phase = "factored"

    def solve(self, x: NDArray[np.float64] | MutableSequence[float]) -> None:
        """
        Overwrite x with the solution of A @ y = x.

        factor() must have been called exactly once beforehand. The matrix
        itself is not modified, so any number of right-hand sides may be
        solved against one factorization.

        Args:
            x: Right-hand side of length dim: a list of floats, a 1D float64
                array, or a 2D float64 array of shape (dim, n_rhs) whose columns
                are solved together. Updated in place; list entries are
                written back as Python floats.
        """
        if self._debug:
            self._require_phase("solve", "factored")
            if len(x) != self._dim:
                raise ValueError(
                    _RHS_LENGTH_ERROR.format(actual=len(x), expected=self._dim)
                )

        if isinstance(x, np.ndarray):
            self._substitute(x)
            return

        work = np.array(x, dtype=np.float64)
        self._substitute(work)
        for i, value in enumerate(work.tolist()):
            x[i] = value

    def _substitute(self, x: NDArray[np.float64]) -> None:
        dim = self._dim
        b = self.bandwidth
        raw = self._raw

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            # L @ y = x
            for i in range(1, dim):
                lo = max(0, i - b)
                x[i] -= np.dot(_lower_row(raw, dim, i, lo, i), x[lo:i][::-1])

            # D @ z = y; band 0 is the head of the buffer
            x /= raw[:dim].reshape((dim,) + (1,) * (x.ndim - 1))

            # L^T @ w = z; L[j, i] for j = i+1 .. hi sits at stride dim
            for i in range(dim - 2, -1, -1):
                hi = min(dim - 1, i + b)
                l_col = raw[dim + i : (hi - i) * dim + i + 1 : dim]
                x[i] -= np.dot(l_col, x[i + 1 : hi + 1])

    # ------------------------------------------------------------------
    # Debug-only checks
    # ------------------------------------------------------------------

    def _require_phase(self, operation: str, expected: MatrixPhase) -> None:
        if self._phase != expected:
            raise_phase_error(operation, phase=self._phase, expected=expected)

    def _check_index(self, i: int, j: int) -> None:
        if not (0 <= i < self._dim and 0 <= j < self._dim):
            raise IndexError(_INDEX_OOB_ERROR.format(i=i, j=j, dim=self._dim))
        if abs(i - j) > self.bandwidth:
            raise IndexError(_INDEX_OUT_OF_BAND_ERROR.format(i=i, j=j, b=self.bandwidth))

    def _check_band(self, k: int) -> None:
        if not 0 <= k <= self.bandwidth:
            raise IndexError(_BAND_OOB_ERROR.format(k=k, b=self.bandwidth))

    @staticmethod
    def _check_pivot(j: int, d: float) -> None:
        if d == 0.0 or not np.isfinite(d):
            warnings.warn(
                _PIVOT_WARNING.format(j=j, d=d),
                RuntimeWarning,
                stacklevel=3,
            )
