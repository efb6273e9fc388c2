# src/banded_ldl/operators.py
"""Builders and converters around BandedSymmetricMatrix.

This module provides the glue between the compact banded storage and the
rest of the NumPy/SciPy ecosystem:

- Construction of common 1D operators (second-difference Laplacian).
- Conversion from and to dense arrays, CSR matrices, and LAPACK lower banded
  form (as consumed by scipy.linalg.solveh_banded).
- Extraction of the explicit (L, D) factors from a factored matrix.
- A factorize-once helper returning a reusable, non-destructive solver.

Design notes:
    * The converters read bands through BandedSymmetricMatrix.band(k), so they
      work on any matrix the caller populated, in either debug or release mode.
    * `to_dense`, `to_csr` and `to_lapack_lower` describe the matrix as it is
      populated; after factor() the storage holds L and D, so use
      `ldl_factors` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.sparse import csr_matrix, diags

from .matrix import BandedSymmetricMatrix, MatrixOptions

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray

    FloatArray = NDArray[np.float64]


# =============================================================================
# Error message constants
# =============================================================================

_UNKNOWN_BC_ERROR = "Unknown bc: {bc}"
_GRID_SIZE_ERROR = "n must be a positive integer; got {n}"
_SQUARE_ERROR = "Dense matrix must be square and 2D; got shape {shape}"
_RHS_NDIM_ERROR = "rhs must be 1D or 2D; got ndim={ndim}"
_RHS_DIM_ERROR = "rhs shape {shape} is incompatible with matrix order {dim}"


def _stored_bands(matrix: BandedSymmetricMatrix) -> range:
    """Band indices that hold at least one slot."""
    return range(min(matrix.bandwidth, matrix.dim - 1) + 1)


# =============================================================================
# Operator builders
# =============================================================================


def build_laplacian_banded(
    n: int,
    dx: float = 1.0,
    coeff: float = 1.0,
    bc: str = "absorbing",
    *,
    options: MatrixOptions | None = None,
) -> BandedSymmetricMatrix:
    """Build the 1D second-difference Laplacian as a tridiagonal banded matrix.

    The result is `coeff * Δ_h` with `Δ_h` the central-difference stencil
    (1, -2, 1) / dx^2. With bc="absorbing" every diagonal entry is -2 (scaled),
    which gives a negative-definite matrix that factors cleanly. With
    bc="neumann" the two end entries are -1 instead; that operator is singular
    on its own and is meant to be shifted (e.g. I - dt * A) before factoring.

    Args:
        n: Number of grid points.
        dx: Grid spacing.
        coeff: Diffusion coefficient or generic spatial scaling.
        bc: Boundary condition; either "absorbing" or "neumann".
        options: Optional MatrixOptions for the new matrix.

    Raises:
        ValueError: If n is not positive or bc is unknown.

    Returns:
        A populated (not yet factored) BandedSymmetricMatrix with bands=3.
    """
    if n < 1:
        raise ValueError(_GRID_SIZE_ERROR.format(n=n))
    if bc not in {"absorbing", "neumann"}:
        raise ValueError(_UNKNOWN_BC_ERROR.format(bc=bc))

    factor = coeff / dx**2
    matrix = BandedSymmetricMatrix(n, 3, options=options)

    main_diag = matrix.band(0)
    main_diag[:] = -2.0 * factor
    if bc == "neumann":
        main_diag[0] = -1.0 * factor
        main_diag[-1] = -1.0 * factor

    if n > 1:
        matrix.band(1)[:] = factor

    return matrix


# =============================================================================
# Conversions
# =============================================================================


def from_dense(
    a: ArrayLike,
    bands: int,
    *,
    options: MatrixOptions | None = None,
) -> BandedSymmetricMatrix:
    """
    Copy the band of a dense square array into a new banded matrix.

    Only the lower triangle is read; entries outside the band are dropped.

    Args:
        a: Square 2D array-like.
        bands: Number of stored diagonals, 2*b + 1.
        options: Optional MatrixOptions for the new matrix.

    Raises:
        ValueError: If a is not a square 2D array.

    Returns:
        A populated BandedSymmetricMatrix.
    """
    arr = np.asarray(a, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError(_SQUARE_ERROR.format(shape=arr.shape))

    matrix = BandedSymmetricMatrix(arr.shape[0], bands, options=options)
    for k in _stored_bands(matrix):
        matrix.band(k)[:] = np.diagonal(arr, offset=-k)
    return matrix


def to_dense(matrix: BandedSymmetricMatrix) -> FloatArray:
    """
    Expand a populated banded matrix to a dense symmetric array.

    Args:
        matrix: Matrix to expand (before factor()).

    Returns:
        A (dim, dim) float64 array.
    """
    n = matrix.dim
    out = np.zeros((n, n), dtype=np.float64)
    for k in _stored_bands(matrix):
        idx = np.arange(n - k)
        values = matrix.band(k)
        out[idx + k, idx] = values
        out[idx, idx + k] = values
    return out


def to_csr(matrix: BandedSymmetricMatrix) -> csr_matrix:
    """
    Convert a populated banded matrix to a SciPy CSR matrix.

    Args:
        matrix: Matrix to convert (before factor()).

    Returns:
        A (dim, dim) csr_matrix with both triangles filled in.
    """
    diagonals: list[FloatArray] = []
    offsets: list[int] = []
    for k in _stored_bands(matrix):
        values = np.array(matrix.band(k), copy=True)
        if k == 0:
            diagonals.append(values)
            offsets.append(0)
        else:
            diagonals.extend((values, values))
            offsets.extend((-k, k))

    out = diags(
        diagonals,
        offsets,
        shape=(matrix.dim, matrix.dim),
        dtype=np.float64,
    )
    return cast("csr_matrix", out.tocsr())


def to_lapack_lower(matrix: BandedSymmetricMatrix) -> FloatArray:
    """
    Convert a populated banded matrix to LAPACK lower banded form.

    The result `ab` satisfies `ab[i - j, j] == A[i, j]` for `j <= i`, which is
    the layout `scipy.linalg.solveh_banded(ab, b, lower=True)` expects.

    Args:
        matrix: Matrix to convert (before factor()).

    Returns:
        A (bandwidth + 1, dim) float64 array.
    """
    n = matrix.dim
    ab = np.zeros((matrix.bandwidth + 1, n), dtype=np.float64)
    for k in _stored_bands(matrix):
        ab[k, : n - k] = matrix.band(k)
    return ab


# =============================================================================
# Factor access and reusable solvers
# =============================================================================


def ldl_factors(matrix: BandedSymmetricMatrix) -> tuple[FloatArray, FloatArray]:
    """
    Read the explicit LDL^T factors out of a factored matrix.

    Args:
        matrix: A matrix on which factor() has been called.

    Returns:
        Tuple (L, D): L is a dense (dim, dim) unit lower-triangular array and
        D is the 1D diagonal, so that `L @ np.diag(D) @ L.T` reproduces the
        matrix as it was before factor().
    """
    n = matrix.dim
    lower = np.eye(n, dtype=np.float64)
    for k in _stored_bands(matrix):
        if k == 0:
            continue
        idx = np.arange(n - k)
        lower[idx + k, idx] = matrix.band(k)
    return lower, np.array(matrix.band(0), dtype=np.float64, copy=True)


def factorized(
    matrix: BandedSymmetricMatrix,
) -> Callable[[ArrayLike], FloatArray]:
    """
    Factor a populated matrix and return a reusable solver.

    The matrix is factored in place exactly once, here. The returned callable
    leaves its argument untouched: it solves a float64 copy and returns it.

    Args:
        matrix: Populated matrix; it must not have been factored yet.

    Returns:
        A callable mapping a 1D (dim,) or 2D (dim, n_rhs) right-hand side to
        the solution of the same shape.
    """
    matrix.factor()
    dim = matrix.dim

    def solve(rhs: ArrayLike) -> FloatArray:
        """
        Solve A @ y = rhs using the stored factorization.

        Args:
            rhs: 1D or 2D right-hand side with leading dimension dim.

        Raises:
            ValueError: If rhs has the wrong rank or leading dimension.

        Returns:
            The solution as a new float64 array.
        """
        out = np.array(rhs, dtype=np.float64, copy=True)
        if out.ndim not in {1, 2}:
            raise ValueError(_RHS_NDIM_ERROR.format(ndim=out.ndim))
        if out.shape[0] != dim:
            raise ValueError(_RHS_DIM_ERROR.format(shape=out.shape, dim=dim))
        matrix.solve(out)
        return out

    return solve
