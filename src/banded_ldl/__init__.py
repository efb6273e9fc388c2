"""banded_ldl: compact symmetric banded matrices with an in-place LDL^T solver."""

from __future__ import annotations

from .config import BandedMatrixConfig
from .errors import (
    BandedLDLError,
    InvalidBandwidthError,
    InvalidDimensionError,
    MatrixPhaseError,
)
from .matrix import BandedSymmetricMatrix, MatrixOptions, MatrixPhase
from .operators import (
    build_laplacian_banded,
    factorized,
    from_dense,
    ldl_factors,
    to_csr,
    to_dense,
    to_lapack_lower,
)

__all__ = [
    "BandedLDLError",
    "BandedMatrixConfig",
    "BandedSymmetricMatrix",
    "InvalidBandwidthError",
    "InvalidDimensionError",
    "MatrixOptions",
    "MatrixPhase",
    "MatrixPhaseError",
    "build_laplacian_banded",
    "factorized",
    "from_dense",
    "ldl_factors",
    "to_csr",
    "to_dense",
    "to_lapack_lower",
]

__version__ = "0.1.0"
