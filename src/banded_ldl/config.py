# src/banded_ldl/config.py
"""Pydantic configuration model for building banded matrices.

This lets a matrix be described in YAML/JSON/dict form (for example as part
of a larger solver configuration) and translated into native banded_ldl
objects.

Notes:
    - Unknown fields are allowed and ignored (`extra="allow"`), so the model can
      sit inside a larger configuration document.
    - Validation here mirrors the constructor checks; building from a valid
      config cannot raise InvalidBandwidthError.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .matrix import BandedSymmetricMatrix, MatrixOptions

_BANDS_ODD_ERROR = "bands must be odd (bands = 2*b + 1); got {bands}"


class BandedMatrixConfig(BaseModel):
    """Configuration schema for a BandedSymmetricMatrix."""

    model_config = ConfigDict(extra="allow")

    dim: int = Field(gt=0, description="Matrix order")

    bands: int = Field(
        default=3,
        gt=0,
        description="Number of stored diagonals of the full matrix, 2*b + 1",
    )

    debug: bool = Field(
        default=False,
        description="Enable caller-contract checks (slow; for tests only)",
    )

    @model_validator(mode="after")
    def check_bands_odd(self) -> BandedMatrixConfig:
        if self.bands % 2 == 0:
            raise ValueError(_BANDS_ODD_ERROR.format(bands=self.bands))
        return self

    @property
    def bandwidth(self) -> int:
        """Bandwidth b implied by bands."""
        return (self.bands - 1) // 2

    def to_options(self) -> MatrixOptions:
        """Convert this config to native MatrixOptions.

        Returns:
            MatrixOptions instance.
        """
        return MatrixOptions(debug=self.debug)

    def build(self) -> BandedSymmetricMatrix:
        """Allocate a zero matrix described by this config.

        Returns:
            A new BandedSymmetricMatrix.
        """
        return BandedSymmetricMatrix(self.dim, self.bands, options=self.to_options())
