# -*- coding: utf-8 -*-
"""
Overlay Exception Hierarchy - Domain-specific exceptions for raster overlays.

Provides a small exception hierarchy that lets the hosting map application
catch overlay errors distinctly from Python built-in exceptions. All
exceptions subclass both ``OverlayError`` and the appropriate built-in
exception for backward compatibility.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-12

Modified
--------
2026-10-19
"""

from typing import Optional


class OverlayError(Exception):
    """Base exception for all geotiffovl errors."""


class ValidationError(OverlayError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for wrong coefficient counts, non-positive image sizes,
    missing palettes, and other input validation failures.
    """


class SingularTransformError(OverlayError, ValueError):
    """Affine geotransform cannot be inverted.

    Raised when the determinant ``c1*c5 - c2*c4`` of the linear part is
    zero (or numerically indistinguishable from zero).
    """

    def __init__(self, message: str, determinant: float = 0.0) -> None:
        super().__init__(message)
        self.determinant = determinant


class UnsupportedSampleTypeError(OverlayError, TypeError):
    """Raster samples are not 8-bit unsigned, 16-bit unsigned or 32-bit signed."""

    def __init__(self, message: str, dtype: Optional[str] = None) -> None:
        super().__init__(message)
        self.dtype = dtype


class RasterReadError(OverlayError, IOError):
    """Reading or decoding raster samples failed.

    The cache is left in its prior state; the next reprojection attempt
    reads the source again.
    """

    def __init__(self, message: str, band: Optional[int] = None) -> None:
        super().__init__(message)
        self.band = band


class InvalidProjectionError(OverlayError, ValueError):
    """A CRS code could not be resolved to a coordinate reference system.

    Attributes
    ----------
    code : str
        The exact code that failed to resolve.
    """

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"'{code}' is not a valid projection."
        super().__init__(message)
        self.code = code


class NotGeoreferencedError(OverlayError, RuntimeError):
    """Source raster has neither an affine transform nor ground control points.

    Not retryable until the underlying source changes.
    """
