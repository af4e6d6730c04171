# -*- coding: utf-8 -*-
"""
GeoTransform - Six-coefficient affine mapping between pixels and map space.

Pure functions converting raster pixel coordinates to projected (map)
coordinates and back. Coefficients use the GDAL ordering::

    x = c0 + px * c1 + py * c2
    y = c3 + px * c4 + py * c5

where ``px`` is the column (pixel) and ``py`` the row (line). Both
directions accept Python scalars or numpy arrays and are fully vectorized.

The inverse solves the 2x2 linear system directly by Cramer's rule and
refuses to divide by a (numerically) zero determinant.

Dependencies
------------
numpy
rasterio (optional, for ``Affine`` interop)

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

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

# Standard library
from dataclasses import dataclass
from typing import Sequence, Tuple, Union, TYPE_CHECKING

# Third-party
import numpy as np

# geotiffovl internal
from geotiffovl.config import SINGULAR_EPSILON
from geotiffovl.exceptions import SingularTransformError, ValidationError

if TYPE_CHECKING:
    from rasterio.transform import Affine

Coordinate = Union[float, np.ndarray]


@dataclass(frozen=True)
class AffineGeoTransform:
    """Six affine coefficients in GDAL order.

    Parameters
    ----------
    c0 : float
        Map x of the upper-left corner of pixel (0, 0).
    c1 : float
        Map x change per column.
    c2 : float
        Map x change per row (rotation/shear term).
    c3 : float
        Map y of the upper-left corner of pixel (0, 0).
    c4 : float
        Map y change per column (rotation/shear term).
    c5 : float
        Map y change per row; negative for north-up rasters.

    Examples
    --------
    >>> gt = AffineGeoTransform(500.0, 2.0, 0.0, 1000.0, 0.0, -2.0)
    >>> gt.forward(10, 10)
    (520.0, 980.0)
    >>> gt.inverse(520.0, 980.0)
    (10.0, 10.0)
    """

    c0: float
    c1: float
    c2: float
    c3: float
    c4: float
    c5: float

    @classmethod
    def from_gdal(cls, coefficients: Sequence[float]) -> 'AffineGeoTransform':
        """Build from a GDAL-ordered sequence of six coefficients.

        Raises
        ------
        ValidationError
            If the sequence does not hold exactly six values.
        """
        values = tuple(float(c) for c in coefficients)
        if len(values) != 6:
            raise ValidationError(
                f"A geotransform needs 6 coefficients, got {len(values)}"
            )
        return cls(*values)

    @classmethod
    def from_affine(cls, affine: 'Affine') -> 'AffineGeoTransform':
        """Build from a ``rasterio.transform.Affine`` (a, b, c, d, e, f)."""
        return cls.from_gdal(affine.to_gdal())

    def to_gdal(self) -> Tuple[float, float, float, float, float, float]:
        """Coefficients as a GDAL-ordered tuple."""
        return (self.c0, self.c1, self.c2, self.c3, self.c4, self.c5)

    def to_affine(self) -> 'Affine':
        """Convert to a ``rasterio.transform.Affine``."""
        from rasterio.transform import Affine
        return Affine.from_gdal(*self.to_gdal())

    @property
    def origin(self) -> Tuple[float, float]:
        """Map coordinates of the upper-left corner of pixel (0, 0)."""
        return (self.c0, self.c3)

    @property
    def determinant(self) -> float:
        """Determinant ``c1*c5 - c2*c4`` of the linear part."""
        return self.c1 * self.c5 - self.c2 * self.c4

    @property
    def is_invertible(self) -> bool:
        return not _is_singular(self.c1, self.c2, self.c4, self.c5)

    def forward(self, px: Coordinate, py: Coordinate) -> Tuple[Coordinate, Coordinate]:
        """Pixel to map coordinates. See :func:`forward`."""
        return forward(px, py, self)

    def inverse(self, x: Coordinate, y: Coordinate) -> Tuple[Coordinate, Coordinate]:
        """Map to pixel coordinates. See :func:`inverse`."""
        return inverse(x, y, self)


GeoTransformLike = Union[AffineGeoTransform, Sequence[float]]


def _coefficients(gt: GeoTransformLike) -> Tuple[float, ...]:
    if isinstance(gt, AffineGeoTransform):
        return gt.to_gdal()
    return AffineGeoTransform.from_gdal(gt).to_gdal()


def _is_singular(c1: float, c2: float, c4: float, c5: float) -> bool:
    det = c1 * c5 - c2 * c4
    scale = max(abs(c1 * c5), abs(c2 * c4))
    return det == 0.0 or abs(det) <= SINGULAR_EPSILON * scale


def forward(
    px: Coordinate,
    py: Coordinate,
    gt: GeoTransformLike,
) -> Tuple[Coordinate, Coordinate]:
    """Map pixel coordinates to projected coordinates.

    Applies ``x = c0 + px*c1 + py*c2`` and ``y = c3 + px*c4 + py*c5``
    exactly, without rounding.

    Parameters
    ----------
    px : float or np.ndarray
        Column (pixel) coordinate(s).
    py : float or np.ndarray
        Row (line) coordinate(s).
    gt : AffineGeoTransform or sequence of 6 floats
        GDAL-ordered geotransform.

    Returns
    -------
    Tuple[float or np.ndarray, float or np.ndarray]
        ``(x, y)`` in the CRS of the geotransform.
    """
    c0, c1, c2, c3, c4, c5 = _coefficients(gt)
    x = c0 + px * c1 + py * c2
    y = c3 + px * c4 + py * c5
    return x, y


def inverse(
    x: Coordinate,
    y: Coordinate,
    gt: GeoTransformLike,
) -> Tuple[Coordinate, Coordinate]:
    """Map projected coordinates back to pixel coordinates.

    Solves the 2x2 system of :func:`forward` by Cramer's rule with
    denominator ``D = c1*c5 - c2*c4``.

    Parameters
    ----------
    x : float or np.ndarray
        Projected x coordinate(s).
    y : float or np.ndarray
        Projected y coordinate(s).
    gt : AffineGeoTransform or sequence of 6 floats
        GDAL-ordered geotransform.

    Returns
    -------
    Tuple[float or np.ndarray, float or np.ndarray]
        ``(px, py)`` pixel (column, row) coordinates.

    Raises
    ------
    SingularTransformError
        If ``D`` is zero or within a relative epsilon of zero.
    """
    c0, c1, c2, c3, c4, c5 = _coefficients(gt)
    det = c1 * c5 - c2 * c4
    if _is_singular(c1, c2, c4, c5):
        raise SingularTransformError(
            f"Geotransform {(c0, c1, c2, c3, c4, c5)} is not invertible "
            f"(determinant {det!r})",
            determinant=det,
        )

    dx = x - c0
    dy = y - c3
    px = (dx * c5 - c2 * dy) / det
    py = (c1 * dy - c4 * dx) / det
    return px, py
