# -*- coding: utf-8 -*-
"""
Screen Placement - Place a reprojected image on the screen at paint time.

The image is drawn with an axis-aligned affine placement::

    screen_x = scale_x * px + translate_x
    screen_y = scale_y * py + translate_y

Translation comes from the screen position of the image origin. The
scales come from the screen positions of the upper-right pixel
``(width-1, 0)`` and the bottom-right pixel ``(width-1, height-1)``,
divided by the pixel distance between them. Nothing is cached: the
viewport's mapping changes with every pan and zoom.

Rotation and shear are not modelled. A display CRS that shears the image
at the current zoom misplaces its corners.

For a 1-pixel-wide (or tall) image the pixel distance is zero; the scale
on that axis is then 0.0 and the image collapses to a line (or point) at
the translation.

Dependencies
------------
rasterio (optional, for ``to_affine``)

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
2026-10-16

Modified
--------
2026-10-19
"""

# Standard library
from dataclasses import dataclass
from typing import Callable, Tuple, TYPE_CHECKING

# geotiffovl internal
from geotiffovl.exceptions import ValidationError
from geotiffovl.geolocation.geotransform import GeoTransformLike, forward

if TYPE_CHECKING:
    from rasterio.transform import Affine
    from geotiffovl.image.models import DrawableImage

ProjectedToScreen = Callable[[float, float], Tuple[float, float]]


@dataclass(frozen=True)
class ScreenPlacement:
    """Translation and independent axis scales of an image on screen.

    Parameters
    ----------
    translate_x : float
        Screen x of the image origin.
    translate_y : float
        Screen y of the image origin.
    scale_x : float
        Screen pixels per image column.
    scale_y : float
        Screen pixels per image row; negative when the display y axis
        runs opposite to the image rows.
    """

    translate_x: float
    translate_y: float
    scale_x: float
    scale_y: float

    @property
    def is_degenerate(self) -> bool:
        """True when either scale is zero (line or point rendering)."""
        return self.scale_x == 0.0 or self.scale_y == 0.0

    def apply(self, px: float, py: float) -> Tuple[float, float]:
        """Screen position of image pixel ``(px, py)``."""
        return (self.scale_x * px + self.translate_x,
                self.scale_y * py + self.translate_y)

    def to_affine(self) -> 'Affine':
        """Placement as ``translation * scale`` rasterio ``Affine``."""
        from rasterio.transform import Affine
        return (Affine.translation(self.translate_x, self.translate_y)
                * Affine.scale(self.scale_x, self.scale_y))


def compute_placement(
    geo_transform: GeoTransformLike,
    width: int,
    height: int,
    projected_to_screen: ProjectedToScreen,
) -> ScreenPlacement:
    """Derive the screen placement of an image from three reference points.

    Parameters
    ----------
    geo_transform : AffineGeoTransform or sequence of 6 floats
        Geotransform of the (reprojected) image.
    width : int
        Image width in pixels.
    height : int
        Image height in pixels.
    projected_to_screen : callable
        ``(x, y) -> (screen_x, screen_y)`` for the current viewport.

    Returns
    -------
    ScreenPlacement

    Raises
    ------
    ValidationError
        If *width* or *height* is less than 1.

    Examples
    --------
    >>> p = compute_placement([500, 2, 0, 1000, 0, -2], 101, 101,
    ...                       lambda x, y: (x, y))
    >>> (p.translate_x, p.translate_y, p.scale_x, p.scale_y)
    (500.0, 1000.0, 2.0, -2.0)
    """
    if width < 1 or height < 1:
        raise ValidationError(
            f"Image size must be positive, got {width}x{height}"
        )

    origin_sx, origin_sy = projected_to_screen(*forward(0, 0, geo_transform))
    upper_right_sx, upper_right_sy = projected_to_screen(
        *forward(width - 1, 0, geo_transform)
    )
    _, bottom_right_sy = projected_to_screen(
        *forward(width - 1, height - 1, geo_transform)
    )

    scale_x = (upper_right_sx - origin_sx) / (width - 1) if width > 1 else 0.0
    scale_y = (bottom_right_sy - upper_right_sy) / (height - 1) if height > 1 else 0.0

    return ScreenPlacement(
        translate_x=float(origin_sx),
        translate_y=float(origin_sy),
        scale_x=float(scale_x),
        scale_y=float(scale_y),
    )


def placement_for_image(
    image: 'DrawableImage',
    geo_transform: GeoTransformLike,
    projected_to_screen: ProjectedToScreen,
) -> ScreenPlacement:
    """:func:`compute_placement` using *image*'s pixel dimensions."""
    return compute_placement(
        geo_transform, image.width, image.height, projected_to_screen
    )
