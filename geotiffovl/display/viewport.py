# -*- coding: utf-8 -*-
"""
Viewport - Pan/zoom mapping between projected and screen coordinates.

A viewport centres a projected coordinate on the screen at a fixed number
of projected units per screen pixel. Screen y grows downward while
projected y (northing) grows upward.

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
2026-10-18
"""

# Standard library
from typing import Tuple

# geotiffovl internal
from geotiffovl.exceptions import ValidationError


class Viewport:
    """Screen window onto projected map coordinates.

    Parameters
    ----------
    center_x : float
        Projected x shown at the screen centre.
    center_y : float
        Projected y shown at the screen centre.
    units_per_pixel : float
        Projected units covered by one screen pixel. Must be positive.
    width : int
        Screen width in pixels.
    height : int
        Screen height in pixels.

    Raises
    ------
    ValidationError
        If the scale or screen size is not positive.
    """

    def __init__(
        self,
        center_x: float,
        center_y: float,
        units_per_pixel: float,
        width: int,
        height: int,
    ) -> None:
        if units_per_pixel <= 0:
            raise ValidationError(
                f"units_per_pixel must be positive, got {units_per_pixel}"
            )
        if width < 1 or height < 1:
            raise ValidationError(
                f"Screen size must be positive, got {width}x{height}"
            )
        self.center_x = float(center_x)
        self.center_y = float(center_y)
        self.units_per_pixel = float(units_per_pixel)
        self.width = int(width)
        self.height = int(height)

    def projected_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        """Screen position of projected point ``(x, y)``."""
        sx = (x - self.center_x) / self.units_per_pixel + self.width / 2.0
        sy = self.height / 2.0 - (y - self.center_y) / self.units_per_pixel
        return sx, sy

    def screen_to_projected(self, sx: float, sy: float) -> Tuple[float, float]:
        """Projected point shown at screen position ``(sx, sy)``."""
        x = self.center_x + (sx - self.width / 2.0) * self.units_per_pixel
        y = self.center_y - (sy - self.height / 2.0) * self.units_per_pixel
        return x, y

    def zoom_to(
        self,
        bounds: Tuple[float, float, float, float],
        margin: float = 0.05,
    ) -> None:
        """Centre on *bounds* and zoom so they fit with a relative margin.

        Parameters
        ----------
        bounds : Tuple[float, float, float, float]
            ``(min_x, min_y, max_x, max_y)`` in projected units.
        margin : float, default=0.05
            Fraction of the extent added on every side.
        """
        min_x, min_y, max_x, max_y = bounds
        self.center_x = (min_x + max_x) / 2.0
        self.center_y = (min_y + max_y) / 2.0
        span_x = (max_x - min_x) * (1.0 + 2.0 * margin)
        span_y = (max_y - min_y) * (1.0 + 2.0 * margin)
        scale = max(span_x / self.width, span_y / self.height)
        if scale > 0:
            self.units_per_pixel = scale

    def __repr__(self) -> str:
        return (f"Viewport(center=({self.center_x:g}, {self.center_y:g}), "
                f"units_per_pixel={self.units_per_pixel:g}, "
                f"size={self.width}x{self.height})")
