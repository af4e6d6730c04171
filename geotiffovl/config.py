# -*- coding: utf-8 -*-
"""
Overlay Configuration - Warp options and shared constants.

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
from typing import Union

# geotiffovl internal
from geotiffovl.exceptions import ValidationError
from geotiffovl.vocabulary import ResamplingMethod

#: Relative tolerance for treating an affine determinant as zero.
SINGULAR_EPSILON = 1e-12

#: File extensions accepted as GeoTIFF rasters (compared case-insensitively).
GEOTIFF_EXTENSIONS = ('.tif', '.tiff')


@dataclass(frozen=True)
class WarpOptions:
    """Parameters handed to the warp service on every reprojection.

    Parameters
    ----------
    resampling : ResamplingMethod or str, default=ResamplingMethod.CUBIC
        Resampling kernel. Strings are matched against the enum values.
    max_pixel_error : float, default=0.2
        Maximum error, in source pixels, allowed when the warp transform
        is approximated. Must be positive.

    Raises
    ------
    ValidationError
        If the resampling name is unknown or the error tolerance is not
        positive.
    """

    resampling: Union[ResamplingMethod, str] = ResamplingMethod.CUBIC
    max_pixel_error: float = 0.2

    def __post_init__(self) -> None:
        if not isinstance(self.resampling, ResamplingMethod):
            try:
                method = ResamplingMethod(str(self.resampling).lower())
            except ValueError:
                valid = [m.value for m in ResamplingMethod]
                raise ValidationError(
                    f"Unknown resampling method '{self.resampling}'. "
                    f"Must be one of {valid}"
                ) from None
            object.__setattr__(self, 'resampling', method)
        if self.max_pixel_error <= 0:
            raise ValidationError(
                f"max_pixel_error must be positive, got {self.max_pixel_error}"
            )


DEFAULT_WARP_OPTIONS = WarpOptions()
