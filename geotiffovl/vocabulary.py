# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for geotiffovl.

Controlled vocabularies shared by the raster providers, the assembler and
the warp service: sample data types, band colour interpretations, colour
model kinds, and resampling methods.

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

from enum import Enum

import numpy as np


class SampleType(Enum):
    """Supported per-band sample data types.

    Values are the numpy dtype names used for the banded pixel buffers.
    """

    UINT8 = "uint8"
    UINT16 = "uint16"
    INT32 = "int32"

    @property
    def bits(self) -> int:
        """Sample width in bits."""
        return np.dtype(self.value).itemsize * 8

    @property
    def dtype(self) -> np.dtype:
        """Native-order numpy dtype for this sample type."""
        return np.dtype(self.value)


class ColorInterpretation(Enum):
    """Colour interpretation of a raster band.

    Names follow GDAL's ``GCI_*`` vocabulary as exposed by rasterio's
    ``ColorInterp``.
    """

    UNDEFINED = "undefined"
    GRAY = "gray"
    PALETTE = "palette"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    ALPHA = "alpha"


class ColorModelKind(Enum):
    """Colour model attached to a ``DrawableImage``."""

    INDEXED = "indexed"
    GRAY = "gray"
    EXTENDED_GRAY = "extended_gray"
    RGB = "rgb"
    RGBA = "rgba"
    GENERIC = "generic"


class ResamplingMethod(Enum):
    """Resampling kernels available to the warp service."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
    CUBIC = "cubic"
