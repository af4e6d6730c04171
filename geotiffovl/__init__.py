# -*- coding: utf-8 -*-
"""
geotiffovl - Georeferenced raster overlays for projected map canvases.

Overlays a georeferenced raster (e.g. a GeoTIFF) onto a 2D map whose
display projection the user can change. The raster is warped into the
display CRS whenever that CRS changes, converted into a drawable image
honouring band count, bit depth and colour interpretation, and placed on
screen at every repaint from three projected reference points.

Dependencies
------------
numpy
rasterio
pyproj
Pillow

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from geotiffovl.exceptions import (
    OverlayError,
    ValidationError,
    SingularTransformError,
    UnsupportedSampleTypeError,
    RasterReadError,
    InvalidProjectionError,
    NotGeoreferencedError,
)
from geotiffovl.vocabulary import (
    SampleType,
    ColorInterpretation,
    ColorModelKind,
    ResamplingMethod,
)
from geotiffovl.geolocation import AffineGeoTransform, forward, inverse, resolve_crs
from geotiffovl.image import DrawableImage, assemble, assemble_from_source
from geotiffovl.display import (
    ScreenPlacement,
    compute_placement,
    Viewport,
    RasterOverlayLayer,
)
from geotiffovl.reprojection import ReprojectionCache, CacheState
from geotiffovl.IO import InMemoryRasterSource, open_raster

__all__ = [
    'OverlayError',
    'ValidationError',
    'SingularTransformError',
    'UnsupportedSampleTypeError',
    'RasterReadError',
    'InvalidProjectionError',
    'NotGeoreferencedError',
    'SampleType',
    'ColorInterpretation',
    'ColorModelKind',
    'ResamplingMethod',
    'AffineGeoTransform',
    'forward',
    'inverse',
    'resolve_crs',
    'DrawableImage',
    'assemble',
    'assemble_from_source',
    'ScreenPlacement',
    'compute_placement',
    'Viewport',
    'RasterOverlayLayer',
    'ReprojectionCache',
    'CacheState',
    'InMemoryRasterSource',
    'open_raster',
]
