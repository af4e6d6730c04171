# -*- coding: utf-8 -*-
"""
IO Module - Raster sources for the overlay.

Provides the ``RasterSource`` interface and its implementations: GeoTIFF
files read through rasterio, and in-memory numpy rasters used for warp
results and synthetic data.

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
2026-10-13

Modified
--------
2026-10-13
"""

from geotiffovl.IO.base import RasterSource, GroundControlPoint
from geotiffovl.IO.memory import InMemoryRasterSource
from geotiffovl.IO.geotiff import GeoTIFFRasterSource, open_raster, is_geotiff_path

__all__ = [
    'RasterSource',
    'GroundControlPoint',
    'InMemoryRasterSource',
    'GeoTIFFRasterSource',
    'open_raster',
    'is_geotiff_path',
]
