# -*- coding: utf-8 -*-
"""
Reprojection Module - Warp rasters into the display CRS and cache them.

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
2026-10-15

Modified
--------
2026-10-15
"""

from geotiffovl.reprojection.cache import CacheState, ReprojectionCache
from geotiffovl.reprojection.warp import RasterioWarpService, WarpService

__all__ = [
    'CacheState',
    'ReprojectionCache',
    'RasterioWarpService',
    'WarpService',
]
