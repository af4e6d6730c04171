# -*- coding: utf-8 -*-
"""
Geolocation Module - Affine pixel/map math and CRS resolution.

Usage
-----
>>> from geotiffovl.geolocation import AffineGeoTransform, resolve_crs
>>> gt = AffineGeoTransform(100.0, 1.0, 0.0, 200.0, 0.0, -1.0)
>>> gt.forward(0, 0)
(100.0, 200.0)
>>> crs = resolve_crs('EPSG:3857')

Modules
-------
- geotransform: Six-coefficient affine forward/inverse mapping
- crs: Projection code to ``pyproj.CRS`` resolution

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
2026-10-13
"""

from geotiffovl.geolocation.geotransform import (
    AffineGeoTransform,
    forward,
    inverse,
)
from geotiffovl.geolocation.crs import (
    resolve_crs,
    crs_to_wkt,
    describe_crs,
    WELL_KNOWN_GEOGCS,
)

__all__ = [
    'AffineGeoTransform',
    'forward',
    'inverse',
    'resolve_crs',
    'crs_to_wkt',
    'describe_crs',
    'WELL_KNOWN_GEOGCS',
]
