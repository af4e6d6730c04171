# -*- coding: utf-8 -*-
"""
Reprojection Backend Detection - Detect available geospatial libraries.

Probes for rasterio (GDAL bindings used to read and warp rasters) and
pyproj (CRS resolution) at import time. Provides boolean flags and a
helper that the CRS resolver and warp service call before touching
either library.

Dependencies
------------
rasterio
pyproj

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
2026-10-12
"""

# Standard library
from typing import List

_HAS_RASTERIO = False
_HAS_PYPROJ = False

try:
    import rasterio  # noqa: F401
    _HAS_RASTERIO = True
except ImportError:
    pass

try:
    import pyproj  # noqa: F401
    _HAS_PYPROJ = True
except ImportError:
    pass


def require_reprojection_backend(feature: str = "Raster reprojection") -> None:
    """Verify that rasterio and pyproj are installed.

    Raises a single ``ImportError`` listing all missing packages so users
    can install everything in one step.

    Parameters
    ----------
    feature : str
        Name of the calling feature, used in the error message.

    Raises
    ------
    ImportError
        If rasterio or pyproj (or both) are not installed.
    """
    missing: List[str] = []
    if not _HAS_RASTERIO:
        missing.append('rasterio')
    if not _HAS_PYPROJ:
        missing.append('pyproj')

    if missing:
        packages = ' '.join(missing)
        raise ImportError(
            f"{feature} requires {', '.join(missing)}. "
            f"Install with: pip install {packages}"
        )
