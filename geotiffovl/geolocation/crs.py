# -*- coding: utf-8 -*-
"""
CRS Resolver - Turn display projection codes into CRS definitions.

Display projections are named by short codes. ``"EPSG:<n>"`` codes are
looked up numerically in the EPSG registry; anything else is treated as
the name of a well-known geographic coordinate system (``WGS84``,
``NAD83``, ...), matched case-insensitively.

Dependencies
------------
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
2026-10-13

Modified
--------
2026-10-19
"""

# Standard library
from typing import TYPE_CHECKING

# geotiffovl internal
from geotiffovl.exceptions import InvalidProjectionError
from geotiffovl.geolocation._backend import require_reprojection_backend

if TYPE_CHECKING:
    import pyproj

#: Well-known geographic coordinate systems and their registry identifiers.
WELL_KNOWN_GEOGCS = {
    'WGS84': 'EPSG:4326',
    'WGS72': 'EPSG:4322',
    'NAD27': 'EPSG:4267',
    'NAD83': 'EPSG:4269',
    'CRS84': 'OGC:CRS84',
    'CRS83': 'OGC:CRS83',
    'CRS27': 'OGC:CRS27',
}


def resolve_crs(code: str) -> 'pyproj.CRS':
    """Resolve a projection code to a ``pyproj.CRS``.

    Parameters
    ----------
    code : str
        ``"EPSG:<n>"`` or a well-known geographic system name.

    Returns
    -------
    pyproj.CRS

    Raises
    ------
    InvalidProjectionError
        If the code is malformed or unknown. The exception's ``code``
        attribute is the exact string passed in.
    ImportError
        If pyproj is not installed.
    """
    require_reprojection_backend("CRS resolution")
    import pyproj
    from pyproj.exceptions import CRSError

    if not isinstance(code, str) or not code.strip():
        raise InvalidProjectionError(code)

    if code.startswith('EPSG:'):
        try:
            epsg = int(code.split(':', 1)[1])
        except ValueError:
            raise InvalidProjectionError(code) from None
        try:
            return pyproj.CRS.from_epsg(epsg)
        except CRSError as e:
            raise InvalidProjectionError(
                code, f"'{code}' is not a valid projection: {e}"
            ) from e

    identifier = WELL_KNOWN_GEOGCS.get(code.strip().upper())
    if identifier is None:
        raise InvalidProjectionError(code)
    return pyproj.CRS.from_user_input(identifier)


def crs_to_wkt(code: str, pretty: bool = False) -> str:
    """Resolve *code* and export it as WKT.

    Raises
    ------
    InvalidProjectionError
        If the code cannot be resolved.
    """
    return resolve_crs(code).to_wkt(pretty=pretty)


def describe_crs(user_input: str) -> str:
    """Pretty WKT for any CRS string pyproj understands (code or WKT).

    Used for source rasters, whose CRS may not be a display code.

    Raises
    ------
    InvalidProjectionError
        If pyproj cannot parse *user_input*.
    """
    require_reprojection_backend("CRS resolution")
    import pyproj
    from pyproj.exceptions import CRSError

    try:
        return pyproj.CRS.from_user_input(user_input).to_wkt(pretty=True)
    except CRSError as e:
        raise InvalidProjectionError(
            user_input, f"'{user_input}' is not a valid projection: {e}"
        ) from e
