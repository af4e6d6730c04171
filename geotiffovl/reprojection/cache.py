# -*- coding: utf-8 -*-
"""
Reprojection Cache - Keep a raster reprojected into the display CRS.

``ReprojectionCache`` is a two-state machine, EMPTY or READY(crs_code).
``ensure_current`` re-derives the displayed image only when the cache is
EMPTY or the requested display CRS code differs from the cached one; a
repeated request for the cached code is a no-op.

A re-derivation resolves the CRS code, warps the source into it, takes
the warped raster's own geotransform, and assembles a drawable image.
The ``(image, geotransform, crs_code)`` triple is installed in a single
assignment after every step succeeded; any failure leaves the previous
triple untouched, and the next call retries.

The cache is not thread-safe. Use one cache per displayed layer and call
it from the paint thread only.

Dependencies
------------
rasterio (default warp service)
pyproj (default CRS resolver)

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
2026-10-19
"""

# Standard library
import logging
from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple, TYPE_CHECKING

# geotiffovl internal
from geotiffovl.config import DEFAULT_WARP_OPTIONS, WarpOptions
from geotiffovl.display.placement import ScreenPlacement, compute_placement
from geotiffovl.exceptions import (
    InvalidProjectionError,
    NotGeoreferencedError,
    SingularTransformError,
)
from geotiffovl.geolocation.crs import resolve_crs
from geotiffovl.geolocation.geotransform import AffineGeoTransform, forward
from geotiffovl.image.assembler import assemble_from_source
from geotiffovl.image.models import DrawableImage

if TYPE_CHECKING:
    from geotiffovl.IO.base import RasterSource
    from geotiffovl.reprojection.warp import WarpService

logger = logging.getLogger(__name__)

_NOT_GEOREFERENCED = (
    "Source image could not be reprojected. It is probably not properly "
    "georeferenced."
)


class CacheState(Enum):
    """Lifecycle state of a ``ReprojectionCache``."""

    EMPTY = "empty"
    READY = "ready"


class _CacheEntry(NamedTuple):
    image: DrawableImage
    geo_transform: AffineGeoTransform
    crs_code: str


class ReprojectionCache:
    """Cache of a raster reprojected into the current display CRS.

    Parameters
    ----------
    warp_service : WarpService, optional
        Reprojection backend. Defaults to ``RasterioWarpService``.
    crs_resolver : callable, optional
        ``code -> CRS definition``; must raise ``InvalidProjectionError``
        for unknown codes. Defaults to :func:`resolve_crs`.
    assembler : callable, optional
        ``RasterSource -> DrawableImage``. Defaults to
        :func:`assemble_from_source`.
    options : WarpOptions, optional
        Resampling kernel and approximation tolerance for the warp.

    Examples
    --------
    >>> cache = ReprojectionCache()
    >>> image = cache.ensure_current(source, 'EPSG:3857')
    >>> placement = cache.placement(viewport.projected_to_screen)
    """

    def __init__(
        self,
        warp_service: Optional['WarpService'] = None,
        crs_resolver: Callable[[str], object] = resolve_crs,
        assembler: Callable[['RasterSource'], DrawableImage] = assemble_from_source,
        options: WarpOptions = DEFAULT_WARP_OPTIONS,
    ) -> None:
        if warp_service is None:
            from geotiffovl.reprojection.warp import RasterioWarpService
            warp_service = RasterioWarpService()
        self._warp_service = warp_service
        self._crs_resolver = crs_resolver
        self._assembler = assembler
        self.options = options
        self._entry: Optional[_CacheEntry] = None
        self._unreferenced_source: Optional['RasterSource'] = None

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------
    @property
    def state(self) -> CacheState:
        return CacheState.EMPTY if self._entry is None else CacheState.READY

    @property
    def crs_code(self) -> str:
        """CRS code of the cached image, ``''`` while EMPTY."""
        return self._entry.crs_code if self._entry is not None else ''

    @property
    def image(self) -> Optional[DrawableImage]:
        return self._entry.image if self._entry is not None else None

    @property
    def geo_transform(self) -> Optional[AffineGeoTransform]:
        return self._entry.geo_transform if self._entry is not None else None

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        """``(width, height)`` of the cached image in pixels."""
        return self._entry.image.size if self._entry is not None else None

    @property
    def origin(self) -> Optional[Tuple[float, float]]:
        """Projected coordinates of the cached image's pixel (0, 0)."""
        return self._entry.geo_transform.origin if self._entry is not None else None

    def needs_update(self, target_crs_code: str) -> bool:
        """Whether :meth:`ensure_current` would re-derive the image."""
        return self._entry is None or self._entry.crs_code != target_crs_code

    def reset(self) -> None:
        """Drop the cached triple, returning to EMPTY.

        Also forgets a source previously found to be not georeferenced.
        """
        self._entry = None
        self._unreferenced_source = None

    # -----------------------------------------------------------------
    # Re-derivation
    # -----------------------------------------------------------------
    def ensure_current(self, source: 'RasterSource', target_crs_code: str) -> DrawableImage:
        """Return the image for *target_crs_code*, reprojecting if needed.

        Parameters
        ----------
        source : RasterSource
            Source raster owned by the caller; read only.
        target_crs_code : str
            Display CRS code, e.g. ``'EPSG:3857'``.

        Returns
        -------
        DrawableImage

        Raises
        ------
        InvalidProjectionError
            If the code cannot be resolved. ``error.code`` is the code.
        NotGeoreferencedError
            If the source has no transform and no ground control points.
            The same source object is not warped again until :meth:`reset`.
        SingularTransformError
            If the reprojected geotransform cannot be inverted.
        RasterReadError
            If reading or warping the raster fails.
        UnsupportedSampleTypeError
            If the warped samples are not uint8, uint16 or int32.
        """
        if not self.needs_update(target_crs_code):
            logger.debug("Reprojection cache hit for %s", target_crs_code)
            return self._entry.image

        target_crs = self._resolve(target_crs_code)
        if source is self._unreferenced_source:
            raise NotGeoreferencedError(_NOT_GEOREFERENCED)

        opts = self.options
        warped = self._warp_service.warp(
            source,
            target_crs,
            resampling=opts.resampling,
            max_pixel_error=opts.max_pixel_error,
        )
        if warped is None:
            self._unreferenced_source = source
            raise NotGeoreferencedError(_NOT_GEOREFERENCED)

        try:
            geo_transform = warped.geo_transform
            if geo_transform is None:
                self._unreferenced_source = source
                raise NotGeoreferencedError(_NOT_GEOREFERENCED)
            if not geo_transform.is_invertible:
                raise SingularTransformError(
                    f"Reprojected geotransform {geo_transform.to_gdal()} "
                    f"is singular",
                    determinant=geo_transform.determinant,
                )
            image = self._assembler(warped)
        finally:
            warped.close()

        self._entry = _CacheEntry(image, geo_transform, target_crs_code)
        logger.info("Reprojected raster to %s: %dx%d, origin (%g, %g)",
                    target_crs_code, image.width, image.height,
                    geo_transform.c0, geo_transform.c3)
        return image

    def _resolve(self, code: str) -> object:
        try:
            return self._crs_resolver(code)
        except InvalidProjectionError as e:
            if e.code == code:
                raise
            raise InvalidProjectionError(code, str(e)) from e
        except (ValueError, LookupError, RuntimeError) as e:
            raise InvalidProjectionError(
                code, f"'{code}' is not a valid projection: {e}"
            ) from e

    # -----------------------------------------------------------------
    # Derived geometry
    # -----------------------------------------------------------------
    def placement(
        self,
        projected_to_screen: Callable[[float, float], Tuple[float, float]],
    ) -> Optional[ScreenPlacement]:
        """Screen placement of the cached image, ``None`` while EMPTY."""
        if self._entry is None:
            return None
        width, height = self._entry.image.size
        return compute_placement(
            self._entry.geo_transform, width, height, projected_to_screen
        )

    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Projected ``(min_x, min_y, max_x, max_y)`` of the cached image.

        Spans the origin and the bottom-right pixel ``(width-1, height-1)``.
        ``None`` while EMPTY.
        """
        if self._entry is None:
            return None
        width, height = self._entry.image.size
        gt = self._entry.geo_transform
        x0, y0 = forward(0, 0, gt)
        x1, y1 = forward(width - 1, height - 1, gt)
        return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))
