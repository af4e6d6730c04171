# -*- coding: utf-8 -*-
"""
Warp Service - Reproject a raster source into another CRS.

``WarpService`` is the interface the reprojection cache calls on a cache
miss. ``RasterioWarpService`` implements it with a GDAL warped VRT
(``rasterio.vrt.WarpedVRT``): the output grid, size and geotransform are
chosen automatically from the source footprint, samples are resampled
with the requested kernel, and the warp transformer is approximated
within ``max_pixel_error`` source pixels.

Sources not backed by an open rasterio dataset are first written to an
in-memory GeoTIFF (``rasterio.io.MemoryFile``).

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
2026-10-15

Modified
--------
2026-10-19
"""

# Standard library
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional, Union, TYPE_CHECKING

# geotiffovl internal
from geotiffovl.IO.base import RasterSource
from geotiffovl.IO.memory import InMemoryRasterSource
from geotiffovl.exceptions import InvalidProjectionError, RasterReadError
from geotiffovl.geolocation._backend import require_reprojection_backend
from geotiffovl.geolocation.geotransform import AffineGeoTransform
from geotiffovl.vocabulary import ColorInterpretation, ResamplingMethod

if TYPE_CHECKING:
    import pyproj

logger = logging.getLogger(__name__)

_RASTERIO_COLORINTERP = {
    ColorInterpretation.UNDEFINED: 'undefined',
    ColorInterpretation.GRAY: 'gray',
    ColorInterpretation.PALETTE: 'palette',
    ColorInterpretation.RED: 'red',
    ColorInterpretation.GREEN: 'green',
    ColorInterpretation.BLUE: 'blue',
    ColorInterpretation.ALPHA: 'alpha',
}


class WarpService(ABC):
    """Interface for reprojecting a raster source."""

    @abstractmethod
    def warp(
        self,
        source: RasterSource,
        target_crs: 'pyproj.CRS',
        resampling: Union[ResamplingMethod, str] = ResamplingMethod.CUBIC,
        max_pixel_error: float = 0.2,
    ) -> Optional[RasterSource]:
        """
        Reproject *source* into *target_crs*.

        Parameters
        ----------
        source : RasterSource
            Read-only source raster; it is not closed.
        target_crs : pyproj.CRS
            Resolved destination CRS.
        resampling : ResamplingMethod or str, default=CUBIC
        max_pixel_error : float, default=0.2
            Approximation tolerance in source pixels.

        Returns
        -------
        RasterSource or None
            The reprojected raster with its own geotransform, or ``None``
            when the source has no transform and no ground control points.

        Raises
        ------
        InvalidProjectionError
            If the source's own CRS cannot be understood; ``error.code``
            is the source CRS code.
        RasterReadError
            If reading or warping fails.
        """
        pass


class RasterioWarpService(WarpService):
    """Warp service backed by rasterio's ``WarpedVRT``.

    Examples
    --------
    >>> from geotiffovl.geolocation.crs import resolve_crs
    >>> service = RasterioWarpService()
    >>> warped = service.warp(source, resolve_crs('EPSG:3857'))
    """

    def __init__(self) -> None:
        require_reprojection_backend("Raster warping")

    def warp(
        self,
        source: RasterSource,
        target_crs: 'pyproj.CRS',
        resampling: Union[ResamplingMethod, str] = ResamplingMethod.CUBIC,
        max_pixel_error: float = 0.2,
    ) -> Optional[RasterSource]:
        from rasterio._err import CPLE_BaseError
        from rasterio.crs import CRS
        from rasterio.enums import Resampling
        from rasterio.errors import CRSError, RasterioError
        from rasterio.vrt import WarpedVRT

        if not source.is_georeferenced:
            logger.debug("Source has no geotransform or GCPs; not warping")
            return None

        method = ResamplingMethod(resampling) if isinstance(resampling, str) \
            else resampling
        logger.debug("Warping %dx%d source from %s to %s (%s, %.3f px)",
                     source.width, source.height, source.crs_code,
                     target_crs.to_string(), method.value, max_pixel_error)

        try:
            dst_crs = CRS.from_wkt(target_crs.to_wkt())
            with _rasterio_dataset(source) as src, WarpedVRT(
                src,
                crs=dst_crs,
                resampling=Resampling[method.value],
                tolerance=max_pixel_error,
            ) as vrt:
                data = vrt.read()
                transform = vrt.transform
                crs_code = vrt.crs.to_string()
        except (RasterioError, CRSError, CPLE_BaseError) as e:
            raise RasterReadError(f"Reprojection failed: {e}") from e

        interp = source.metadata.get('color_interp')
        return InMemoryRasterSource(
            data,
            crs=crs_code,
            geotransform=AffineGeoTransform.from_affine(transform),
            color_interp=interp if interp else None,
            colormap=source.color_table,
            name='warped',
        )


@contextmanager
def _rasterio_dataset(source: RasterSource) -> Iterator:
    """Yield an open rasterio dataset holding *source*'s samples.

    A source that already wraps an open dataset is yielded as-is and left
    open; otherwise the bands are copied into an in-memory GeoTIFF.
    """
    dataset = getattr(source, 'dataset', None)
    if dataset is not None and not dataset.closed:
        yield dataset
        return

    from rasterio.control import GroundControlPoint
    from rasterio.crs import CRS
    from rasterio.enums import ColorInterp
    from rasterio.errors import CRSError
    from rasterio.io import MemoryFile

    try:
        crs = CRS.from_user_input(source.crs_code)
    except CRSError as e:
        raise InvalidProjectionError(
            source.crs_code,
            f"Source projection '{source.crs_code}' is not a valid "
            f"projection: {e}",
        ) from e
    profile = {
        'driver': 'GTiff',
        'width': source.width,
        'height': source.height,
        'count': source.band_count,
        'dtype': str(source.dtype),
    }
    gt = source.geo_transform
    if gt is not None:
        profile['crs'] = crs
        profile['transform'] = gt.to_affine()

    with MemoryFile() as memfile:
        with memfile.open(**profile) as dst:
            for band in range(source.band_count):
                samples = source.get_band_samples(band)
                dst.write(samples.reshape(source.height, source.width), band + 1)
            if gt is None:
                dst.gcps = (
                    [GroundControlPoint(g.row, g.col, g.x, g.y, g.z)
                     for g in source.gcps],
                    crs,
                )
            interp = source.metadata.get('color_interp') or []
            if ColorInterpretation.PALETTE in interp:
                # GTiff marks the band as palette when a colormap is written
                if source.color_table:
                    dst.write_colormap(
                        1, {i: tuple(c) for i, c in enumerate(source.color_table)}
                    )
            elif interp:
                dst.colorinterp = [
                    ColorInterp[_RASTERIO_COLORINTERP[ci]] for ci in interp
                ]
        with memfile.open() as src:
            yield src
