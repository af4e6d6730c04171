# -*- coding: utf-8 -*-
"""
GeoTIFF Raster Source - Read GeoTIFF imagery through rasterio (GDAL).

Opens any GDAL-readable GeoTIFF, extracts its CRS, affine geotransform,
ground control points, per-band colour interpretation and palette, and
serves full-band sample reads to the assembler.

Dependencies
------------
rasterio

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
from pathlib import Path
from typing import List, Optional, Union

# Third-party
import numpy as np

try:
    import rasterio
    from rasterio.enums import ColorInterp
    from rasterio.errors import RasterioError
    _HAS_RASTERIO = True
except ImportError:
    _HAS_RASTERIO = False

# geotiffovl internal
from geotiffovl.IO.base import RGBA, GroundControlPoint, RasterSource
from geotiffovl.config import GEOTIFF_EXTENSIONS
from geotiffovl.exceptions import RasterReadError
from geotiffovl.geolocation.geotransform import AffineGeoTransform
from geotiffovl.vocabulary import ColorInterpretation

_INTERP_BY_NAME = {
    'gray': ColorInterpretation.GRAY,
    'grey': ColorInterpretation.GRAY,
    'palette': ColorInterpretation.PALETTE,
    'red': ColorInterpretation.RED,
    'green': ColorInterpretation.GREEN,
    'blue': ColorInterpretation.BLUE,
    'alpha': ColorInterpretation.ALPHA,
}


def is_geotiff_path(path: Union[str, Path]) -> bool:
    """Whether *path* names a GeoTIFF file by its extension.

    Matching is case-insensitive, so ``scan.TIF`` and ``scan.Tiff`` are
    accepted. Directories never match.
    """
    path = Path(path)
    if path.is_dir():
        return False
    return path.name.lower().endswith(GEOTIFF_EXTENSIONS)


class GeoTIFFRasterSource(RasterSource):
    """Raster source reading a GeoTIFF file with rasterio.

    Parameters
    ----------
    filepath : str or Path
        Path to the GeoTIFF file.

    Attributes
    ----------
    dataset : rasterio.DatasetReader
        Open rasterio dataset; used directly by the warp service.

    Raises
    ------
    ImportError
        If rasterio is not installed.
    FileNotFoundError
        If the file does not exist.
    RasterReadError
        If the file cannot be opened as a raster.

    Examples
    --------
    >>> from geotiffovl.IO.geotiff import GeoTIFFRasterSource
    >>> with GeoTIFFRasterSource('scan.tif') as source:
    ...     print(source.crs_code, source.band_count)
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        if not _HAS_RASTERIO:
            raise ImportError(
                "rasterio is required for GeoTIFF reading. "
                "Install with: pip install rasterio"
            )
        self.dataset = None
        super().__init__(filepath)

    def _load_metadata(self) -> None:
        """Load GeoTIFF metadata using rasterio."""
        try:
            self.dataset = rasterio.open(str(self.filepath))
            ds = self.dataset

            gcp_list, gcp_crs = ds.gcps
            crs = ds.crs if ds.crs is not None else gcp_crs
            interp = [_INTERP_BY_NAME.get(ci.name, ColorInterpretation.UNDEFINED)
                      for ci in ds.colorinterp]

            self.metadata = {
                'format': 'GeoTIFF',
                'rows': ds.height,
                'cols': ds.width,
                'bands': ds.count,
                'dtype': str(ds.dtypes[0]),
                'crs': crs.to_string() if crs is not None else None,
                'geotransform': self._read_geotransform(ds),
                'color_interp': interp,
                'colormap': self._read_colormap(ds, interp),
                'gcps': [
                    GroundControlPoint(g.row, g.col, g.x, g.y, g.z or 0.0)
                    for g in gcp_list
                ],
                'nodata': ds.nodata,
            }
        except RasterioError as e:
            raise RasterReadError(
                f"Failed to load GeoTIFF metadata: {e}"
            ) from e

    @staticmethod
    def _read_geotransform(ds) -> Optional[AffineGeoTransform]:
        # rasterio reports an identity transform for rasters without one
        if ds.crs is None and ds.transform.is_identity:
            return None
        return AffineGeoTransform.from_affine(ds.transform)

    @staticmethod
    def _read_colormap(ds, interp: List[ColorInterpretation]) -> Optional[List[RGBA]]:
        if not interp or interp[0] is not ColorInterpretation.PALETTE:
            return None
        try:
            table = ds.colormap(1)
        except ValueError:
            return None
        size = max(table) + 1 if table else 0
        return [tuple(table.get(i, (0, 0, 0, 0))) for i in range(size)]

    def read_band(self, band: int) -> np.ndarray:
        try:
            return self.dataset.read(band + 1)
        except RasterioError as e:
            raise RasterReadError(
                f"Could not read band {band} of {self.filepath}: {e}",
                band=band,
            ) from e

    def close(self) -> None:
        """Close the rasterio dataset."""
        if self.dataset is not None and not self.dataset.closed:
            self.dataset.close()


def open_raster(filepath: Union[str, Path]) -> GeoTIFFRasterSource:
    """Open a GeoTIFF as a raster source.

    Parameters
    ----------
    filepath : str or Path

    Returns
    -------
    GeoTIFFRasterSource
        The caller owns the source and must close it.
    """
    return GeoTIFFRasterSource(filepath)
