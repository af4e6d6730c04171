# -*- coding: utf-8 -*-
"""
In-Memory Raster Source - Wrap numpy arrays as a georeferenced raster.

Used for warp results and for synthetic rasters in tests. Band data is
copied and frozen on construction so the source stays read-only.

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
from typing import List, Optional, Sequence, Union

# Third-party
import numpy as np

# geotiffovl internal
from geotiffovl.IO.base import RGBA, GroundControlPoint, RasterSource
from geotiffovl.exceptions import ValidationError
from geotiffovl.geolocation.geotransform import AffineGeoTransform
from geotiffovl.vocabulary import ColorInterpretation


class InMemoryRasterSource(RasterSource):
    """Raster source backed by a ``(bands, rows, cols)`` numpy array.

    Parameters
    ----------
    data : np.ndarray
        ``(rows, cols)`` for a single band or ``(bands, rows, cols)``.
    crs : str, optional
        CRS code of the map coordinates.
    geotransform : AffineGeoTransform or sequence of 6 floats, optional
        GDAL-ordered pixel-to-map transform.
    color_interp : ColorInterpretation or sequence, optional
        One interpretation for all bands, or one per band. Defaults to
        gray for 1-2 bands and red/green/blue(/alpha) for 3+ bands.
    colormap : sequence of RGBA tuples, optional
        Ordered palette for palette-indexed data.
    gcps : sequence of GroundControlPoint, optional
    name : str, optional
        Display name, defaults to ``'memory'``.

    Raises
    ------
    ValidationError
        If *data* is not 2D or 3D, or the interpretation list length
        does not match the band count.
    """

    def __init__(
        self,
        data: np.ndarray,
        crs: Optional[str] = None,
        geotransform: Optional[Union[AffineGeoTransform, Sequence[float]]] = None,
        color_interp: Optional[Union[ColorInterpretation,
                                     Sequence[ColorInterpretation]]] = None,
        colormap: Optional[Sequence[RGBA]] = None,
        gcps: Optional[Sequence[GroundControlPoint]] = None,
        name: str = 'memory',
    ) -> None:
        arr = np.array(data, copy=True)
        if arr.ndim == 2:
            arr = arr[np.newaxis, ...]
        if arr.ndim != 3:
            raise ValidationError(
                f"Expected (rows, cols) or (bands, rows, cols) data, "
                f"got shape {np.shape(data)}"
            )
        arr.setflags(write=False)
        self._data = arr

        if geotransform is not None and not isinstance(geotransform, AffineGeoTransform):
            geotransform = AffineGeoTransform.from_gdal(geotransform)
        self._geotransform = geotransform
        self._crs = crs
        self._color_interp = color_interp
        self._colormap = [tuple(int(v) for v in entry) for entry in colormap] \
            if colormap is not None else None
        self._gcps = list(gcps or [])
        self.name = name
        super().__init__(None)

    def _default_interp(self, bands: int) -> List[ColorInterpretation]:
        if bands <= 2:
            return [ColorInterpretation.GRAY] * bands
        order = [ColorInterpretation.RED, ColorInterpretation.GREEN,
                 ColorInterpretation.BLUE, ColorInterpretation.ALPHA]
        return [order[i] if i < len(order) else ColorInterpretation.UNDEFINED
                for i in range(bands)]

    def _load_metadata(self) -> None:
        bands, rows, cols = self._data.shape

        if self._color_interp is None:
            interp = self._default_interp(bands)
        elif isinstance(self._color_interp, ColorInterpretation):
            interp = [self._color_interp] * bands
        else:
            interp = list(self._color_interp)
            if len(interp) != bands:
                raise ValidationError(
                    f"{len(interp)} colour interpretations given for "
                    f"{bands} band(s)"
                )

        self.metadata = {
            'format': 'memory',
            'rows': rows,
            'cols': cols,
            'bands': bands,
            'dtype': str(self._data.dtype),
            'crs': self._crs,
            'geotransform': self._geotransform,
            'color_interp': interp,
            'colormap': self._colormap,
            'gcps': self._gcps,
        }

    def read_band(self, band: int) -> np.ndarray:
        return self._data[band]

    def read_full(self) -> np.ndarray:
        """All bands as a read-only ``(bands, rows, cols)`` array."""
        return self._data
