# -*- coding: utf-8 -*-
"""
IO Base Classes - Abstract interface for georeferenced raster sources.

Defines ``RasterSource``, the read-only view of a decoded multi-band
dataset that the reprojection and assembly code works against. Concrete
sources (GeoTIFF files, in-memory arrays, warped datasets) populate a
standardized ``metadata`` dictionary and implement single-band reads.

Standardized metadata keys
--------------------------
rows, cols, bands : int
dtype : str
    numpy dtype name of the band samples.
crs : str or None
    CRS code, e.g. ``'EPSG:4326'``.
geotransform : AffineGeoTransform or None
color_interp : List[ColorInterpretation]
    One entry per band.
colormap : List[Tuple[int, int, int, int]] or None
    Ordered RGBA palette of the first band.
gcps : List[GroundControlPoint]

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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from geotiffovl.exceptions import RasterReadError, ValidationError
from geotiffovl.geolocation.geotransform import AffineGeoTransform
from geotiffovl.vocabulary import ColorInterpretation

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class GroundControlPoint:
    """Known correspondence between a pixel and a map coordinate.

    Parameters
    ----------
    row : float
        Line coordinate in the source raster.
    col : float
        Pixel coordinate in the source raster.
    x : float
        Map x in the GCP CRS.
    y : float
        Map y in the GCP CRS.
    z : float
        Height, 0.0 when unknown.
    """

    row: float
    col: float
    x: float
    y: float
    z: float = 0.0


class RasterSource(ABC):
    """
    Abstract base class for all raster sources.

    A source is owned by the layer that opened it. The reprojection and
    assembly code only reads from it and never closes it.

    Attributes
    ----------
    filepath : Path or None
        Path to the backing file, ``None`` for in-memory sources.
    metadata : Dict[str, Any]
        Standardized metadata (see module docstring).
    """

    def __init__(self, filepath: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the raster source.

        Parameters
        ----------
        filepath : str or Path, optional
            Path to the backing file.

        Raises
        ------
        FileNotFoundError
            If *filepath* is given and does not exist.
        """
        self.filepath = Path(filepath) if filepath is not None else None
        if self.filepath is not None and not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")

        self.metadata: Dict[str, Any] = {}
        self._load_metadata()

    @abstractmethod
    def _load_metadata(self) -> None:
        """Populate ``self.metadata`` with the standardized keys."""
        pass

    @abstractmethod
    def read_band(self, band: int) -> np.ndarray:
        """
        Read one full band.

        Parameters
        ----------
        band : int
            0-based band index.

        Returns
        -------
        np.ndarray
            Samples with shape ``(rows, cols)``.

        Raises
        ------
        RasterReadError
            If the backend fails to deliver the samples.
        """
        pass

    def get_band_samples(self, band: int) -> np.ndarray:
        """
        Read one band as a flat row-major sample buffer.

        Parameters
        ----------
        band : int
            0-based band index.

        Returns
        -------
        np.ndarray
            1D C-contiguous array of ``rows * cols`` samples.

        Raises
        ------
        ValidationError
            If *band* is out of range.
        RasterReadError
            If the read fails or returns the wrong number of samples.
        """
        if not 0 <= band < self.band_count:
            raise ValidationError(
                f"Band index {band} out of range for {self.band_count} band(s)"
            )
        data = np.ascontiguousarray(self.read_band(band))
        expected = self.width * self.height
        if data.size != expected:
            raise RasterReadError(
                f"Band {band} returned {data.size} samples, expected {expected}",
                band=band,
            )
        return data.reshape(-1)

    @property
    def width(self) -> int:
        return int(self.metadata['cols'])

    @property
    def height(self) -> int:
        return int(self.metadata['rows'])

    @property
    def band_count(self) -> int:
        return int(self.metadata['bands'])

    @property
    def dtype(self) -> np.dtype:
        """Sample data type of the bands."""
        return np.dtype(self.metadata['dtype'])

    @property
    def crs_code(self) -> Optional[str]:
        return self.metadata.get('crs')

    @property
    def geo_transform(self) -> Optional[AffineGeoTransform]:
        return self.metadata.get('geotransform')

    @property
    def gcps(self) -> List[GroundControlPoint]:
        return list(self.metadata.get('gcps') or [])

    @property
    def color_interpretation(self) -> ColorInterpretation:
        """Colour interpretation of the first band."""
        interp = self.metadata.get('color_interp') or []
        return interp[0] if interp else ColorInterpretation.UNDEFINED

    @property
    def color_table(self) -> Optional[List[RGBA]]:
        return self.metadata.get('colormap')

    @property
    def is_georeferenced(self) -> bool:
        """Whether the source carries a CRS and either a transform or GCPs."""
        if self.crs_code is None:
            return False
        return self.geo_transform is not None or bool(self.gcps)

    def get_geolocation(self) -> Optional[Dict[str, Any]]:
        """
        Get geolocation information.

        Returns
        -------
        Optional[Dict[str, Any]]
            ``crs``, ``geotransform`` and ``gcps``, or ``None`` when the
            source is not georeferenced.
        """
        if not self.is_georeferenced:
            return None
        return {
            'crs': self.crs_code,
            'geotransform': self.geo_transform,
            'gcps': self.gcps,
        }

    def close(self) -> None:
        """
        Release resources held by the source.

        Default implementation does nothing.
        """
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
