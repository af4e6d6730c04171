# -*- coding: utf-8 -*-
"""
Drawable Image Models - Banded pixel buffers with an attached colour model.

``DrawableImage`` holds one contiguous, row-major, read-only sample array
per band (no inter-band interleaving) and a ``ColorModel`` saying how the
bands become colour. Images are immutable after construction: a new
reprojection produces a new image rather than mutating the old one.

Dependencies
------------
numpy
Pillow (optional, for ``to_pil``)

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
2026-10-14

Modified
--------
2026-10-19
"""

# Standard library
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

# Third-party
import numpy as np

try:
    from PIL import Image
    _HAS_PIL = True
except ImportError:
    _HAS_PIL = False

# geotiffovl internal
from geotiffovl.exceptions import ValidationError
from geotiffovl.vocabulary import ColorModelKind, SampleType


@dataclass(frozen=True, eq=False)
class ColorModel:
    """How the bands of a ``DrawableImage`` map to colour.

    Parameters
    ----------
    kind : ColorModelKind
        Indexed, gray, extended-range gray, RGB, RGBA or generic.
    bits : int
        Bits per sample of the underlying buffer.
    num_components : int
        Number of bands the model consumes.
    palette : np.ndarray, optional
        ``(N, 4)`` uint8 RGBA lookup table for indexed models.
    has_alpha : bool
        Whether the model carries transparency.
    """

    kind: ColorModelKind
    bits: int
    num_components: int = 1
    palette: Optional[np.ndarray] = None
    has_alpha: bool = False


def _to_8bit(samples: np.ndarray, sample_type: SampleType) -> np.ndarray:
    if sample_type is SampleType.UINT8:
        return samples
    if sample_type is SampleType.UINT16:
        return (samples >> 8).astype(np.uint8)
    return (np.clip(samples, 0, None) >> 23).astype(np.uint8)


class DrawableImage:
    """In-memory banded image ready for drawing.

    Parameters
    ----------
    bands : sequence of np.ndarray
        One 1D array of ``width * height`` samples per band, row-major.
        All bands share one dtype.
    width : int
        Pixels per row.
    height : int
        Number of rows.
    color_model : ColorModel

    Raises
    ------
    ValidationError
        If band lengths or dtypes disagree, or the colour model consumes
        a different number of bands than supplied.
    """

    def __init__(
        self,
        bands: Sequence[np.ndarray],
        width: int,
        height: int,
        color_model: ColorModel,
    ) -> None:
        if not bands:
            raise ValidationError("A DrawableImage needs at least one band")
        if len(bands) != color_model.num_components:
            raise ValidationError(
                f"Colour model expects {color_model.num_components} band(s), "
                f"got {len(bands)}"
            )
        frozen = []
        for i, band in enumerate(bands):
            arr = np.ascontiguousarray(band).reshape(-1)
            if arr.size != width * height:
                raise ValidationError(
                    f"Band {i} holds {arr.size} samples, expected "
                    f"{width * height}"
                )
            if arr.dtype != bands[0].dtype:
                raise ValidationError(
                    f"Band {i} has dtype {arr.dtype}, expected {bands[0].dtype}"
                )
            if arr.flags.writeable:
                arr = arr.copy()
                arr.setflags(write=False)
            frozen.append(arr)

        self._bands: Tuple[np.ndarray, ...] = tuple(frozen)
        self.width = int(width)
        self.height = int(height)
        self.color_model = color_model
        self.sample_type = SampleType(str(frozen[0].dtype))

    @property
    def bands(self) -> Tuple[np.ndarray, ...]:
        """Flat read-only sample arrays, one per band."""
        return self._bands

    @property
    def band_count(self) -> int:
        return len(self._bands)

    @property
    def dtype(self) -> np.dtype:
        return self._bands[0].dtype

    @property
    def size(self) -> Tuple[int, int]:
        """``(width, height)`` in pixels."""
        return (self.width, self.height)

    def band(self, index: int) -> np.ndarray:
        """Band *index* as a read-only ``(height, width)`` view."""
        return self._bands[index].reshape(self.height, self.width)

    def to_rgba(self) -> np.ndarray:
        """Render the image to 8-bit RGBA.

        Returns
        -------
        np.ndarray
            ``(height, width, 4)`` uint8 array.

        Notes
        -----
        Indices outside an indexed palette become fully transparent.
        16-bit samples keep their high byte; 32-bit RGB components are
        clipped at zero and keep bits 23-30. Generic 32-bit gray is
        stretched linearly between its own minimum and maximum.
        """
        cm = self.color_model
        shape = (self.height, self.width)

        if cm.kind is ColorModelKind.INDEXED:
            index = self.band(0).astype(np.int64)
            out = np.zeros(shape + (4,), dtype=np.uint8)
            valid = (index >= 0) & (index < cm.palette.shape[0])
            out[valid] = cm.palette[index[valid]]
            return out

        if cm.kind in (ColorModelKind.RGB, ColorModelKind.RGBA):
            channels = [_to_8bit(self.band(i), self.sample_type)
                        for i in range(cm.num_components)]
            if cm.kind is ColorModelKind.RGB:
                channels.append(np.full(shape, 255, dtype=np.uint8))
            return np.stack(channels, axis=-1)

        if cm.kind is ColorModelKind.GENERIC:
            values = self.band(0).astype(np.float64)
            lo, hi = values.min(), values.max()
            if hi > lo:
                gray = np.round((values - lo) / (hi - lo) * 255.0).astype(np.uint8)
            else:
                gray = np.zeros(shape, dtype=np.uint8)
        else:
            gray = _to_8bit(self.band(0), self.sample_type)

        alpha = np.full(shape, 255, dtype=np.uint8)
        return np.stack([gray, gray, gray, alpha], axis=-1)

    def to_pil(self) -> 'Image.Image':
        """Convert to a Pillow image in the closest native mode.

        8-bit gray becomes ``'L'``, 16-bit gray ``'I;16'``, generic
        32-bit ``'I'``, 8-bit RGB(A) ``'RGB'``/``'RGBA'``, and indexed
        images with at most 256 palette entries ``'P'``. Anything else is
        rendered through :meth:`to_rgba`.

        Raises
        ------
        ImportError
            If Pillow is not installed.
        """
        if not _HAS_PIL:
            raise ImportError(
                "Pillow is required for image conversion. "
                "Install with: pip install Pillow"
            )
        kind = self.color_model.kind
        st = self.sample_type

        if kind in (ColorModelKind.GRAY, ColorModelKind.EXTENDED_GRAY,
                    ColorModelKind.GENERIC):
            return Image.fromarray(np.array(self.band(0)))
        if kind is ColorModelKind.INDEXED and st is SampleType.UINT8 \
                and self.color_model.palette.shape[0] <= 256:
            # putpalette on an 'L' image switches it to 'P' keeping indices
            img = Image.fromarray(np.array(self.band(0)))
            img.putpalette(self.color_model.palette.reshape(-1).tobytes(),
                           rawmode='RGBA')
            return img
        if kind in (ColorModelKind.RGB, ColorModelKind.RGBA) and st is SampleType.UINT8:
            stacked = np.stack([self.band(i) for i in range(self.band_count)],
                               axis=-1)
            return Image.fromarray(stacked)
        return Image.fromarray(self.to_rgba())

    def __repr__(self) -> str:
        return (f"DrawableImage({self.width}x{self.height}, "
                f"{self.band_count} band(s), {self.sample_type.value}, "
                f"{self.color_model.kind.value})")
