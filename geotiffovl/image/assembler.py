# -*- coding: utf-8 -*-
"""
Raster Assembler - Build a drawable image from per-band sample buffers.

Dispatches on the sample data type (8-bit unsigned, 16-bit unsigned,
32-bit signed), lays the samples out as one contiguous row-major array
per band, and selects a colour model in priority order:

1. Palette-indexed data -> indexed model over the first band.
2. More than two bands -> RGB, with a fourth band used as alpha.
3. Otherwise -> single-band gray (8-bit), extended-range gray (16-bit),
   or a generic model for 32-bit samples.

Assembly is all-or-nothing: a failed or short band read aborts with
``RasterReadError`` and no image is returned.

Dependencies
------------
numpy

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
import logging
from typing import List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

# Third-party
import numpy as np

# geotiffovl internal
from geotiffovl.exceptions import (
    RasterReadError,
    UnsupportedSampleTypeError,
    ValidationError,
)
from geotiffovl.image.models import ColorModel, DrawableImage
from geotiffovl.vocabulary import ColorInterpretation, ColorModelKind, SampleType

if TYPE_CHECKING:
    from geotiffovl.IO.base import RasterSource

logger = logging.getLogger(__name__)

SampleBuffer = Union[np.ndarray, bytes, bytearray, memoryview]

_SAMPLE_TYPES = {
    np.dtype(np.uint8): SampleType.UINT8,
    np.dtype(np.uint16): SampleType.UINT16,
    np.dtype(np.int32): SampleType.INT32,
}

_GRAY_KINDS = {
    SampleType.UINT8: ColorModelKind.GRAY,
    SampleType.UINT16: ColorModelKind.EXTENDED_GRAY,
    SampleType.INT32: ColorModelKind.GENERIC,
}


def sample_type_of(dtype) -> SampleType:
    """Map a numpy dtype to a supported ``SampleType``.

    Byte order is ignored; big-endian 16-bit samples are still 16-bit
    unsigned.

    Raises
    ------
    UnsupportedSampleTypeError
        For any dtype other than uint8, uint16 or int32.
    """
    dt = np.dtype(dtype)
    st = _SAMPLE_TYPES.get(dt.newbyteorder('='))
    if st is None:
        raise UnsupportedSampleTypeError(
            f"Unsupported sample type '{dt}'. Supported: "
            f"{[s.value for s in SampleType]}",
            dtype=str(dt),
        )
    return st


def _to_samples(
    buffer: SampleBuffer,
    sample_type: SampleType,
    expected: int,
    band: int,
) -> np.ndarray:
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        raw = memoryview(buffer).cast('B')
        if raw.nbytes % sample_type.dtype.itemsize:
            raise RasterReadError(
                f"Band {band} buffer of {raw.nbytes} bytes is not a whole "
                f"number of {sample_type.value} samples",
                band=band,
            )
        arr = np.frombuffer(raw, dtype=sample_type.dtype)
    else:
        arr = np.asarray(buffer)
        if sample_type_of(arr.dtype) is not sample_type:
            raise ValidationError(
                f"Band {band} has dtype {arr.dtype}, expected "
                f"{sample_type.value}; all bands must share one sample type"
            )
        arr = arr.astype(sample_type.dtype, copy=False)

    arr = arr.reshape(-1)
    if arr.size != expected:
        raise RasterReadError(
            f"Band {band} holds {arr.size} samples, expected {expected}",
            band=band,
        )
    samples = np.array(arr, copy=True)
    samples.setflags(write=False)
    return samples


def _palette_array(palette: Sequence[Sequence[int]]) -> np.ndarray:
    entries = []
    for entry in palette:
        values = [int(v) for v in entry]
        if len(values) == 3:
            values.append(255)
        if len(values) != 4:
            raise ValidationError(
                f"Palette entries must be RGB or RGBA, got {tuple(entry)}"
            )
        entries.append(values)
    if not entries:
        raise ValidationError("Palette is empty")
    return np.clip(np.array(entries), 0, 255).astype(np.uint8)


def _select_color_model(
    samples: List[np.ndarray],
    sample_type: SampleType,
    color_interpretation: ColorInterpretation,
    palette: Optional[Sequence[Sequence[int]]],
) -> Tuple[List[np.ndarray], ColorModel]:
    bits = sample_type.bits

    if color_interpretation is ColorInterpretation.PALETTE:
        if palette is None:
            raise ValidationError(
                "Palette-indexed data requires a colour table"
            )
        lut = _palette_array(palette)
        model = ColorModel(
            kind=ColorModelKind.INDEXED,
            bits=bits,
            num_components=1,
            palette=lut,
            has_alpha=bool((lut[:, 3] < 255).any()),
        )
        return samples[:1], model

    if len(samples) > 2:
        kept = samples[:4]
        has_alpha = len(kept) == 4
        model = ColorModel(
            kind=ColorModelKind.RGBA if has_alpha else ColorModelKind.RGB,
            bits=bits,
            num_components=len(kept),
            has_alpha=has_alpha,
        )
        return kept, model

    model = ColorModel(kind=_GRAY_KINDS[sample_type], bits=bits)
    return samples[:1], model


def assemble(
    buffers: Sequence[SampleBuffer],
    width: int,
    height: int,
    color_interpretation: ColorInterpretation = ColorInterpretation.GRAY,
    palette: Optional[Sequence[Sequence[int]]] = None,
    sample_type: Optional[Union[SampleType, str]] = None,
) -> DrawableImage:
    """Assemble per-band sample buffers into a ``DrawableImage``.

    Parameters
    ----------
    buffers : sequence of np.ndarray or bytes-like
        One buffer of ``width * height`` samples per band. Raw bytes are
        interpreted in native byte order.
    width : int
        Pixels per row.
    height : int
        Number of rows.
    color_interpretation : ColorInterpretation, default=GRAY
        Interpretation of the first band.
    palette : sequence of RGB(A) tuples, optional
        Ordered colour table; required for palette-indexed data.
    sample_type : SampleType or str, optional
        Sample type of the buffers. Inferred from the first buffer when
        it is a numpy array; required for raw bytes.

    Returns
    -------
    DrawableImage

    Raises
    ------
    UnsupportedSampleTypeError
        If the samples are not uint8, uint16 or int32.
    RasterReadError
        If any buffer holds the wrong number of samples.
    ValidationError
        For non-positive sizes, no buffers, mixed sample types, or a
        palette interpretation without a palette.
    """
    if width < 1 or height < 1:
        raise ValidationError(
            f"Image size must be positive, got {width}x{height}"
        )
    if not buffers:
        raise ValidationError("At least one band buffer is required")

    if sample_type is None:
        first = buffers[0]
        if isinstance(first, (bytes, bytearray, memoryview)):
            raise ValidationError(
                "sample_type is required when buffers are raw bytes"
            )
        sample_type = sample_type_of(np.asarray(first).dtype)
    elif not isinstance(sample_type, SampleType):
        try:
            sample_type = SampleType(str(sample_type))
        except ValueError:
            raise UnsupportedSampleTypeError(
                f"Unsupported sample type '{sample_type}'",
                dtype=str(sample_type),
            ) from None

    expected = width * height
    samples = [_to_samples(buf, sample_type, expected, i)
               for i, buf in enumerate(buffers)]

    kept, model = _select_color_model(
        samples, sample_type, color_interpretation, palette
    )
    logger.debug("Assembled %dx%d %s image from %d band(s) as %s",
                 width, height, sample_type.value, len(buffers),
                 model.kind.value)
    return DrawableImage(kept, width, height, model)


def bands_needed(band_count: int, color_interpretation: ColorInterpretation) -> int:
    """Number of leading bands the chosen colour model will consume."""
    if color_interpretation is ColorInterpretation.PALETTE or band_count <= 2:
        return 1
    return min(band_count, 4)


def assemble_from_source(source: 'RasterSource') -> DrawableImage:
    """Read a raster source's bands and assemble them.

    The sample type is checked before any band is read, and only the
    bands the colour model consumes are read.

    Parameters
    ----------
    source : RasterSource
        Read-only source; it is not closed.

    Returns
    -------
    DrawableImage

    Raises
    ------
    UnsupportedSampleTypeError
        If the source's sample type is unsupported.
    RasterReadError
        If any band read fails.
    """
    sample_type = sample_type_of(source.dtype)
    interp = source.color_interpretation
    count = bands_needed(source.band_count, interp)
    buffers = [source.get_band_samples(b) for b in range(count)]
    return assemble(
        buffers,
        source.width,
        source.height,
        color_interpretation=interp,
        palette=source.color_table,
        sample_type=sample_type,
    )
