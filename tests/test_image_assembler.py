# -*- coding: utf-8 -*-
"""
Raster Assembler Tests - Band layout, sample type dispatch, colour models.

Dependencies
------------
pytest
Pillow (conversion tests only)

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

import pytest
import numpy as np

from geotiffovl.IO.memory import InMemoryRasterSource
from geotiffovl.exceptions import (
    RasterReadError,
    UnsupportedSampleTypeError,
    ValidationError,
)
from geotiffovl.image.assembler import assemble, assemble_from_source, sample_type_of
from geotiffovl.vocabulary import ColorInterpretation, ColorModelKind, SampleType

try:
    from PIL import Image
    _HAS_PIL = True
except ImportError:
    _HAS_PIL = False


PALETTE = [(0, 0, 0, 255), (255, 0, 0, 255), (0, 255, 0, 128)]


# ---------------------------------------------------------------------------
# Sample type dispatch
# ---------------------------------------------------------------------------

class TestSampleType:
    """Test dtype -> SampleType mapping."""

    @pytest.mark.parametrize("dtype, expected", [
        (np.uint8, SampleType.UINT8),
        (np.uint16, SampleType.UINT16),
        (np.int32, SampleType.INT32),
        ('>u2', SampleType.UINT16),
    ])
    def test_supported(self, dtype, expected):
        assert sample_type_of(dtype) is expected

    @pytest.mark.parametrize("dtype", [np.int16, np.float32, np.float64,
                                       np.uint32, np.complex64])
    def test_unsupported(self, dtype):
        with pytest.raises(UnsupportedSampleTypeError) as info:
            sample_type_of(dtype)
        assert info.value.dtype == str(np.dtype(dtype))

    def test_unsupported_buffer(self):
        with pytest.raises(UnsupportedSampleTypeError):
            assemble([np.zeros(4, dtype=np.float32)], 2, 2)

    def test_bits(self):
        assert SampleType.UINT8.bits == 8
        assert SampleType.UINT16.bits == 16
        assert SampleType.INT32.bits == 32


# ---------------------------------------------------------------------------
# Grayscale
# ---------------------------------------------------------------------------

class TestGray:
    """Test the 1-2 band, non-indexed path."""

    def test_byte_gray_layout(self):
        """2x2 byte samples come back unchanged, row-major."""
        image = assemble([np.array([10, 20, 30, 40], dtype=np.uint8)], 2, 2)
        assert image.size == (2, 2)
        assert image.band_count == 1
        assert image.color_model.kind is ColorModelKind.GRAY
        np.testing.assert_array_equal(image.bands[0], [10, 20, 30, 40])
        np.testing.assert_array_equal(image.band(0), [[10, 20], [30, 40]])

    def test_extended_gray(self):
        samples = np.array([0, 256, 65535, 1000, 2, 3], dtype=np.uint16)
        image = assemble([samples], 3, 2)
        assert image.color_model.kind is ColorModelKind.EXTENDED_GRAY
        assert image.color_model.bits == 16
        assert image.dtype == np.uint16
        np.testing.assert_array_equal(image.bands[0], samples)

    def test_int32_generic(self):
        samples = np.array([-5, 0, 5, 10], dtype=np.int32)
        image = assemble([samples], 2, 2)
        assert image.color_model.kind is ColorModelKind.GENERIC
        assert image.color_model.bits == 32

    def test_two_bands_keeps_first(self):
        b1 = np.arange(6, dtype=np.uint8)
        b2 = np.full(6, 99, dtype=np.uint8)
        image = assemble([b1, b2], 3, 2)
        assert image.band_count == 1
        assert image.color_model.kind is ColorModelKind.GRAY
        np.testing.assert_array_equal(image.bands[0], b1)

    def test_bands_are_read_only(self):
        samples = np.array([1, 2, 3, 4], dtype=np.uint8)
        image = assemble([samples], 2, 2)
        with pytest.raises(ValueError):
            image.bands[0][0] = 7
        # Input buffer is not aliased
        samples[0] = 200
        assert image.bands[0][0] == 1

    def test_two_dimensional_buffer(self):
        data = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)
        image = assemble([data], 3, 2)
        np.testing.assert_array_equal(image.band(0), data)


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

class TestPalette:
    """Test the palette-indexed path."""

    def test_indexed_model(self):
        index = np.array([0, 1, 2, 1], dtype=np.uint8)
        image = assemble([index], 2, 2, ColorInterpretation.PALETTE, PALETTE)
        cm = image.color_model
        assert cm.kind is ColorModelKind.INDEXED
        assert cm.bits == 8
        assert cm.palette.shape == (3, 4)
        assert cm.has_alpha

    def test_palette_wins_over_band_count(self):
        bands = [np.zeros(4, dtype=np.uint8) for _ in range(3)]
        image = assemble(bands, 2, 2, ColorInterpretation.PALETTE, PALETTE)
        assert image.color_model.kind is ColorModelKind.INDEXED
        assert image.band_count == 1

    def test_rgb_entries_get_opaque_alpha(self):
        image = assemble([np.zeros(1, dtype=np.uint8)], 1, 1,
                         ColorInterpretation.PALETTE, [(1, 2, 3)])
        np.testing.assert_array_equal(image.color_model.palette, [[1, 2, 3, 255]])
        assert not image.color_model.has_alpha

    def test_missing_palette(self):
        with pytest.raises(ValidationError, match="colour table"):
            assemble([np.zeros(4, dtype=np.uint8)], 2, 2,
                     ColorInterpretation.PALETTE)

    def test_sixteen_bit_index(self):
        index = np.array([0, 2], dtype=np.uint16)
        image = assemble([index], 2, 1, ColorInterpretation.PALETTE, PALETTE)
        assert image.color_model.bits == 16
        assert image.dtype == np.uint16


# ---------------------------------------------------------------------------
# RGB(A)
# ---------------------------------------------------------------------------

class TestRGB:
    """Test the more-than-two-band path."""

    def test_rgb(self):
        bands = [np.full(4, v, dtype=np.uint8) for v in (10, 20, 30)]
        image = assemble(bands, 2, 2)
        assert image.color_model.kind is ColorModelKind.RGB
        assert image.color_model.num_components == 3
        assert not image.color_model.has_alpha
        for i, v in enumerate((10, 20, 30)):
            np.testing.assert_array_equal(image.bands[i], np.full(4, v))

    def test_rgba(self):
        bands = [np.full(4, v, dtype=np.uint8) for v in (10, 20, 30, 40)]
        image = assemble(bands, 2, 2)
        assert image.color_model.kind is ColorModelKind.RGBA
        assert image.color_model.has_alpha
        assert image.band_count == 4

    def test_extra_bands_dropped(self):
        bands = [np.full(4, v, dtype=np.uint8) for v in range(6)]
        image = assemble(bands, 2, 2)
        assert image.band_count == 4

    def test_bands_not_interleaved(self):
        r = np.array([1, 2, 3, 4], dtype=np.uint16)
        g = np.array([5, 6, 7, 8], dtype=np.uint16)
        b = np.array([9, 10, 11, 12], dtype=np.uint16)
        image = assemble([r, g, b], 2, 2)
        for got, want in zip(image.bands, (r, g, b)):
            np.testing.assert_array_equal(got, want)
            assert got.flags.c_contiguous


# ---------------------------------------------------------------------------
# Buffer validation
# ---------------------------------------------------------------------------

class TestBuffers:
    """Test raw buffers and failure handling."""

    def test_raw_bytes(self):
        raw = np.array([1, 2, 300, 4], dtype=np.uint16).tobytes()
        image = assemble([raw], 2, 2, sample_type=SampleType.UINT16)
        np.testing.assert_array_equal(image.bands[0], [1, 2, 300, 4])

    def test_raw_bytes_needs_sample_type(self):
        with pytest.raises(ValidationError, match="sample_type"):
            assemble([b'\x00\x01\x02\x03'], 2, 2)

    def test_raw_bytes_partial_sample(self):
        with pytest.raises(RasterReadError):
            assemble([b'\x00\x01\x02'], 2, 1, sample_type='uint16')

    def test_short_buffer(self):
        with pytest.raises(RasterReadError) as info:
            assemble([np.zeros(4, dtype=np.uint8),
                      np.zeros(3, dtype=np.uint8),
                      np.zeros(4, dtype=np.uint8)], 2, 2)
        assert info.value.band == 1

    def test_mixed_sample_types(self):
        with pytest.raises(ValidationError, match="share one sample type"):
            assemble([np.zeros(4, dtype=np.uint8),
                      np.zeros(4, dtype=np.uint16),
                      np.zeros(4, dtype=np.uint8)], 2, 2)

    def test_unknown_sample_type_name(self):
        with pytest.raises(UnsupportedSampleTypeError):
            assemble([b'\x00'], 1, 1, sample_type='float32')

    @pytest.mark.parametrize("width, height", [(0, 2), (2, 0), (-1, 1)])
    def test_bad_size(self, width, height):
        with pytest.raises(ValidationError):
            assemble([np.zeros(4, dtype=np.uint8)], width, height)

    def test_no_buffers(self):
        with pytest.raises(ValidationError):
            assemble([], 2, 2)


# ---------------------------------------------------------------------------
# Assembly from a raster source
# ---------------------------------------------------------------------------

class _FailingSource(InMemoryRasterSource):
    """Source whose second band read fails."""

    def read_band(self, band):
        if band == 1:
            raise RasterReadError("disk on fire", band=band)
        return super().read_band(band)


class TestFromSource:
    """Test assemble_from_source."""

    def test_gray_source(self):
        source = InMemoryRasterSource(
            np.array([[10, 20], [30, 40]], dtype=np.uint8),
            crs='EPSG:4326', geotransform=[100, 1, 0, 200, 0, -1],
        )
        image = assemble_from_source(source)
        assert image.size == (2, 2)
        np.testing.assert_array_equal(image.bands[0], [10, 20, 30, 40])

    def test_palette_source(self):
        source = InMemoryRasterSource(
            np.array([[0, 1], [2, 0]], dtype=np.uint8),
            color_interp=ColorInterpretation.PALETTE, colormap=PALETTE,
        )
        image = assemble_from_source(source)
        assert image.color_model.kind is ColorModelKind.INDEXED

    def test_read_failure_aborts(self):
        source = _FailingSource(np.zeros((3, 2, 2), dtype=np.uint8))
        with pytest.raises(RasterReadError, match="disk on fire"):
            assemble_from_source(source)

    def test_unsupported_source_not_read(self):
        source = _FailingSource(np.zeros((3, 2, 2), dtype=np.float32))
        with pytest.raises(UnsupportedSampleTypeError):
            assemble_from_source(source)


# ---------------------------------------------------------------------------
# Drawable conversion
# ---------------------------------------------------------------------------

class TestToRGBA:
    """Test DrawableImage.to_rgba."""

    def test_gray(self):
        image = assemble([np.array([0, 128, 255, 7], dtype=np.uint8)], 2, 2)
        rgba = image.to_rgba()
        assert rgba.shape == (2, 2, 4)
        assert rgba.dtype == np.uint8
        np.testing.assert_array_equal(rgba[0, 1], [128, 128, 128, 255])

    def test_extended_gray_high_byte(self):
        image = assemble([np.array([0x1234, 0xFF00], dtype=np.uint16)], 2, 1)
        rgba = image.to_rgba()
        np.testing.assert_array_equal(rgba[0, :, 0], [0x12, 0xFF])

    def test_generic_stretch(self):
        image = assemble([np.array([-10, 0, 10, 245], dtype=np.int32)], 2, 2)
        gray = image.to_rgba()[..., 0]
        assert gray[0, 0] == 0
        assert gray[1, 1] == 255

    def test_generic_constant(self):
        image = assemble([np.full(4, 7, dtype=np.int32)], 2, 2)
        assert (image.to_rgba()[..., :3] == 0).all()

    def test_palette_lookup(self):
        image = assemble([np.array([0, 1, 2, 5], dtype=np.uint8)], 2, 2,
                         ColorInterpretation.PALETTE, PALETTE)
        rgba = image.to_rgba()
        np.testing.assert_array_equal(rgba[0, 1], [255, 0, 0, 255])
        np.testing.assert_array_equal(rgba[1, 0], [0, 255, 0, 128])
        # Index outside the palette is transparent
        np.testing.assert_array_equal(rgba[1, 1], [0, 0, 0, 0])

    def test_palette_negative_index_transparent(self):
        image = assemble([np.array([-1, 0], dtype=np.int32)], 2, 1,
                         ColorInterpretation.PALETTE, [(10, 20, 30)])
        rgba = image.to_rgba()
        np.testing.assert_array_equal(rgba[0, 0], [0, 0, 0, 0])
        np.testing.assert_array_equal(rgba[0, 1], [10, 20, 30, 255])

    def test_palette_large_index_transparent(self):
        image = assemble([np.array([2_000_000_000, 0], dtype=np.int32)], 2, 1,
                         ColorInterpretation.PALETTE, [(10, 20, 30)])
        rgba = image.to_rgba()
        assert rgba.shape == (1, 2, 4)
        np.testing.assert_array_equal(rgba[0, 0], [0, 0, 0, 0])
        np.testing.assert_array_equal(rgba[0, 1], [10, 20, 30, 255])

    def test_rgb_sixteen_bit(self):
        bands = [np.full(1, v, dtype=np.uint16) for v in (0x0100, 0x8000, 0xFFFF)]
        rgba = assemble(bands, 1, 1).to_rgba()
        np.testing.assert_array_equal(rgba[0, 0], [1, 128, 255, 255])

    def test_rgba_alpha_band(self):
        bands = [np.full(1, v, dtype=np.uint8) for v in (1, 2, 3, 4)]
        rgba = assemble(bands, 1, 1).to_rgba()
        np.testing.assert_array_equal(rgba[0, 0], [1, 2, 3, 4])

    def test_rgb_int32_clipped(self):
        bands = [np.array([v], dtype=np.int32) for v in (-1, 1 << 23, (1 << 31) - 1)]
        rgba = assemble(bands, 1, 1).to_rgba()
        np.testing.assert_array_equal(rgba[0, 0], [0, 1, 255, 255])


@pytest.mark.skipif(not _HAS_PIL, reason="Pillow not installed")
class TestToPIL:
    """Test DrawableImage.to_pil mode selection."""

    def test_gray_mode(self):
        image = assemble([np.zeros(4, dtype=np.uint8)], 2, 2)
        assert image.to_pil().mode == 'L'

    def test_indexed_mode(self):
        image = assemble([np.array([0, 1, 2, 1], dtype=np.uint8)], 2, 2,
                         ColorInterpretation.PALETTE, PALETTE)
        pil = image.to_pil()
        assert pil.mode == 'P'
        assert pil.getpixel((1, 0)) == 1

    def test_rgb_mode(self):
        bands = [np.zeros(4, dtype=np.uint8) for _ in range(3)]
        assert assemble(bands, 2, 2).to_pil().mode == 'RGB'

    def test_rgb16_falls_back_to_rgba(self):
        bands = [np.zeros(4, dtype=np.uint16) for _ in range(3)]
        pil = assemble(bands, 2, 2).to_pil()
        assert pil.mode == 'RGBA'
        assert pil.size == (2, 2)

    def test_int32_mode(self):
        image = assemble([np.zeros(4, dtype=np.int32)], 2, 2)
        assert image.to_pil().mode == 'I'
