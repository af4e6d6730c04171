# -*- coding: utf-8 -*-
"""
Reprojection Cache Tests - EMPTY/READY state machine and failure handling.

Uses a recording fake warp service and CRS resolver so the cache logic is
tested without GDAL.

Dependencies
------------
pytest

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

import pytest
import numpy as np

from geotiffovl.IO.memory import InMemoryRasterSource
from geotiffovl.config import WarpOptions
from geotiffovl.exceptions import (
    InvalidProjectionError,
    NotGeoreferencedError,
    RasterReadError,
    SingularTransformError,
    ValidationError,
)
from geotiffovl.geolocation.geotransform import AffineGeoTransform
from geotiffovl.image.assembler import assemble_from_source
from geotiffovl.reprojection.cache import CacheState, ReprojectionCache
from geotiffovl.reprojection.warp import WarpService
from geotiffovl.vocabulary import ResamplingMethod


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

KNOWN_CRS = {
    'EPSG:3857': 'mercator-definition',
    'EPSG:4326': 'wgs84-definition',
}

TRANSFORMS = {
    'mercator-definition': [100.0, 1.0, 0.0, 200.0, 0.0, -1.0],
    'wgs84-definition': [10.0, 0.5, 0.0, 50.0, 0.0, -0.5],
}


def fake_resolver(code):
    if code not in KNOWN_CRS:
        raise InvalidProjectionError(code)
    return KNOWN_CRS[code]


class FakeWarpService(WarpService):
    """Records calls and returns a 2x2 raster in the requested CRS."""

    def __init__(self):
        self.calls = []
        self.result_none = False
        self.drop_transform = False
        self.transform_override = None

    def warp(self, source, target_crs, resampling=ResamplingMethod.CUBIC,
             max_pixel_error=0.2):
        self.calls.append((source, target_crs, resampling, max_pixel_error))
        if self.result_none:
            return None
        gt = None if self.drop_transform else TRANSFORMS[target_crs]
        if self.transform_override is not None:
            gt = self.transform_override
        return InMemoryRasterSource(
            np.array([[10, 20], [30, 40]], dtype=np.uint8),
            crs=target_crs, geotransform=gt,
        )


class CountingResolver:
    def __init__(self):
        self.calls = []

    def __call__(self, code):
        self.calls.append(code)
        return fake_resolver(code)


@pytest.fixture
def source():
    return InMemoryRasterSource(
        np.zeros((4, 4), dtype=np.uint8),
        crs='EPSG:32633', geotransform=[500000, 10, 0, 6000000, 0, -10],
    )


@pytest.fixture
def warp_service():
    return FakeWarpService()


@pytest.fixture
def cache(warp_service):
    return ReprojectionCache(warp_service=warp_service, crs_resolver=fake_resolver)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class TestStates:
    """Test EMPTY -> READY transitions."""

    def test_starts_empty(self, cache):
        assert cache.state is CacheState.EMPTY
        assert cache.crs_code == ''
        assert cache.image is None
        assert cache.geo_transform is None
        assert cache.image_size is None
        assert cache.origin is None
        assert cache.bounds() is None
        assert cache.placement(lambda x, y: (x, y)) is None
        assert cache.needs_update('EPSG:3857')

    def test_first_call_fills(self, cache, source, warp_service):
        image = cache.ensure_current(source, 'EPSG:3857')
        assert cache.state is CacheState.READY
        assert cache.crs_code == 'EPSG:3857'
        assert cache.image is image
        assert cache.geo_transform == AffineGeoTransform(100, 1, 0, 200, 0, -1)
        np.testing.assert_array_equal(image.bands[0], [10, 20, 30, 40])
        assert len(warp_service.calls) == 1

    def test_same_code_is_cache_hit(self, cache, source, warp_service):
        first = cache.ensure_current(source, 'EPSG:3857')
        second = cache.ensure_current(source, 'EPSG:3857')
        assert second is first
        assert len(warp_service.calls) == 1
        assert not cache.needs_update('EPSG:3857')

    def test_new_code_replaces_triple(self, cache, source, warp_service):
        first = cache.ensure_current(source, 'EPSG:3857')
        second = cache.ensure_current(source, 'EPSG:4326')
        assert len(warp_service.calls) == 2
        assert second is not first
        assert cache.image is second
        assert cache.crs_code == 'EPSG:4326'
        assert cache.geo_transform == AffineGeoTransform(10, 0.5, 0, 50, 0, -0.5)

    def test_switch_back_rewarps(self, cache, source, warp_service):
        cache.ensure_current(source, 'EPSG:3857')
        cache.ensure_current(source, 'EPSG:4326')
        cache.ensure_current(source, 'EPSG:3857')
        assert len(warp_service.calls) == 3

    def test_warp_parameters(self, cache, source, warp_service):
        cache.ensure_current(source, 'EPSG:3857')
        src, target, resampling, max_error = warp_service.calls[0]
        assert src is source
        assert target == 'mercator-definition'
        assert resampling is ResamplingMethod.CUBIC
        assert max_error == 0.2

    def test_custom_options(self, source, warp_service):
        cache = ReprojectionCache(
            warp_service=warp_service, crs_resolver=fake_resolver,
            options=WarpOptions('nearest', 0.5),
        )
        cache.ensure_current(source, 'EPSG:3857')
        _, _, resampling, max_error = warp_service.calls[0]
        assert resampling is ResamplingMethod.NEAREST
        assert max_error == 0.5

    def test_reset(self, cache, source, warp_service):
        cache.ensure_current(source, 'EPSG:3857')
        cache.reset()
        assert cache.state is CacheState.EMPTY
        cache.ensure_current(source, 'EPSG:3857')
        assert len(warp_service.calls) == 2


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    """Failures leave the previous triple untouched."""

    def test_not_georeferenced(self, cache, source, warp_service):
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError, match="georeferenced"):
            cache.ensure_current(source, 'EPSG:3857')
        assert cache.state is CacheState.EMPTY

    def test_not_georeferenced_keeps_previous(self, cache, source, warp_service):
        image = cache.ensure_current(source, 'EPSG:3857')
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:4326')
        assert cache.image is image
        assert cache.crs_code == 'EPSG:3857'
        assert cache.geo_transform == AffineGeoTransform(100, 1, 0, 200, 0, -1)

    def test_warp_without_transform(self, cache, source, warp_service):
        warp_service.drop_transform = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:3857')
        assert cache.state is CacheState.EMPTY

    def test_not_georeferenced_not_rewarped(self, cache, source, warp_service):
        warp_service.result_none = True
        for _ in range(3):
            with pytest.raises(NotGeoreferencedError):
                cache.ensure_current(source, 'EPSG:3857')
        assert len(warp_service.calls) == 1

    def test_not_georeferenced_other_code_not_rewarped(self, cache, source,
                                                       warp_service):
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:3857')
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:4326')
        assert len(warp_service.calls) == 1

    def test_not_georeferenced_invalid_code_still_reported(self, cache, source,
                                                           warp_service):
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:3857')
        with pytest.raises(InvalidProjectionError):
            cache.ensure_current(source, 'EPSG:bogus')

    def test_new_source_is_warped(self, cache, source, warp_service):
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:3857')
        warp_service.result_none = False
        replacement = InMemoryRasterSource(
            np.zeros((2, 2), dtype=np.uint8),
            crs='EPSG:32633', geotransform=[0, 1, 0, 0, 0, -1],
        )
        cache.ensure_current(replacement, 'EPSG:3857')
        assert cache.state is CacheState.READY
        assert len(warp_service.calls) == 2

    def test_reset_forgets_unreferenced_source(self, cache, source, warp_service):
        warp_service.result_none = True
        with pytest.raises(NotGeoreferencedError):
            cache.ensure_current(source, 'EPSG:3857')
        cache.reset()
        warp_service.result_none = False
        cache.ensure_current(source, 'EPSG:3857')
        assert len(warp_service.calls) == 2

    def test_singular_warped_transform(self, cache, source, warp_service):
        image = cache.ensure_current(source, 'EPSG:3857')
        warp_service.transform_override = [0, 1, 2, 0, 2, 4]
        with pytest.raises(SingularTransformError) as info:
            cache.ensure_current(source, 'EPSG:4326')
        assert info.value.determinant == 0.0
        assert cache.image is image
        assert cache.crs_code == 'EPSG:3857'

    def test_invalid_projection(self, cache, source, warp_service):
        image = cache.ensure_current(source, 'EPSG:3857')
        with pytest.raises(InvalidProjectionError) as info:
            cache.ensure_current(source, 'EPSG:bogus')
        assert info.value.code == 'EPSG:bogus'
        assert cache.image is image
        assert cache.crs_code == 'EPSG:3857'
        assert len(warp_service.calls) == 1

    def test_invalid_projection_retried(self, source, warp_service):
        resolver = CountingResolver()
        cache = ReprojectionCache(warp_service=warp_service, crs_resolver=resolver)
        for _ in range(2):
            with pytest.raises(InvalidProjectionError):
                cache.ensure_current(source, 'Nowhere')
        assert resolver.calls == ['Nowhere', 'Nowhere']
        assert warp_service.calls == []

    def test_resolver_builtin_error_wrapped(self, source, warp_service):
        def resolver(code):
            raise KeyError(code)

        cache = ReprojectionCache(warp_service=warp_service, crs_resolver=resolver)
        with pytest.raises(InvalidProjectionError) as info:
            cache.ensure_current(source, 'EPSG:1')
        assert info.value.code == 'EPSG:1'
        assert isinstance(info.value.__cause__, KeyError)

    def test_resolver_error_for_other_code(self, source, warp_service):
        def resolver(code):
            raise InvalidProjectionError('something-else')

        cache = ReprojectionCache(warp_service=warp_service, crs_resolver=resolver)
        with pytest.raises(InvalidProjectionError) as info:
            cache.ensure_current(source, 'EPSG:2')
        assert info.value.code == 'EPSG:2'

    def test_read_error_keeps_state_and_retries(self, source, warp_service):
        attempts = []

        def flaky_assembler(warped):
            attempts.append(warped)
            if len(attempts) == 1:
                raise RasterReadError("transient", band=0)
            return assemble_from_source(warped)

        cache = ReprojectionCache(warp_service=warp_service,
                                  crs_resolver=fake_resolver,
                                  assembler=flaky_assembler)
        with pytest.raises(RasterReadError):
            cache.ensure_current(source, 'EPSG:3857')
        assert cache.state is CacheState.EMPTY
        image = cache.ensure_current(source, 'EPSG:3857')
        assert cache.image is image
        assert len(warp_service.calls) == 2


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

class TestAccessors:
    """Test dimensions, origin, bounds and placement of the cached image."""

    def test_size_and_origin(self, cache, source):
        cache.ensure_current(source, 'EPSG:3857')
        assert cache.image_size == (2, 2)
        assert cache.origin == (100.0, 200.0)

    def test_bounds(self, cache, source):
        cache.ensure_current(source, 'EPSG:3857')
        assert cache.bounds() == (100.0, 199.0, 101.0, 200.0)

    def test_placement(self, cache, source):
        cache.ensure_current(source, 'EPSG:4326')
        p = cache.placement(lambda x, y: (x, y))
        assert (p.translate_x, p.translate_y) == (10.0, 50.0)
        assert (p.scale_x, p.scale_y) == (0.5, -0.5)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestWarpOptions:
    """Test WarpOptions validation."""

    def test_defaults(self):
        opts = WarpOptions()
        assert opts.resampling is ResamplingMethod.CUBIC
        assert opts.max_pixel_error == 0.2

    def test_string_resampling(self):
        assert WarpOptions('Bilinear').resampling is ResamplingMethod.BILINEAR

    def test_unknown_resampling(self):
        with pytest.raises(ValidationError, match="Unknown resampling"):
            WarpOptions('lanczos')

    @pytest.mark.parametrize("error", [0.0, -0.2])
    def test_non_positive_error(self, error):
        with pytest.raises(ValidationError):
            WarpOptions(max_pixel_error=error)
