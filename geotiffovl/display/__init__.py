# -*- coding: utf-8 -*-
"""
Display Module - Screen placement, viewports and the overlay layer.

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
2026-10-16

Modified
--------
2026-10-17
"""

from geotiffovl.display.placement import (
    ScreenPlacement,
    compute_placement,
    placement_for_image,
)
from geotiffovl.display.viewport import Viewport
from geotiffovl.display.layer import RasterOverlayLayer

__all__ = [
    'ScreenPlacement',
    'compute_placement',
    'placement_for_image',
    'Viewport',
    'RasterOverlayLayer',
]
