# -*- coding: utf-8 -*-
"""
Image Module - Drawable images assembled from raster bands.

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
2026-10-14
"""

from geotiffovl.image.models import ColorModel, DrawableImage
from geotiffovl.image.assembler import (
    assemble,
    assemble_from_source,
    sample_type_of,
)

__all__ = [
    'ColorModel',
    'DrawableImage',
    'assemble',
    'assemble_from_source',
    'sample_type_of',
]
