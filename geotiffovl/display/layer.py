# -*- coding: utf-8 -*-
"""
Raster Overlay Layer - Paint a georeferenced raster onto a map canvas.

``RasterOverlayLayer`` owns a raster source and a reprojection cache. On
every paint it brings the cache up to date for the current display CRS,
derives the screen placement from the viewport, and composites the image
onto a Pillow RGBA canvas. When the raster cannot be shown, a red error
message is painted in its place instead of stale pixels.

Dependencies
------------
Pillow

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
2026-10-17

Modified
--------
2026-10-19
"""

# Standard library
import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

# Third-party
try:
    from PIL import Image, ImageDraw, ImageFont
    _HAS_PIL = True
except ImportError:
    _HAS_PIL = False

# geotiffovl internal
from geotiffovl.display.placement import ScreenPlacement
from geotiffovl.exceptions import (
    InvalidProjectionError,
    NotGeoreferencedError,
    OverlayError,
    ValidationError,
)
from geotiffovl.geolocation.crs import crs_to_wkt, describe_crs
from geotiffovl.reprojection.cache import ReprojectionCache

if TYPE_CHECKING:
    from geotiffovl.IO.base import RasterSource
    from geotiffovl.display.viewport import Viewport

logger = logging.getLogger(__name__)

ERROR_COLOR = (255, 0, 0, 255)
ERROR_POSITION = (20, 100)
ERROR_FONT_SIZE = 20


class RasterOverlayLayer:
    """Map layer displaying one raster in the current display projection.

    Parameters
    ----------
    source : RasterSource
        Source raster. The layer owns it and closes it in :meth:`close`.
    name : str, optional
        Display name; defaults to the source file name.
    cache : ReprojectionCache, optional
        Defaults to a cache with the rasterio warp service.
    display_crs_code : str, optional
        When given, the raster is reprojected immediately; failures are
        logged and reported again at paint time.

    Raises
    ------
    ImportError
        If Pillow is not installed.
    """

    def __init__(
        self,
        source: 'RasterSource',
        name: Optional[str] = None,
        cache: Optional[ReprojectionCache] = None,
        display_crs_code: Optional[str] = None,
    ) -> None:
        if not _HAS_PIL:
            raise ImportError(
                "Pillow is required for painting overlays. "
                "Install with: pip install Pillow"
            )
        self.source = source
        if name is None:
            name = source.filepath.name if source.filepath is not None \
                else getattr(source, 'name', 'raster')
        self.name = name
        self.cache = cache if cache is not None else ReprojectionCache()

        if display_crs_code is not None:
            try:
                self.cache.ensure_current(source, display_crs_code)
            except OverlayError:
                logger.warning("Could not initialize layer '%s'", name,
                               exc_info=True)

    @property
    def title(self) -> str:
        return f"Image: {self.name}"

    @property
    def tooltip(self) -> str:
        """Absolute path of the source file, or the layer name."""
        if self.source.filepath is not None:
            return str(self.source.filepath.resolve())
        return self.name

    def is_mergeable(self, other: object) -> bool:
        """Raster overlays never merge with other layers."""
        return False

    # -----------------------------------------------------------------
    # Painting
    # -----------------------------------------------------------------
    def paint(
        self,
        canvas: 'Image.Image',
        viewport: 'Viewport',
        display_crs_code: str,
    ) -> Optional[ScreenPlacement]:
        """Composite the raster onto *canvas* for the given viewport.

        Parameters
        ----------
        canvas : PIL.Image.Image
            ``'RGBA'`` canvas, modified in place.
        viewport : Viewport
            Supplies ``projected_to_screen`` for the current pan/zoom.
        display_crs_code : str
            Current display CRS code.

        Returns
        -------
        ScreenPlacement or None
            The placement used, or ``None`` when an error indicator was
            painted instead.

        Raises
        ------
        ValidationError
            If *canvas* is not an RGBA image.
        """
        if canvas.mode != 'RGBA':
            raise ValidationError(
                f"Canvas must be an RGBA image, got mode '{canvas.mode}'"
            )

        try:
            image = self.cache.ensure_current(self.source, display_crs_code)
        except NotGeoreferencedError:
            self._paint_error(
                canvas,
                f"Image layer '{self.name}': IMAGE IS NOT PROPERLY GEOREFERENCED",
            )
            return None
        except InvalidProjectionError as e:
            self._paint_error(
                canvas,
                f"Image layer '{self.name}': CANNOT COMPREHEND PROJECTION "
                f"'{e.code}'",
            )
            return None
        except OverlayError as e:
            self._paint_error(canvas, f"Image layer '{self.name}': {e}")
            return None

        placement = self.cache.placement(viewport.projected_to_screen)
        bitmap = Image.fromarray(image.to_rgba())
        if placement.is_degenerate:
            self._paint_collapsed(canvas, bitmap, placement)
        else:
            sx, sy = placement.scale_x, placement.scale_y
            tx, ty = placement.translate_x, placement.translate_y
            overlay = bitmap.transform(
                canvas.size,
                Image.Transform.AFFINE,
                (1.0 / sx, 0.0, -tx / sx, 0.0, 1.0 / sy, -ty / sy),
                resample=Image.Resampling.NEAREST,
            )
            canvas.alpha_composite(overlay)
        return placement

    def _paint_collapsed(
        self,
        canvas: 'Image.Image',
        bitmap: 'Image.Image',
        placement: ScreenPlacement,
    ) -> None:
        width, height = bitmap.size
        span_x = placement.scale_x * width
        span_y = placement.scale_y * height
        size = (max(1, int(round(abs(span_x)))), max(1, int(round(abs(span_y)))))
        strip = bitmap.resize(size, Image.Resampling.NEAREST)
        if span_x < 0:
            strip = strip.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if span_y < 0:
            strip = strip.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        left = placement.translate_x + min(0.0, span_x)
        top = placement.translate_y + min(0.0, span_y)
        canvas.paste(strip, (int(round(left)), int(round(top))), strip)

    def _paint_error(self, canvas: 'Image.Image', message: str) -> None:
        logger.warning("%s", message)
        draw = ImageDraw.Draw(canvas)
        font = ImageFont.load_default(size=ERROR_FONT_SIZE)
        draw.text(ERROR_POSITION, message, fill=ERROR_COLOR, font=font)

    # -----------------------------------------------------------------
    # Reporting
    # -----------------------------------------------------------------
    def bounding_box(self) -> Optional[Tuple[float, float, float, float]]:
        """Projected bounds of the displayed image, ``None`` if not shown."""
        return self.cache.bounds()

    def info(self, display_crs_code: str) -> str:
        """Multi-line description of the source and the projected image."""
        try:
            image = self.cache.ensure_current(self.source, display_crs_code)
        except OverlayError as e:
            return f"Unusable dataset:\n{type(e).__name__}: {e}"

        src = self.source
        lines: List[str] = ["Source image properties:"]
        lines.append(f"Dimensions: {src.width}x{src.height}")
        lines.append(f"Bands: {src.band_count}")
        if src.geo_transform is not None:
            ox, oy = src.geo_transform.origin
            lines.append(f"Origin: ({ox} ; {oy})")
        lines.append("Source projection:")
        try:
            lines.append(describe_crs(src.crs_code))
        except InvalidProjectionError:
            lines.append(f"UNKNOWN PROJECTION: {src.crs_code}")
        lines.append("")

        ox, oy = self.cache.origin
        lines.append("Projected image properties:")
        lines.append(f"Dimensions: {image.width}x{image.height}")
        lines.append(f"Origin: ({ox} ; {oy})")
        lines.append("Display projection:")
        try:
            lines.append(crs_to_wkt(display_crs_code, pretty=True))
        except InvalidProjectionError:
            lines.append(f"NOT A VALID PROJECTION: {display_crs_code}")
        lines.append("")
        return "\n".join(lines)

    def close(self) -> None:
        """Close the owned raster source."""
        self.source.close()

    def __repr__(self) -> str:
        return f"RasterOverlayLayer({self.name!r}, {self.cache.state.value})"
