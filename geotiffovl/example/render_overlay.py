# -*- coding: utf-8 -*-
"""
Render Overlay - Draw a GeoTIFF onto a blank map canvas in any projection.

Opens a GeoTIFF, reprojects it into the requested display CRS, zooms a
viewport onto its footprint, paints it onto a transparent canvas and saves
the result as PNG. Also prints the layer information report.

Usage:
  python -m geotiffovl.example.render_overlay <tif>
  python -m geotiffovl.example.render_overlay <tif> --crs EPSG:3857
  python -m geotiffovl.example.render_overlay <tif> --size 1024x768 --out map.png
  python -m geotiffovl.example.render_overlay --help

Dependencies
------------
rasterio
pyproj
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
2026-10-18

Modified
--------
2026-10-19
"""

# Standard library
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Third-party
from PIL import Image

# geotiffovl
from geotiffovl.IO import is_geotiff_path, open_raster
from geotiffovl.display import RasterOverlayLayer, Viewport
from geotiffovl.exceptions import OverlayError


def _parse_size(text: str) -> Tuple[int, int]:
    try:
        width, height = (int(v) for v in text.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Size must look like 800x600, got '{text}'"
        ) from None
    if width < 1 or height < 1:
        raise argparse.ArgumentTypeError(f"Size must be positive, got '{text}'")
    return width, height


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a GeoTIFF overlay in a display projection.",
    )
    parser.add_argument("raster", type=Path, help="GeoTIFF file (.tif/.tiff)")
    parser.add_argument("--crs", default="EPSG:3857",
                        help="Display CRS code (default: EPSG:3857)")
    parser.add_argument("--size", type=_parse_size, default=(800, 600),
                        help="Canvas size WIDTHxHEIGHT (default: 800x600)")
    parser.add_argument("--out", type=Path, default=Path("overlay.png"),
                        help="Output PNG path (default: overlay.png)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not is_geotiff_path(args.raster):
        print(f"Not a GeoTIFF file: {args.raster}", file=sys.stderr)
        return 2

    try:
        source = open_raster(args.raster)
    except (FileNotFoundError, OverlayError) as e:
        print(f"Cannot open {args.raster}: {e}", file=sys.stderr)
        return 1

    layer = RasterOverlayLayer(source, display_crs_code=args.crs)
    try:
        width, height = args.size
        canvas = Image.new('RGBA', (width, height), (0, 0, 0, 0))
        viewport = Viewport(0.0, 0.0, 1.0, width, height)

        bounds = layer.bounding_box()
        if bounds is not None:
            viewport.zoom_to(bounds)
        print(f"  Viewport: {viewport}")

        placement = layer.paint(canvas, viewport, args.crs)
        canvas.save(str(args.out))
        print(f"  Saved: {args.out}")
        print(layer.info(args.crs))
    finally:
        layer.close()

    return 0 if placement is not None else 1


if __name__ == "__main__":
    sys.exit(main())
