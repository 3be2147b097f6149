"""Composite image construction for detection requests.

The active frame is downscaled so its longer side fits ``max_size`` and every
freehand stroke is burned into it, so the model sees what the user drew.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image, ImageDraw

from spatial_annotator.constants import STROKE_PRESSURE
from spatial_annotator.geometry import Size, from_unit, stroke_shape
from spatial_annotator.schemas import FreehandStroke
from spatial_annotator.utils import encode_png

logger = logging.getLogger(__name__)


def scaled_size(width: int, height: int, max_size: int) -> tuple[int, int]:
    """Return the size that fits ``max_size`` on the longer side, preserving aspect ratio."""
    scale = min(max_size / width, max_size / height)
    return max(1, int(width * scale)), max(1, int(height * scale))


def draw_strokes(
    image: Image.Image,
    strokes: Sequence[FreehandStroke],
    line_thickness: float,
) -> None:
    """Paint each stroke area onto the image, in place."""
    size = Size(*image.size)
    for stroke in strokes:
        samples = [(*from_unit(p, size), STROKE_PRESSURE) for p in stroke.points]
        shape = stroke_shape(samples, line_thickness)
        if shape.is_empty:
            continue

        coverage = Image.new("L", image.size, 0)
        draw = ImageDraw.Draw(coverage)
        draw.polygon(list(shape.exterior.coords), fill=255)
        for hole in shape.interiors:
            draw.polygon(list(hole.coords), fill=0)
        image.paste(stroke.color, mask=coverage)


def composite_image(
    source: Image.Image,
    strokes: Sequence[FreehandStroke],
    line_thickness: float,
    max_size: int = 640,
) -> Image.Image:
    """Downscale the source and burn in the strokes.

    Args:
        source: Active image or video frame.
        strokes: Freehand strokes in unit coordinates.
        line_thickness: Stroke width in pixels of the downscaled canvas.
        max_size: Maximum length of the longer side.

    Returns:
        New RGB image; the source is not modified.
    """
    width, height = scaled_size(source.width, source.height, max_size)
    canvas = source.convert("RGB").resize((width, height), Image.Resampling.BILINEAR)
    if strokes:
        draw_strokes(canvas, strokes, line_thickness)
    return canvas


def build_composite(
    source: Image.Image,
    strokes: Sequence[FreehandStroke],
    line_thickness: float,
    max_size: int = 640,
) -> bytes:
    """Build the composite image and encode it as PNG bytes."""
    canvas = composite_image(source, strokes, line_thickness, max_size)
    logger.debug(f"Composite image {canvas.width}x{canvas.height} with {len(strokes)} strokes")
    return encode_png(canvas)
