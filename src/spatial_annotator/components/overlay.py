"""Overlay rendering of detection results onto the active image."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image, ImageDraw

from spatial_annotator.constants import BOX_OUTLINE_WIDTH, MASK_OPACITY, POINT_OUTLINE_WIDTH, POINT_RADIUS
from spatial_annotator.geometry import Size, fit_contain, from_unit, has_area
from spatial_annotator.masks import decode_mask, fit_mask, recolor_mask
from spatial_annotator.models import DetectType
from spatial_annotator.schemas import BoundingBox2D, Point, SegmentationMask
from spatial_annotator.services.compositing import draw_strokes
from spatial_annotator.state import AnnotationStore
from spatial_annotator.utils import string_to_hsl_color

logger = logging.getLogger(__name__)


def rendered_size(media_size: Size, container_size: Size) -> tuple[int, int] | None:
    """Get the integer pixel size the media is drawn at, or None while a size is unknown."""
    if not has_area(media_size) or not has_area(container_size):
        return None
    fitted = fit_contain(media_size, container_size)
    return max(1, round(fitted.width)), max(1, round(fitted.height))


def _box_pixels(box: BoundingBox2D, size: Size) -> tuple[float, float, float, float]:
    """Return the pixel corners (x1, y1, x2, y2) of a unit box."""
    x1, y1 = from_unit((box.x, box.y), size)
    x2, y2 = from_unit((box.x + box.width, box.y + box.height), size)
    return x1, y1, x2, y2


def _draw_label(
    draw: ImageDraw.ImageDraw,
    anchor: tuple[float, float],
    label: str,
    color: tuple[int, int, int],
) -> None:
    """Draw a label with a filled background whose top-left corner is at anchor."""
    label_bbox = draw.textbbox(anchor, label)
    draw.rectangle((label_bbox[0] - 2, label_bbox[1] - 1, label_bbox[2] + 2, label_bbox[3] + 1), fill=color)
    draw.text(anchor, label, fill="white")


def _draw_boxes(
    draw: ImageDraw.ImageDraw,
    boxes: Sequence[BoundingBox2D],
    size: Size,
    show_boxes: bool,
    show_labels: bool,
    label_above: bool = False,
) -> None:
    """Draw box outlines and labels, colored by label."""
    for box in boxes:
        color = string_to_hsl_color(box.label)
        x1, y1, x2, y2 = _box_pixels(box, size)
        if show_boxes:
            draw.rectangle((x1, y1, max(x1, x2), max(y1, y2)), outline=color, width=BOX_OUTLINE_WIDTH)
        if show_labels and box.label:
            if label_above:
                top = draw.textbbox((x1, y1), box.label)
                anchor = (x1, y1 - (top[3] - top[1]) - 2)
            else:
                anchor = (x1 + 2, y1 + 1)
            _draw_label(draw, anchor, box.label, color)


def _mask_layer(masks: Sequence[SegmentationMask], size: Size) -> Image.Image:
    """Composite every recolored mask into its box region on a transparent layer."""
    layer = Image.new("RGBA", (round(size.width), round(size.height)), (0, 0, 0, 0))
    for index, mask in enumerate(masks):
        x1, y1, x2, y2 = _box_pixels(mask, size)
        box_size = (max(1, round(x2 - x1)), max(1, round(y2 - y1)))
        try:
            decoded = decode_mask(mask.image_data)
        except ValueError as e:
            logger.warning(f"Skipping mask {index} ({mask.label}): {e}")
            continue

        tinted = fit_mask(recolor_mask(decoded, index), box_size)
        tinted.putalpha(tinted.getchannel("A").point(lambda a: round(a * MASK_OPACITY)))

        placed = Image.new("RGBA", layer.size, (0, 0, 0, 0))
        placed.paste(tinted, (round(x1), round(y1)))
        layer = Image.alpha_composite(layer, placed)
    return layer


def _draw_points(
    draw: ImageDraw.ImageDraw,
    points: Sequence[Point],
    size: Size,
    show_labels: bool,
) -> None:
    """Draw points as filled circles with a white outline and a label above."""
    for point in points:
        color = string_to_hsl_color(point.label)
        x, y = from_unit((point.point.x, point.point.y), size)
        draw.ellipse(
            (x - POINT_RADIUS, y - POINT_RADIUS, x + POINT_RADIUS, y + POINT_RADIUS),
            fill=color,
            outline="white",
            width=POINT_OUTLINE_WIDTH,
        )
        if show_labels and point.label:
            text_box = draw.textbbox((0, 0), point.label)
            text_width = text_box[2] - text_box[0]
            text_height = text_box[3] - text_box[1]
            _draw_label(draw, (x - text_width / 2, y - POINT_RADIUS - text_height - 6), point.label, color)


def render_overlay(store: AnnotationStore, container_size: Size) -> Image.Image | None:
    """Render the active source fitted to the container with strokes and results on top.

    Only the collection of the active detection type is drawn.

    Args:
        store: Session state to render.
        container_size: Space available for the image, in pixels.

    Returns:
        RGBA image of the fitted size, or None when there is nothing to render yet.
    """
    source = store.active_source
    if source is None:
        return None
    pixel_size = rendered_size(Size(*source.size), container_size)
    if pixel_size is None:
        return None

    size = Size(*pixel_size)
    base = source.convert("RGBA").resize(pixel_size, Image.Resampling.BILINEAR)
    layer = Image.new("RGBA", pixel_size, (0, 0, 0, 0))

    if store.strokes:
        draw_strokes(layer, store.strokes, store.line_thickness)

    if store.mode == DetectType.SEGMENTATION_MASKS and store.masks:
        layer = Image.alpha_composite(layer, _mask_layer(store.masks, size))

    draw = ImageDraw.Draw(layer)
    if store.mode == DetectType.BOUNDING_BOXES_2D:
        _draw_boxes(draw, store.boxes, size, store.show_boxes, store.show_labels)
    elif store.mode == DetectType.SEGMENTATION_MASKS:
        _draw_boxes(draw, store.masks, size, store.show_boxes, store.show_labels, label_above=True)
    else:
        _draw_points(draw, store.points, size, store.show_labels)

    return Image.alpha_composite(base, layer)
