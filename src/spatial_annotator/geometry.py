"""Coordinate conversion between display pixels and unit-normalized image space.

Unit coordinates are fractions of the rendered image rectangle, with the origin
at its top-left corner. The rendered rectangle is the "object-fit: contain" box
of the media inside its container, so it must be recomputed whenever either size
changes. None of these functions clamp: values outside [0, 1] map outside the
image and are drawn as given.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

from shapely.geometry import LineString, Polygon
from shapely.geometry import Point as ShapelyPoint

from spatial_annotator.schemas import BoundingBox2D

# Arc resolution of round stroke joins and caps (vertices per quarter circle)
ARC_QUAD_SEGMENTS = 8


class Size(NamedTuple):
    """Width and height of a container, media element or image."""

    width: float
    height: float


def has_area(size: Size) -> bool:
    """Return True if both dimensions are positive, i.e. the size can be rendered into."""
    return size.width > 0 and size.height > 0


def to_unit(pixel_point: tuple[float, float], container_size: Size) -> tuple[float, float]:
    """Convert a pixel position inside the container to unit coordinates.

    Raises:
        ZeroDivisionError: If the container has a zero dimension.
    """
    x, y = pixel_point
    return x / container_size.width, y / container_size.height


def from_unit(unit_point: tuple[float, float], container_size: Size) -> tuple[float, float]:
    """Convert unit coordinates to a pixel position inside the container."""
    x, y = unit_point
    return x * container_size.width, y * container_size.height


def fit_contain(media_size: Size, container_size: Size) -> Size:
    """Return the size of media scaled to fit inside the container, preserving aspect ratio.

    If the media is relatively narrower than the container its height is bound
    to the container height, otherwise its width is bound to the container width.

    Raises:
        ZeroDivisionError: If the media or container height is zero.
    """
    aspect_ratio = media_size.width / media_size.height
    container_aspect_ratio = container_size.width / container_size.height
    if aspect_ratio < container_aspect_ratio:
        return Size(width=container_size.height * aspect_ratio, height=container_size.height)
    return Size(width=container_size.width, height=container_size.width / aspect_ratio)


def _dedupe(points: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    """Drop the pressure component and consecutive duplicate samples."""
    result: list[tuple[float, float]] = []
    for p in points:
        xy = (float(p[0]), float(p[1]))
        if not result or result[-1] != xy:
            result.append(xy)
    return result


def stroke_shape(points: Sequence[Sequence[float]], thickness: float) -> Polygon:
    """Return the area covered by a freehand stroke.

    The stroke has a constant radius of ``thickness / 2`` (pressure is fixed, there
    is no thinning, smoothing or streamlining), so its area is every position
    within that radius of the polyline through the literal samples, with round
    joins and round caps. A stroke that crosses itself can enclose holes.

    Args:
        points: Ordered samples as ``(x, y)`` or ``(x, y, pressure)``; pressure is ignored.
        thickness: Stroke width in the same units as the samples.

    Returns:
        The stroke polygon; empty for no samples or a non-positive thickness.
    """
    samples = _dedupe(points)
    if not samples or thickness <= 0:
        return Polygon()

    centerline = ShapelyPoint(samples[0]) if len(samples) == 1 else LineString(samples)
    return centerline.buffer(thickness / 2, quad_segs=ARC_QUAD_SEGMENTS)


def smooth_stroke(points: Sequence[Sequence[float]], thickness: float) -> list[tuple[float, float]]:
    """Build the closed outline polygon of a freehand stroke.

    Returns the exterior ring of :func:`stroke_shape` without its repeated
    closing vertex, suitable for a filled polygon. Empty for no samples.
    """
    shape = stroke_shape(points, thickness)
    if shape.is_empty:
        return []
    return [(x, y) for x, y in shape.exterior.coords[:-1]]


def find_smallest_box_at(unit_point: tuple[float, float], boxes: Sequence[BoundingBox2D]) -> int | None:
    """Return the index of the smallest box strictly containing the point, or None."""
    x, y = unit_point
    containing = [
        (box.area, i)
        for i, box in enumerate(boxes)
        if box.x < x < box.x + box.width and box.y < y < box.y + box.height
    ]
    if not containing:
        return None
    return min(containing)[1]


def find_nearest_point(
    pixel_point: tuple[float, float],
    unit_points: Sequence[tuple[float, float]],
    container_size: Size,
    threshold: float = 15.0,
) -> int | None:
    """Return the index of the point closest to a click, if within ``threshold`` pixels.

    Args:
        pixel_point: Click position in container pixels.
        unit_points: Candidate points in unit coordinates.
        container_size: Size the unit coordinates are rendered into.
        threshold: Maximum hit distance in pixels.
    """
    nearest = None
    min_distance = float("inf")
    cx, cy = pixel_point
    for i, unit_point in enumerate(unit_points):
        px, py = from_unit(unit_point, container_size)
        distance = math.hypot(cx - px, cy - py)
        if distance < min_distance and distance <= threshold:
            min_distance = distance
            nearest = i
    return nearest
