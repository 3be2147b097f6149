"""Parsing of detection responses into typed result collections.

The service answers with text that should hold a JSON array, optionally inside
a ```json fence. Each detection type has its own item schema; coordinates
arrive on a 0-1000 scale with y before x and are converted to unit
coordinates here.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from spatial_annotator.errors import ResponseParseError, SchemaMismatchError
from spatial_annotator.models import DetectType
from spatial_annotator.schemas import (
    BoundingBox2D,
    BoxItem,
    MaskItem,
    Point,
    PointItem,
    SegmentationMask,
    UnitPoint,
)

logger = logging.getLogger(__name__)

JSON_FENCE = "```json"
FENCE = "```"
COORDINATE_SCALE = 1000


class BoxesResult(BaseModel):
    """Normalized 2D bounding boxes."""

    kind: Literal[DetectType.BOUNDING_BOXES_2D] = DetectType.BOUNDING_BOXES_2D
    items: list[BoundingBox2D]


class MasksResult(BaseModel):
    """Normalized segmentation masks, largest area first."""

    kind: Literal[DetectType.SEGMENTATION_MASKS] = DetectType.SEGMENTATION_MASKS
    items: list[SegmentationMask]


class PointsResult(BaseModel):
    """Normalized points in response order."""

    kind: Literal[DetectType.POINTS] = DetectType.POINTS
    items: list[Point]


DetectionResult = Annotated[BoxesResult | MasksResult | PointsResult, Field(discriminator="kind")]

_box_items = TypeAdapter(list[BoxItem])
_mask_items = TypeAdapter(list[MaskItem])
_point_items = TypeAdapter(list[PointItem])


def extract_json_payload(text: str) -> str:
    """Return the content of the first ```json fence, or the whole text if there is none."""
    if JSON_FENCE in text:
        return text.split(JSON_FENCE, 1)[1].split(FENCE, 1)[0]
    return text


def parse_json(text: str) -> Any:
    """Parse the JSON carried by a response text.

    Raises:
        ResponseParseError: If the payload is not valid JSON.
    """
    payload = extract_json_payload(text)
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e}") from e


def _box_fields(box_2d: tuple[float, float, float, float]) -> dict[str, float]:
    """Convert ``[ymin, xmin, ymax, xmax]`` on the 0-1000 scale to unit x/y/width/height."""
    ymin, xmin, ymax, xmax = box_2d
    return {
        "x": xmin / COORDINATE_SCALE,
        "y": ymin / COORDINATE_SCALE,
        "width": (xmax - xmin) / COORDINATE_SCALE,
        "height": (ymax - ymin) / COORDINATE_SCALE,
    }


def normalize_boxes(items: list[BoxItem]) -> list[BoundingBox2D]:
    """Convert box items to unit-coordinate boxes."""
    return [BoundingBox2D(**_box_fields(item.box_2d), label=item.label) for item in items]


def normalize_masks(items: list[MaskItem]) -> list[SegmentationMask]:
    """Convert mask items to unit-coordinate masks sorted by descending area."""
    masks = [SegmentationMask(**_box_fields(item.box_2d), label=item.label, image_data=item.mask) for item in items]
    return sorted(masks, key=lambda m: m.area, reverse=True)


def normalize_points(items: list[PointItem]) -> list[Point]:
    """Convert ``[y, x]`` point items to unit-coordinate points."""
    return [
        Point(
            point=UnitPoint(x=item.point[1] / COORDINATE_SCALE, y=item.point[0] / COORDINATE_SCALE),
            label=item.label,
        )
        for item in items
    ]


def decode_result(mode: DetectType, data: Any) -> BoxesResult | MasksResult | PointsResult:
    """Validate parsed JSON against the schema of ``mode`` and normalize it.

    Raises:
        SchemaMismatchError: If the data does not match the expected item schema.
    """
    try:
        if mode == DetectType.BOUNDING_BOXES_2D:
            return BoxesResult(items=normalize_boxes(_box_items.validate_python(data)))
        if mode == DetectType.SEGMENTATION_MASKS:
            return MasksResult(items=normalize_masks(_mask_items.validate_python(data)))
        return PointsResult(items=normalize_points(_point_items.validate_python(data)))
    except ValidationError as e:
        raise SchemaMismatchError(
            f"Response does not match the {mode.value} schema: {e.error_count()} errors"
        ) from e


def parse_response(mode: DetectType, text: str) -> BoxesResult | MasksResult | PointsResult:
    """Parse a response text into the result type of ``mode``.

    Raises:
        ResponseParseError: If the text carries no valid JSON.
        SchemaMismatchError: If the JSON does not match the schema of ``mode``.
    """
    result = decode_result(mode, parse_json(text))
    logger.info(f"Parsed {len(result.items)} {mode.value} from response")
    return result
