"""Pydantic schemas for detection results and model responses."""

from pydantic import BaseModel, ConfigDict, Field

from spatial_annotator.constants import DEFAULT_CUSTOM_PROMPTS, DEFAULT_LABEL_LANGUAGE, DEFAULT_PROMPT_PARTS
from spatial_annotator.models import DetectType


class UnitPoint(BaseModel):
    """Point in unit-normalized image coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class BoundingBox2D(BaseModel):
    """Axis-aligned box in unit-normalized image coordinates (top-left origin)."""

    x: float
    y: float
    width: float
    height: float
    label: str

    @property
    def area(self) -> float:
        """Return the box area as a fraction of the image area."""
        return self.width * self.height


class SegmentationMask(BoundingBox2D):
    """Bounding box with the raw mask payload for that box's region."""

    image_data: str


class Point(BaseModel):
    """Labelled point in unit-normalized image coordinates."""

    point: UnitPoint
    label: str


class FreehandStroke(BaseModel):
    """Pointer samples of one drag, in unit-normalized coordinates."""

    points: list[tuple[float, float]] = []
    color: str


class PromptTemplates(BaseModel):
    """Editable prompt configuration for every detection type."""

    parts: dict[DetectType, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PROMPT_PARTS.items()}
    )
    custom: dict[DetectType, str] = Field(default_factory=lambda: dict(DEFAULT_CUSTOM_PROMPTS))
    use_custom_prompt: bool = False
    label_prompt: str = ""
    segmentation_language: str = DEFAULT_LABEL_LANGUAGE


# Model response items. Coordinates are on the service's 0-1000 scale.


class BoxItem(BaseModel):
    """One entry of a 2D bounding box response."""

    box_2d: tuple[float, float, float, float]
    label: str


class MaskItem(BoxItem):
    """One entry of a segmentation response."""

    mask: str


class PointItem(BaseModel):
    """One entry of a point response; ``point`` is ``[y, x]``."""

    point: tuple[float, float]
    label: str
