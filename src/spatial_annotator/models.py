"""Shared data models and enums."""

from enum import StrEnum


class DetectType(StrEnum):
    """Kind of detection requested from the model."""

    BOUNDING_BOXES_2D = "2D bounding boxes"
    SEGMENTATION_MASKS = "Segmentation masks"
    POINTS = "Points"


class CollectionKind(StrEnum):
    """Result collection addressed by a label edit."""

    BOX_2D = "2d"
    MASK = "mask"
    POINT = "point"


class ImageOrigin(StrEnum):
    """Where the active image came from."""

    UPLOAD = "upload"
    GALLERY = "gallery"


# Values accepted by the ``task`` URL parameter
TASK_PARAMS = {
    "2d-bounding-boxes": DetectType.BOUNDING_BOXES_2D,
    "segmentation-masks": DetectType.SEGMENTATION_MASKS,
    "points": DetectType.POINTS,
}
