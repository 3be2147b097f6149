"""Session-scoped annotation state.

One ``AnnotationStore`` exists per user session. It owns the active image or
stream, the detection mode, the three result collections, freehand strokes,
prompt templates and UI flags. The detection pipeline and the overlay renderer
receive the store explicitly; nothing here is module-global.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from io import BytesIO
from typing import Protocol, runtime_checkable

from PIL import Image

from spatial_annotator.constants import (
    DEFAULT_LINE_THICKNESS,
    DEFAULT_STROKE_COLOR,
    DEFAULT_TEMPERATURE,
    MAX_LINE_THICKNESS,
    MAX_TEMPERATURE,
    MIN_LINE_THICKNESS,
    MIN_TEMPERATURE,
)
from spatial_annotator.models import CollectionKind, DetectType, ImageOrigin
from spatial_annotator.schemas import BoundingBox2D, FreehandStroke, Point, PromptTemplates, SegmentationMask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageReference:
    """A decoded static image and where it came from."""

    image: Image.Image
    origin: ImageOrigin
    name: str = ""

    @classmethod
    def from_bytes(cls, data: bytes, origin: ImageOrigin, name: str = "") -> ImageReference:
        """Decode raw image bytes.

        Raises:
            PIL.UnidentifiedImageError: If the bytes are not a supported image.
        """
        image = Image.open(BytesIO(data))
        image.load()
        return cls(image=image, origin=origin, name=name)


@runtime_checkable
class FrameSource(Protocol):
    """A live video source that can provide its current frame."""

    def current_frame(self) -> Image.Image | None:
        """Return the latest frame, or None if no frame is available yet."""
        ...

    def stop(self) -> None:
        """Stop producing frames."""
        ...


class CameraStream:
    """Frame source fed by camera snapshots pushed from the UI."""

    def __init__(self) -> None:
        self._frame: Image.Image | None = None
        self._stopped = False

    def push_frame(self, data: bytes) -> None:
        """Replace the current frame with a newly captured snapshot."""
        if self._stopped:
            logger.debug("Ignoring frame pushed to a stopped stream")
            return
        frame = Image.open(BytesIO(data))
        frame.load()
        self._frame = frame

    def current_frame(self) -> Image.Image | None:
        """Return the latest snapshot."""
        return self._frame

    def stop(self) -> None:
        """Stop the stream and drop the last frame."""
        self._stopped = True
        self._frame = None


class AnnotationStore:
    """In-memory source of truth for one annotation session."""

    def __init__(self, mode: DetectType = DetectType.BOUNDING_BOXES_2D) -> None:
        self._image: ImageReference | None = None
        self._stream: FrameSource | None = None
        self._mode = mode
        self._boxes: list[BoundingBox2D] = []
        self._masks: list[SegmentationMask] = []
        self._points: list[Point] = []
        self._strokes: list[FreehandStroke] = []
        self._epoch = 0

        self.prompts = PromptTemplates()
        self.is_loading = False
        self.image_sent = False
        self.draw_mode = False
        self.show_labels = True
        self.show_boxes = True
        self.active_color = DEFAULT_STROKE_COLOR
        self._line_thickness = DEFAULT_LINE_THICKNESS
        self._temperature = DEFAULT_TEMPERATURE

    # Sources

    @property
    def image(self) -> ImageReference | None:
        """The static image slot."""
        return self._image

    @property
    def stream(self) -> FrameSource | None:
        """The live stream slot."""
        return self._stream

    def set_image(self, ref: ImageReference | None) -> None:
        """Set the static image. Does not touch the stream slot."""
        self._image = ref

    def set_stream(self, ref: FrameSource | None) -> None:
        """Set the live stream. Does not touch the image slot."""
        self._stream = ref

    @property
    def active_source(self) -> Image.Image | None:
        """Return the image to render and send; a stream takes precedence over a static image."""
        if self._stream is not None:
            return self._stream.current_frame()
        if self._image is not None:
            return self._image.image
        return None

    # Mode

    @property
    def mode(self) -> DetectType:
        """The active detection type."""
        return self._mode

    def set_mode(self, mode: DetectType) -> None:
        """Select the detection type."""
        self._mode = DetectType(mode)

    # Result collections

    @property
    def boxes(self) -> list[BoundingBox2D]:
        """Current 2D bounding boxes."""
        return list(self._boxes)

    @property
    def masks(self) -> list[SegmentationMask]:
        """Current segmentation masks, largest first."""
        return list(self._masks)

    @property
    def points(self) -> list[Point]:
        """Current points."""
        return list(self._points)

    def replace_boxes(self, boxes: list[BoundingBox2D]) -> None:
        """Replace the whole box collection."""
        self._boxes = list(boxes)

    def replace_masks(self, masks: list[SegmentationMask]) -> None:
        """Replace the whole mask collection."""
        self._masks = list(masks)

    def replace_points(self, points: list[Point]) -> None:
        """Replace the whole point collection."""
        self._points = list(points)

    def collection_for(self, mode: DetectType) -> list[BoundingBox2D] | list[SegmentationMask] | list[Point]:
        """Return the result collection rendered for a detection type."""
        if mode == DetectType.BOUNDING_BOXES_2D:
            return self.boxes
        if mode == DetectType.SEGMENTATION_MASKS:
            return self.masks
        return self.points

    def update_label(self, kind: CollectionKind, index: int, new_label: str) -> None:
        """Replace the label of one entry. Out-of-range indices are ignored."""
        kind = CollectionKind(kind)
        if kind == CollectionKind.BOX_2D:
            collection: list = self._boxes
        elif kind == CollectionKind.MASK:
            collection = self._masks
        else:
            collection = self._points

        if not 0 <= index < len(collection):
            logger.debug(f"Ignoring label edit for {kind.value} index {index}, collection has {len(collection)}")
            return

        updated = list(collection)
        updated[index] = updated[index].model_copy(update={"label": new_label})
        if kind == CollectionKind.BOX_2D:
            self._boxes = updated
        elif kind == CollectionKind.MASK:
            self._masks = updated
        else:
            self._points = updated

    # Freehand strokes

    @property
    def strokes(self) -> list[FreehandStroke]:
        """Freehand strokes in drawing order."""
        return list(self._strokes)

    def begin_stroke(self, color: str | None = None) -> None:
        """Open a new stroke drawn with the given color (the active color by default)."""
        self._strokes.append(FreehandStroke(points=[], color=color or self.active_color))

    def append_stroke_point(self, point: tuple[float, float]) -> None:
        """Append a unit-coordinate sample to the open stroke."""
        if not self._strokes:
            logger.debug("No open stroke, ignoring sample")
            return
        last = self._strokes[-1]
        self._strokes[-1] = last.model_copy(update={"points": [*last.points, (float(point[0]), float(point[1]))]})

    def clear_strokes(self) -> None:
        """Remove every stroke."""
        self._strokes = []

    # Settings with ranges

    @property
    def line_thickness(self) -> int:
        """Stroke width in display pixels."""
        return self._line_thickness

    @line_thickness.setter
    def line_thickness(self, value: int) -> None:
        self._line_thickness = int(min(max(value, MIN_LINE_THICKNESS), MAX_LINE_THICKNESS))

    @property
    def temperature(self) -> float:
        """Sampling temperature sent with detection requests."""
        return self._temperature

    @temperature.setter
    def temperature(self, value: float) -> None:
        self._temperature = float(min(max(value, MIN_TEMPERATURE), MAX_TEMPERATURE))

    # Session lifecycle

    @property
    def epoch(self) -> int:
        """Counter of events that invalidated previous results."""
        return self._epoch

    def reset(self) -> None:
        """Clear all results and start a new epoch. Strokes are kept."""
        self.image_sent = False
        self._boxes = []
        self._masks = []
        self._points = []
        self._epoch += 1
        logger.debug(f"Session reset, epoch is now {self._epoch}")

    @contextmanager
    def loading(self) -> Iterator[None]:
        """Mark a request as in progress for the duration of the block."""
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
