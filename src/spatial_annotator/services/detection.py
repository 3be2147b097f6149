"""Detection request pipeline: composite, instruct, call, parse, apply."""

from __future__ import annotations

import asyncio
import logging

from spatial_annotator.errors import DetectionError, StaleResultError
from spatial_annotator.prompts import build_instruction
from spatial_annotator.services.compositing import build_composite
from spatial_annotator.services.gemini_client import GeminiClient
from spatial_annotator.services.response_parsing import (
    BoxesResult,
    DetectionResult,
    MasksResult,
    PointsResult,
    parse_response,
)
from spatial_annotator.state import AnnotationStore

logger = logging.getLogger(__name__)


class DetectionPipeline:
    """Runs one detection request against the state of an annotation store."""

    def __init__(self, store: AnnotationStore, client: GeminiClient, max_image_size: int = 640) -> None:
        """Initialize the pipeline.

        Args:
            store: Session state to read the request from and write results to.
            client: Detection service client.
            max_image_size: Longer side of the composite image sent to the service.
        """
        self._store = store
        self._client = client
        self._max_image_size = max_image_size

    def build_request(self) -> tuple[bytes, str]:
        """Return the composite PNG and the instruction for the current store state.

        Raises:
            DetectionError: If there is no image or stream frame to send.
        """
        store = self._store
        source = store.active_source
        if source is None:
            raise DetectionError("No image or stream frame to send")
        image_png = build_composite(source, store.strokes, store.line_thickness, self._max_image_size)
        return image_png, build_instruction(store.prompts, store.mode)

    async def detect(self) -> DetectionResult:
        """Request detections and store them.

        The epoch is stamped when the request starts. Results are written only if
        the session has not been reset since; otherwise they are discarded. The
        loading flag is cleared whatever the outcome.

        Raises:
            DetectionError: On service failure, malformed or mismatched responses,
                or when the result is stale.
        """
        store = self._store
        request_epoch = store.epoch
        mode = store.mode

        with store.loading():
            try:
                image_png, instruction = self.build_request()
                logger.info(f"Requesting {mode.value} (epoch {request_epoch}, {len(image_png)} bytes)")
                text = await self._client.generate(image_png, instruction, store.temperature)
                result = parse_response(mode, text)
                self._apply(result, request_epoch)
            except StaleResultError as e:
                logger.warning(str(e))
                raise
            except DetectionError as e:
                logger.error(f"Detection failed: {e}")
                raise

        return result

    def run(self) -> DetectionResult:
        """Run :meth:`detect` to completion from synchronous code."""
        return asyncio.run(self.detect())

    def _apply(self, result: DetectionResult, request_epoch: int) -> None:
        """Write a result to the store if it still belongs to the current epoch."""
        store = self._store
        if store.epoch != request_epoch:
            raise StaleResultError(request_epoch, store.epoch)

        if isinstance(result, BoxesResult):
            store.replace_boxes(result.items)
        elif isinstance(result, MasksResult):
            store.replace_masks(result.items)
        elif isinstance(result, PointsResult):
            store.replace_points(result.items)
        store.image_sent = True
        logger.info(f"Stored {len(result.items)} {result.kind.value}")
