"""Detection services."""

from spatial_annotator.services.compositing import build_composite, composite_image
from spatial_annotator.services.detection import DetectionPipeline
from spatial_annotator.services.example_images import fetch_example_images
from spatial_annotator.services.gemini_client import GeminiClient
from spatial_annotator.services.response_parsing import (
    BoxesResult,
    DetectionResult,
    MasksResult,
    PointsResult,
    extract_json_payload,
    parse_response,
)

__all__ = [
    "BoxesResult",
    "DetectionPipeline",
    "DetectionResult",
    "GeminiClient",
    "MasksResult",
    "PointsResult",
    "build_composite",
    "composite_image",
    "extract_json_payload",
    "fetch_example_images",
    "parse_response",
]
