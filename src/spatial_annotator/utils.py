"""Shared utility functions."""

import logging
from io import BytesIO

from PIL import Image, ImageColor

from spatial_annotator.constants import LABEL_COLOR_LIGHTNESS, LABEL_COLOR_SATURATION
from spatial_annotator.models import TASK_PARAMS, DetectType

logger = logging.getLogger(__name__)


def _to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def label_hue(label: str) -> int:
    """Hash a label to a hue in degrees.

    Uses the classic ``c + (hash << 5) - hash`` string hash over UTF-16 code
    units, so equal labels always share a color.
    """
    encoded = label.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = code_unit + (_to_int32(_to_int32(h) << 5) - h)
    return h % 360


def string_to_hsl_color(
    label: str,
    saturation: int = LABEL_COLOR_SATURATION,
    lightness: int = LABEL_COLOR_LIGHTNESS,
) -> tuple[int, int, int]:
    """Get the RGB color for a label.

    Args:
        label: Label text.
        saturation: HSL saturation in percent.
        lightness: HSL lightness in percent.

    Returns:
        RGB tuple.
    """
    return ImageColor.getrgb(f"hsl({label_hue(label)}, {saturation}%, {lightness}%)")[:3]


def detect_type_from_task(task: str | None) -> DetectType | None:
    """Map a ``task`` URL parameter to a detection type.

    Unknown values are logged and ignored.
    """
    if not task:
        return None
    detect_type = TASK_PARAMS.get(task)
    if detect_type is None:
        logger.warning(f"Unknown task parameter in URL: {task}")
    return detect_type


def encode_png(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
