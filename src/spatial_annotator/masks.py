"""Segmentation mask decoding and per-instance recoloring."""

import base64
import binascii
from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from spatial_annotator.constants import SEGMENTATION_COLORS_RGB

DATA_URL_PREFIX = "data:"


def decode_mask(payload: str) -> Image.Image:
    """Decode a mask payload into a PIL image.

    Args:
        payload: A ``data:image/png;base64,...`` URL or bare base64 image data.

    Returns:
        The decoded image, fully loaded.

    Raises:
        ValueError: If the payload is not valid base64 image data.
    """
    data = payload.strip()
    if data.startswith(DATA_URL_PREFIX):
        _, _, data = data.partition(",")

    try:
        raw = base64.b64decode(data, validate=True)
        image = Image.open(BytesIO(raw))
        image.load()
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Invalid mask payload: {e}") from e
    return image


def get_mask_color(index: int) -> tuple[int, int, int]:
    """Get the palette color for the mask at the given position."""
    return SEGMENTATION_COLORS_RGB[index % len(SEGMENTATION_COLORS_RGB)]


def recolor_mask(mask: Image.Image, palette_index: int) -> Image.Image:
    """Tint a mask with its palette color, using channel 0 as alpha.

    Channel 0 of the input encodes membership (0 outside, 255 inside,
    intermediate values are soft edges); every other channel is ignored.

    Args:
        mask: Mask image in any mode.
        palette_index: Position of the mask in its collection.

    Returns:
        New RGBA image of the same size. The input is left untouched.
    """
    if mask.mode in ("L", "P", "1", "I", "F"):
        # Single-channel modes, palette images are expanded first
        source = mask.convert("RGBA") if mask.mode == "P" else mask.convert("L")
    else:
        source = mask.convert("RGBA")
    channels = np.asarray(source)
    alpha = channels if channels.ndim == 2 else channels[..., 0]

    pixels = np.empty((*alpha.shape, 4), dtype=np.uint8)
    pixels[..., :3] = get_mask_color(palette_index)
    pixels[..., 3] = alpha
    return Image.fromarray(pixels)


def fit_mask(mask: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Resize a mask to the given pixel size without interpolating its edges."""
    if mask.size == size:
        return mask
    return mask.resize(size, Image.Resampling.NEAREST)
