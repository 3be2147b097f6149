"""Example image gallery fetched once at startup."""

from __future__ import annotations

import logging

import httpx
from PIL import UnidentifiedImageError

from spatial_annotator.constants import API_TIMEOUT_READ, EXAMPLE_IMAGE_FILENAMES
from spatial_annotator.models import ImageOrigin
from spatial_annotator.state import ImageReference

logger = logging.getLogger(__name__)


def fetch_example_images(
    base_url: str,
    filenames: list[str] | None = None,
    client: httpx.Client | None = None,
) -> list[ImageReference]:
    """Download and decode the example images.

    Images that fail to download or decode are logged and skipped.

    Args:
        base_url: URL prefix the filenames are appended to.
        filenames: Images to fetch; defaults to the bundled example list.
        client: Optional HTTP client, used by tests to mock the server.

    Returns:
        Decoded images in filename order.
    """
    filenames = EXAMPLE_IMAGE_FILENAMES if filenames is None else filenames
    base_url = base_url if base_url.endswith("/") else f"{base_url}/"
    http = client or httpx.Client(timeout=API_TIMEOUT_READ)

    images: list[ImageReference] = []
    try:
        for filename in filenames:
            try:
                response = http.get(f"{base_url}{filename}")
                response.raise_for_status()
                images.append(ImageReference.from_bytes(response.content, ImageOrigin.GALLERY, name=filename))
            except httpx.HTTPError as e:
                logger.warning(f"Failed to fetch example image {filename}: {e}")
            except (UnidentifiedImageError, OSError) as e:
                logger.warning(f"Failed to decode example image {filename}: {e}")
    finally:
        if client is None:
            http.close()

    logger.info(f"Loaded {len(images)} of {len(filenames)} example images")
    return images
