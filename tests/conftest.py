"""Test fixtures for spatial annotator tests."""

import base64
import os
from collections.abc import Callable
from io import BytesIO

import httpx
import pytest
from PIL import Image

# Set test environment variables before importing app modules
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["EXAMPLE_IMAGES_BASE_URL"] = "http://examples.test/"

from spatial_annotator.models import ImageOrigin
from spatial_annotator.services.gemini_client import GeminiClient
from spatial_annotator.state import AnnotationStore, ImageReference


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Create PNG bytes of a solid image."""

    def factory(size: tuple[int, int] = (8, 8), color: str | int | tuple = "red", mode: str = "RGB") -> bytes:
        buffer = BytesIO()
        Image.new(mode, size, color).save(buffer, format="PNG")
        return buffer.getvalue()

    return factory


@pytest.fixture
def make_mask_url(make_png: Callable[..., bytes]) -> Callable[..., str]:
    """Create a grayscale mask PNG encoded as a data URL."""

    def factory(size: tuple[int, int] = (4, 4), value: int = 255) -> str:
        encoded = base64.b64encode(make_png(size, value, mode="L")).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    return factory


@pytest.fixture
def image_ref() -> ImageReference:
    """A 200x100 white image."""
    return ImageReference(image=Image.new("RGB", (200, 100), "white"), origin=ImageOrigin.UPLOAD, name="white.png")


@pytest.fixture
def store(image_ref: ImageReference) -> AnnotationStore:
    """A fresh store with an active image."""
    annotation_store = AnnotationStore()
    annotation_store.set_image(image_ref)
    return annotation_store


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], GeminiClient]:
    """Create a Gemini client whose requests are answered by a handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> GeminiClient:
        return GeminiClient(api_key="test-key", transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def model_reply() -> Callable[[str], dict]:
    """Wrap model text in a generateContent response body."""

    def factory(text: str) -> dict:
        return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}

    return factory
