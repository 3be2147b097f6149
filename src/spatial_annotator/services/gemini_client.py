"""Client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from spatial_annotator.config import Settings
from spatial_annotator.constants import SAFETY_CATEGORIES, SAFETY_THRESHOLD
from spatial_annotator.errors import DetectionServiceError, ResponseParseError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Sends one image and one instruction to a multimodal model and returns its text."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        api_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key.
            model: Model name.
            api_url: Base URL of the API version.
            timeout: Request timeout in seconds.
            transport: Optional transport, used by tests to mock the service.
        """
        self._api_key = api_key
        self._model = model
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiClient:
        """Create a client from application settings."""
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            api_url=settings.gemini_api_url,
            timeout=settings.request_timeout,
        )

    @property
    def endpoint(self) -> str:
        """URL of the generateContent call for the configured model."""
        return f"{self._api_url}/models/{self._model}:generateContent"

    @staticmethod
    def build_request_body(image_png: bytes, instruction: str, temperature: float) -> dict[str, Any]:
        """Build the JSON body: inline PNG, instruction, temperature, no thinking budget."""
        return {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": "image/png",
                                "data": base64.b64encode(image_png).decode("ascii"),
                            }
                        },
                        {"text": instruction},
                    ]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                # Spatial tasks run without extended reasoning
                "thinkingConfig": {"thinkingBudget": 0},
            },
            "safetySettings": [
                {"category": category, "threshold": SAFETY_THRESHOLD} for category in SAFETY_CATEGORIES
            ],
        }

    @staticmethod
    def extract_text(payload: Any) -> str:
        """Concatenate the text parts of the first candidate.

        Raises:
            ResponseParseError: If the payload has no candidate text.
        """
        try:
            parts = payload["candidates"][0]["content"]["parts"]
            texts = [part["text"] for part in parts if "text" in part]
        except (KeyError, IndexError, TypeError) as e:
            raise ResponseParseError(f"Response has no candidate content: {e!r}") from e
        if not texts:
            raise ResponseParseError("Response candidate has no text")
        return "".join(texts)

    async def generate(self, image_png: bytes, instruction: str, temperature: float) -> str:
        """Send the image and instruction and return the model's text.

        Raises:
            DetectionServiceError: If the key is missing or the request fails.
            ResponseParseError: If the response body is not the expected JSON.
        """
        if not self._api_key:
            raise DetectionServiceError("GEMINI_API_KEY is not set")

        body = self.build_request_body(image_png, instruction, temperature)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    json=body,
                    headers={"x-goog-api-key": self._api_key},
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise DetectionServiceError(f"Detection request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseParseError(f"Service returned invalid JSON: {e}") from e

        text = self.extract_text(payload)
        logger.debug(f"Received {len(text)} characters from {self._model}")
        return text
