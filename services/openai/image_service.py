"""Thumbnail generation and editing via the OpenAI Images API."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from configs.settings import Settings
from exceptions.exceptions import ConfigurationError, ImageServiceError
from models.image_content import ImageContent
from services.openai.response_parser import extract_b64_image, extract_error_message, extract_usage

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedImage:
    """Image returned by the API plus its usage record."""

    image: ImageContent
    usage: Optional[Dict[str, Any]] = None


def build_openai_client(settings: Settings) -> Optional[AsyncOpenAI]:
    """Create the shared async client, or None when no credential is configured.

    Retries are disabled and no timeout is set: the remote call's own lifecycle
    decides when a submission ends.
    """
    if not settings.has_api_key:
        return None
    return AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        max_retries=0,
        timeout=None,
    )


class ThumbnailImageService:
    """Send one generate or edit request per call and return the decoded image."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None) -> None:
        """Initialize the service.

        Args:
            settings: Model, size and quality used for every request.
            client: Async OpenAI client; None means the credential is missing.
        """
        self.settings = settings
        self.client = client

    def _resolve_client(self) -> AsyncOpenAI:
        """Return a usable OpenAI client or raise if missing."""
        if self.client is None:
            raise self.settings.credential_error() or ConfigurationError(
                "OPENAI_API_KEY", "OpenAI client is not configured."
            )
        return self.client

    async def generate(self, prompt: str) -> GeneratedImage:
        """Generate a new thumbnail from a prompt.

        Raises:
            ConfigurationError: If no credential is configured.
            ImageServiceError: If the call fails or returns no image.
        """
        client = self._resolve_client()
        response = await self._call(
            "generate",
            client.images.generate(
                model=self.settings.image_model,
                prompt=prompt,
                n=1,
                size=self.settings.image_size,
                quality=self.settings.image_quality,
            ),
        )
        return self._to_generated(response, "generate")

    async def edit(self, image: ImageContent, prompt: str) -> GeneratedImage:
        """Edit `image` according to `prompt`.

        Only this single base image is transmitted.

        Raises:
            ConfigurationError: If no credential is configured.
            ImageServiceError: If the call fails or returns no image.
        """
        if not image.data:
            raise ImageServiceError("Failed to edit image: base image is empty")
        client = self._resolve_client()
        response = await self._call(
            "edit",
            client.images.edit(
                image=(image.filename, image.data, image.mime_type),
                prompt=prompt,
                model=self.settings.image_model,
                n=1,
                size=self.settings.image_size,
                quality=self.settings.image_quality,
            ),
        )
        return self._to_generated(response, "edit")

    async def _call(self, action: str, request: Any) -> Any:
        try:
            return await request
        except openai.APIStatusError as exc:
            message = extract_error_message(exc.body, exc.status_code)
            LOGGER.error("Image %s request failed with status %s: %s", action, exc.status_code, message)
            raise ImageServiceError(f"Failed to {action} image: {message}", status_code=exc.status_code) from exc
        except openai.APIConnectionError as exc:
            LOGGER.error("Image %s request could not reach the service: %s", action, exc)
            raise ImageServiceError(f"Failed to {action} image: HTTP error! {exc.message}") from exc

    def _to_generated(self, response: Any, action: str) -> GeneratedImage:
        try:
            b64_json = extract_b64_image(response)
            image = ImageContent.from_base64(b64_json, mime_type="image/png", filename="thumbnail.png")
        except (ImageServiceError, ValueError) as exc:
            LOGGER.error("Malformed image %s response: %r", action, response)
            raise ImageServiceError(f"Failed to {action} image: {exc}") from exc
        return GeneratedImage(image=image, usage=extract_usage(response))
