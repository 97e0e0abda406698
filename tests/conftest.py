"""Shared fixtures: Pillow-made images and a fake async OpenAI client."""

from __future__ import annotations

import base64
import io
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from PIL import Image

from configs.settings import Settings
from models.image_content import ImageContent
from models.session_models import Turn, TurnRole


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (48, 27), color=(200, 30, 30), mode: str = "RGB") -> bytes:
    """Return encoded bytes of a solid-color image."""
    img = Image.new(mode, size, color)
    out = io.BytesIO()
    img.save(out, format=fmt)
    return out.getvalue()


def make_images_response(data: Optional[bytes] = None, usage: Optional[Dict[str, Any]] = None) -> SimpleNamespace:
    payload = data if data is not None else make_image_bytes()
    return SimpleNamespace(
        data=[SimpleNamespace(b64_json=base64.b64encode(payload).decode("utf-8"))],
        usage=usage if usage is not None else {"input_tokens": 120, "output_tokens": 4000, "total_tokens": 4120},
    )


class FakeImages:
    """Records calls to images.generate / images.edit and replays canned results."""

    def __init__(self) -> None:
        self.generate_calls: List[Dict[str, Any]] = []
        self.edit_calls: List[Dict[str, Any]] = []
        self.response: Any = make_images_response()
        self.error: Optional[Exception] = None

    async def generate(self, **kwargs: Any) -> Any:
        self.generate_calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response

    async def edit(self, **kwargs: Any) -> Any:
        self.edit_calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.generate_calls) + len(self.edit_calls)


class FakeOpenAIClient:
    def __init__(self) -> None:
        self.images = FakeImages()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk-test")


@pytest.fixture
def fake_client() -> FakeOpenAIClient:
    return FakeOpenAIClient()


@pytest.fixture
def png_image() -> ImageContent:
    return ImageContent(data=make_image_bytes("PNG"), mime_type="image/png", filename="upload.png")


@pytest.fixture
def gif_image() -> ImageContent:
    return ImageContent(data=make_image_bytes("GIF", size=(40, 30), mode="P", color=3), mime_type="image/gif", filename="funny.gif")


def user_turn(text: str, image: Optional[ImageContent] = None) -> Turn:
    return Turn(role=TurnRole.USER, text=text, image=image)


def bot_turn(image: Optional[ImageContent] = None, text: str = "Here's your generated thumbnail:") -> Turn:
    return Turn(role=TurnRole.BOT, text=text, image=image)
