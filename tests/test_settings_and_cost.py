"""Settings loading, upload validation and cost estimates."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from configs.settings import Settings
from exceptions.exceptions import ConfigurationError, InvalidImageError
from services.openai.cost_generator import CostGenerator
from utils.media_validation import INVALID_IMAGE_MESSAGE, resolve_image_type


def test_settings_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_IMAGE_MODEL",
        "OPENAI_IMAGE_SIZE",
        "OPENAI_IMAGE_QUALITY",
        "THUMBNAIL_CONTEXT_WINDOW",
        "THUMBNAIL_CONTEXT_EXCHANGES",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.api_key is None
    assert (settings.image_model, settings.image_size, settings.image_quality) == ("gpt-image-1", "1536x1024", "high")
    assert (settings.context_window, settings.max_context_exchanges) == (6, 3)
    assert isinstance(settings.credential_error(), ConfigurationError)


def test_settings_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-live  ")
    monkeypatch.setenv("THUMBNAIL_CONTEXT_WINDOW", "10")

    settings = Settings.from_env()

    assert settings.api_key == "sk-live"
    assert settings.credential_error() is None
    assert settings.context_window == 10


def test_settings_rejects_non_integer_window(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("THUMBNAIL_CONTEXT_WINDOW", "six")

    with pytest.raises(ConfigurationError):
        Settings.from_env()


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("a.png", "image/png", "image/png"),
        ("a.gif", "IMAGE/GIF", "image/gif"),
        ("scan.tiff", "image/tiff", "image/tiff"),
        ("photo.JPEG", None, "image/jpeg"),
        ("pic.webp", "", "image/webp"),
    ],
)
def test_resolve_image_type_accepts_images(filename, content_type, expected) -> None:
    assert resolve_image_type(filename, content_type) == expected


@pytest.mark.parametrize("filename, content_type", [("a.txt", "text/plain"), ("a.pdf", None), (None, None)])
def test_resolve_image_type_rejects_non_images(filename, content_type) -> None:
    with pytest.raises(InvalidImageError) as excinfo:
        resolve_image_type(filename, content_type)

    assert str(excinfo.value) == INVALID_IMAGE_MESSAGE


def test_cost_prices_image_input_separately_from_text() -> None:
    usage = {
        "input_tokens": 1000,
        "output_tokens": 2000,
        "input_tokens_details": {"text_tokens": 200, "image_tokens": 800},
    }

    cost = CostGenerator().estimate_usage(usage, "GPT-IMAGE-1")

    assert cost["model"] == "gpt-image-1"
    assert (cost["text_input_tokens"], cost["image_input_tokens"]) == (200, 800)
    assert cost["input_cost"] == pytest.approx(0.009)
    assert cost["output_cost"] == pytest.approx(0.08)
    assert cost["total_cost"] == pytest.approx(0.089)


def test_cost_without_input_details_prices_input_as_text() -> None:
    usage = SimpleNamespace(input_tokens=1000, output_tokens=0, input_tokens_details=None)

    cost = CostGenerator().estimate_usage(usage, "gpt-image-1-mini")

    assert (cost["text_input_tokens"], cost["image_input_tokens"]) == (1000, 0)
    assert cost["total_cost"] == pytest.approx(0.002)


def test_cost_is_zeroed_when_unpriced() -> None:
    generator = CostGenerator()

    assert generator.estimate_usage(None, "gpt-image-1")["total_cost"] == 0.0
    assert generator.estimate_usage({"input_tokens": 10, "output_tokens": 10}, "dall-e-2")["total_cost"] == 0.0
    assert generator.estimate_usage({"input_tokens": -5, "output_tokens": "n/a"}, "gpt-image-1")["total_cost"] == 0.0
