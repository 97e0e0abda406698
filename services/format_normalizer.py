"""Format normalization for images sent to the edit endpoint.

The image API accepts a fixed set of raster formats. Images already in one of
them pass through untouched; anything else (GIF, BMP, TIFF, ...) is decoded
with Pillow and re-encoded to the first allowed format at the same pixel size.

Public class: `FormatNormalizer`

Example:
    normalizer = FormatNormalizer()
    ready = normalizer.normalize(image_content)
"""
from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Tuple

from PIL import Image

from exceptions.exceptions import FormatConversionError
from models.image_content import ImageContent

LOGGER = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: Tuple[str, ...] = ("image/png", "image/jpeg", "image/webp")

# Pillow save() format name and file extension per allowed content type.
_PIL_FORMATS = {
    "image/png": ("PNG", "png"),
    "image/jpeg": ("JPEG", "jpg"),
    "image/webp": ("WEBP", "webp"),
}


def base_content_type(mime_type: str | None) -> str:
    """Lower-case a declared content type and drop parameters such as charset."""
    return (mime_type or "").lower().split(";", 1)[0].strip()


class FormatNormalizer:
    """Make sure an image is in a format the edit endpoint accepts.

    Args:
        allowed_types: Accepted content types, in order of preference. The first
            one is the re-encoding target.
    """

    def __init__(self, allowed_types: Tuple[str, ...] = ALLOWED_IMAGE_TYPES):
        if not allowed_types:
            raise ValueError("At least one allowed image type is required.")
        self.allowed_types = allowed_types
        self.target_type = allowed_types[0]

    def is_allowed(self, mime_type: str | None) -> bool:
        return base_content_type(mime_type) in self.allowed_types

    def normalize(self, image: ImageContent) -> ImageContent:
        """Return `image` unchanged if allowed, otherwise a re-encoded copy.

        Raises:
            FormatConversionError: If the bytes cannot be decoded or re-encoded.
        """
        if self.is_allowed(image.mime_type):
            return image

        try:
            src = Image.open(io.BytesIO(image.data))
            src.load()
        except Exception as exc:
            raise FormatConversionError(
                f"Could not read {image.filename} ({image.mime_type or 'unknown type'}) for conversion."
            ) from exc

        pil_format, extension = _PIL_FORMATS[self.target_type]
        out_io = io.BytesIO()
        try:
            converted = self._convert_mode(src, pil_format)
            converted.save(out_io, format=pil_format)
        except Exception as exc:
            raise FormatConversionError(f"Could not convert {image.filename} to {self.target_type}.") from exc

        LOGGER.info(
            "Converted %s from %s to %s (%dx%d)",
            image.filename,
            image.mime_type,
            self.target_type,
            converted.width,
            converted.height,
        )
        filename = f"{PurePath(image.filename).stem or 'image'}.{extension}"
        return ImageContent(data=out_io.getvalue(), mime_type=self.target_type, filename=filename)

    @staticmethod
    def _convert_mode(src: Image.Image, pil_format: str) -> Image.Image:
        # JPEG has no alpha; PNG and WEBP keep transparency when present.
        if pil_format == "JPEG":
            return src if src.mode in ("RGB", "L") else src.convert("RGB")
        if src.mode in ("RGB", "RGBA", "L", "LA"):
            return src
        has_alpha = src.mode in ("PA", "RGBa") or "transparency" in src.info
        return src.convert("RGBA" if has_alpha else "RGB")
