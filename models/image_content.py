from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageContent:
    """In-memory image payload owned by a single Turn or pending upload.

    Attributes:
        data: Raw image bytes (not base64).
        mime_type: Declared content type, e.g. image/png.
        filename: Name sent with multipart uploads.
    """

    data: bytes
    mime_type: str = "image/png"
    filename: str = "image.png"

    @classmethod
    def from_base64(cls, b64_data: str | bytes, mime_type: str = "image/png", filename: str = "thumbnail.png") -> "ImageContent":
        """Build an image from base64 text such as the API's `b64_json` field.

        Raises:
            ValueError: If the payload is not valid base64.
        """
        try:
            raw = base64.b64decode(b64_data, validate=True)
        except Exception as exc:
            raise ValueError("Invalid base64 image data") from exc
        return cls(data=raw, mime_type=mime_type, filename=filename)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """Return a data URL suitable for inline previews."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"
