"""Validation helpers for uploaded image files."""

from fastapi import UploadFile

from exceptions.exceptions import InvalidImageError
from models.image_content import ImageContent

INVALID_IMAGE_MESSAGE = "Please select a valid image file"

IMAGE_EXTENSION_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def resolve_image_type(filename: str | None, content_type: str | None) -> str:
    """Return the declared image content type of an upload.

    Any `image/*` content type is accepted; format normalization happens later.
    When the content type is missing, the filename extension must be a known
    image extension.

    Raises:
        InvalidImageError: If the upload is not declared as an image.
    """
    if content_type:
        base_type = content_type.lower().split(";", 1)[0].strip()
        if not base_type.startswith("image/"):
            raise InvalidImageError(INVALID_IMAGE_MESSAGE)
        return base_type
    lowered = (filename or "").lower()
    for extension, mime_type in IMAGE_EXTENSION_TYPES.items():
        if lowered.endswith(extension):
            return mime_type
    raise InvalidImageError(INVALID_IMAGE_MESSAGE)


async def read_image_upload(image_file: UploadFile) -> ImageContent:
    """Read a validated image upload, ensuring it is not empty.

    Raises:
        InvalidImageError: If the upload is not an image.
        ValueError: If the upload has no content.
    """
    mime_type = resolve_image_type(image_file.filename, image_file.content_type)
    data = await image_file.read()
    if not data:
        raise ValueError("Uploaded image is empty.")
    return ImageContent(data=data, mime_type=mime_type, filename=image_file.filename or "upload")
