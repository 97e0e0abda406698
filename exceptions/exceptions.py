"""
Custom exceptions for the thumbnail chat service.

They are used across:

  - configs/
  - services/
  - controllers/

Every error a submission can raise derives from ThumbnailChatError, so the
submission boundary can convert any of them into one user-visible string.
"""


class ThumbnailChatError(Exception):
    """Base class for all expected failures in the thumbnail chat flow."""


class ConfigurationError(ThumbnailChatError):
    """
    Raised when a required setting (the OpenAI credential) is missing.

    At startup this is only logged; it surfaces at call time when a request
    actually needs the credential.
    """

    def __init__(self, setting: str, detail: str | None = None):
        self.setting = setting
        msg = detail or (
            f"{setting} is not set. Please export it in your environment "
            "or define it in a .env file."
        )
        super().__init__(msg)


class InvalidImageError(ThumbnailChatError):
    """Raised when a selected file is not an image. Never touches the session."""


class FormatConversionError(ThumbnailChatError):
    """Raised when an image cannot be decoded or re-encoded before upload."""


class ImageServiceError(ThumbnailChatError):
    """
    Raised when the image API call fails or returns no image payload.

    `status_code` is the HTTP status when the service answered, otherwise None.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EmptyPromptError(ThumbnailChatError):
    """Raised when a submission carries no text."""


class SubmissionInProgressError(ThumbnailChatError):
    """Raised when a submission arrives while another one is still in flight."""
