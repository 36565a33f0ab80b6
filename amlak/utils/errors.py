"""Error handling utilities."""

from typing import Optional


class AmlakError(Exception):
    """Base exception for the amlak client."""
    pass


class ConfigurationError(AmlakError):
    """Required configuration is missing or invalid."""
    pass


class RequestError(AmlakError):
    """Backend answered with a non-success status, or the request never completed.

    ``status`` is the HTTP status code, or 0 for transport failures.
    ``message`` is the raw response body text.
    """

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"RequestError(status={self.status}, message={self.message!r})"


class ResponseParseError(AmlakError):
    """Success response body was not valid JSON."""
    pass


class ContractViolationError(AmlakError):
    """Response JSON does not match the expected record shape."""
    pass


class FormValidationError(AmlakError):
    """Form input rejected before any request was made."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


class ImageUploadError(AmlakError):
    """An image upload failed part-way through a batch.

    ``uploaded_urls`` holds the images that were stored before the failure;
    they are left in storage.
    """

    def __init__(self, filename: str, uploaded_urls: list[str], cause: Optional[Exception] = None):
        self.filename = filename
        self.uploaded_urls = uploaded_urls
        self.cause = cause
        super().__init__(
            f"Failed to upload {filename} after {len(uploaded_urls)} successful upload(s): {cause}"
        )
