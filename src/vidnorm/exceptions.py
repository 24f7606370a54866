"""Domain errors raised by the upload, transcode and lookup stages."""

from __future__ import annotations

from fastapi import status

__all__ = [
    "VideoServiceError",
    "MissingFileError",
    "UnsupportedMediaTypeError",
    "PayloadTooLargeError",
    "InvalidInputError",
    "TranscodeFailedError",
    "ArtifactNotFoundError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "OriginNotAllowedError",
    "RateLimitedError",
    "RouteNotFoundError",
]


class VideoServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status(self) -> str:
        """``fail`` for client-caused errors, ``error`` for server-side ones."""
        return "fail" if 400 <= self.status_code < 500 else "error"


class MissingFileError(VideoServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No video file uploaded"


class UnsupportedMediaTypeError(VideoServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only video files are allowed"

    def __init__(self, content_type: str | None) -> None:
        super().__init__()
        self.content_type = content_type


class PayloadTooLargeError(VideoServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, limit_bytes: int, size_bytes: int | None = None) -> None:
        super().__init__(f"File too large. Maximum size is {limit_bytes / 1_000_000:g}MB")
        self.limit_bytes = limit_bytes
        self.size_bytes = size_bytes


class InvalidInputError(VideoServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Input video file not found"


class TranscodeFailedError(VideoServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error processing video"

    def __init__(self, diagnostic: str = "") -> None:
        super().__init__()
        self.diagnostic = diagnostic


class ArtifactNotFoundError(VideoServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Video not found"


class StoreUnavailableError(VideoServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Processed directory not found"


class UnauthorizedError(VideoServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized: Invalid API key"

    @property
    def status(self) -> str:
        return "error"


class OriginNotAllowedError(VideoServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed by CORS"


class RateLimitedError(VideoServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests from this IP, please try again later"

    def __init__(self, retry_after: int) -> None:
        super().__init__()
        self.retry_after = retry_after


class RouteNotFoundError(VideoServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
