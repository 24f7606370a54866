"""Translation of raised errors into JSON responses."""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..exceptions import RateLimitedError, TranscodeFailedError, VideoServiceError
from ..security.headers import REQUEST_ID_HEADER, SECURITY_HEADERS

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong"


def translate(error: BaseException, *, debug: bool) -> tuple[int, dict[str, Any]]:
    """Map ``error`` onto ``(status_code, body)``.

    Domain errors keep their own status and message. Anything else becomes a
    generic 500. ``debug`` adds the transcoder diagnostic and a stack trace.
    """

    if isinstance(error, VideoServiceError):
        status_code = error.status_code
        payload_status = error.status
        message = error.message
        if debug and isinstance(error, TranscodeFailedError) and error.diagnostic:
            message = f"{message}: {error.diagnostic}"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        payload_status = "error"
        message = f"{GENERIC_MESSAGE}: {error}" if debug else GENERIC_MESSAGE

    body: dict[str, Any] = {
        "success": False,
        "status": payload_status,
        "message": message,
    }
    if debug:
        body["stack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return status_code, body


def discard_staged_upload(request: Request) -> None:
    """Delete the staged input still attached to ``request`` if any."""

    staged = getattr(request.state, "staged_upload", None)
    if staged is None:
        return
    request.state.staged_upload = None
    receiver = getattr(request.app.state, "upload_receiver", None)
    if receiver is None:
        return
    receiver.discard(staged)


def _is_debug(request: Request) -> bool:
    config = getattr(request.app.state, "config", None)
    return bool(config is not None and config.debug)


def _response(
    status_code: int,
    body: dict[str, Any],
    error: BaseException,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    headers = dict(headers or {})
    if isinstance(error, RateLimitedError):
        headers["Retry-After"] = str(error.retry_after)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def video_error_handler(request: Request, exc: VideoServiceError) -> JSONResponse:
    """Convert :class:`VideoServiceError` into the JSON error body."""

    discard_staged_upload(request)
    if exc.status_code >= 500:
        logger.error(
            "request.failed",
            extra={
                "path": request.url.path,
                "error": type(exc).__name__,
                "detail": exc.message,
            },
        )
    status_code, body = translate(exc, debug=_is_debug(request))
    return _response(status_code, body, exc)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the process keeps serving afterwards."""

    discard_staged_upload(request)
    logger.exception(
        "request.unhandled_error",
        extra={"path": request.url.path, "error": type(exc).__name__},
    )
    # Built outside the middleware stack, so the headers it would add are set here.
    headers = dict(SECURITY_HEADERS)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
    status_code, body = translate(exc, debug=_is_debug(request))
    return _response(status_code, body, exc, headers)


__all__ = [
    "GENERIC_MESSAGE",
    "discard_staged_upload",
    "translate",
    "unexpected_error_handler",
    "video_error_handler",
]
