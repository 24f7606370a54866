"""Startup checks run from the FastAPI lifespan."""

from __future__ import annotations

import logging

from .transcode import Transcoder

logger = logging.getLogger(__name__)


async def check_transcoder(transcoder: Transcoder) -> str | None:
    """Log the transcoder version, or an error when the binary is unusable.

    Startup continues either way; processing requests will fail until the
    binary is installed.
    """

    version = await transcoder.probe_version()
    if version is None:
        logger.error(
            "transcoder.unavailable",
            extra={"hint": "install ffmpeg or set FFMPEG_PATH; /api/process will fail"},
        )
        return None
    logger.info("transcoder.available", extra={"version": version})
    return version
