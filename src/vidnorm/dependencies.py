"""Dependency wiring helpers."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import unexpected_error_handler, video_error_handler
from .config import AppConfig
from .exceptions import VideoServiceError
from .ingest.ingest_service import UploadReceiver
from .ingest.staging_store import StagingStore
from .ingest.validation import UploadValidator
from .media.artifact_store import ArtifactStore
from .middleware import (
    OriginGuardMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from .public.downloads_router import build_downloads_router
from .security import ApiKeyPolicy, SlidingWindowRateLimiter
from .transcode import FfmpegTranscoder, TranscodeService, Transcoder
from .videos.videos_api import router as videos_router
from .videos.videos_service import VideoService

CORS_METHODS = ["GET", "POST"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-API-KEY"]


def include_routers(app: FastAPI, config: AppConfig, transcoder: Transcoder | None = None) -> None:
    """Attach services, policies and routers to ``app``."""
    staging = StagingStore(config.paths.uploads)
    staging.ensure_structure()
    receiver = UploadReceiver(
        validator=UploadValidator(config.upload_limits),
        staging=staging,
    )
    transcoder = transcoder or FfmpegTranscoder(binary=config.ffmpeg_path)
    transcode_service = TranscodeService(
        transcoder=transcoder,
        max_concurrent=config.max_concurrent_transcodes,
    )
    artifact_store = ArtifactStore(config.paths.processed)
    video_service = VideoService(
        receiver=receiver,
        transcoder=transcode_service,
        store=artifact_store,
        base_url=config.base_url,
    )

    app.state.config = config
    app.state.transcoder = transcoder
    app.state.upload_receiver = receiver
    app.state.artifact_store = artifact_store
    app.state.video_service = video_service
    app.state.api_key_policy = ApiKeyPolicy(expected=config.api_key)
    app.state.rate_limiter = SlidingWindowRateLimiter(
        max_requests=config.rate_limit.max_requests,
        window_seconds=config.rate_limit.window_seconds,
    )

    app.add_exception_handler(VideoServiceError, video_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Last added runs first.
    app.add_middleware(
        OriginGuardMiddleware,
        allowed_origins=config.allowed_origins,
        debug=config.debug,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(videos_router)
    app.include_router(build_downloads_router(artifact_store))

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}
