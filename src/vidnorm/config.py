"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Sequence

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_VIDEO_TYPES: tuple[str, ...] = (
    "video/mp4",
    "video/mpeg",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-ms-wmv",
    "video/webm",
    "video/ogg",
    "application/ogg",
)


class Settings(BaseSettings):
    """Environment variables understood by the service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: Literal["development", "production"] = Field(
        default="production",
        description="Deployment mode; only an explicit development setting exposes diagnostics.",
    )
    port: int = Field(default=3000, ge=1, le=65535)
    upload_dir: Path = Field(
        default=Path("uploads"),
        description="Staging directory for raw uploads awaiting transcoding.",
    )
    processed_dir: Path = Field(
        default=Path("processed"),
        description="Directory holding transcoded artifacts served under /downloads.",
    )
    max_file_size: int = Field(
        default=100_000_000,
        gt=0,
        description="Upload ceiling in bytes.",
    )
    base_url: str | None = Field(
        default=None,
        description="Public base URL for download links; defaults to http://localhost:{port}.",
    )
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of origins allowed to call /api.",
    )
    api_key: str | None = Field(
        default=None,
        description="Shared secret expected in X-API-KEY; enforcement is off when unset.",
    )
    rate_limit_window_seconds: int = Field(default=15 * 60, gt=0)
    rate_limit_max_requests: int | None = Field(
        default=None,
        gt=0,
        description="Requests allowed per client within the window (60 in production, 100 otherwise).",
    )
    ffmpeg_path: str = Field(default="ffmpeg", min_length=1)
    max_concurrent_transcodes: int = Field(
        default=0,
        ge=0,
        description="Upper bound on simultaneous transcoder processes; 0 disables the bound.",
    )
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _apply_mode_defaults(self) -> "Settings":
        if self.rate_limit_max_requests is None:
            self.rate_limit_max_requests = 60 if self.app_env == "production" else 100
        if not self.base_url:
            self.base_url = f"http://localhost:{self.port}"
        return self


@dataclass(frozen=True, slots=True)
class StoragePaths:
    uploads: Path
    processed: Path


@dataclass(frozen=True, slots=True)
class UploadLimits:
    allowed_content_types: Sequence[str]
    max_file_size_bytes: int
    chunk_size_bytes: int = 1024 * 1024


@dataclass(frozen=True, slots=True)
class RateLimitPolicy:
    window_seconds: int
    max_requests: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    environment: str
    port: int
    base_url: str
    paths: StoragePaths
    upload_limits: UploadLimits
    rate_limit: RateLimitPolicy
    allowed_origins: tuple[str, ...]
    api_key: str | None
    ffmpeg_path: str
    max_concurrent_transcodes: int
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def debug(self) -> bool:
        return self.environment == "development"


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _ensure_storage_paths(paths: StoragePaths) -> None:
    paths.uploads.mkdir(parents=True, exist_ok=True)
    paths.processed.mkdir(parents=True, exist_ok=True)


def load_config(settings: Settings | None = None) -> AppConfig:
    """Build the immutable application config from environment settings."""
    env = settings or Settings()
    paths = StoragePaths(
        uploads=env.upload_dir.resolve(),
        processed=env.processed_dir.resolve(),
    )
    _ensure_storage_paths(paths)

    return AppConfig(
        environment=env.app_env,
        port=env.port,
        base_url=(env.base_url or f"http://localhost:{env.port}").rstrip("/"),
        paths=paths,
        upload_limits=UploadLimits(
            allowed_content_types=ALLOWED_VIDEO_TYPES,
            max_file_size_bytes=env.max_file_size,
        ),
        rate_limit=RateLimitPolicy(
            window_seconds=env.rate_limit_window_seconds,
            max_requests=env.rate_limit_max_requests or 100,
        ),
        allowed_origins=_split_origins(env.allowed_origins),
        api_key=env.api_key or None,
        ffmpeg_path=env.ffmpeg_path,
        max_concurrent_transcodes=env.max_concurrent_transcodes,
        log_level=env.log_level.upper(),
    )
