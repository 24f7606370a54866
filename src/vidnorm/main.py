"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .lifecycle import check_transcoder
from .logging import configure_logging
from .transcode import Transcoder


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await check_transcoder(app.state.transcoder)
    yield


def create_app(config: AppConfig | None = None, *, transcoder: Transcoder | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level, json_logs=cfg.is_production)
    app = FastAPI(title="Video Normalizer", lifespan=lifespan)
    include_routers(app, cfg, transcoder)
    return app


app = create_app()


def run() -> None:
    """Serve ``app`` on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=app.state.config.port, log_config=None)
