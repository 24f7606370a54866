"""Transcode invocation with input checks and partial-output cleanup."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator

from ..exceptions import InvalidInputError, TranscodeFailedError
from .transcode_base import Transcoder, TranscoderError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TranscodeService:
    """Runs the transcoder for one staged input and one artifact path.

    ``max_concurrent`` bounds the number of simultaneous transcoder
    processes; ``0`` leaves it unbounded.
    """

    transcoder: Transcoder
    max_concurrent: int = 0
    log: logging.Logger = field(default_factory=lambda: logger)
    _semaphore: asyncio.Semaphore | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_concurrent > 0:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)

    async def transcode(self, input_path: Path, output_path: Path) -> Path:
        if not input_path.is_file():
            self.log.warning("transcode.input_missing", extra={"input": str(input_path)})
            raise InvalidInputError()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        started = time.perf_counter()
        try:
            async with self._slot():
                await self.transcoder.run(input_path, output_path)
        except TranscoderError as exc:
            self._remove_partial(output_path)
            self.log.error(
                "transcode.failed",
                extra={
                    "input": str(input_path),
                    "output": str(output_path),
                    "diagnostic": exc.diagnostic,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            raise TranscodeFailedError(exc.diagnostic) from exc
        except BaseException:
            self._remove_partial(output_path)
            raise

        if not output_path.is_file():
            raise TranscodeFailedError("transcoder reported success but produced no output")

        self.log.info(
            "transcode.succeeded",
            extra={
                "output": str(output_path),
                "size_bytes": output_path.stat().st_size,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return output_path

    @contextlib.asynccontextmanager
    async def _slot(self) -> AsyncIterator[None]:
        if self._semaphore is None:
            yield
            return
        async with self._semaphore:
            yield

    def _remove_partial(self, output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as exc:
            self.log.error(
                "transcode.partial_cleanup_failed",
                extra={"output": str(output_path), "error": str(exc)},
            )
