"""FFmpeg-backed transcoder.

The option list is fixed: H.264 video, AAC audio, ``faststart`` container
layout, rotation metadata cleared and a yuv420p pixel format. Callers cannot
extend it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .transcode_base import Transcoder, TranscoderError

FFMPEG_OUTPUT_OPTIONS: tuple[str, ...] = (
    "-c:v", "libx264",
    "-c:a", "aac",
    "-movflags", "faststart",
    "-metadata:s:v:0", "rotate=0",
    "-pix_fmt", "yuv420p",
)

_DIAGNOSTIC_LIMIT = 4000


@dataclass(slots=True)
class FfmpegTranscoder(Transcoder):
    """Runs ``ffmpeg`` as a subprocess without blocking the event loop."""

    binary: str = "ffmpeg"
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            self.binary,
            "-y",
            "-nostdin",
            "-i", str(input_path),
            *FFMPEG_OUTPUT_OPTIONS,
            "-progress", "pipe:1",
            "-nostats",
            "-loglevel", "error",
            str(output_path),
        ]

    async def run(self, input_path: Path, output_path: Path) -> None:
        cmd = self.build_command(input_path, output_path)
        self.log.info("transcode.started", extra={"command": " ".join(cmd)})
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise TranscoderError(f"failed to launch {self.binary}: {exc}") from exc

        assert proc.stdout is not None and proc.stderr is not None
        _, stderr = await asyncio.gather(
            self._log_progress(proc.stdout, output_path),
            proc.stderr.read(),
        )
        returncode = await proc.wait()
        diagnostic = stderr.decode("utf-8", "replace").strip()

        if returncode != 0:
            raise TranscoderError(
                diagnostic[-_DIAGNOSTIC_LIMIT:] or f"{self.binary} exited with code {returncode}"
            )
        self.log.info("transcode.completed", extra={"output": str(output_path)})

    async def _log_progress(self, stream: asyncio.StreamReader, output_path: Path) -> None:
        while True:
            line = await stream.readline()
            if not line:
                break
            key, _, value = line.decode("utf-8", "ignore").strip().partition("=")
            if key == "out_time":
                self.log.debug(
                    "transcode.progress",
                    extra={"output": str(output_path), "out_time": value},
                )

    async def probe_version(self) -> str | None:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                "-version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError:
            return None
        stdout, _ = await proc.communicate()
        if proc.returncode != 0:
            return None
        first_line = stdout.decode("utf-8", "replace").splitlines()
        return first_line[0] if first_line else None
