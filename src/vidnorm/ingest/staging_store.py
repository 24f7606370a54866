"""Staging storage for raw uploads awaiting transcoding."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi import UploadFile

from ..domain import new_id

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB
DEFAULT_EXTENSION = ".mp4"

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def derive_extension(filename: str | None) -> str:
    """Return the client's file extension when it is safe to reuse."""
    if not filename:
        return DEFAULT_EXTENSION
    suffix = Path(filename.replace("\\", "/")).suffix
    if _EXTENSION_RE.match(suffix):
        return suffix.lower()
    return DEFAULT_EXTENSION


@dataclass(slots=True)
class StagingStore:
    """Writes uploads under generated names and removes them afterwards."""

    root: Path
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def ensure_structure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    async def persist_upload(self, upload: UploadFile, extension: str) -> tuple[str, Path]:
        """Copy upload contents to ``{new_id()}{extension}`` and return both."""
        directory = self.ensure_structure()
        staged_id = new_id()
        target = directory / f"{staged_id}{extension}"

        try:
            with target.open("wb") as sink:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    sink.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        finally:
            await upload.seek(0)

        self.log.info(
            "upload.staged",
            extra={"staged_id": staged_id, "path": str(target)},
        )
        return staged_id, target

    def discard(self, path: Path) -> bool:
        """Delete a staged file; returns ``True`` when something was removed."""
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            self.log.error(
                "upload.discard_failed",
                extra={"path": str(path), "error": str(exc)},
            )
            return False
        self.log.info("upload.discarded", extra={"path": str(path)})
        return True

    def list_stale(self, older_than: timedelta, now: datetime | None = None) -> list[Path]:
        """Return staged files whose modification time is older than ``older_than``."""
        if not self.root.exists():
            return []
        cutoff = (now or datetime.now(timezone.utc)) - older_than
        stale: list[Path] = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_file():
                continue
            modified = datetime.fromtimestamp(entry.stat().st_mtime, tz=timezone.utc)
            if modified < cutoff:
                stale.append(entry)
        return stale
