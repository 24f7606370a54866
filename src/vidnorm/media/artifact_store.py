"""Processed artifact storage and download serving."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from fastapi.responses import FileResponse

from ..exceptions import ArtifactNotFoundError, StoreUnavailableError
from .media_models import ProcessedArtifact


@dataclass(slots=True)
class ArtifactStore:
    """Directory of transcoded files named ``{video_id}{extension}``.

    Lookups match on filename prefix. With 128-bit random ids two artifacts
    sharing a prefix is improbable, but nothing here enforces it: the first
    match in sorted order wins.
    """

    root: Path
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def output_path(self, video_id: str, extension: str) -> ProcessedArtifact:
        filename = f"{video_id}{extension}"
        return ProcessedArtifact(video_id=video_id, filename=filename, path=self.root / filename)

    @staticmethod
    def url_for(filename: str, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/downloads/{filename}"

    def resolve_prefix(self, video_id: str) -> str:
        if not self.root.is_dir():
            self.log.error("artifact.store_unavailable", extra={"root": str(self.root)})
            raise StoreUnavailableError()
        try:
            names = sorted(entry.name for entry in self.root.iterdir() if entry.is_file())
        except OSError as exc:
            self.log.error(
                "artifact.store_unreadable",
                extra={"root": str(self.root), "error": str(exc)},
            )
            raise StoreUnavailableError() from exc

        for name in names:
            if name.startswith(video_id):
                return name
        self.log.info("artifact.lookup.not_found", extra={"video_id": video_id})
        raise ArtifactNotFoundError()

    def open_download(self, filename: str) -> FileResponse:
        """Return a forced-attachment response for ``filename``."""
        path = self._locate(filename)
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return FileResponse(
            path=path,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="{path.name}"'},
        )

    def _locate(self, filename: str) -> Path:
        if not filename or "/" in filename or "\\" in filename or filename in {".", ".."}:
            raise ArtifactNotFoundError("File not found")
        root = self.root.resolve()
        candidate = (root / filename).resolve()
        if candidate.parent != root or not candidate.is_file():
            self.log.debug("artifact.download.not_found", extra={"artifact_name": filename})
            raise ArtifactNotFoundError("File not found")
        return candidate
