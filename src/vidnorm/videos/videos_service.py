"""Upload-to-download pipeline and artifact lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import UploadFile

from ..domain import new_id
from ..ingest.ingest_models import UploadedFile
from ..ingest.ingest_service import UploadReceiver
from ..media.artifact_store import ArtifactStore
from ..media.media_models import DownloadDescriptor
from ..transcode.transcode_service import TranscodeService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VideoService:
    """Binds receiving, transcoding and the artifact store together."""

    receiver: UploadReceiver
    transcoder: TranscodeService
    store: ArtifactStore
    base_url: str
    log: logging.Logger = field(default_factory=lambda: logger)

    async def receive(self, upload: UploadFile | None) -> UploadedFile:
        return await self.receiver.receive(upload)

    async def process(self, staged: UploadedFile) -> DownloadDescriptor:
        """Transcode ``staged`` into a new artifact and describe its download.

        The staged input is deleted whether the transcode succeeds or fails.
        """
        artifact = self.store.output_path(new_id(), staged.original_extension)
        self.log.info(
            "video.process.started",
            extra={
                "video_id": artifact.video_id,
                "staged_id": staged.generated_id,
                "media_type": staged.declared_media_type,
                "size_bytes": staged.byte_size,
            },
        )
        try:
            await self.transcoder.transcode(staged.staged_path, artifact.path)
        finally:
            self.receiver.discard(staged)

        descriptor = DownloadDescriptor(
            video_id=artifact.video_id,
            download_url=self.store.url_for(artifact.filename, self.base_url),
            filename=artifact.filename,
        )
        self.log.info(
            "video.process.completed",
            extra={"video_id": descriptor.video_id, "artifact_name": descriptor.filename},
        )
        return descriptor

    def lookup(self, video_id: str) -> DownloadDescriptor:
        filename = self.store.resolve_prefix(video_id)
        return DownloadDescriptor(
            video_id=video_id,
            download_url=self.store.url_for(filename, self.base_url),
            filename=filename,
        )
