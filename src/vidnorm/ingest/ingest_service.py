"""Upload receiving: validation followed by staging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import UploadFile

from ..exceptions import MissingFileError
from .ingest_models import UploadedFile
from .staging_store import StagingStore, derive_extension
from .validation import UploadValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadReceiver:
    """Accepts a single ``video`` upload and stages it under a generated name."""

    validator: UploadValidator
    staging: StagingStore
    log: logging.Logger = field(default_factory=lambda: logger)

    async def receive(self, upload: UploadFile | None) -> UploadedFile:
        if upload is None or not upload.filename:
            self.log.warning("upload.missing_file")
            raise MissingFileError()

        result = await self.validator.validate(upload)
        extension = derive_extension(upload.filename)
        staged_id, staged_path = await self.staging.persist_upload(upload, extension)

        return UploadedFile(
            generated_id=staged_id,
            original_extension=extension,
            staged_path=staged_path,
            declared_media_type=result.content_type,
            byte_size=result.size_bytes,
        )

    def discard(self, uploaded: UploadedFile) -> bool:
        return self.staging.discard(uploaded.staged_path)
