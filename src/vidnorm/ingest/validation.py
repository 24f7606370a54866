"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile

from ..config import UploadLimits
from ..exceptions import PayloadTooLargeError, UnsupportedMediaTypeError
from .ingest_models import UploadValidationResult

logger = logging.getLogger(__name__)


def normalize_media_type(content_type: str | None) -> str:
    """Strip parameters and case from a declared ``Content-Type``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


@dataclass(slots=True)
class UploadValidator:
    """Validate uploads against the media type allow-list and size ceiling.

    Nothing is written to disk here: the size is measured by streaming the
    spooled upload in chunks, and the stream is rewound afterwards.
    """

    limits: UploadLimits

    async def validate(self, upload: UploadFile) -> UploadValidationResult:
        media_type = normalize_media_type(upload.content_type)
        if media_type not in self.limits.allowed_content_types:
            logger.warning(
                "upload.unsupported_media",
                extra={"content_type": upload.content_type, "upload_name": upload.filename},
            )
            raise UnsupportedMediaTypeError(upload.content_type)

        cap = self.limits.max_file_size_bytes
        size = 0
        try:
            while True:
                chunk = await upload.read(self.limits.chunk_size_bytes)
                if not chunk:
                    break
                size += len(chunk)
                if size > cap:
                    logger.warning(
                        "upload.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": cap},
                    )
                    raise PayloadTooLargeError(cap, size)
        finally:
            await upload.seek(0)

        result = UploadValidationResult(
            content_type=media_type,
            size_bytes=size,
            filename=upload.filename or "upload",
        )
        logger.info(
            "upload.validated",
            extra={
                "upload_name": result.filename,
                "size_bytes": result.size_bytes,
                "content_type": result.content_type,
            },
        )
        return result
