"""Data structures for the upload pipeline."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class UploadValidationResult:
    """Outcome of checking an upload against the configured limits."""

    content_type: str
    size_bytes: int
    filename: str


@dataclass(slots=True)
class UploadedFile:
    """A raw upload written to the staging directory, alive for one request."""

    generated_id: str
    original_extension: str
    staged_path: Path
    declared_media_type: str
    byte_size: int
