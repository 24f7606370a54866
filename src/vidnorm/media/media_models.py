"""Media data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class ProcessedArtifact:
    video_id: str
    filename: str
    path: Path


@dataclass(slots=True)
class DownloadDescriptor:
    video_id: str
    download_url: str
    filename: str
