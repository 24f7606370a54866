"""Abstract transcoder definition."""

from abc import ABC, abstractmethod
from pathlib import Path


class TranscoderError(Exception):
    """Raised when the external tool cannot produce the output file."""

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


class Transcoder(ABC):
    """Base interface for transcoder backends."""

    @abstractmethod
    async def run(self, input_path: Path, output_path: Path) -> None:
        """Write the normalized version of ``input_path`` to ``output_path``."""

    async def probe_version(self) -> str | None:
        """Return a human readable version string, or ``None`` if unavailable."""
        return None
