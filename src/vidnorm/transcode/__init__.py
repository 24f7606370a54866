"""Transcoder capability and the service that invokes it."""

from .transcode_base import Transcoder, TranscoderError
from .transcode_ffmpeg import FFMPEG_OUTPUT_OPTIONS, FfmpegTranscoder
from .transcode_service import TranscodeService

__all__ = [
    "FFMPEG_OUTPUT_OPTIONS",
    "FfmpegTranscoder",
    "TranscodeService",
    "Transcoder",
    "TranscoderError",
]
