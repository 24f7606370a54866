"""Response models for the video API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PROCESS_SUCCESS_MESSAGE = "Video processed successfully"


class ProcessResponse(BaseModel):
    """Result of a successful ``POST /api/process``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    success: Literal[True] = True
    video_id: str = Field(..., alias="videoId", description="Identifier of the processed video.")
    download_url: str = Field(
        ..., alias="downloadUrl", description="Absolute URL serving the artifact as an attachment."
    )
    message: str = PROCESS_SUCCESS_MESSAGE


class VideoLookupResponse(BaseModel):
    """Result of ``GET /api/video/{video_id}``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    success: Literal[True] = True
    video_id: str = Field(..., alias="videoId")
    download_url: str = Field(..., alias="downloadUrl")
    filename: str
