"""HTTP routes for video processing and lookup."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import MissingFileError, RouteNotFoundError
from ..security import enforce_rate_limit, require_api_key
from .videos_schemas import ProcessResponse, VideoLookupResponse
from .videos_service import VideoService

UPLOAD_FIELD = "video"

router = APIRouter(
    prefix="/api",
    tags=["videos"],
    dependencies=[Depends(enforce_rate_limit), Depends(require_api_key)],
)


def get_video_service(request: Request) -> VideoService:
    """Fetch video service from application state."""
    try:
        return request.app.state.video_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("VideoService is not configured") from exc


async def read_form(request: Request) -> FormData:
    """Parse the request body; an unparseable multipart body counts as no upload."""
    try:
        return await request.form()
    except StarletteHTTPException as exc:
        raise MissingFileError() from exc


@router.post("/process", response_model=ProcessResponse)
async def process_video(
    request: Request,
    service: VideoService = Depends(get_video_service),
) -> ProcessResponse:
    """Normalize the uploaded ``video`` and return its download URL."""
    form = await read_form(request)
    try:
        field_value = form.get(UPLOAD_FIELD)
        upload = field_value if isinstance(field_value, StarletteUploadFile) else None
        staged = await service.receive(upload)
        request.state.staged_upload = staged
        descriptor = await service.process(staged)
        request.state.staged_upload = None
    finally:
        await form.close()

    return ProcessResponse(video_id=descriptor.video_id, download_url=descriptor.download_url)


@router.get("/video/{video_id}", response_model=VideoLookupResponse)
def get_video(
    video_id: str,
    service: VideoService = Depends(get_video_service),
) -> VideoLookupResponse:
    descriptor = service.lookup(video_id)
    return VideoLookupResponse(
        video_id=descriptor.video_id,
        download_url=descriptor.download_url,
        filename=descriptor.filename,
    )


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def unknown_api_route(path: str) -> None:
    """Keeps unmatched ``/api`` paths behind the router's policies."""
    raise RouteNotFoundError()
