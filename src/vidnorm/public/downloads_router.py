"""Public download endpoint for processed artifacts."""

from fastapi import APIRouter

from ..media.artifact_store import ArtifactStore


def build_downloads_router(store: ArtifactStore) -> APIRouter:
    router = APIRouter(prefix="/downloads", tags=["downloads"])

    @router.get("/{filename}")
    def download(filename: str):
        return store.open_download(filename)

    return router
