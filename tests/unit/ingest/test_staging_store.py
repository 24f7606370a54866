import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from src.vidnorm.ingest.staging_store import StagingStore, derive_extension
from tests.helpers.video_fakes import make_upload

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("holiday.MOV", ".mov"),
        ("clip.final.webm", ".webm"),
        ("no_extension", ".mp4"),
        ("", ".mp4"),
        (None, ".mp4"),
        ("weird.ext with space", ".mp4"),
        ("..\\..\\evil.avi", ".avi"),
    ],
)
def test_derive_extension(filename: str | None, expected: str) -> None:
    assert derive_extension(filename) == expected


@pytest.mark.asyncio
async def test_persist_upload_writes_generated_name(tmp_path: Path) -> None:
    store = StagingStore(tmp_path / "uploads")
    upload = make_upload(b"video-bytes", content_type="video/mp4", filename="clip.mp4")

    staged_id, path = await store.persist_upload(upload, ".mp4")

    assert path.name == f"{staged_id}.mp4"
    assert path.parent == tmp_path / "uploads"
    assert path.read_bytes() == b"video-bytes"


@pytest.mark.asyncio
async def test_persist_upload_generates_unique_names(tmp_path: Path) -> None:
    store = StagingStore(tmp_path)
    first = await store.persist_upload(make_upload(b"a", content_type="video/mp4", filename="a.mp4"), ".mp4")
    second = await store.persist_upload(make_upload(b"a", content_type="video/mp4", filename="a.mp4"), ".mp4")

    assert first[0] != second[0]
    assert first[1] != second[1]


def test_discard_removes_file_once(tmp_path: Path) -> None:
    store = StagingStore(tmp_path)
    staged = tmp_path / "staged.mp4"
    staged.write_bytes(b"data")

    assert store.discard(staged) is True
    assert not staged.exists()
    assert store.discard(staged) is False


def test_list_stale_uses_modification_time(tmp_path: Path) -> None:
    store = StagingStore(tmp_path)
    old = tmp_path / "old.mp4"
    fresh = tmp_path / "fresh.mp4"
    old.write_bytes(b"1")
    fresh.write_bytes(b"2")
    two_hours_ago = (datetime.now(timezone.utc) - timedelta(hours=2)).timestamp()
    os.utime(old, (two_hours_ago, two_hours_ago))

    stale = store.list_stale(timedelta(hours=1))

    assert stale == [old]


def test_list_stale_handles_missing_root(tmp_path: Path) -> None:
    store = StagingStore(tmp_path / "missing")

    assert store.list_stale(timedelta(minutes=1)) == []
