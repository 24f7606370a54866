from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

from tests.helpers.video_fakes import FakeTranscoder, build_config

_RUNTIME_ROOT = Path(tempfile.mkdtemp(prefix="vidnorm-tests-"))

os.environ.setdefault("UPLOAD_DIR", str(_RUNTIME_ROOT / "uploads"))
os.environ.setdefault("PROCESSED_DIR", str(_RUNTIME_ROOT / "processed"))


@pytest.fixture
def fake_transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def app_config(tmp_path: Path):
    return build_config(tmp_path)
