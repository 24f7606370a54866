import importlib.util
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from tests.helpers.video_fakes import build_config

pytestmark = pytest.mark.unit

PROJECT_ROOT = Path(__file__).resolve().parents[3]
MODULE_PATH = PROJECT_ROOT / "scripts" / "cleanup_staging.py"
SPEC = importlib.util.spec_from_file_location("cleanup_staging_module", MODULE_PATH)
cleanup_staging = importlib.util.module_from_spec(SPEC)
assert SPEC and SPEC.loader
sys.modules["cleanup_staging_module"] = cleanup_staging
SPEC.loader.exec_module(cleanup_staging)


def seed_staging(tmp_path: Path):
    config = build_config(tmp_path)
    old = config.paths.uploads / "old.mp4"
    fresh = config.paths.uploads / "fresh.mp4"
    old.write_bytes(b"old")
    fresh.write_bytes(b"fresh")
    three_hours_ago = (datetime.now(timezone.utc) - timedelta(hours=3)).timestamp()
    os.utime(old, (three_hours_ago, three_hours_ago))
    return config, old, fresh


def test_perform_cleanup_dry_run(monkeypatch, tmp_path: Path) -> None:
    config, old, fresh = seed_staging(tmp_path)
    monkeypatch.setattr(cleanup_staging, "load_config", lambda: config)

    summary = cleanup_staging.perform_cleanup(dry_run=True, max_age_minutes=60)

    assert summary.dry_run is True
    assert summary.staged_removed == 1
    assert old.exists()
    assert fresh.exists()


def test_perform_cleanup_removes_stale_files(monkeypatch, tmp_path: Path) -> None:
    config, old, fresh = seed_staging(tmp_path)
    monkeypatch.setattr(cleanup_staging, "load_config", lambda: config)

    summary = cleanup_staging.perform_cleanup(dry_run=False, max_age_minutes=60)

    assert summary.staged_removed == 1
    assert not old.exists()
    assert fresh.exists()


def test_main_reports_summary(monkeypatch, tmp_path: Path, capsys) -> None:
    config, _, _ = seed_staging(tmp_path)
    monkeypatch.setattr(cleanup_staging, "load_config", lambda: config)

    exit_code = cleanup_staging.main(["--dry-run", "--max-age-minutes", "30"])

    assert exit_code == 0
    assert "staged_stale=1" in capsys.readouterr().out


def test_main_handles_errors(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cleanup_staging, "perform_cleanup", lambda **kwargs: (_ for _ in ()).throw(RuntimeError("boom")))

    exit_code = cleanup_staging.main([])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert "cleanup failed" in captured.err
    assert "boom" in captured.err
