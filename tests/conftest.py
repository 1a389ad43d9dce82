import os
import tempfile

# config creates the scratch root at import time
os.environ.setdefault("SCRATCH_DIR", tempfile.mkdtemp(prefix="ffmpeg-worker-tests-"))

import pytest

from ffmpeg_worker.core import config


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    path = tmp_path / "scratch"
    path.mkdir()
    monkeypatch.setattr(config, "SCRATCH_DIR", str(path))
    return path


@pytest.fixture
def render_body():
    return {
        "googleAccessToken": "ya29.test-token",
        "sourceVideoFileId": "src-video-id",
        "start": "00:00:10",
        "duration": 5,
        "outputName": "nyc snow/001.mp4",
        "driveOutputFolderId": "folder-123",
    }
