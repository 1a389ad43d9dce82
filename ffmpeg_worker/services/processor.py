import contextlib
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from typing import Optional

from ffmpeg_worker.core import config
from ffmpeg_worker.core.errors import InvalidInput
from ffmpeg_worker.schemas.render import RenderRequest
from ffmpeg_worker.services.drive import UploadResult, download_drive_file, upload_to_drive
from ffmpeg_worker.services.render import render_clip
from ffmpeg_worker.services.timecode import default_output_name, normalize_time, safe_name

logger = logging.getLogger(__name__)


def _make_gate(limit: int):
    if limit > 0:
        return threading.BoundedSemaphore(limit)
    return None


RENDER_GATE = _make_gate(config.MAX_CONCURRENT_RENDERS)


# ==================================================
# VALIDATION
# ==================================================
@dataclass
class RenderJob:
    access_token: str
    source_video_file_id: str
    start: str
    duration: str
    output_name: str
    folder_id: Optional[str] = None
    music_file_id: Optional[str] = None
    music_start: str = "0"
    music_volume: float = config.DEFAULT_MUSIC_VOLUME
    video_volume: float = config.DEFAULT_VIDEO_VOLUME


def validate_request(req: RenderRequest) -> RenderJob:
    if not req.google_access_token:
        raise InvalidInput("Missing googleAccessToken")
    if not req.source_video_file_id:
        raise InvalidInput("Missing sourceVideoFileId")
    if req.duration is None:
        raise InvalidInput("Missing duration")

    return RenderJob(
        access_token=req.google_access_token,
        source_video_file_id=req.source_video_file_id,
        start=normalize_time(req.start or "0"),
        duration=normalize_time(req.duration),
        output_name=safe_name(req.output_name or default_output_name()),
        folder_id=req.drive_output_folder_id or None,
        music_file_id=req.music_file_id or None,
        music_start=normalize_time(req.music_start or "0") if req.music_file_id else "0",
        music_volume=(
            config.DEFAULT_MUSIC_VOLUME if req.music_volume is None else req.music_volume
        ),
        video_volume=(
            config.DEFAULT_VIDEO_VOLUME if req.video_volume is None else req.video_volume
        ),
    )


# ==================================================
# PIPELINE
# ==================================================
def run_pipeline(job: RenderJob, workdir: str) -> UploadResult:
    video_in = os.path.join(workdir, "video.mp4")
    audio_in = os.path.join(workdir, "music.mp3") if job.music_file_id else None
    out_path = os.path.join(workdir, "output.mp4")

    # 1) source video
    logger.info("[%s] downloading source video", os.path.basename(workdir))
    download_drive_file(job.source_video_file_id, job.access_token, video_in)

    # 2) optional music
    if job.music_file_id:
        logger.info("[%s] downloading music", os.path.basename(workdir))
        download_drive_file(job.music_file_id, job.access_token, audio_in)

    # 3) ffmpeg
    logger.info(
        "[%s] rendering start=%s duration=%s music=%s",
        os.path.basename(workdir), job.start, job.duration, bool(audio_in),
    )
    render_clip(
        video_in,
        out_path,
        job.start,
        job.duration,
        audio_in=audio_in,
        music_start=job.music_start,
        video_volume=job.video_volume,
        music_volume=job.music_volume,
    )

    # 4) upload
    logger.info("[%s] uploading %s", os.path.basename(workdir), job.output_name)
    return upload_to_drive(
        access_token=job.access_token,
        file_path=out_path,
        filename=job.output_name,
        mime_type=config.OUTPUT_MIME,
        folder_id=job.folder_id,
    )


def process_render(req: RenderRequest, scratch_dir: Optional[str] = None) -> UploadResult:
    """
    Validate, fetch, render, publish.
    Scratch files live in a per-request directory that is removed
    afterwards whatever the outcome; cleanup errors are ignored.
    """
    job = validate_request(req)
    scratch_dir = scratch_dir or config.SCRATCH_DIR
    os.makedirs(scratch_dir, exist_ok=True)

    gate = RENDER_GATE if RENDER_GATE is not None else contextlib.nullcontext()
    with gate:
        with tempfile.TemporaryDirectory(
            prefix="render-",
            dir=scratch_dir,
            ignore_cleanup_errors=True,
        ) as workdir:
            result = run_pipeline(job, workdir)

    logger.info("render done, uploaded file %s", result.id)
    return result
