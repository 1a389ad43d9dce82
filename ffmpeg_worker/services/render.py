import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ffmpeg_worker.core import config
from ffmpeg_worker.core.errors import TranscodeFailure

logger = logging.getLogger(__name__)

# vertical Reels-friendly frame: fill then center-crop
VIDEO_FILTER = (
    f"scale={config.TARGET_W}:{config.TARGET_H}:force_original_aspect_ratio=increase,"
    f"crop={config.TARGET_W}:{config.TARGET_H}"
)

SILENCE_SOURCE = "anullsrc=channel_layout=stereo:sample_rate=44100"


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(args: List[str]) -> CommandResult:
    try:
        p = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise TranscodeFailure(f"{args[0]} could not be started: {e}") from e
    return CommandResult(p.returncode, p.stdout, p.stderr)


def has_audio_stream(path: str) -> bool:
    result = run_command([
        config.FFPROBE_BIN,
        "-v", "error",
        "-select_streams", "a",
        "-show_entries", "stream=index",
        "-of", "csv=p=0",
        path,
    ])
    if not result.ok:
        raise TranscodeFailure(
            f"ffprobe exited {result.returncode}\n{result.stderr}",
            result.returncode,
            result.stderr,
        )
    return bool(result.stdout.strip())


def build_ffmpeg_args(
    video_in: str,
    out_path: str,
    start: str,
    duration: str,
    audio_in: Optional[str] = None,
    music_start: str = "0",
    video_volume: float = config.DEFAULT_VIDEO_VOLUME,
    music_volume: float = config.DEFAULT_MUSIC_VOLUME,
    source_has_audio: bool = True,
) -> List[str]:
    """
    ffmpeg arguments (without the binary) for one clip.
    Re-encodes for frame-accurate cuts.
    """
    args = ["-hide_banner"]

    # seek before -i for speed
    args += ["-ss", start, "-i", video_in]

    if audio_in:
        args += ["-ss", music_start, "-i", audio_in]
        if not source_has_audio:
            # input 2 stands in for the missing source track
            args += ["-f", "lavfi", "-i", SILENCE_SOURCE]

    args += ["-t", duration]
    args += ["-vf", VIDEO_FILTER]

    if audio_in:
        source_audio = "0:a" if source_has_audio else "2:a"
        filter_graph = "".join([
            f"[{source_audio}]volume={video_volume}[va];",
            f"[1:a]volume={music_volume}[ma];",
            "[va][ma]amix=inputs=2:duration=first:dropout_transition=2[aout]",
        ])
        args += ["-filter_complex", filter_graph]
        args += ["-map", "0:v:0", "-map", "[aout]"]
    else:
        # keep original audio if present
        args += ["-map", "0:v:0", "-map", "0:a?"]

    args += [
        "-c:v", config.VIDEO_CODEC,
        "-preset", config.VIDEO_PRESET,
        "-crf", str(config.VIDEO_CRF),
        "-pix_fmt", config.PIX_FMT,
        "-c:a", config.AUDIO_CODEC,
        "-b:a", config.AUDIO_BITRATE,
        "-movflags", "+faststart",
        "-y", out_path,
    ]
    return args


def render_clip(
    video_in: str,
    out_path: str,
    start: str,
    duration: str,
    audio_in: Optional[str] = None,
    music_start: str = "0",
    video_volume: float = config.DEFAULT_VIDEO_VOLUME,
    music_volume: float = config.DEFAULT_MUSIC_VOLUME,
) -> CommandResult:
    source_has_audio = True
    if audio_in:
        source_has_audio = has_audio_stream(video_in)
        if not source_has_audio:
            logger.info("source has no audio track, mixing music over silence")

    args = [config.FFMPEG_BIN] + build_ffmpeg_args(
        video_in,
        out_path,
        start,
        duration,
        audio_in=audio_in,
        music_start=music_start,
        video_volume=video_volume,
        music_volume=music_volume,
        source_has_audio=source_has_audio,
    )

    logger.debug("running %s", " ".join(args))
    result = run_command(args)
    if not result.ok:
        raise TranscodeFailure(
            f"ffmpeg exited {result.returncode}\n{result.stderr}",
            result.returncode,
            result.stderr,
        )
    return result
