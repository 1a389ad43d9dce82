import os
import tempfile

PORT = int(os.getenv("PORT", "3000"))

SCRATCH_DIR = os.getenv(
    "SCRATCH_DIR",
    os.path.join(tempfile.gettempdir(), "ffmpeg-worker")
)
os.makedirs(SCRATCH_DIR, exist_ok=True)

FFMPEG_BIN = os.getenv("FFMPEG_BIN", "ffmpeg")
FFPROBE_BIN = os.getenv("FFPROBE_BIN", "ffprobe")

# =========================
# GOOGLE DRIVE
# =========================
DRIVE_API_URL = os.getenv("DRIVE_API_URL", "https://www.googleapis.com/drive/v3")
DRIVE_UPLOAD_URL = os.getenv("DRIVE_UPLOAD_URL", "https://www.googleapis.com/upload/drive/v3")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "300"))

UPLOAD_BOUNDARY = "-------314159265358979323846"

# =========================
# HTTP
# =========================
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(2 * 1024 * 1024)))

# 0 = no admission gate, every request spawns its own ffmpeg
MAX_CONCURRENT_RENDERS = int(os.getenv("MAX_CONCURRENT_RENDERS", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# =========================
# RENDER DEFAULTS
# =========================
TARGET_W, TARGET_H = 1080, 1920

VIDEO_CODEC = "libx264"
VIDEO_PRESET = "veryfast"
VIDEO_CRF = 22
PIX_FMT = "yuv420p"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "160k"

DEFAULT_MUSIC_VOLUME = 0.35
DEFAULT_VIDEO_VOLUME = 1.0

OUTPUT_MIME = "video/mp4"
