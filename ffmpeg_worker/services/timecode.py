import math
import re
import time

from ffmpeg_worker.core.errors import InvalidInput

SECONDS_RE = re.compile(r"^\d+(\.\d+)?$", re.ASCII)
CLOCK_RE = re.compile(r"^\d{1,2}:\d{2}:\d{2}(\.\d+)?$", re.ASCII)

SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]")
MAX_NAME_LEN = 120


def normalize_time(t) -> str:
    """
    Canonical ffmpeg time string for:
    - seconds as a number (750, 12.5)
    - seconds as a string ("750", "12.5")
    - clock strings ("0:12:30", "00:12:30.250")
    Anything else is InvalidInput.
    """
    if isinstance(t, bool) or t is None:
        raise InvalidInput(f"Invalid time format: {t}")

    if isinstance(t, (int, float)):
        if not math.isfinite(t) or t < 0:
            raise InvalidInput(f"Invalid time format: {t}")
        if isinstance(t, int) or t.is_integer():
            return str(int(t))
        # fixed notation, ffmpeg does not read exponents
        return ("%.6f" % t).rstrip("0").rstrip(".")

    if not isinstance(t, str):
        raise InvalidInput(f"Invalid time format: {t}")

    s = t.strip()
    if SECONDS_RE.match(s) or CLOCK_RE.match(s):
        return s
    raise InvalidInput(f"Invalid time format: {t}")


def safe_name(name, default: str = "clip") -> str:
    return SAFE_NAME_RE.sub("_", str(name or default))[:MAX_NAME_LEN]


def default_output_name() -> str:
    return f"clip-{int(time.time() * 1000)}.mp4"
