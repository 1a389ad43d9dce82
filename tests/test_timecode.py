"""Time normalization and output-name sanitization."""

import re

import pytest
from hypothesis import given, settings, strategies as st

from ffmpeg_worker.core.errors import InvalidInput
from ffmpeg_worker.services.timecode import (
    MAX_NAME_LEN,
    default_output_name,
    normalize_time,
    safe_name,
)

SAFE_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-"
SAFE_RE = re.compile(r"^[A-Za-z0-9._-]*$")

seconds_strategy = st.one_of(
    st.integers(min_value=0, max_value=10 ** 9),
    st.floats(min_value=0, max_value=1e9, allow_nan=False, allow_infinity=False),
)

clock_strategy = st.builds(
    lambda h, m, s, frac: f"{h}:{m:02d}:{s:02d}{frac}",
    st.sampled_from(["0", "1", "9", "00", "01", "12", "23"]),
    st.integers(min_value=0, max_value=59),
    st.integers(min_value=0, max_value=59),
    st.sampled_from(["", ".5", ".250", ".999999"]),
)


class TestNormalizeTime:

    @given(value=seconds_strategy)
    @settings(max_examples=200)
    def test_numbers_are_idempotent(self, value):
        once = normalize_time(value)
        assert normalize_time(once) == once
        assert re.match(r"^\d+(\.\d+)?$", once)

    @given(value=clock_strategy)
    @settings(max_examples=100)
    def test_clock_strings_map_to_themselves(self, value):
        assert normalize_time(value) == value
        assert normalize_time(normalize_time(value)) == value

    @pytest.mark.parametrize("value, expected", [
        (5, "5"),
        (5.0, "5"),
        (12.5, "12.5"),
        (0, "0"),
        ("750", "750"),
        (" 00:12:30 ", "00:12:30"),
        ("1:02:03.5", "1:02:03.5"),
    ])
    def test_canonical_form(self, value, expected):
        assert normalize_time(value) == expected

    @pytest.mark.parametrize("value", [
        None,
        True,
        -1,
        -0.5,
        float("nan"),
        float("inf"),
        "",
        "abc",
        "-5",
        "1e5",
        "12:30",
        "123:00:00",
        "00:1:00",
        "1:00:00:00",
        "\u0663",
        "\u0661:\u0660\u0660:\u0660\u0660",
        "\uff15",
        [],
        {"seconds": 5},
    ])
    def test_rejects_other_shapes(self, value):
        with pytest.raises(InvalidInput, match="Invalid time format"):
            normalize_time(value)


class TestSafeName:

    @given(name=st.text(max_size=400))
    def test_output_is_short_and_safe(self, name):
        out = safe_name(name)
        assert len(out) <= MAX_NAME_LEN
        assert SAFE_RE.match(out)

    @given(name=st.text(alphabet=SAFE_CHARS, min_size=1, max_size=MAX_NAME_LEN))
    def test_safe_names_are_unchanged(self, name):
        assert safe_name(name) == name

    def test_replaces_unsafe_characters(self):
        assert safe_name("nyc snow/001 (final).mp4") == "nyc_snow_001__final_.mp4"

    def test_truncates(self):
        assert safe_name("a" * 300) == "a" * MAX_NAME_LEN

    def test_empty_falls_back(self):
        assert safe_name(None) == "clip"
        assert safe_name("") == "clip"

    def test_default_output_name_is_timestamped(self):
        name = default_output_name()
        assert re.match(r"^clip-\d{13,}\.mp4$", name)
        assert safe_name(name) == name
