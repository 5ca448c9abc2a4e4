"""Tests for presets and option validation."""

import pytest

from converteverything_mcp.sdk.exceptions import InvalidInputError
from converteverything_mcp.sdk.presets import (
    PRESET_CONFIGS,
    PRESET_NAMES,
    get_preset_options,
    resolve_options,
    validate_options,
)


@pytest.mark.unit
class TestPresetTable:
    def test_names(self):
        assert PRESET_NAMES == (
            "web-optimized",
            "high-quality",
            "smallest-size",
            "balanced",
            "print-ready",
            "archive",
        )

    def test_every_preset_has_description(self):
        for config in PRESET_CONFIGS.values():
            assert config["description"]
            assert config["options"]

    def test_web_optimized_audio(self):
        assert get_preset_options("web-optimized", "audio") == {
            "bitrate": "128k",
            "sample_rate": 44100,
            "channels": 2,
        }

    def test_ebook_uses_document_section(self):
        assert get_preset_options("balanced", "ebook") == {"pdf_quality": "ebook"}

    def test_missing_section_returns_none(self):
        assert get_preset_options("print-ready", "audio") is None

    def test_unmapped_category_returns_none(self):
        assert get_preset_options("balanced", "font") is None

    def test_returns_copy(self):
        options = get_preset_options("archive", "video")
        options["crf"] = 0
        assert PRESET_CONFIGS["archive"]["options"]["video"]["crf"] == 15

    def test_unknown_preset(self):
        with pytest.raises(InvalidInputError, match="Unknown preset: turbo"):
            get_preset_options("turbo", "audio")


@pytest.mark.unit
class TestResolveOptions:
    def test_override_wins_per_key(self):
        assert resolve_options("mp3", "web-optimized", {"bitrate": "96k"}) == {
            "bitrate": "96k",
            "sample_rate": 44100,
            "channels": 2,
        }

    def test_preset_only(self):
        assert resolve_options("mp4", "smallest-size") == {
            "crf": 35,
            "preset": "ultrafast",
            "resolution": "854x480",
        }

    def test_overrides_only(self):
        assert resolve_options("png", None, {"quality": 70}) == {"quality": 70}

    def test_nothing_to_send(self):
        assert resolve_options("mp3") is None
        assert resolve_options("mp3", None, {}) is None

    def test_preset_without_section_for_category(self):
        assert resolve_options("wav", "print-ready") is None

    def test_leading_dot_target(self):
        assert resolve_options(".jpg", "high-quality") == {
            "quality": 95,
            "strip_metadata": False,
        }

    def test_unknown_keys_pass_through(self):
        result = resolve_options("mp3", None, {"bitrate": "320k", "future_flag": True})
        assert result == {"bitrate": "320k", "future_flag": True}

    def test_unknown_category_is_not_validated(self):
        assert resolve_options("zip", None, {"level": 9}) == {"level": 9}


@pytest.mark.unit
class TestValidateOptions:
    @pytest.mark.parametrize(
        "category,options",
        [
            ("image", {"quality": 0}),
            ("image", {"quality": 101}),
            ("video", {"crf": 52}),
            ("video", {"fps": 0}),
            ("audio", {"channels": 0}),
            ("audio", {"sample_rate": -1}),
        ],
    )
    def test_out_of_range(self, category, options):
        with pytest.raises(InvalidInputError, match=f"Invalid {category} options"):
            validate_options(category, options)

    def test_integer_fps_stays_integer(self):
        assert validate_options("video", {"fps": 30}) == {"fps": 30}

    def test_numeric_bitrate_accepted(self):
        assert validate_options("audio", {"bitrate": 256}) == {"bitrate": 256}

    def test_no_model_copies_input(self):
        options = {"a": 1}
        result = validate_options(None, options)
        assert result == options
        assert result is not options
