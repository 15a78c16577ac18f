"""
Tests for the JSON settings file.
"""

import json

import pytest

from core import PrizeSettings, load_settings, save_settings, validate_settings


class TestSettings:
    def test_missing_file_created_with_defaults(self, tmp_path):
        path = tmp_path / "prize_config.json"
        settings = load_settings(str(path))

        assert settings == PrizeSettings(gpa_threshold=4.0, max_recipients=5)
        assert json.loads(path.read_text(encoding="utf-8")) == {"gpa_threshold": 4.0, "max_recipients": 5}

    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "cfg.json")
        save_settings(path, PrizeSettings(gpa_threshold=3.5, max_recipients=3))
        assert load_settings(path) == PrizeSettings(gpa_threshold=3.5, max_recipients=3)

    def test_missing_keys_default(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text('{"max_recipients": 2}', encoding="utf-8")
        assert load_settings(str(path)) == PrizeSettings(gpa_threshold=4.0, max_recipients=2)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(str(path))

    @pytest.mark.parametrize(
        "threshold, cap",
        [("high", 5), (4.0, -1), (4.0, "five"), (4.0, 2.5), (4.0, True), (None, 5)],
    )
    def test_invalid_values(self, threshold, cap):
        with pytest.raises(ValueError):
            validate_settings(threshold, cap)

    def test_numeric_strings_accepted(self):
        assert validate_settings("4.2", "3") == PrizeSettings(gpa_threshold=4.2, max_recipients=3)
