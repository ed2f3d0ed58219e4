"""Tests for configuration loading and saving."""
from __future__ import annotations

import json
from unittest.mock import patch

from kanji_quiz.config import Settings, load_settings, save_settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.levels == [4, 5, 6, 7, 8]
        assert s.ready_levels == [7, 8]
        assert s.quiz_format == "input"

    def test_to_dict(self):
        d = Settings().to_dict()
        assert d["default_level"] == 7
        assert isinstance(d["levels"], list)
        assert len(d) == 9  # all fields present

    def test_to_dict_roundtrip(self):
        s = Settings(ready_levels=[6, 7], quiz_format="choice")
        s2 = Settings(**s.to_dict())
        assert s2.ready_levels == [6, 7]
        assert s2.quiz_format == "choice"

    def test_is_ready(self):
        s = Settings()
        assert s.is_ready(7)
        assert not s.is_ready(4)

    def test_level_locations(self):
        s = Settings(data_origin="http://example.test/")
        assert s.level_base(8) == "/kanji/level-8"
        assert s.mappings_url(8) == "http://example.test/kanji/level-8/mappings.csv"

    def test_mappings_url_uses_serving_origin(self):
        s = Settings()
        assert s.data_origin == ""
        assert s.mappings_url(7, "http://127.0.0.1:9000/") == "http://127.0.0.1:9000/kanji/level-7/mappings.csv"

    def test_configured_origin_wins(self):
        s = Settings(data_origin="https://cdn.test")
        assert s.mappings_url(7, "http://127.0.0.1:9000/") == "https://cdn.test/kanji/level-7/mappings.csv"

    def test_local_mappings_path(self, tmp_path):
        s = Settings(data_dir=str(tmp_path))
        assert s.local_mappings_path(7) == tmp_path / "level-7" / "mappings.csv"

    def test_default_lists_not_shared(self):
        a, b = Settings(), Settings()
        a.ready_levels.append(6)
        assert b.ready_levels == [7, 8]


class TestLoadSaveSettings:
    def test_load_from_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"ready_levels": [6, 7, 8], "quiz_format": "choice"}))

        with patch("kanji_quiz.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.ready_levels == [6, 7, 8]
        assert s.quiz_format == "choice"
        # Defaults for unspecified fields
        assert s.default_level == 7

    def test_load_missing_file(self, tmp_path):
        with patch("kanji_quiz.config.CONFIG_PATH", tmp_path / "nonexistent.json"):
            s = load_settings()
        assert s.ready_levels == [7, 8]

    def test_save_creates_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        with patch("kanji_quiz.config.CONFIG_PATH", config_path):
            save_settings(Settings(default_level=8))

        data = json.loads(config_path.read_text())
        assert data["default_level"] == 8

    def test_unknown_keys_ignored(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"quiz_format": "input", "unknown_key": "value"}))

        with patch("kanji_quiz.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert not hasattr(s, "unknown_key")
