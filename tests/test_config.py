"""Tests for config loading, merging and persistence."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from echobloom.config import DEFAULT_CONFIG, load_config, reset_config, save_config


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "coach.json")
        assert cfg == DEFAULT_CONFIG
        cfg["pacing"]["ms_per_char"] = 1
        assert DEFAULT_CONFIG["pacing"]["ms_per_char"] == 80

    def test_partial_section_merges(self, tmp_path):
        path = tmp_path / "coach.json"
        path.write_text(json.dumps({"pacing": {"pause_seconds": 3}, "volume": 0.2}), encoding="utf-8")
        cfg = load_config(path)
        assert cfg["pacing"] == {"ms_per_char": 80, "pause_seconds": 3}
        assert cfg["volume"] == 0.2
        assert cfg["generation"] == DEFAULT_CONFIG["generation"]

    def test_bad_json_falls_back(self, tmp_path, caplog):
        path = tmp_path / "coach.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(path) == DEFAULT_CONFIG
        assert "using defaults" in caplog.text

    def test_non_object_falls_back(self, tmp_path):
        path = tmp_path / "coach.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(path) == DEFAULT_CONFIG

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "coach.json"
        cfg = load_config(path)
        cfg["toggles"]["speak_replies"] = False
        save_config(cfg, path)
        assert load_config(path)["toggles"]["speak_replies"] is False

    def test_reset(self, tmp_path):
        path = tmp_path / "coach.json"
        path.write_text(json.dumps({"volume": 0.9}), encoding="utf-8")
        assert reset_config(path) == DEFAULT_CONFIG
        assert load_config(path)["volume"] == DEFAULT_CONFIG["volume"]
