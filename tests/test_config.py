"""
Tests for runtime configuration persistence.
"""

import json

from das.interface.config import (
    DEFAULT_CONFIG,
    get_config_path,
    load_config,
    save_config,
    set_alert_stand_down,
    set_log_level,
)


class TestConfig:
    """Loading, saving and the setters."""

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_defaults_are_a_copy(self, tmp_path):
        config = load_config(tmp_path)
        config["audit_log_limit"] = 1
        assert DEFAULT_CONFIG["audit_log_limit"] == 100

    def test_round_trip(self, tmp_path):
        config = load_config(tmp_path)
        config["audit_log_limit"] = 25

        assert save_config(config, tmp_path)
        assert load_config(tmp_path)["audit_log_limit"] == 25

    def test_unknown_keys_dropped(self, tmp_path):
        get_config_path(tmp_path).write_text(json.dumps({"color": "red", "recent_actions": 9}))

        config = load_config(tmp_path)

        assert "color" not in config
        assert config["recent_actions"] == 9
        assert config["mission_log_limit"] == 200

    def test_unreadable_file_falls_back(self, tmp_path, caplog):
        get_config_path(tmp_path).write_text("{not json")

        assert load_config(tmp_path) == DEFAULT_CONFIG
        assert "Ignoring unreadable config" in caplog.text

    def test_setters(self, tmp_path):
        set_log_level("debug", tmp_path)
        set_alert_stand_down(True, tmp_path)

        config = load_config(tmp_path)
        assert config["log_level"] == "DEBUG"
        assert config["alert_stands_down_critical"] is True

    def test_save_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "campaigns"
        assert save_config(DEFAULT_CONFIG.copy(), target)
        assert get_config_path(target).exists()
