from pathlib import Path

from coaching_tracker.config import load_settings


def test_defaults():
    settings = load_settings({})
    assert settings.data_dir == Path(".agent_tracker")
    assert settings.log_level == "INFO"


def test_environment_overrides(tmp_path):
    settings = load_settings({"AGENT_TRACKER_DATA_DIR": str(tmp_path), "AGENT_TRACKER_LOG_LEVEL": " debug"})
    assert settings.data_dir == tmp_path
    assert settings.log_level == "DEBUG"
