import pytest

from housekeeper.config import DEFAULT_CONFIG, load_config


def test_defaults_from_empty_file(write_config):
    config = load_config(write_config({}))
    assert config["Settings"]["WARNING_PERCENTAGE"] == 75
    assert config["Settings"]["THRESHOLD_PERCENTAGE"] == 85
    assert config["Settings"]["CRITICAL_PERCENTAGE"] == 90
    assert config["Settings"]["REPEAT_ALERT_INTERVAL"] == 30
    assert config["Settings"]["MAX_RETRIES"] == 3
    assert config["Settings"]["RETRY_DELAY"] == 60
    assert config["Paths"]["MONITOR_PATH"] == "/"
    assert config["Paths"]["FAILED_TRANSFERS_FILE"] == "/tmp/failed_transfers.txt"


def test_file_values_override_defaults(write_config):
    config = load_config(write_config({
        "Settings": {"THRESHOLD_PERCENTAGE": 80, "LOG_LEVEL": "debug"},
        "Paths": {"TEMP_DIR": "/scratch"},
    }))
    assert config["Settings"]["THRESHOLD_PERCENTAGE"] == 80
    assert config["Settings"]["CRITICAL_PERCENTAGE"] == 90
    assert config["Settings"]["LOG_LEVEL"] == "DEBUG"
    assert config["Paths"]["TEMP_DIR"] == "/scratch"
    assert config["Paths"]["LOG_DIR"] == "/var/log"


def test_environment_overrides_file(write_config, monkeypatch):
    monkeypatch.setenv("THRESHOLD_PERCENTAGE", "82")
    monkeypatch.setenv("NOTIFICATION_URLS", "mailto://a@example.com, json://hooks.example.com")
    monkeypatch.setenv("NOTIFICATIONS_ENABLED", "true")
    monkeypatch.setenv("FTP_USE_TLS", "yes")
    monkeypatch.setenv("FTP_PORT", "2121")

    config = load_config(write_config({"Settings": {"THRESHOLD_PERCENTAGE": 80}}))

    assert config["Settings"]["THRESHOLD_PERCENTAGE"] == 82.0
    assert config["Settings"]["NOTIFICATION_URLS"] == ["mailto://a@example.com", "json://hooks.example.com"]
    assert config["Settings"]["NOTIFICATIONS_ENABLED"] is True
    assert config["FTP"]["USE_TLS"] is True
    assert config["FTP"]["PORT"] == 2121


def test_defaults_are_not_mutated(write_config):
    load_config(write_config({"Settings": {"MAX_RETRIES": 7}, "FTP": {"HOST": "h"}}))
    assert DEFAULT_CONFIG["Settings"]["MAX_RETRIES"] == 3
    assert DEFAULT_CONFIG["FTP"]["HOST"] is None


def test_missing_explicit_config_file(tmp_path):
    with pytest.raises(ValueError, match="Configuration file not found"):
        load_config(str(tmp_path / "nope.yml"))


@pytest.mark.parametrize("settings", [
    {"WARNING_PERCENTAGE": 90, "THRESHOLD_PERCENTAGE": 85},
    {"THRESHOLD_PERCENTAGE": 95},
    {"CRITICAL_PERCENTAGE": 101},
    {"WARNING_PERCENTAGE": 0},
])
def test_threshold_ordering_is_validated(write_config, settings):
    with pytest.raises(ValueError, match="Thresholds"):
        load_config(write_config({"Settings": settings}))


def test_invalid_retry_settings(write_config):
    with pytest.raises(ValueError, match="MAX_RETRIES"):
        load_config(write_config({"Settings": {"MAX_RETRIES": 0}}))
    with pytest.raises(ValueError, match="RETRY_DELAY"):
        load_config(write_config({"Settings": {"RETRY_DELAY": -1}}))


def test_unknown_log_level(write_config):
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        load_config(write_config({"Settings": {"LOG_LEVEL": "chatty"}}))


def test_ftp_settings_required_for_transfers(write_config):
    path = write_config({})
    with pytest.raises(ValueError, match="FTP.HOST, Paths.LOCAL_DIR"):
        load_config(path, require_ftp=True)
    # The disk monitor does not need them
    assert load_config(path)["FTP"]["HOST"] is None


def test_section_must_be_mapping(write_config):
    with pytest.raises(ValueError, match="Settings"):
        load_config(write_config({"Settings": ["not", "a", "mapping"]}))


def test_null_remote_dir_defaults_to_root(write_config):
    config = load_config(write_config({"FTP": {"HOST": "h", "REMOTE_DIR": None}}))
    assert config["FTP"]["REMOTE_DIR"] == "/"
