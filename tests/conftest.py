import logging

import pytest
import yaml

from housekeeper.config import ENV_MAPPINGS, load_config


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep configuration from the real environment out of the tests."""
    for env_var in ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def write_config(tmp_path):
    def _write(data):
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump(data))
        return str(path)
    return _write


@pytest.fixture
def dirs(tmp_path):
    paths = {}
    for name in ("logs", "backups", "temp", "outbox"):
        path = tmp_path / name
        path.mkdir()
        paths[name] = path
    return paths


@pytest.fixture
def config(tmp_path, dirs, write_config):
    return load_config(write_config({
        "Paths": {
            "LOG_PATH": str(tmp_path / "housekeeper.log"),
            "MONITOR_PATH": str(tmp_path),
            "LOG_DIR": str(dirs["logs"]),
            "BACKUP_DIR": str(dirs["backups"]),
            "TEMP_DIR": str(dirs["temp"]),
            "ALERT_STATE_FILE": str(tmp_path / "disk_alert_timestamp"),
            "LOCAL_DIR": str(dirs["outbox"]),
            "FAILED_TRANSFERS_FILE": str(tmp_path / "failed_transfers.txt"),
        },
        "Settings": {
            "CLEAN_PACKAGE_CACHE": False,
            "RETRY_DELAY": 5,
        },
        "FTP": {
            "HOST": "ftp.example.com",
            "USER": "uploader",
            "PASSWORD": "secret",
            "REMOTE_DIR": "/incoming",
        },
    }), require_ftp=True)


class FakeNotifier:
    """Records every notification instead of sending it."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if not name.startswith("notify_"):
            raise AttributeError(name)

        def _record(*args):
            self.calls.append((name, args))
            return True
        return _record

    def names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def notifier():
    return FakeNotifier()
