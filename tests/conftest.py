"""KeePass backup test fixtures."""

import logging
import os
from datetime import datetime

import pytest
import yaml

FIXED_MTIME = datetime(2025, 1, 1, 10, 0, 0)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep BACKUP_DIR from the calling shell out of the tests."""
    monkeypatch.delenv('BACKUP_DIR', raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so later tests do not write to closed streams."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def make_database(tmp_path):
    """Factory creating a database file with given content and modification time."""
    source_dir = tmp_path / 'sources'
    source_dir.mkdir()

    def _make(name='keepass-bob.kbdx', content=b'X', mtime=FIXED_MTIME):
        path = source_dir / name
        path.write_bytes(content)
        timestamp = mtime.timestamp()
        os.utime(path, (timestamp, timestamp))
        return str(path)

    return _make


@pytest.fixture
def backup_dir(tmp_path):
    return str(tmp_path / 'backups')


@pytest.fixture
def write_config(tmp_path):
    """Factory writing a YAML config file and returning its path."""

    def _write(data, name='config.yaml'):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding='utf-8')
        return str(path)

    return _write
