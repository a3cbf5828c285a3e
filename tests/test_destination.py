"""Tests for backup directory preparation."""

import os
import stat

import pytest

from keepass_backup.core.destination import DirectoryPreparer
from keepass_backup.core.exceptions import BackupDirectoryError


def test_creates_missing_directory_with_mode(tmp_path):
    target = tmp_path / 'nested' / 'backups'

    destination = DirectoryPreparer(str(target)).prepare()

    assert destination.path == str(target)
    assert destination.created
    assert target.is_dir()
    assert stat.S_IMODE(target.stat().st_mode) == 0o755


def test_existing_directory_is_left_alone(tmp_path):
    target = tmp_path / 'backups'
    target.mkdir()
    os.chmod(target, 0o700)

    destination = DirectoryPreparer(str(target)).prepare()

    assert not destination.created
    assert stat.S_IMODE(target.stat().st_mode) == 0o700


def test_relative_path_resolved_against_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    destination = DirectoryPreparer('backups').prepare()

    assert destination.path == str(tmp_path / 'backups')
    assert (tmp_path / 'backups').is_dir()


def test_home_and_variables_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.setenv('BACKUP_NAME', 'vault')

    destination = DirectoryPreparer('~/$BACKUP_NAME').prepare()

    assert destination.path == str(tmp_path / 'vault')


@pytest.mark.parametrize('configured', ['', '   '])
def test_empty_path_is_fatal(configured):
    with pytest.raises(BackupDirectoryError, match="empty"):
        DirectoryPreparer(configured).prepare()


def test_path_that_is_a_file_is_fatal(tmp_path):
    target = tmp_path / 'backups'
    target.write_text('not a directory')

    with pytest.raises(BackupDirectoryError, match="not a directory"):
        DirectoryPreparer(str(target)).prepare()


def test_creation_failure_is_fatal(tmp_path, monkeypatch):
    def fail(path, *args, **kwargs):
        raise PermissionError(13, 'Permission denied', path)

    monkeypatch.setattr(os, 'makedirs', fail)

    with pytest.raises(BackupDirectoryError, match="Failed to create backup directory"):
        DirectoryPreparer(str(tmp_path / 'backups')).prepare()


def test_unwritable_directory_is_fatal(tmp_path, monkeypatch):
    monkeypatch.setattr(os, 'access', lambda path, mode: False)

    with pytest.raises(BackupDirectoryError, match="check permissions"):
        DirectoryPreparer(str(tmp_path)).prepare()
