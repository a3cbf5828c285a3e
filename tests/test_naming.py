"""Tests for backup filename helpers."""

import hashlib
import io
import os
from datetime import datetime

import pytest

from keepass_backup.core.exceptions import BackupError
from keepass_backup.core.naming import (build_backup_filename, calculate_md5, copy_with_md5,
                                        extract_name, get_mod_date, split_filename)
from keepass_backup.utils.formatters import expand_path, format_file_size, format_timestamp


class TestExtractName:

    def test_strips_prefix_and_extension(self):
        assert extract_name('/data/keepass-bob.kbdx') == 'bob'

    def test_name_without_prefix_is_kept(self):
        assert extract_name('/data/personal.kbdx') == 'personal'

    def test_prefix_only_in_middle_is_kept(self):
        assert extract_name('/data/my-keepass-bob.kbdx') == 'my-keepass-bob'

    def test_custom_prefix(self):
        assert extract_name('/data/vault-work.kdbx', prefix='vault') == 'work'

    def test_only_last_extension_removed(self):
        assert extract_name('/data/keepass-bob.old.kbdx') == 'bob.old'

    def test_empty_name_fails(self):
        with pytest.raises(BackupError):
            extract_name('/data/keepass-.kbdx')


def test_split_filename():
    assert split_filename('/data/keepass-bob.KBDX') == ('keepass-bob', 'KBDX')
    assert split_filename('/data/database') == ('database', '')


def test_get_mod_date_uses_local_mtime(make_database):
    path = make_database(mtime=datetime(2025, 1, 1, 10, 0, 0))
    assert get_mod_date(path) == '2025-01-01_10-00-00'


def test_get_mod_date_missing_file(tmp_path):
    with pytest.raises(BackupError, match="Failed to get modification date"):
        get_mod_date(str(tmp_path / 'missing.kbdx'))


class TestCalculateMd5:

    def test_matches_hashlib(self, make_database):
        path = make_database(content=b'X')
        assert calculate_md5(path) == hashlib.md5(b'X').hexdigest()

    def test_large_file_hashed_in_full(self, make_database):
        content = os.urandom(200 * 1024)
        path = make_database(content=content)
        assert calculate_md5(path) == hashlib.md5(content).hexdigest()

    def test_empty_file(self, make_database):
        path = make_database(content=b'')
        assert calculate_md5(path) == 'd41d8cd98f00b204e9800998ecf8427e'

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(BackupError, match="Failed to calculate MD5"):
            calculate_md5(str(tmp_path / 'missing.kbdx'))


def test_copy_with_md5_hashes_what_it_writes():
    content = os.urandom(150 * 1024)
    dst = io.BytesIO()

    digest = copy_with_md5(io.BytesIO(content), dst)

    assert dst.getvalue() == content
    assert digest == hashlib.md5(content).hexdigest()


class TestBuildBackupFilename:

    def test_full_name(self):
        digest = hashlib.md5(b'X').hexdigest()
        filename = build_backup_filename('2025-01-01_10-00-00', 'keepass', 'bob', digest, 'kbdx')
        assert filename == f'2025-01-01_10-00-00_keepass-bob_{digest}.kbdx'

    def test_extension_lowercased(self):
        assert build_backup_filename('t', 'keepass', 'bob', 'h', 'KDBX') == 't_keepass-bob_h.kdbx'

    def test_no_extension(self):
        assert build_backup_filename('t', 'keepass', 'bob', 'h', '') == 't_keepass-bob_h'


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 12, 31, 23, 59, 58)) == '2024-12-31_23-59-58'


def test_format_file_size():
    assert format_file_size(512) == '512B'
    assert format_file_size(2048) == '2KB'
    assert format_file_size(3 * 1024 * 1024) == '3MB'


class TestExpandPath:

    def test_home(self, monkeypatch):
        monkeypatch.setenv('HOME', '/home/tester')
        assert expand_path('~/keepass-bob.kbdx') == '/home/tester/keepass-bob.kbdx'

    def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv('VAULT_DIR', '/srv/vault')
        assert expand_path('$VAULT_DIR/keepass-bob.kbdx') == '/srv/vault/keepass-bob.kbdx'
        assert expand_path('${VAULT_DIR}/x.kbdx') == '/srv/vault/x.kbdx'

    def test_unset_variable_left_in_place(self, monkeypatch, caplog):
        monkeypatch.delenv('NOT_A_REAL_VAR', raising=False)
        assert expand_path('$NOT_A_REAL_VAR/x.kbdx') == '$NOT_A_REAL_VAR/x.kbdx'
        assert 'unresolved' in caplog.text
