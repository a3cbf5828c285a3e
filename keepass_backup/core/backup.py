"""Main KeePass backup class."""

import logging
import os
import re
import tempfile
from typing import List, Optional, Tuple

from .destination import DirectoryPreparer
from .exceptions import BackupError, ConfigurationError
from .models import (BackupDestination, BackupResult, RunSummary, SourceDatabase,
                     STATUS_CREATED, STATUS_EXISTS, STATUS_FAILED)
from .naming import (DEFAULT_PREFIX, HASH_PATTERN, build_backup_filename, calculate_md5,
                     copy_with_md5, extract_name, format_mod_date, get_mod_date, split_filename)
from ..config.config_manager import ConfigManager
from ..utils.formatters import expand_path, format_file_size

BACKUP_FILE_MODE = 0o600
COMMENT_PATTERN = re.compile(r'^\s*#')


def is_skipped_entry(entry: str) -> bool:
    """Return True for blank and comment entries in the database list."""
    return not entry or bool(COMMENT_PATTERN.match(entry))


def inspect_source(entry: str) -> SourceDatabase:
    """Expand a configured entry and check that it is a readable file."""
    path = os.path.abspath(expand_path(entry))
    exists = os.path.isfile(path)
    return SourceDatabase(
        configured=entry,
        path=path,
        exists=exists,
        readable=exists and os.access(path, os.R_OK)
    )


class KeePassBackup:
    """Backs up a list of database files into one backup directory."""

    def __init__(self, databases: List[str], backup_dir: str, prefix: str = DEFAULT_PREFIX):
        """Initialize backup runner.

        Args:
            databases: Ordered list of database paths. Blank and ``#`` entries are skipped.
            backup_dir: Backup directory as configured.
            prefix: Fixed filename prefix, stripped from source names and
                    prepended to backup names.
        """
        self.databases = list(databases)
        self.backup_dir = backup_dir
        self.prefix = prefix
        self.destination: Optional[BackupDestination] = None
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config_manager: ConfigManager) -> 'KeePassBackup':
        """Create a runner from loaded configuration."""
        return cls(
            databases=config_manager.get_databases(),
            backup_dir=config_manager.get_backup_dir(),
            prefix=config_manager.get_naming_config().get('prefix', DEFAULT_PREFIX)
        )

    def run(self) -> RunSummary:
        """Back up every configured database.

        Returns:
            RunSummary with per-entry results.

        Raises:
            BackupDirectoryError: If the backup directory cannot be prepared.
            ConfigurationError: If no databases are configured.
        """
        self.logger.info("Starting KeePass backup process")

        self.destination = DirectoryPreparer(self.backup_dir).prepare()

        if not self.databases:
            raise ConfigurationError("No KeePass databases configured")

        self.logger.info(f"Processing {len(self.databases)} configured databases")
        summary = RunSummary()

        for entry in self.databases:
            if is_skipped_entry(entry):
                self.logger.debug(f"Skipping entry: {entry!r}")
                summary.skipped += 1
                continue

            summary.record(self._process_entry(entry))

        if summary.processed == 0:
            raise ConfigurationError("No valid databases found in configuration")

        self.logger.info(f"Processed {summary.processed} configured database(s)")
        self.logger.info("Backup process completed")
        self.logger.info(f"Processed: {summary.processed}, Successful: {summary.successful}, "
                         f"Failed: {summary.failed}")
        return summary

    def _process_entry(self, entry: str) -> BackupResult:
        """Validate one configured entry and back it up."""
        source = inspect_source(entry)

        if not source.exists:
            self.logger.error(f"Database not found: {source.path}")
            return BackupResult(source.path, STATUS_FAILED, error_message="Database not found")

        if not source.readable:
            self.logger.error(f"Cannot read database: {source.path}")
            return BackupResult(source.path, STATUS_FAILED, error_message="Cannot read database")

        try:
            return self.backup_database(source.path)
        except (BackupError, OSError) as e:
            self.logger.error(str(e))
            return BackupResult(source.path, STATUS_FAILED, error_message=str(e))

    def backup_database(self, source_path: str) -> BackupResult:
        """Create a backup of one database unless an identical one exists.

        Args:
            source_path: Expanded path to an existing, readable database.

        Returns:
            BackupResult with status ``created`` or ``exists``.

        Raises:
            BackupError: If the name, timestamp, hash or copy step fails.
        """
        if self.destination is None:
            self.destination = DirectoryPreparer(self.backup_dir).prepare()

        self.logger.info(f"Processing: {source_path}")

        name = extract_name(source_path, self.prefix)
        mod_date = get_mod_date(source_path)
        file_hash = calculate_md5(source_path)
        _, extension = split_filename(source_path)

        backup_filename = build_backup_filename(mod_date, self.prefix, name, file_hash, extension)
        backup_path = os.path.join(self.destination.path, backup_filename)

        if os.path.exists(backup_path):
            self.logger.info(f"Backup already exists: {backup_filename}")
            return BackupResult(source_path, STATUS_EXISTS, backup_path=backup_path)

        self.logger.info(f"Creating backup: {backup_filename}")
        tmp_path, copied_date, copied_hash = self._copy_to_temp(source_path, backup_filename)
        replaced = False

        try:
            if (copied_date, copied_hash) != (mod_date, file_hash):
                # Saved between hashing and copying; name the copy after what was copied
                self.logger.warning(f"Database changed while it was being backed up: {source_path}")
                backup_filename = build_backup_filename(copied_date, self.prefix, name,
                                                        copied_hash, extension)
                backup_path = os.path.join(self.destination.path, backup_filename)

                if os.path.exists(backup_path):
                    self.logger.info(f"Backup already exists: {backup_filename}")
                    return BackupResult(source_path, STATUS_EXISTS, backup_path=backup_path)

            os.chmod(tmp_path, BACKUP_FILE_MODE)
            os.replace(tmp_path, backup_path)
            replaced = True
        except OSError as e:
            raise BackupError(f"Failed to create backup: {backup_filename} ({e})", source_path) from e
        finally:
            if not replaced:
                _remove_temp_file(tmp_path)

        self.logger.info(f"Backup created successfully: {backup_filename} "
                         f"({format_file_size(os.path.getsize(backup_path))})")
        return BackupResult(source_path, STATUS_CREATED, backup_path=backup_path)

    def _copy_to_temp(self, source_path: str, backup_filename: str) -> Tuple[str, str, str]:
        """Copy the database into a temporary file in the backup directory.

        The modification date and MD5 come from the same open file and the same
        read that fills the temporary file, so they always describe its content.

        Returns:
            Tuple of (temporary path, modification date, MD5 hex digest).

        Raises:
            BackupError: If the copy fails or the database is written to during the copy.
        """
        fd, tmp_path = tempfile.mkstemp(prefix=f".{backup_filename}.", suffix='.tmp',
                                        dir=self.destination.path)
        copied = False

        try:
            with os.fdopen(fd, 'wb') as dst, open(source_path, 'rb') as src:
                before = os.fstat(src.fileno())
                file_hash = copy_with_md5(src, dst)
                after = os.fstat(src.fileno())

            if (before.st_mtime_ns, before.st_size) != (after.st_mtime_ns, after.st_size):
                raise BackupError(f"Database was modified during the copy: {source_path}", source_path)
            if not HASH_PATTERN.match(file_hash):
                raise BackupError(f"Invalid MD5 hash format for: {source_path}", source_path)

            copied = True
        except OSError as e:
            raise BackupError(f"Failed to create backup: {backup_filename} ({e})", source_path) from e
        finally:
            if not copied:
                _remove_temp_file(tmp_path)

        return tmp_path, format_mod_date(before.st_mtime), file_hash


def _remove_temp_file(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
