"""Backup directory preparation."""

import logging
import os

from .exceptions import BackupDirectoryError
from .models import BackupDestination
from ..utils.formatters import expand_path

DIRECTORY_MODE = 0o755


class DirectoryPreparer:
    """Resolves the backup directory and makes sure it can be written to."""

    def __init__(self, configured_path: str):
        """Initialize directory preparer.

        Args:
            configured_path: Backup directory as configured. May be relative
                            and may contain ``~`` or environment references.
        """
        self.configured_path = configured_path
        self.logger = logging.getLogger(__name__)

    def prepare(self) -> BackupDestination:
        """Resolve, create and verify the backup directory.

        Returns:
            BackupDestination describing the ready directory.

        Raises:
            BackupDirectoryError: If the directory cannot be used.
        """
        if not self.configured_path or not self.configured_path.strip():
            raise BackupDirectoryError("Backup directory path is empty")

        path = self.resolve(self.configured_path)
        self.logger.info(f"Using backup directory: {path}")

        created = self.ensure_directory(path)
        self.ensure_writable(path)

        self.logger.info(f"Backup directory ready: {path}")
        return BackupDestination(
            configured=self.configured_path,
            path=path,
            exists=True,
            writable=True,
            created=created
        )

    def resolve(self, path: str) -> str:
        """Expand a configured path and make it absolute.

        Relative paths are taken relative to the current working directory.
        """
        expanded = expand_path(path)
        try:
            return os.path.abspath(expanded)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not resolve {expanded}, using it as-is: {e}")
            return expanded

    def ensure_directory(self, path: str) -> bool:
        """Create the directory (and parents) if it does not exist.

        Args:
            path: Absolute directory path.

        Returns:
            True if the directory was created by this call.

        Raises:
            BackupDirectoryError: If the path is not a directory or cannot be created.
        """
        if os.path.isdir(path):
            return False

        if os.path.exists(path):
            raise BackupDirectoryError(f"Backup path exists but is not a directory: {path}")

        self.logger.info(f"Creating backup directory: {path}")
        try:
            os.makedirs(path)
            # makedirs applies the umask, so set the mode explicitly
            os.chmod(path, DIRECTORY_MODE)
        except OSError as e:
            raise BackupDirectoryError(f"Failed to create backup directory: {path} ({e})") from e

        return True

    def ensure_writable(self, path: str) -> None:
        """Verify that new files can be created in the directory.

        Raises:
            BackupDirectoryError: If the directory is not writable.
        """
        if not os.access(path, os.W_OK | os.X_OK):
            raise BackupDirectoryError(
                f"Cannot write to backup directory: {path}. "
                "Please check permissions or choose a different location"
            )
