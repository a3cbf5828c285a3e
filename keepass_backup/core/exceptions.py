"""Exception types for KeePass backup."""

from typing import Optional


class KeePassBackupError(Exception):
    """Base class for errors that abort the whole run."""


class BackupDirectoryError(KeePassBackupError):
    """Backup directory could not be created or is not writable."""


class ConfigurationError(KeePassBackupError):
    """No usable databases are configured."""


class BackupError(Exception):
    """A single database could not be backed up.

    Recorded as a failure for that entry; the run continues.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
