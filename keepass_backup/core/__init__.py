"""Core backup functionality."""

from .backup import KeePassBackup
from .destination import DirectoryPreparer
from .exceptions import BackupDirectoryError, BackupError, ConfigurationError, KeePassBackupError
from .models import BackupDestination, BackupResult, RunSummary, SourceDatabase

__all__ = [
    "KeePassBackup", "DirectoryPreparer",
    "KeePassBackupError", "BackupDirectoryError", "ConfigurationError", "BackupError",
    "BackupDestination", "BackupResult", "RunSummary", "SourceDatabase",
]
