"""
KeePass Backup - Timestamped, content-addressed backups of KeePass databases.

This package copies configured database files into a backup directory, naming
each copy after its modification time and MD5 hash so unchanged databases are
never backed up twice.
"""

__version__ = "1.0.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

from .core.backup import KeePassBackup
from .core.destination import DirectoryPreparer
from .config.config_manager import ConfigManager

__all__ = ["KeePassBackup", "DirectoryPreparer", "ConfigManager"]
