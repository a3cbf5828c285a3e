"""Data models for KeePass backup."""

from dataclasses import dataclass, field
from typing import List, Optional

STATUS_CREATED = 'created'
STATUS_EXISTS = 'exists'
STATUS_FAILED = 'failed'


@dataclass
class SourceDatabase:
    """A configured database after path expansion."""
    configured: str
    path: str
    exists: bool
    readable: bool


@dataclass
class BackupDestination:
    """The prepared backup directory."""
    configured: str
    path: str
    exists: bool
    writable: bool
    created: bool = False


@dataclass
class BackupResult:
    """Outcome of backing up one database."""
    source: str
    status: str
    backup_path: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status in (STATUS_CREATED, STATUS_EXISTS)


@dataclass
class RunSummary:
    """Counts and per-entry results for one backup run."""
    processed: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    results: List[BackupResult] = field(default_factory=list)

    def record(self, result: BackupResult) -> None:
        self.processed += 1
        if result.succeeded:
            self.successful += 1
        else:
            self.failed += 1
        self.results.append(result)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
