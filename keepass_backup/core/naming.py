"""Helpers that derive the backup filename for a database."""

import hashlib
import os
import re
from datetime import datetime
from typing import Optional

from .exceptions import BackupError
from ..utils.formatters import format_timestamp

DEFAULT_PREFIX = 'keepass'
HASH_PATTERN = re.compile(r'^[a-f0-9]{32}$')
CHUNK_SIZE = 64 * 1024


def split_filename(path: str):
    """Split a path's base name into (stem, extension without dot)."""
    stem, ext = os.path.splitext(os.path.basename(path))
    return stem, ext[1:]


def extract_name(path: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Extract the logical name from a database filename.

    ``keepass-bob.kbdx`` -> ``bob``; names without the prefix are kept as-is.

    Raises:
        BackupError: If the resulting name is empty.
    """
    stem, _ = split_filename(path)
    marker = f"{prefix}-"
    name = stem[len(marker):] if stem.startswith(marker) else stem

    if not name:
        raise BackupError(f"Could not extract name from: {path}", path)
    return name


def format_mod_date(mtime: float) -> str:
    """Format an ``st_mtime`` value (local time) as used in backup names."""
    return format_timestamp(datetime.fromtimestamp(mtime))


def get_mod_date(path: str) -> str:
    """Return the file's modification time (local) as used in backup names."""
    try:
        mtime = os.path.getmtime(path)
    except OSError as e:
        raise BackupError(f"Failed to get modification date for: {path} ({e})", path) from e
    return format_mod_date(mtime)


def calculate_md5(path: str) -> str:
    """Calculate the MD5 digest of a file's full content.

    Args:
        path: File to hash.

    Returns:
        32 character lowercase hex digest.

    Raises:
        BackupError: If the file cannot be read or the digest is malformed.
    """
    digest = hashlib.md5()
    try:
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                digest.update(chunk)
    except OSError as e:
        raise BackupError(f"Failed to calculate MD5 for: {path} ({e})", path) from e

    value = digest.hexdigest()
    if not HASH_PATTERN.match(value):
        raise BackupError(f"Invalid MD5 hash format for: {path}", path)
    return value


def copy_with_md5(src, dst) -> str:
    """Copy an open binary file into another, hashing the bytes written.

    Returns:
        MD5 hex digest of exactly what was written to ``dst``.
    """
    digest = hashlib.md5()
    for chunk in iter(lambda: src.read(CHUNK_SIZE), b''):
        dst.write(chunk)
        digest.update(chunk)
    return digest.hexdigest()


def build_backup_filename(timestamp: str, prefix: str, name: str, file_hash: str,
                          extension: Optional[str] = None) -> str:
    """Compose ``{timestamp}_{prefix}-{name}_{hash}.{extension}``."""
    filename = f"{timestamp}_{prefix}-{name}_{file_hash}"
    if extension:
        filename += f".{extension.lower()}"
    return filename
