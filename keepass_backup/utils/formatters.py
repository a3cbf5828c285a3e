"""Formatting and path utilities for KeePass backup."""

import logging
import os
from datetime import datetime

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d_%H-%M-%S'


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Human readable size string.
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes // 1024}KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes // (1024 * 1024)}MB"
    else:
        return f"{size_bytes // (1024 * 1024 * 1024)}GB"


def format_timestamp(dt: datetime) -> str:
    """Format datetime the way it appears in backup filenames."""
    return dt.strftime(TIMESTAMP_FORMAT)


def expand_path(path: str) -> str:
    """Expand ``~`` and environment references in a path.

    Falls back to the raw string if expansion fails. References to unset
    variables are left in place by ``os.path.expandvars``; those are
    logged so a silently wrong path does not go unnoticed.

    Args:
        path: Configured path string.

    Returns:
        Expanded path (not made absolute).
    """
    try:
        expanded = os.path.expandvars(os.path.expanduser(path))
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Could not expand path {path!r}, using it as-is: {e}")
        return path

    if '$' in expanded:
        logger.warning(f"Path contains unresolved environment references: {expanded}")

    return expanded
