"""Utility modules for KeePass backup."""

from .formatters import format_file_size, format_timestamp, expand_path

__all__ = ["format_file_size", "format_timestamp", "expand_path"]
