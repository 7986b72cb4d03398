"""Utilities module initialization."""

from .path_utils import (
    collect_source_files,
    module_name_for_path,
    output_path_for,
    sanitize_for_filesystem,
)

__all__ = [
    "collect_source_files",
    "module_name_for_path",
    "output_path_for",
    "sanitize_for_filesystem",
]
