"""Filesystem helpers used when materializing project templates."""
from __future__ import annotations

from pathlib import Path
import shutil


class FilesystemError(OSError):
    """Raised when a directory cannot be created or a template cannot be copied."""


def ensure_directory(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Failed to create folder: {path} ({exc})") from exc
    return path


def copy_tree(source: Path, destination: Path) -> None:
    """Recursively copy ``source`` into ``destination``, merging with existing content."""

    if not source.is_dir():
        raise FilesystemError(f"Template directory not found: {source}")
    try:
        shutil.copytree(source, destination, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise FilesystemError(f"Failed to copy '{source}' to '{destination}': {exc}") from exc
