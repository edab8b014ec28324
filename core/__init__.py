"""Shared core utilities for command execution, console output and configuration files."""

from .command_runner import (
    CommandError,
    CommandResult,
    CommandRunner,
    LaunchError,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)
from .config_loader import (
    ConfigLoader,
    FILE_LOADERS,
    collect_config_files,
    load_config_file,
    normalize_string_list,
)
from .console import Console
from .filesystem import FilesystemError, copy_tree, ensure_directory

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "LaunchError",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "ConfigLoader",
    "FILE_LOADERS",
    "collect_config_files",
    "load_config_file",
    "normalize_string_list",
    "Console",
    "FilesystemError",
    "copy_tree",
    "ensure_directory",
]
