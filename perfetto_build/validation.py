"""Command-line argument validation"""

import re
from pathlib import Path
from typing import Sequence

from .errors import PathFormatError, PathNotFoundError, UsageError

WINDOWS_ABSOLUTE = re.compile(r"^[A-Za-z]:[\\/]")


def ensure_absolute(path: str, windows: bool) -> None:
    """
    Check that ``path`` is absolute by the host's convention

    Raises:
        PathFormatError: If the path is relative
    """
    if windows:
        if not WINDOWS_ABSOLUTE.match(path):
            raise PathFormatError(
                "On Windows, path must be absolute like C:\\path\\to\\perfetto"
            )
    elif not path.startswith("/"):
        raise PathFormatError("On macOS/Linux, path must start with / (absolute).")


def canonicalize(path: str) -> Path:
    """Resolve symlinks and relative segments; keep the path unchanged if that fails"""
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError):
        return Path(path)


def validate_arguments(args: Sequence[str], windows: bool) -> Path:
    """
    Validate the command-line arguments

    Args:
        args: Positional arguments, excluding the program name
        windows: Whether Windows path conventions apply

    Returns:
        Canonical source directory

    Raises:
        UsageError: Unless exactly one argument is given
        PathFormatError: If the path is not absolute
        PathNotFoundError: If the path is not an existing directory
    """
    if len(args) != 1:
        raise UsageError("Expected exactly 1 argument: absolute path to Perfetto source.")

    source = args[0]
    ensure_absolute(source, windows)
    if not Path(source).is_dir():
        raise PathNotFoundError(f"Path does not exist: {source}")
    return canonicalize(source)
