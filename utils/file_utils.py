"""
Utilities for file and folder operations.

Provides functions for sanitizing file names, locating the project root and
writing saved assets.
"""

import re
import unicodedata
from pathlib import Path
from typing import Optional

FALLBACK_NAME = "Untitled"

# Typographic punctuation that NFKC leaves alone
_PUNCTUATION = str.maketrans({
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
})
# Characters Windows rejects, including both path separators
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_SEPARATOR_RUNS = re.compile(r"[_\s]+")


def sanitize_filename(name: str, max_length: int = 100, fallback: str = FALLBACK_NAME) -> str:
    """
    Reduce name to a single safe path component (Windows and POSIX).

    Separators and characters Windows rejects become "_", control characters
    are removed, and leading/trailing dots are stripped, so "..", "../x" or
    "a/b" can never address another directory. Letters outside ASCII are kept
    (NFKC-normalized), so distinct names stay distinct.

    Args:
        name: Candidate file or folder name.
        max_length: Maximum length of the result.
        fallback: Returned when nothing usable is left; pass "" to detect that case.

    Example:
        >>> sanitize_filename("test<file>name")
        'test_file_name'
        >>> sanitize_filename("../etc/passwd")
        'etc_passwd'
    """
    if not name:
        return fallback
    text = unicodedata.normalize("NFKC", str(name)).translate(_PUNCTUATION)
    text = _CONTROL_CHARS.sub("", _UNSAFE_CHARS.sub("_", text))
    text = _SEPARATOR_RUNS.sub("_", text).strip("._ ")
    text = text[:max_length].rstrip("._ ")
    return text or fallback


def find_project_root(start: Path, marker_folder: str) -> Optional[Path]:
    """
    Walk up from start and return the first directory containing marker_folder.

    Args:
        start: Directory to start from.
        marker_folder: Name of a sub-folder that identifies the project root (e.g. "public").

    Returns:
        The project root, or None if no ancestor contains marker_folder.
    """
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / marker_folder).is_dir():
            return candidate
    return None


def write_asset_file(dest: Path, data: bytes) -> Path:
    """
    Write data to dest, creating parent folders as needed. Overwrites an existing file.

    Args:
        dest: Destination file path.
        data: Bytes to write.

    Returns:
        The destination path.

    Raises:
        OSError: If the folder cannot be created or the file cannot be written.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(data)
    return dest
