"""Small helpers for reading and writing values in files."""

from __future__ import annotations

import os
import re

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def _open_for_write(path: str, flags: int) -> int:
    return os.open(path, flags, 0o644)


def write_string_to_file(filename: str | os.PathLike, content: str) -> None:
    """Write ``content`` to ``filename``, creating it with mode 0644 or truncating it."""
    with open(filename, "w", encoding="utf-8", opener=_open_for_write) as handle:
        handle.write(content)


def read_string_from_file(filename: str | os.PathLike) -> str:
    """Return the file's contents with surrounding whitespace removed."""
    with open(filename, encoding="utf-8") as handle:
        return handle.read().strip()


def write_int_to_file(filename: str | os.PathLike, value: int) -> None:
    write_string_to_file(filename, str(value))


def read_int_from_file(filename: str | os.PathLike) -> int:
    """Read a decimal integer from a file; raise ValueError if it holds none."""
    content = read_string_from_file(filename)
    if not _INT_PATTERN.fullmatch(content):
        raise ValueError(f"invalid integer {content!r} in {os.fspath(filename)}")
    return int(content)


def file_exists(filename: str | os.PathLike) -> bool:
    try:
        os.stat(filename)
    except (OSError, ValueError):
        return False
    return True


def ensure_dir(path: str | os.PathLike) -> None:
    """Create ``path`` and its parents with mode 0755 if missing."""
    os.makedirs(path, 0o755, exist_ok=True)