"""
Log File Loader

Reads a Quake III server log from disk, either through a buffered read or a
read-only memory map. Line endings are normalized to "\\n" here so the
grammar only ever sees one terminator.
"""

import logging
import mmap
from collections.abc import Iterator
from pathlib import Path

from fraglog.core.utils import format_file_size

logger = logging.getLogger(__name__)


def _check_log_path(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Log file not found: {path}")
    if path.is_dir():
        raise IsADirectoryError(f"Expected a log file, got a directory: {path}")


def normalize_newlines(text: str) -> str:
    """Turn CRLF (and lone CR) line endings into LF."""
    if "\r" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n")


def read_log_bytes(path: str | Path, use_mmap: bool = False) -> bytes:
    """
    Read the raw bytes of a log file.

    With use_mmap the file is mapped read-only. The caller must make sure no
    other process rewrites the file while it is being read.
    """
    path = Path(path)
    _check_log_path(path)

    with open(path, "rb") as f:
        if not use_mmap:
            return f.read()

        # Zero-length files cannot be mapped
        if path.stat().st_size == 0:
            return b""
        with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
            return mapped[:]


def read_log(
    path: str | Path,
    use_mmap: bool = False,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Read a whole log file as text.

    Args:
        path: Path to the log file
        use_mmap: Map the file into memory instead of a buffered read
        encoding: Text encoding of the log
        errors: Codec error handler for undecodable bytes

    Returns:
        Log content with "\\n" line endings

    Raises:
        FileNotFoundError: If the file does not exist
        IsADirectoryError: If the path is a directory
    """
    path = Path(path)
    raw = read_log_bytes(path, use_mmap=use_mmap)
    mode = "mmap" if use_mmap else "buffered"
    logger.info(f"Read {path.name} ({format_file_size(len(raw))}, {mode})")
    return normalize_newlines(raw.decode(encoding, errors=errors))


def iter_log_lines(
    path: str | Path,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> Iterator[str]:
    """
    Lazily yield the lines of a log file, terminators stripped.

    Each yielded line is an independent string, safe to keep after the next
    line is read. A missing file is reported at call time, not on first
    iteration.
    """
    path = Path(path)
    _check_log_path(path)
    return _iter_lines(path, encoding, errors)


def _iter_lines(path: Path, encoding: str, errors: str) -> Iterator[str]:
    with open(path, encoding=encoding, errors=errors, newline="") as f:
        for line in f:
            yield line.rstrip("\r\n")
