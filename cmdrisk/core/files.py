"""Filesystem facts for the paths a command would touch.

This is the only part of the engine that reads the disk. It is kept out of
Analyzer.analyze() so that classification stays pure and cheap.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from ..types import FileInfo

logger = logging.getLogger(__name__)


def _resolve(path_str: str, working_dir: Optional[str]) -> Path:
    path = Path(path_str).expanduser()
    if working_dir and not path.is_absolute():
        path = Path(working_dir).expanduser() / path
    return path


def count_files(directory: Path) -> int:
    """Count every entry below directory, the directory itself included."""
    count = 1
    for _, dirs, filenames in os.walk(directory):
        count += len(dirs) + len(filenames)
    return count


def collect_file_info(
    paths: Iterable[str],
    max_files: Optional[int] = None,
    working_dir: Optional[str] = None,
) -> List[FileInfo]:
    """
    Stat each path and describe it.

    Paths that do not exist or cannot be read are skipped silently. Dynamic
    paths ($VAR, globs) are not expanded and so are usually skipped too.

    Args:
        paths: Paths as they appeared in the command
        max_files: Stop after this many entries (None for no limit)
        working_dir: Base for relative paths (default: process cwd)

    Returns:
        List of FileInfo in the order the paths were given
    """
    files: List[FileInfo] = []
    for path_str in paths:
        if max_files is not None and len(files) >= max_files:
            logger.debug(f"Affected file limit {max_files} reached")
            break

        path = _resolve(path_str, working_dir)
        try:
            stat = path.stat()
        except (OSError, ValueError):
            continue

        is_dir = path.is_dir()
        files.append(
            FileInfo(
                path=str(path),
                size=stat.st_size,
                is_dir=is_dir,
                file_count=count_files(path) if is_dir else 0,
            )
        )
    return files
