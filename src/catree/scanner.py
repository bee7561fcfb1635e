"""Directory traversal using os.scandir with explicit stack (DFS)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling scanner behavior.

    Attributes:
        max_depth: Maximum directory depth to descend into. ``0`` lists
            only files directly under the root; ``None`` means unlimited.
    """

    max_depth: int | None = None


def list_files(root: Path, options: ScanOptions | None = None) -> list[Path]:
    """List regular files under *root* in deterministic DFS order.

    Symbolic links are neither returned nor followed. Unreadable
    directories are skipped.

    Args:
        root: Root directory to scan.
        options: Scanner options. Defaults to ``ScanOptions()``.

    Returns:
        list[Path]: Discovered file paths.
    """
    scan_options = options or ScanOptions()

    if not root.is_dir():
        return []

    result: list[Path] = []

    # Stack items: (directory_path, depth)
    stack: list[tuple[Path, int]] = [(root, 0)]

    while stack:
        current_dir, depth = stack.pop()

        try:
            raw_entries = list(os.scandir(current_dir))
        except OSError:
            logger.debug("Cannot list directory: %s", current_dir)
            continue

        raw_entries.sort(key=lambda e: e.name)

        child_dirs: list[Path] = []

        for dir_entry in raw_entries:
            try:
                if dir_entry.is_symlink():
                    continue
                is_dir = dir_entry.is_dir(follow_symlinks=False)
                is_file = dir_entry.is_file(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                continue

            if is_dir:
                child_dirs.append(Path(dir_entry.path))
            elif is_file:
                result.append(Path(dir_entry.path))

        if scan_options.max_depth is not None and depth >= scan_options.max_depth:
            continue

        # Push children in reverse so first-alphabetical is popped first
        for child in reversed(child_dirs):
            stack.append((child, depth + 1))

    logger.debug("Found %d files under %s", len(result), root)
    return result


def read_file_contents(path: Path) -> str:
    """Read a file as strict UTF-8.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the bytes are not valid UTF-8.
    """
    return path.read_bytes().decode("utf-8")
