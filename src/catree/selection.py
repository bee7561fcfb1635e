"""File selection: decide, per candidate, whether it belongs in the output."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from catree.rules import OverrideSet, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Candidate:
    """A discovered file paired with its path relative to the scan root.

    Attributes:
        path: Filesystem path as discovered.
        relative_path: POSIX path relative to the root, or the path
            itself when it lies outside the root.
    """

    path: Path
    relative_path: str

    @classmethod
    def from_path(cls, path: Path, root: Path) -> Candidate:
        """Build a candidate for *path* under *root*."""
        try:
            rel = path.relative_to(root)
        except ValueError:
            rel = path
        return cls(path=path, relative_path=rel.as_posix())


def _has_prefix(relative_path: str, directory: str) -> bool:
    """Return whether *directory* is a whole-segment prefix of the path."""
    prefix = PurePosixPath(directory).parts
    return PurePosixPath(relative_path).parts[: len(prefix)] == prefix


def should_include(relative_path: str, rules: RuleSet, overrides: OverrideSet) -> bool:
    """Decide whether one file is included.

    Precedence:
      1. An exact file override includes the file unconditionally.
      2. Hidden files (base name starting with ``.``) need an
         include-hidden match.
      3. Any ignore pattern matching the relative path excludes the file,
         except that ``dir/*`` patterns are skipped for files under a
         directory override.

    Args:
        relative_path: POSIX path relative to the scan root.
        rules: Compiled rule set.
        overrides: Literal include overrides.

    Returns:
        bool: ``True`` when the file is included.
    """
    if relative_path in overrides.files:
        return True

    name = PurePosixPath(relative_path).name
    is_hidden = rules.hidden_catch_all.matches_name(name)
    include_hidden_match = any(
        pattern.matches_name(name) for pattern in rules.include_hidden_patterns
    )
    dir_included = any(
        _has_prefix(relative_path, directory) for directory in overrides.directories
    )

    ignored_by_pattern = any(
        pattern.matches_path(relative_path)
        for pattern in rules.ignore_patterns
        if not (dir_included and pattern.is_directory_glob)
    )

    return (not is_hidden or include_hidden_match) and not ignored_by_pattern


def select_files(
    paths: Iterable[Path],
    root: Path,
    rules: RuleSet,
    overrides: OverrideSet,
) -> list[Candidate]:
    """Filter discovered paths through the selection rules.

    Args:
        paths: Candidate file paths, in any order.
        root: Scan root used to compute relative paths.
        rules: Compiled rule set.
        overrides: Literal include overrides.

    Returns:
        list[Candidate]: Included candidates sorted by relative path.
    """
    selected: list[Candidate] = []
    total = 0
    for path in paths:
        total += 1
        candidate = Candidate.from_path(path, root)
        if should_include(candidate.relative_path, rules, overrides):
            selected.append(candidate)
        else:
            logger.debug("Excluded: %s", candidate.relative_path)

    selected.sort(key=lambda c: c.relative_path)
    logger.info("Selected %d of %d files", len(selected), total)
    return selected
