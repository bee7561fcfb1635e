"""Rule model: compiled ignore/include-hidden patterns and literal overrides."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

from catree import InvalidPatternError
from catree.config import Config
from catree.pattern import Pattern, compile_pattern, compile_patterns

logger = logging.getLogger(__name__)

HIDDEN_CATCH_ALL: Final[str] = ".*"


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Compiled selection rules for one run.

    Attributes:
        ignore_patterns: Ignore patterns, user list first, then the
            project type's extras. Never contains ``.*``.
        include_hidden_patterns: Patterns rescuing hidden files.
        hidden_catch_all: Pattern matching any name starting with ``.``.
    """

    ignore_patterns: tuple[Pattern, ...]
    include_hidden_patterns: tuple[Pattern, ...]
    hidden_catch_all: Pattern


@dataclass(frozen=True, slots=True)
class OverrideSet:
    """Literal include overrides.

    Attributes:
        files: Relative paths included unconditionally.
        directories: Relative directory prefixes that lift ``dir/*`` ignores.
    """

    files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()


def _dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def collect_ignore_sources(config: Config) -> list[str]:
    """Merge user and project-type ignore patterns into one ordered list.

    Args:
        config: Configuration snapshot.

    Returns:
        list[str]: De-duplicated pattern strings without ``.*``.
    """
    sources = list(config.ignore_patterns)
    if config.project_type:
        extra = config.project_specific_ignores.get(config.project_type)
        if extra is None:
            logger.warning(
                "No ignore patterns registered for project type '%s'",
                config.project_type,
            )
        else:
            sources.extend(extra)
    return [s for s in _dedupe(sources) if s != HIDDEN_CATCH_ALL]


def build_rule_set(config: Config) -> RuleSet:
    """Compile a :class:`RuleSet` from configuration.

    Args:
        config: Configuration snapshot.

    Returns:
        RuleSet: Immutable compiled rules.

    Raises:
        InvalidPatternError: On the first pattern that fails to compile, or
            an include-hidden pattern containing ``/``.
    """
    try:
        ignore = compile_patterns(collect_ignore_sources(config))
    except InvalidPatternError as exc:
        raise InvalidPatternError(
            exc.pattern, f"{exc.reason} (ignore patterns)"
        ) from exc

    try:
        hidden_sources = _dedupe(config.include_hidden_patterns)
        for source in hidden_sources:
            if "/" in source:
                raise InvalidPatternError(
                    source, "matches base names only and cannot contain '/'"
                )
        include_hidden = compile_patterns(hidden_sources)
    except InvalidPatternError as exc:
        raise InvalidPatternError(
            exc.pattern, f"{exc.reason} (include-hidden patterns)"
        ) from exc

    logger.debug(
        "Rule set: %d ignore, %d include-hidden patterns",
        len(ignore),
        len(include_hidden),
    )
    return RuleSet(
        ignore_patterns=ignore,
        include_hidden_patterns=include_hidden,
        hidden_catch_all=compile_pattern(HIDDEN_CATCH_ALL),
    )


def normalize_override(entry: str) -> str:
    """Return an override in POSIX relative form.

    Backslashes become ``/``, and a leading ``./``, trailing ``/`` and
    repeated separators are dropped. ``""`` means the entry names nothing.
    """
    posix = entry.strip().replace("\\", "/")
    if not posix:
        return ""
    normalized = str(PurePosixPath(posix))
    return "" if normalized == "." else normalized


def build_override_set(
    files: Iterable[str] = (),
    directories: Iterable[str] = (),
) -> OverrideSet:
    """Build an :class:`OverrideSet` from literal strings.

    Args:
        files: File overrides.
        directories: Directory overrides.

    Returns:
        OverrideSet: Normalised, de-duplicated overrides.
    """
    file_entries = [normalize_override(f) for f in files]
    dir_entries = [normalize_override(d) for d in directories]
    return OverrideSet(
        files=tuple(_dedupe(f for f in file_entries if f)),
        directories=tuple(_dedupe(d for d in dir_entries if d)),
    )


def classify_overrides(entries: Iterable[str], root: Path) -> OverrideSet:
    """Split include overrides into file and directory overrides.

    An entry naming an existing directory under *root*, or written with a
    trailing ``/``, becomes a directory override. Everything else is a
    file override.

    Args:
        entries: Override strings relative to *root*.
        root: Scan root.

    Returns:
        OverrideSet: Classified overrides.
    """
    files: list[str] = []
    directories: list[str] = []
    for entry in entries:
        stripped = entry.strip()
        if stripped.endswith(("/", "\\")) or (root / stripped).is_dir():
            directories.append(stripped)
        else:
            files.append(stripped)
    overrides = build_override_set(files, directories)
    logger.debug(
        "Overrides: files=%s directories=%s", overrides.files, overrides.directories
    )
    return overrides
