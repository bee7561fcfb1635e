"""Glob pattern compilation and matching via pathspec."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from pathspec import GitIgnoreSpec

from catree import InvalidPatternError

_DIRECTORY_GLOB_SUFFIX = "/*"


@dataclass(frozen=True, slots=True)
class Pattern:
    """A compiled glob pattern.

    Uses gitignore-style wildmatch: ``*`` stays inside one path segment,
    ``**`` spans segments, a pattern without ``/`` matches at any depth,
    and ``dir/*`` matches everything below ``dir``. Matching is
    case-sensitive.

    Attributes:
        source: Literal pattern string as configured.
    """

    source: str
    _spec: GitIgnoreSpec = field(compare=False, repr=False)

    @property
    def is_directory_glob(self) -> bool:
        """Whether the literal pattern ends in ``/*``."""
        return self.source.rstrip().endswith(_DIRECTORY_GLOB_SUFFIX)

    def matches_name(self, name: str) -> bool:
        """Return whether a bare file name matches.

        Args:
            name: Base name without path separators.

        Returns:
            bool: ``True`` on match.
        """
        return self._spec.match_file(name)

    def matches_path(self, path: str) -> bool:
        """Return whether a POSIX relative path matches.

        Args:
            path: Slash-separated path relative to the scan root.

        Returns:
            bool: ``True`` on match.
        """
        return self._spec.match_file(path)


def _glob_syntax_error(source: str) -> str | None:
    """Return why a bracket or star form would compile to a dead rule."""
    i = 0
    length = len(source)
    while i < length:
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == "[":
            i = _find_bracket_end(source, i)
            if i < 0:
                return "unclosed '[' character class"
            continue
        if char == "*":
            start = i
            while i < length and source[i] == "*":
                i += 1
            run = i - start
            if run > 2:
                return "more than two consecutive '*'"
            if run == 2:
                before_ok = start == 0 or source[start - 1] == "/"
                after_ok = i == length or source[i] == "/"
                if not (before_ok and after_ok):
                    return "'**' must be a whole path segment"
            continue
        i += 1
    return None


def _find_bracket_end(source: str, start: int) -> int:
    """Return the index after the ``]`` closing the class at *start*, or -1."""
    i = start + 1
    if i < len(source) and source[i] in "!^":
        i += 1
    # A leading ']' is a literal member of the class.
    if i < len(source) and source[i] == "]":
        i += 1
    while i < len(source):
        if source[i] == "\\":
            i += 2
            continue
        if source[i] == "]":
            return i + 1
        i += 1
    return -1


def compile_pattern(source: str) -> Pattern:
    """Compile a glob string into a :class:`Pattern`.

    Args:
        source: Pattern string.

    Returns:
        Pattern: The compiled pattern.

    Raises:
        InvalidPatternError: If the string is empty, comment- or
            negation-shaped, holds an unclosed ``[`` or a misplaced
            ``**``, or is rejected by the glob compiler.
    """
    stripped = source.strip()
    if not stripped:
        raise InvalidPatternError(source, "pattern is empty")
    if stripped.startswith("#"):
        raise InvalidPatternError(source, "'#' starts a comment, escape it as '\\#'")
    if stripped.startswith("!"):
        raise InvalidPatternError(source, "negated patterns are not supported")
    if stripped == "/":
        raise InvalidPatternError(source, "a bare '/' matches nothing")
    reason = _glob_syntax_error(stripped)
    if reason is not None:
        raise InvalidPatternError(source, reason)

    try:
        spec = GitIgnoreSpec.from_lines([source])
    except ValueError as exc:
        raise InvalidPatternError(source, str(exc)) from exc
    return Pattern(source=source, _spec=spec)


def compile_patterns(sources: Iterable[str]) -> tuple[Pattern, ...]:
    """Compile several patterns, failing on the first invalid one."""
    return tuple(compile_pattern(source) for source in sources)
