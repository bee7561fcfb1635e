"""catree — concatenate a directory tree into one Markdown or text document."""

__version__ = "0.1.0"


class CatreeError(Exception):
    """User-facing CLI error.

    Raised for invalid arguments, missing directories, and other
    recoverable input errors. The message is printed to stderr
    and the process exits with code 1.
    """


class ConfigError(CatreeError):
    """Configuration file is missing, unreadable, or malformed."""


class InvalidPatternError(CatreeError):
    """A configured glob pattern cannot be compiled.

    Attributes:
        pattern: The offending pattern string, verbatim.
        reason: Why compilation failed.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
