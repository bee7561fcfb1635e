"""TOML configuration: locate, load, validate, and generate defaults."""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Literal

from catree import ConfigError
from catree.preset import PRESETS, get_preset_patterns

logger = logging.getLogger(__name__)

OutputFormat = Literal["markdown", "text"]

_OUTPUT_FORMATS: Final[tuple[str, ...]] = ("markdown", "text")

DESKTOP_PLACEHOLDER: Final[str] = "{DESKTOP}"

DEFAULT_IGNORE_PATTERNS: Final[tuple[str, ...]] = (
    ".git/*",
    ".hg/*",
    ".svn/*",
    ".idea/*",
    ".vscode/*",
    "*.log",
    "*.tmp",
    "*.swp",
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.ico",
    "*.pdf",
    "*.zip",
    "*.tar.gz",
)

DEFAULT_CONFIG_TOML: Final[str] = """\
# catree configuration

# Directory to scan. "." means the current working directory.
input_dir = "."

# Where the output document is written. {DESKTOP} expands to ~/Desktop.
output_dir = "{DESKTOP}"

# "markdown" or "text"
output_format = "markdown"

# Glob patterns matched against paths relative to input_dir.
# A pattern ending in "/*" ignores a whole directory tree.
ignore_patterns = [
    ".git/*",
    ".hg/*",
    ".svn/*",
    ".idea/*",
    ".vscode/*",
    "*.log",
    "*.tmp",
    "*.swp",
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.ico",
    "*.pdf",
    "*.zip",
    "*.tar.gz",
]

# Selects an entry of [project_specific_ignores], e.g. "python" or "rust".
# project_type = "python"

# Hidden files (names starting with ".") are skipped unless matched here.
include_hidden_patterns = [".gitignore"]

# Relative paths always included. Directories only lift "dir/*" ignores.
include_overrides = []

# Extra ignore patterns per project type. Built-in types are python, node,
# rust, go and java; an entry here replaces the built-in list for its type.
[project_specific_ignores]
# rust = ["target/*", "Cargo.lock", "benches/data/*"]
"""


def _default_project_ignores() -> dict[str, list[str]]:
    return {name: get_preset_patterns(name) for name in PRESETS}


@dataclass(frozen=True, slots=True)
class Config:
    """Resolved configuration snapshot for one run.

    Attributes:
        input_dir: Directory to scan.
        output_dir: Output directory, may contain ``{DESKTOP}`` or ``~``.
        output_format: ``markdown`` or ``text``.
        ignore_patterns: Ordered ignore glob patterns.
        project_type: Key into ``project_specific_ignores`` or ``None``.
        project_specific_ignores: Project type to extra ignore patterns.
        include_hidden_patterns: Globs that rescue hidden files.
        include_overrides: Relative paths that bypass ignore rules.
    """

    input_dir: str = "."
    output_dir: str = DESKTOP_PLACEHOLDER
    output_format: OutputFormat = "markdown"
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    project_type: str | None = None
    project_specific_ignores: dict[str, list[str]] = field(
        default_factory=_default_project_ignores
    )
    include_hidden_patterns: tuple[str, ...] = ()
    include_overrides: tuple[str, ...] = ()

    def with_overrides(self, **changes: Any) -> Config:
        """Return a copy with the given fields replaced.

        ``None`` values are ignored so unset CLI options keep the
        configured value.
        """
        applied = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **applied)

    def resolved_output_dir(self, home: Path | None = None) -> Path:
        """Expand ``{DESKTOP}`` and ``~`` in ``output_dir``.

        Args:
            home: Home directory override, defaults to ``Path.home()``.

        Returns:
            Path: Expanded output directory.
        """
        home_dir = home or Path.home()
        raw = self.output_dir.replace(DESKTOP_PLACEHOLDER, str(home_dir / "Desktop"))
        if raw == "~" or raw.startswith("~/"):
            return home_dir / raw[2:]
        return Path(raw)


def default_config_path(home: Path | None = None) -> Path:
    """Return ``~/.config/catree/config.toml``.

    Args:
        home: Home directory override, defaults to ``Path.home()``.
    """
    home_dir = home or Path.home()
    return home_dir / ".config" / "catree" / "config.toml"


def load_config(path: str | Path | None = None, home: Path | None = None) -> Config:
    """Read and validate a TOML configuration file.

    Args:
        path: Explicit config file. When ``None`` the default location is
            tried and built-in defaults are used if it does not exist.
        home: Home directory override for the default location.

    Returns:
        Config: Parsed configuration.

    Raises:
        ConfigError: If an explicit file is missing, or any file is
            unreadable, not valid TOML, or holds wrongly typed values.
    """
    if path is None:
        config_path = default_config_path(home)
        if not config_path.exists():
            logger.debug("No config at %s, using built-in defaults", config_path)
            return Config()
    else:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found at '{config_path}'. "
                "To generate a default config, run: catree --generate-config"
            )

    try:
        raw = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read config file '{config_path}': {exc}") from exc

    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Failed to parse config file '{config_path}': {exc}"
        ) from exc

    logger.debug("Loaded config from %s", config_path)
    return _config_from_mapping(data, config_path)


def _config_from_mapping(data: dict[str, Any], source: Path) -> Config:
    known = {f.name for f in dataclasses.fields(Config)}
    for key in sorted(set(data) - known):
        logger.warning("Unknown config key '%s' in %s", key, source)

    kwargs: dict[str, Any] = {}

    for key in ("input_dir", "output_dir"):
        if key in data:
            kwargs[key] = _expect_str(data[key], key, source)

    if "output_format" in data:
        output_format = _expect_str(data["output_format"], "output_format", source)
        if output_format not in _OUTPUT_FORMATS:
            raise ConfigError(
                f"{source}: 'output_format' must be one of "
                f"{', '.join(_OUTPUT_FORMATS)}, got '{output_format}'"
            )
        kwargs["output_format"] = output_format

    if "project_type" in data:
        kwargs["project_type"] = _expect_str(
            data["project_type"], "project_type", source
        )

    for key in ("ignore_patterns", "include_hidden_patterns", "include_overrides"):
        if key in data:
            kwargs[key] = tuple(_expect_str_list(data[key], key, source))

    if "project_specific_ignores" in data:
        table = data["project_specific_ignores"]
        if not isinstance(table, dict):
            raise ConfigError(f"{source}: 'project_specific_ignores' must be a table")
        merged = _default_project_ignores()
        for name, patterns in table.items():
            merged[name] = _expect_str_list(
                patterns, f"project_specific_ignores.{name}", source
            )
        kwargs["project_specific_ignores"] = merged

    return Config(**kwargs)


def _expect_str(value: Any, key: str, source: Path) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{source}: '{key}' must be a string")
    return value


def _expect_str_list(value: Any, key: str, source: Path) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{source}: '{key}' must be a list of strings")
    return list(value)


def generate_default_config(path: Path | None = None) -> bool:
    """Write the default configuration template.

    Args:
        path: Target file, defaults to :func:`default_config_path`.

    Returns:
        bool: ``True`` if written, ``False`` if the file already existed.

    Raises:
        ConfigError: If the directory or file cannot be written.
    """
    config_path = path or default_config_path()
    if config_path.exists():
        logger.info("Config file already exists at %s", config_path)
        return False
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config file '{config_path}': {exc}") from exc
    logger.info("Generated default config file at %s", config_path)
    return True
