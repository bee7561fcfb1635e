"""Extra ignore patterns registered per project type."""

from __future__ import annotations

from typing import Final

PRESETS: Final[dict[str, list[str]]] = {
    "python": [
        "**/__pycache__/*",
        "*.pyc",
        ".venv/*",
        "venv/*",
        ".pytest_cache/*",
        ".mypy_cache/*",
        "dist/*",
        "build/*",
        "*.egg-info/*",
    ],
    "node": [
        "**/node_modules/*",
        ".next/*",
        "dist/*",
        ".cache/*",
        "coverage/*",
        "package-lock.json",
    ],
    "rust": [
        "target/*",
        "Cargo.lock",
    ],
    "go": [
        "vendor/*",
        "bin/*",
        "go.sum",
    ],
    "java": [
        "target/*",
        "build/*",
        ".gradle/*",
        "*.class",
        "*.jar",
    ],
}


def get_preset_patterns(name: str) -> list[str]:
    """Return the ignore patterns registered for a project type.

    Args:
        name: Project type name.

    Returns:
        list[str]: A fresh copy of the pattern list.

    Raises:
        ValueError: If ``name`` is not a known project type.
    """
    if name not in PRESETS:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown project type '{name}'. Known types: {known}")
    return list(PRESETS[name])
