"""Code-fence language hints by file name and extension."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

_FILENAME_HINTS: Final[dict[str, str]] = {
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
    "CMakeLists.txt": "cmake",
    "Gemfile": "ruby",
    "Rakefile": "ruby",
    "Jenkinsfile": "groovy",
    ".gitignore": "gitignore",
    ".bashrc": "bash",
    ".zshrc": "zsh",
    ".env": "dotenv",
}

_EXTENSION_HINTS: Final[dict[str, str]] = {
    ".py": "python",
    ".pyi": "python",
    ".rs": "rust",
    ".go": "go",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".kt": "kotlin",
    ".scala": "scala",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "zsh",
    ".ps1": "powershell",
    ".sql": "sql",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".md": "markdown",
    ".rst": "rst",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".ini": "ini",
    ".cfg": "ini",
    ".xml": "xml",
    ".lua": "lua",
    ".r": "r",
    ".dart": "dart",
    ".vue": "vue",
    ".proto": "protobuf",
}


def detect_language(path: str) -> str:
    """Return a code-fence language for a path, or ``""`` if unknown.

    Exact file names take precedence over extensions.
    """
    pure = PurePosixPath(path)
    if pure.name in _FILENAME_HINTS:
        return _FILENAME_HINTS[pure.name]
    return _EXTENSION_HINTS.get(pure.suffix.lower(), "")
