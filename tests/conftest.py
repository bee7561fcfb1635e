"""Shared fixtures for catree tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point ``HOME`` at an empty directory so no user config is picked up."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Create a small project tree with noise files.

    Structure::

        root/
        ├── .env
        ├── .gitignore
        ├── README.md
        ├── app.log
        ├── node_modules/
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── main.py
        │   └── util.py
        └── temp/
            ├── notes.txt
            └── trace.log
    """
    (tmp_path / ".env").write_text("SECRET=1\n")
    (tmp_path / ".gitignore").write_text("*.log\n")
    (tmp_path / "README.md").write_text("# readme\n")
    (tmp_path / "app.log").write_text("log line\n")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("module.exports = 1;\n")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("print('main')\n")
    (tmp_path / "src" / "util.py").write_text("def util():\n    pass\n")
    (tmp_path / "temp").mkdir()
    (tmp_path / "temp" / "notes.txt").write_text("notes\n")
    (tmp_path / "temp" / "trace.log").write_text("trace\n")
    return tmp_path
