"""Tests for catree.cli — CLI entry point.

Tests here cover:
  - The full pipeline through ``run_catree`` on a realistic tree
  - Error paths (missing dir, invalid pattern, invalid -L, bad config)
  - ``main`` side effects (output file, stdout, --generate-config)
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from catree import CatreeError, ConfigError, InvalidPatternError
from catree.cli import main, run_catree


def _list(root: Path, *argv: str) -> list[str]:
    output = run_catree([str(root), "--list", *argv])
    return output.split("\n") if output else []


def _write_config(path: Path, **values: object) -> Path:
    lines = []
    for key, value in values.items():
        if isinstance(value, list):
            items = ", ".join(f"'{v}'" for v in value)
            lines.append(f"{key} = [{items}]")
        else:
            lines.append(f"{key} = '{value}'")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestRunCatree:
    # ------------------------------------------------------------------
    # Full-stack checks
    # ------------------------------------------------------------------
    def test_default_selection(self, project_tree: Path) -> None:
        assert _list(project_tree) == [
            "README.md",
            "node_modules/pkg/index.js",
            "src/main.py",
            "src/util.py",
            "temp/notes.txt",
        ]

    def test_markdown_output(self, project_tree: Path) -> None:
        output = run_catree([str(project_tree)])
        assert "# src/main.py\n\n```python\nprint('main')\n```\n" in output
        assert "# README.md" in output
        assert "log line" not in output
        assert "SECRET" not in output

    def test_plain_output(self, project_tree: Path) -> None:
        output = run_catree([str(project_tree), "--plain"])
        assert "File: src/main.py\n" + "=" * 40 in output
        assert "```" not in output

    def test_ignore_option_adds_pattern(self, project_tree: Path) -> None:
        selected = _list(project_tree, "-I", "*.md", "-I", "src/*")
        assert selected == ["node_modules/pkg/index.js", "temp/notes.txt"]

    def test_include_hidden(self, project_tree: Path) -> None:
        selected = _list(project_tree, "--include-hidden", ".env")
        assert ".env" in selected
        assert ".gitignore" not in selected

    def test_include_file_override(self, project_tree: Path) -> None:
        selected = _list(project_tree, "--include", "app.log")
        assert "app.log" in selected
        assert "temp/trace.log" not in selected

    def test_project_type(self, project_tree: Path) -> None:
        selected = _list(project_tree, "--project-type", "node")
        assert "node_modules/pkg/index.js" not in selected
        assert "src/main.py" in selected

    def test_directory_override_lifts_directory_ignore(
        self, project_tree: Path
    ) -> None:
        selected = _list(
            project_tree, "--project-type", "node", "--include", "node_modules"
        )
        assert "node_modules/pkg/index.js" in selected

    def test_directory_override_keeps_extension_ignore(
        self, project_tree: Path
    ) -> None:
        selected = _list(project_tree, "-I", "temp/*", "--include", "temp")
        assert "temp/notes.txt" in selected
        assert "temp/trace.log" not in selected

    def test_level_limits_depth(self, project_tree: Path) -> None:
        assert _list(project_tree, "-L", "1") == ["README.md"]

    def test_config_file(
        self, project_tree: Path, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        config = _write_config(
            tmp_path_factory.mktemp("cfg") / "catree.toml",
            input_dir=str(project_tree),
            ignore_patterns=["*.py", "node_modules/*"],
            include_hidden_patterns=[".gitignore"],
        )
        output = run_catree(["-c", str(config), "--list"])
        assert output.split("\n") == [
            ".gitignore",
            "README.md",
            "app.log",
            "temp/notes.txt",
            "temp/trace.log",
        ]

    def test_positional_directory_overrides_config(
        self, project_tree: Path, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        work = tmp_path_factory.mktemp("cfg")
        config = _write_config(work / "catree.toml", input_dir=str(work / "elsewhere"))
        output = run_catree([str(project_tree), "-c", str(config), "--list"])
        assert "README.md" in output.split("\n")
        assert "catree.toml" not in output

    def test_config_project_type_extends_presets(
        self, project_tree: Path, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        config = tmp_path_factory.mktemp("cfg") / "catree.toml"
        config.write_text(
            "[project_specific_ignores]\ndocs = ['*.md']\n", encoding="utf-8"
        )
        selected = _list(project_tree, "-c", str(config), "--project-type", "docs")
        assert "README.md" not in selected
        assert "src/main.py" in selected

    def test_title_option(self, project_tree: Path) -> None:
        output = run_catree([str(project_tree), "--title", "My Project"])
        assert output.startswith("# My Project\n\n# README.md\n")

    def test_title_option_plain(self, project_tree: Path) -> None:
        output = run_catree([str(project_tree), "--plain", "--title", "My Project"])
        assert output.startswith("My Project\n\nFile: README.md\n")

    def test_no_fences_option(self, project_tree: Path) -> None:
        output = run_catree([str(project_tree), "--no-fences"])
        assert "# src/main.py\n\nprint('main')\n\n\n" in output
        assert "```" not in output

    def test_empty_directory(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        assert run_catree([str(empty)]) == ""

    def test_undecodable_file_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "ok.txt").write_text("fine")
        (tmp_path / "blob.dat").write_bytes(b"\xff\xfe\xfd")
        output = run_catree([str(tmp_path)])
        assert "# ok.txt" in output
        assert "blob.dat" not in output

    # ------------------------------------------------------------------
    # Error paths
    # ------------------------------------------------------------------
    def test_nonexistent_directory(self) -> None:
        with pytest.raises(CatreeError, match="not a directory"):
            run_catree(["/nonexistent/path/xyz"])

    def test_invalid_pattern(self, project_tree: Path) -> None:
        with pytest.raises(InvalidPatternError, match="Invalid pattern"):
            run_catree([str(project_tree), "-I", "bad\\"])

    def test_invalid_pattern_reported_before_traversal(self) -> None:
        with pytest.raises(InvalidPatternError):
            run_catree(["/nonexistent/path/xyz", "--include-hidden", "!x"])

    def test_include_hidden_with_slash(self, project_tree: Path) -> None:
        with pytest.raises(InvalidPatternError, match="cannot contain"):
            run_catree([str(project_tree), "--include-hidden", "config/.env"])

    def test_unknown_project_type(self, project_tree: Path) -> None:
        with pytest.raises(CatreeError, match="Unknown project type") as excinfo:
            run_catree([str(project_tree), "--project-type", "cobol"])
        assert "'cobol'" in str(excinfo.value)
        assert "python" in str(excinfo.value)

    @pytest.mark.parametrize("level", ["0", "-1"])
    def test_invalid_level(self, tmp_path: Path, level: str) -> None:
        with pytest.raises(CatreeError, match="Invalid level"):
            run_catree([str(tmp_path), "-L", level])

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            run_catree([str(tmp_path), "-c", str(tmp_path / "missing.toml")])

    def test_format_flags_are_exclusive(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            run_catree([str(tmp_path), "--plain", "--markdown"])


def _run_main(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["catree", *argv])
    main()


class TestMain:
    def test_writes_to_output_file(
        self,
        project_tree: Path,
        tmp_path_factory: pytest.TempPathFactory,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        out_file = tmp_path_factory.mktemp("out") / "result.md"
        _run_main(monkeypatch, str(project_tree), "-o", str(out_file))
        assert "# src/main.py" in out_file.read_text(encoding="utf-8")
        assert f"Output written to: {out_file}" in capsys.readouterr().out

    def test_writes_to_configured_output_dir(
        self,
        project_tree: Path,
        tmp_path_factory: pytest.TempPathFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        work = tmp_path_factory.mktemp("work")
        out_dir = work / "dumps"
        config = _write_config(work / "catree.toml", output_dir=str(out_dir))
        _run_main(monkeypatch, str(project_tree), "-c", str(config), "--plain")
        expected = out_dir / f"{project_tree.name}_catree_output.txt"
        assert "File: README.md" in expected.read_text(encoding="utf-8")

    def test_stdout(
        self,
        project_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _run_main(monkeypatch, str(project_tree), "--stdout")
        assert "# README.md" in capsys.readouterr().out

    def test_list_prints_paths(
        self,
        project_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _run_main(monkeypatch, str(project_tree), "--list")
        assert "src/main.py\n" in capsys.readouterr().out

    def test_no_files_found(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "only.log").write_text("x")
        _run_main(monkeypatch, str(tmp_path))
        assert capsys.readouterr().out == "No files found\n"
        assert list(tmp_path.iterdir()) == [tmp_path / "only.log"]

    def test_error_exits_with_code_1(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as excinfo:
            _run_main(monkeypatch, str(tmp_path), "-I", "!negated")
        assert excinfo.value.code == 1
        assert capsys.readouterr().err.startswith("catree: Invalid pattern")

    def test_generate_config(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = tmp_path / "cfg" / "config.toml"
        _run_main(monkeypatch, "--generate-config", "-c", str(target))
        assert target.exists()
        assert "Generated default config" in capsys.readouterr().out

        _run_main(monkeypatch, "--generate-config", "-c", str(target))
        assert "already exists" in capsys.readouterr().out

    def test_default_output_goes_to_desktop(
        self,
        project_tree: Path,
        isolated_home: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.chdir(project_tree)
        _run_main(monkeypatch)
        expected = isolated_home / "Desktop" / f"{project_tree.name}_catree_output.md"
        assert "# src/main.py" in expected.read_text(encoding="utf-8")
        assert f"Output written to: {expected}" in capsys.readouterr().out
        assert not list(project_tree.glob("*_catree_output.*"))

    def test_output_inside_root_is_not_read_back(
        self,
        project_tree: Path,
        tmp_path_factory: pytest.TempPathFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        config = _write_config(
            tmp_path_factory.mktemp("cfg") / "catree.toml", output_dir="."
        )
        monkeypatch.chdir(project_tree)
        _run_main(monkeypatch, "-c", str(config))
        _run_main(monkeypatch, "-c", str(config))
        output_file = project_tree / f"{project_tree.name}_catree_output.md"
        text = output_file.read_text(encoding="utf-8")
        assert text.count("# README.md\n") == 1
        assert "_catree_output" not in text

    def test_output_file_inside_root_is_not_read_back(
        self,
        project_tree: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        out_file = project_tree / "dump.md"
        _run_main(monkeypatch, str(project_tree), "-o", str(out_file))
        _run_main(monkeypatch, str(project_tree), "-o", str(out_file))
        assert "# dump.md" not in out_file.read_text(encoding="utf-8")
