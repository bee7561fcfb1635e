"""CLI entry point for catree — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from catree import CatreeError, __version__
from catree.aggregator import FileContent, aggregate_contents
from catree.config import (
    Config,
    default_config_path,
    generate_default_config,
    load_config,
)
from catree.rules import build_rule_set, classify_overrides
from catree.scanner import ScanOptions, list_files
from catree.selection import select_files

logger = logging.getLogger(__name__)

_OUTPUT_SUFFIXES = {"markdown": "md", "text": "txt"}


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of one pipeline run.

    Attributes:
        output: Rendered document, or ``""`` when no file was selected.
        root: Resolved scan root.
        config: Effective configuration after CLI overrides.
        output_path: File the document goes to, ``None`` for stdout.
    """

    output: str
    root: Path
    config: Config
    output_path: Path | None = None


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``catree`` command.
    """
    parser = argparse.ArgumentParser(
        prog="catree",
        description="concatenate the files of a directory tree into one document",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Root directory to scan (default: input_dir from config)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: ~/.config/catree/config.toml)",
    )
    parser.add_argument(
        "--generate-config",
        action="store_true",
        dest="generate_config",
        help="Write a default config file and exit",
    )

    # selection rules
    parser.add_argument(
        "-I",
        "--ignore",
        action="append",
        default=[],
        dest="ignore",
        help="Add an ignore pattern (can be specified multiple times)",
    )
    parser.add_argument(
        "--include-hidden",
        action="append",
        default=None,
        dest="include_hidden",
        help="Include hidden files whose name matches pattern "
        "(replaces config list)",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        dest="include",
        help="Force-include a file or directory by relative path "
        "(replaces config list)",
    )
    parser.add_argument(
        "--project-type",
        type=str,
        default=None,
        dest="project_type",
        help="Apply project-specific ignore patterns (e.g. python, node, rust)",
    )
    parser.add_argument(
        "-L",
        "--level",
        type=int,
        default=None,
        dest="max_depth",
        help="Max directory depth to scan (1 = root files only)",
    )

    # output
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument(
        "--markdown",
        action="store_const",
        const="markdown",
        dest="output_format",
        help="Render Markdown with code fences",
    )
    fmt.add_argument(
        "--plain",
        action="store_const",
        const="text",
        dest="output_format",
        help="Render plain text",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Put a title line at the top of the document",
    )
    parser.add_argument(
        "--no-fences",
        action="store_false",
        dest="code_fences",
        help="Markdown only: do not wrap file bodies in code fences",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        dest="output_file",
        help="Write output to this file instead of the configured output_dir",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Write output to stdout",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_only",
        help="Print selected relative paths instead of contents",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run_catree(argv: list[str] | None = None) -> str:
    """Run catree with provided CLI args and return the rendered document.

    Writes nothing; ``main`` owns all output side effects.

    Args:
        argv: Command-line argument list without program name.

    Returns:
        str: Rendered output, ``""`` when no file was selected.

    Raises:
        CatreeError: On any user-facing validation or configuration error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args).output


def _apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Layer CLI options over the loaded configuration.

    Args:
        config: Loaded configuration.
        args: Parsed CLI namespace.

    Returns:
        Config: Effective configuration.
    """
    ignore = config.ignore_patterns + tuple(args.ignore) if args.ignore else None
    return config.with_overrides(
        input_dir=args.directory,
        output_format=args.output_format,
        project_type=args.project_type,
        ignore_patterns=ignore,
        include_hidden_patterns=(
            tuple(args.include_hidden) if args.include_hidden is not None else None
        ),
        include_overrides=tuple(args.include) if args.include is not None else None,
    )


def _validate_project_type(config: Config) -> None:
    """Reject a ``--project-type`` with no configured or built-in patterns.

    Raises:
        CatreeError: If the type is unknown.
    """
    name = config.project_type
    if name is None or name in config.project_specific_ignores:
        return
    known = ", ".join(sorted(config.project_specific_ignores))
    raise CatreeError(f"Unknown project type '{name}'. Known types: {known}")


def _resolve_root(directory: str) -> Path:
    """Resolve directory and validate it is a directory.

    Raises:
        CatreeError: If directory does not exist or is not a directory.
    """
    root = Path(directory).expanduser().resolve()
    if not root.is_dir():
        raise CatreeError(f"'{directory}' is not a directory")
    return root


def _translate_level_to_scan_depth(level_arg: int | None) -> int | None:
    """Translate ``-L`` level semantics to scanner depth.

    Raises:
        CatreeError: If level is less than 1.
    """
    if level_arg is None:
        return None
    if level_arg < 1:
        raise CatreeError("Invalid level, must be greater than 0.")
    return level_arg - 1


def _format_output(
    config: Config, contents: list[FileContent], args: argparse.Namespace
) -> str:
    if config.output_format == "text":
        from catree.formatter.text import TextOptions, format_text

        return format_text(contents, TextOptions(title=args.title))

    from catree.formatter.markdown import MdOptions, format_markdown

    options = MdOptions(code_fences=args.code_fences, title=args.title)
    return format_markdown(contents, options)


def _output_path(args: argparse.Namespace, config: Config, root: Path) -> Path | None:
    """Return the file the document will be written to, if any."""
    if args.stdout or args.list_only:
        return None
    if args.output_file:
        return Path(args.output_file).expanduser().resolve()
    return _default_output_path(config, root)


def _default_output_path(config: Config, root: Path) -> Path:
    """Return ``<output_dir>/<root name>_catree_output.<ext>``."""
    suffix = _OUTPUT_SUFFIXES[config.output_format]
    root_name = root.name or "root"
    output_dir = config.resolved_output_dir().expanduser().resolve()
    return output_dir / f"{root_name}_catree_output.{suffix}"


def _run_with_args(args: argparse.Namespace) -> RunResult:
    """Run the load/select/aggregate/format pipeline for parsed arguments.

    Rules are compiled before the directory is touched so that an invalid
    pattern is reported without any traversal. The output file is never a
    candidate, so a document written inside the root is not read back in.

    Raises:
        CatreeError: On any user-facing validation or configuration error.
    """
    config = _apply_cli_overrides(load_config(args.config), args)
    if args.project_type:
        _validate_project_type(config)
    rules = build_rule_set(config)
    scan_max_depth = _translate_level_to_scan_depth(args.max_depth)
    root = _resolve_root(config.input_dir)
    overrides = classify_overrides(config.include_overrides, root)
    output_path = _output_path(args, config, root)
    logger.info("Scanning %s", root)

    paths = [
        path
        for path in list_files(root, ScanOptions(max_depth=scan_max_depth))
        if path != output_path
    ]
    selected = select_files(paths, root, rules, overrides)

    if args.list_only:
        output = "\n".join(c.relative_path for c in selected)
    else:
        output = _format_output(config, aggregate_contents(selected), args)
    return RunResult(output=output, root=root, config=config, output_path=output_path)


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(message: str) -> None:
    sys.stderr.write(f"catree: {message}\n")
    sys.exit(1)


def main() -> None:
    """Run the CLI entry point with process arguments.

    Writes the document to ``-o FILE``, stdout, or the configured output
    directory. Exits with code 1 on user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse
    _configure_logging(args.verbose)

    if args.generate_config:
        target = Path(args.config) if args.config else default_config_path()
        try:
            created = generate_default_config(target)
        except CatreeError as exc:
            _fail(str(exc))
            return
        if created:
            sys.stdout.write(f"Generated default config file at {target}\n")
        else:
            sys.stdout.write(f"Config file already exists at {target}\n")
        return

    try:
        result = _run_with_args(args)
    except CatreeError as exc:
        _fail(str(exc))
        return

    if not result.output:
        sys.stdout.write("No files found\n")
        return

    output_path = result.output_path
    if output_path is None:
        output = result.output
        sys.stdout.write(output if output.endswith("\n") else output + "\n")
        return

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.output, encoding="utf-8", newline="")
    except OSError as exc:
        _fail(f"cannot write to '{output_path}': {exc}")
        return
    sys.stdout.write(f"Output written to: {output_path}\n")
