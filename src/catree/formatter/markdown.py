"""Markdown output formatter."""

from __future__ import annotations

import re
from dataclasses import dataclass

from catree.aggregator import FileContent

_BACKTICK_RUN = re.compile(r"`+")
_MIN_FENCE = 3


@dataclass(frozen=True, slots=True)
class MdOptions:
    """Options for Markdown output.

    Attributes:
        code_fences: Wrap each file body in a fenced code block.
        title: Level-one heading placed before the first file, if set.
    """

    code_fences: bool = True
    title: str | None = None


def _fence_for(content: str) -> str:
    """Return a backtick fence longer than any run inside *content*."""
    longest = max((len(m.group()) for m in _BACKTICK_RUN.finditer(content)), default=0)
    return "`" * max(_MIN_FENCE, longest + 1)


def _format_section(item: FileContent, code_fences: bool) -> str:
    body = item.content
    if not code_fences:
        return f"# {item.relative_path}\n\n{body}\n\n"

    if body and not body.endswith("\n"):
        body += "\n"
    fence = _fence_for(body)
    return f"# {item.relative_path}\n\n{fence}{item.language}\n{body}{fence}\n\n"


def format_markdown(
    contents: list[FileContent],
    options: MdOptions | None = None,
) -> str:
    """Render file contents as one Markdown document.

    Each file becomes a ``# path`` heading followed by its body in a code
    fence tagged with the detected language. A title, when set, comes
    first as its own heading.

    Args:
        contents: File contents in output order.
        options: Rendering options.

    Returns:
        str: Markdown document, ``""`` when *contents* is empty.
    """
    opts = options or MdOptions()
    if not contents:
        return ""
    header = f"# {opts.title}\n\n" if opts.title else ""
    return header + "".join(
        _format_section(item, opts.code_fences) for item in contents
    )
