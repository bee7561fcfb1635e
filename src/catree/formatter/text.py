"""Plain-text output formatter."""

from __future__ import annotations

from dataclasses import dataclass

from catree.aggregator import FileContent


@dataclass(frozen=True, slots=True)
class TextOptions:
    """Options for plain-text output.

    Attributes:
        separator_char: Character repeated under each file header.
        separator_width: Length of the separator line.
        title: Line placed before the first file, if set.
    """

    separator_char: str = "="
    separator_width: int = 40
    title: str | None = None


def format_text(
    contents: list[FileContent],
    options: TextOptions | None = None,
) -> str:
    """Render file contents as plain text.

    Layout per file::

        File: <relative path>
        ========================================

        <content>

    Args:
        contents: File contents in output order.
        options: Rendering options.

    Returns:
        str: Text document, ``""`` when *contents* is empty.
    """
    opts = options or TextOptions()
    if not contents:
        return ""
    separator = opts.separator_char * opts.separator_width
    header = f"{opts.title}\n\n" if opts.title else ""
    return header + "".join(
        f"File: {item.relative_path}\n{separator}\n\n{item.content}\n\n"
        for item in contents
    )
