"""Read selected files into memory for formatting."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from catree.formatter.language import detect_language
from catree.scanner import read_file_contents
from catree.selection import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileContent:
    """Decoded content of one selected file.

    Attributes:
        relative_path: POSIX path relative to the scan root.
        content: UTF-8 decoded text.
        language: Code-fence language hint, ``""`` when unknown.
    """

    relative_path: str
    content: str
    language: str = ""


def aggregate_contents(candidates: Iterable[Candidate]) -> list[FileContent]:
    """Read candidates in order, skipping unreadable or non-UTF-8 files.

    Args:
        candidates: Selected candidates.

    Returns:
        list[FileContent]: Contents in input order.
    """
    contents: list[FileContent] = []
    for candidate in candidates:
        try:
            text = read_file_contents(candidate.path)
        except UnicodeDecodeError:
            logger.warning("Skipping %s: not valid UTF-8", candidate.relative_path)
            continue
        except OSError as exc:
            logger.warning("Skipping %s: %s", candidate.relative_path, exc)
            continue
        contents.append(
            FileContent(
                relative_path=candidate.relative_path,
                content=text,
                language=detect_language(candidate.relative_path),
            )
        )
    return contents
