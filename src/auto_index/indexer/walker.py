"""File system access for the scan engine."""

import fnmatch
import logging
import re
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """
    Read a whole file as text.

    A file that cannot be read is treated as empty: scanning it simply
    produces no entries.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s, treating as empty: %s", path, e)
        return ""


def iter_children(directory: Path) -> Iterator[Path]:
    """Yield the immediate children of ``directory`` in name order."""
    yield from sorted(directory.iterdir(), key=lambda p: p.name)


def compile_mask(mask: str) -> re.Pattern:
    """
    Compile a file name mask.

    Masks are regular expressions matched against the whole file name
    (e.g. ``.*\\.hpp``). A mask that is not a valid regular expression,
    such as ``*.hpp``, is read as a shell glob instead.
    """
    try:
        return re.compile(mask)
    except re.error:
        logger.debug("Mask %r is not a regular expression, using it as a glob", mask)
        return re.compile(fnmatch.translate(mask))
