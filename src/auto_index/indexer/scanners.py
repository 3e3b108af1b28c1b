"""Scanner registry: the built-in file scanners plus user-defined ones."""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

import yaml

from auto_index.indexer.errors import ScannerDefinitionError
from auto_index.indexer.models import FileScanner

logger = logging.getLogger(__name__)

# Scanner patterns run in multiline mode so "^" anchors at each line start.
SCANNER_FLAGS = re.MULTILINE

# Built-in scanners as (type, scanner regex, format template, term template).
# Format templates rebuild a stricter pattern that finds the declaration
# itself rather than any occurrence of the word.
DEFAULT_SCANNERS: list[tuple[str, str, str, str]] = [
    (
        "class_name",
        (
            # possibly leading whitespace
            r"^\s*"
            # possible template declaration
            r"(template\s*<[^;:{]+>\s*)?"
            # class or struct
            r"(class|struct)\s*"
            # leading declspec macros etc
            r"(\b\w+\b([ \t]*\([^)]*\))?\s*)*"
            # the class name
            r"(\b\w+\b)\s*"
            # template specialisation parameters
            r"(<[^;:{]+>)?\s*"
            # terminate in { or :
            r"(\{|:[^;\{()]*\{)"
        ),
        r"class[^;{]+\\b\5\\b[^;{]+\\{",
        r"\5",
    ),
    (
        "typedef_name",
        r"typedef[^;{}#]+?(\w+)\s*;",
        r"typedef[^;]+\\b\1\\b\\s*;",
        r"\1",
    ),
    (
        "macro_name",
        r"^\s*#\s*define\s+(\w+)",
        r"\\b\1\\b",
        r"\1",
    ),
    (
        "function_name",
        r"\w+\s+(\w+)\s*\([^\)]*\)\s*[;{]",
        r"\\b\\w+\\b\\s+\\b\1\\b\\s*\\([^;{]*\\)\\s*[;{]",
        r"\1",
    ),
]

# Keys accepted in YAML scanner definition files
REQUIRED_KEYS = ("type", "scanner", "format", "term")


def make_scanner(
    type: str,
    scanner: str,
    format: str,
    term: str,
    section_filter: str = "",
    file_name_filter: str = "",
) -> FileScanner:
    """
    Build a FileScanner from its textual definition.

    Raises:
        ScannerDefinitionError: If the scanner regex, section filter or file
            name filter does not compile.
    """
    if not type:
        raise ScannerDefinitionError("Scanner type must not be empty")
    try:
        compiled = re.compile(scanner, SCANNER_FLAGS)
    except re.error as e:
        raise ScannerDefinitionError(
            f"Invalid scanner regex for type '{type}': {e}"
        ) from e

    if section_filter:
        try:
            re.compile(section_filter)
        except re.error as e:
            raise ScannerDefinitionError(
                f"Invalid section filter for type '{type}': {e}"
            ) from e

    name_filter = None
    if file_name_filter:
        try:
            name_filter = re.compile(file_name_filter)
        except re.error as e:
            raise ScannerDefinitionError(
                f"Invalid file name filter for type '{type}': {e}"
            ) from e

    return FileScanner(
        type=type,
        scanner=compiled,
        format_template=format,
        term_template=term,
        section_filter=section_filter,
        file_name_filter=name_filter,
    )


class ScannerRegistry:
    """
    The set of file scanners, keyed by type.

    Scanners are never replaced: defining a type that already exists is a
    no-op. Built-in scanners are installed lazily on first use, so a
    user-defined scanner with a built-in name wins if it is defined first.
    """

    def __init__(self):
        self._scanners: dict[str, FileScanner] = {}
        self._defaults_installed = False

    def define(self, scanner: FileScanner) -> bool:
        """
        Add a scanner unless one of the same type is already registered.

        Returns True if the scanner was added.
        """
        if scanner.type in self._scanners:
            logger.debug("Scanner %s already defined, ignoring new definition", scanner.type)
            return False
        self._scanners[scanner.type] = scanner
        return True

    def install_defaults(self) -> None:
        """Install any built-in scanner whose type is not yet registered."""
        self._defaults_installed = True
        for type_, scanner, format_, term in DEFAULT_SCANNERS:
            if type_ not in self._scanners:
                self.define(make_scanner(type_, scanner, format_, term))

    def ensure_defaults(self) -> None:
        """Install the built-in scanners once per registry."""
        if not self._defaults_installed:
            self.install_defaults()

    def load_file(self, path: Path) -> int:
        """
        Load scanner definitions from a YAML file.

        The file holds either a list of definitions or a mapping with a
        ``scanners`` list. Each definition needs ``type``, ``scanner``,
        ``format`` and ``term`` and may add ``section_filter`` and
        ``file_name_filter``.

        Returns the number of scanners added.
        """
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ScannerDefinitionError(f"Cannot read scanner file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ScannerDefinitionError(f"Invalid YAML in scanner file {path}: {e}") from e

        if isinstance(raw, dict):
            raw = raw.get("scanners")
        if raw is None:
            return 0
        if not isinstance(raw, list):
            raise ScannerDefinitionError(f"Scanner file {path} must contain a list of scanners")

        added = 0
        for item in raw:
            if not isinstance(item, dict):
                raise ScannerDefinitionError(f"Invalid scanner definition in {path}: {item!r}")
            missing = [key for key in REQUIRED_KEYS if not item.get(key)]
            if missing:
                raise ScannerDefinitionError(
                    f"Scanner definition in {path} is missing: {', '.join(missing)}"
                )
            scanner = make_scanner(
                str(item["type"]),
                str(item["scanner"]),
                str(item["format"]),
                str(item["term"]),
                section_filter=str(item.get("section_filter") or ""),
                file_name_filter=str(item.get("file_name_filter") or ""),
            )
            if self.define(scanner):
                added += 1

        logger.info("Loaded %d scanners from %s", added, path)
        return added

    def get(self, type: str) -> FileScanner | None:
        return self._scanners.get(type)

    def types(self) -> list[str]:
        return sorted(self._scanners)

    def __contains__(self, type: object) -> bool:
        return type in self._scanners

    def __iter__(self) -> Iterator[FileScanner]:
        return iter(sorted(self._scanners.values()))

    def __len__(self) -> int:
        return len(self._scanners)
