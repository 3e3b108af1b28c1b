"""Data models for the indexer."""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class FileScanner:
    """A named rule that turns regex matches in a source file into index entries.

    Only ``type`` takes part in equality, hashing and ordering: the registry
    holds at most one scanner per type.
    """

    type: str
    scanner: re.Pattern = field(compare=False)
    format_template: str = field(compare=False)  # Match.expand template -> search pattern
    term_template: str = field(compare=False)  # Match.expand template -> display term
    section_filter: str = field(default="", compare=False)
    file_name_filter: re.Pattern | None = field(default=None, compare=False)

    def accepts(self, path: str) -> bool:
        """Check whether this scanner should run against ``path``."""
        if self.file_name_filter is None:
            return True
        return self.file_name_filter.fullmatch(path) is not None


@dataclass(frozen=True, order=True)
class IndexEntry:
    """One accepted index item.

    Identity and ordering use ``(term, category)`` only.
    """

    term: str
    search_pattern: re.Pattern = field(compare=False)
    section_id: re.Pattern | None = field(default=None, compare=False)
    category: str = ""  # "" means uncategorized

    @property
    def key(self) -> tuple[str, str]:
        return (self.term, self.category)


@dataclass(frozen=True)
class RewriteRule:
    """Maps index term spelling (or anchor ids) from one form to another."""

    from_text: str
    to_text: str
    applies_to_id: bool = False


@dataclass(frozen=True)
class EntryFailure:
    """A match that could not be turned into an index entry."""

    term: str
    file: str
    message: str


@dataclass
class ScanReport:
    """Outcome of scanning one file or one directory tree."""

    files_scanned: int = 0
    added: int = 0
    failures: list[EntryFailure] = field(default_factory=list)

    def merge(self, other: "ScanReport") -> None:
        self.files_scanned += other.files_scanned
        self.added += other.added
        self.failures.extend(other.failures)

    @property
    def ok(self) -> bool:
        return not self.failures
