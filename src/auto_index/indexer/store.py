"""The deduplicated set of accepted index entries."""

import logging
from collections.abc import Iterable, Iterator

from auto_index.indexer.models import IndexEntry

logger = logging.getLogger(__name__)


class IndexEntryStore:
    """
    Index entries keyed by ``(term, category)``.

    Inserting an entry whose key is already present is a no-op: the first
    insertion wins. Iteration is in key order.
    """

    def __init__(self):
        self._entries: dict[tuple[str, str], IndexEntry] = {}

    def add(self, entry: IndexEntry) -> bool:
        """Insert ``entry`` if its key is absent. Returns True if inserted."""
        if entry.key in self._entries:
            return False
        self._entries[entry.key] = entry
        return True

    def contains(self, term: str, category: str = "") -> bool:
        return (term, category) in self._entries

    def get(self, term: str, category: str = "") -> IndexEntry | None:
        return self._entries.get((term, category))

    def discard(self, term: str, category: str = "") -> bool:
        """Remove the entry with this key. Returns True if one was removed."""
        return self._entries.pop((term, category), None) is not None

    def exclude(self, term: str, categories: Iterable[str]) -> int:
        """
        Remove ``term`` from the uncategorized key and from each of ``categories``.

        Returns the number of entries removed.
        """
        removed = int(self.discard(term))
        for category in categories:
            removed += int(self.discard(term, category))
        if removed:
            logger.debug("Excluded %s (%d entries)", term, removed)
        return removed

    def terms(self) -> list[str]:
        return sorted({term for term, _ in self._entries})

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(sorted(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
