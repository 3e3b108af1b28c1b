"""Scan engine: applies the scanner registry to files and directory trees."""

import logging
import re
from pathlib import Path

from auto_index.indexer.models import EntryFailure, FileScanner, IndexEntry, ScanReport
from auto_index.indexer.scanners import ScannerRegistry
from auto_index.indexer.store import IndexEntryStore
from auto_index.indexer.walker import compile_mask, iter_children, read_text

logger = logging.getLogger(__name__)


def build_entry(match: re.Match, scanner: FileScanner, term: str) -> IndexEntry:
    """
    Turn one scanner match into an index entry.

    Raises:
        re.error: If the rendered search pattern is not valid.
        IndexError: If the format template names an unknown group.
    """
    search_text = match.expand(scanner.format_template)
    section_id = re.compile(scanner.section_filter) if scanner.section_filter else None
    return IndexEntry(
        term=term,
        search_pattern=re.compile(search_text),
        section_id=section_id,
        category=scanner.type,
    )


def scan_file(
    path: Path | str,
    registry: ScannerRegistry,
    store: IndexEntryStore,
    verbose: bool = False,
) -> ScanReport:
    """
    Scan one source file and add an entry for every new term found.

    A match that cannot be turned into an entry is logged, recorded in the
    report and skipped. Any other failure aborts the scan.
    """
    registry.ensure_defaults()
    path = Path(path)
    file_name = str(path)
    if verbose:
        logger.info("Scanning file... %s", file_name)

    text = read_text(path)
    report = ScanReport(files_scanned=1)

    for scanner in registry:
        if not scanner.accepts(file_name):
            continue
        if verbose:
            logger.info('Scanning for type "%s" ...', scanner.type)

        for match in scanner.scanner.finditer(text):
            term = None
            try:
                term = match.expand(scanner.term_template)
                if store.contains(term, scanner.type):
                    continue
                entry = build_entry(match, scanner, term)
            except (re.error, IndexError) as e:
                logger.error(
                    'Unable to create regular expression from found index term: "%s" In file %s: %s',
                    term,
                    file_name,
                    e,
                )
                report.failures.append(EntryFailure(term=term or "", file=file_name, message=str(e)))
                continue
            except Exception:
                logger.exception('Unable to create index term: "%s" In file %s', term, file_name)
                raise

            if verbose:
                logger.info("Indexing %s as type %s", entry.term, entry.category)
            store.add(entry)
            report.added += 1

    return report


def scan_dir(
    directory: Path | str,
    mask: str,
    recurse: bool,
    registry: ScannerRegistry,
    store: IndexEntryStore,
    verbose: bool = False,
) -> ScanReport:
    """
    Scan every file in ``directory`` whose name matches ``mask``.

    Children that do not match the mask are descended into only when
    ``recurse`` is set and they are directories.
    """
    return _scan_dir(Path(directory), compile_mask(mask), recurse, registry, store, verbose)


def _scan_dir(
    directory: Path,
    mask: re.Pattern,
    recurse: bool,
    registry: ScannerRegistry,
    store: IndexEntryStore,
    verbose: bool,
) -> ScanReport:
    report = ScanReport()
    for child in iter_children(directory):
        if mask.fullmatch(child.name):
            report.merge(scan_file(child, registry, store, verbose=verbose))
        elif recurse and child.is_dir():
            report.merge(_scan_dir(child, mask, recurse, registry, store, verbose))
    return report
