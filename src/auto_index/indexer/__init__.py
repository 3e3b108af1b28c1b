"""
Indexer module for auto-index.

This module turns source files and an index script into a set of index
entries. Recognition is pattern matching against raw text: scanners pair a
detection regex with templates that render each match into a term and a
search pattern.
"""

from auto_index.indexer.errors import AutoIndexError, ScannerDefinitionError, ScriptError
from auto_index.indexer.interpreter import IndexBuilder, build_literal_entry
from auto_index.indexer.models import EntryFailure, FileScanner, IndexEntry, RewriteRule, ScanReport
from auto_index.indexer.scanners import DEFAULT_SCANNERS, ScannerRegistry, make_scanner
from auto_index.indexer.scanning import scan_dir, scan_file
from auto_index.indexer.script import parse_line, tokenize, unquote
from auto_index.indexer.store import IndexEntryStore

__all__ = [
    "DEFAULT_SCANNERS",
    "AutoIndexError",
    "EntryFailure",
    "FileScanner",
    "IndexBuilder",
    "IndexEntry",
    "IndexEntryStore",
    "RewriteRule",
    "ScanReport",
    "ScannerDefinitionError",
    "ScannerRegistry",
    "ScriptError",
    "build_literal_entry",
    "make_scanner",
    "parse_line",
    "scan_dir",
    "scan_file",
    "tokenize",
    "unquote",
]
