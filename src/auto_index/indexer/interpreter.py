"""Script interpreter that drives scanning and entry registration."""

import logging
import re
from pathlib import Path

from auto_index.config import Config
from auto_index.indexer.errors import ScannerDefinitionError, ScriptError
from auto_index.indexer.models import IndexEntry, RewriteRule, ScanReport
from auto_index.indexer.scanners import ScannerRegistry, make_scanner
from auto_index.indexer.scanning import scan_dir, scan_file
from auto_index.indexer.script import (
    Blank,
    Debug,
    DefineScanner,
    Directive,
    Entry,
    Exclude,
    Rewrite,
    Scan,
    ScanPath,
    parse_line,
)
from auto_index.indexer.store import IndexEntryStore

logger = logging.getLogger(__name__)


class IndexBuilder:
    """
    Owns the state of one index-building run and interprets scripts against it.

    The scanner registry, the entry store and the rewrite rules live here
    rather than in module globals, so separate runs never share state.
    """

    def __init__(
        self,
        prefix: Path | str | None = None,
        verbose: bool = False,
        debug: str = "",
        registry: ScannerRegistry | None = None,
        store: IndexEntryStore | None = None,
    ):
        """
        Initialize the builder.

        Args:
            prefix: Base directory for relative scan paths. When unset,
                relative paths are taken relative to the script file.
            verbose: Log progress messages at info level.
            debug: Debug filter handed on to the renderer.
            registry: Scanner registry to use (a fresh one by default).
            store: Entry store to fill (a fresh one by default).
        """
        self.prefix = Path(prefix) if prefix else None
        self.verbose = verbose
        self.debug = debug
        self.registry = registry if registry is not None else ScannerRegistry()
        self.entries = store if store is not None else IndexEntryStore()
        self.rewrite_rules: list[RewriteRule] = []

    @classmethod
    def from_config(cls, config: Config) -> "IndexBuilder":
        """Create a builder from configuration, loading any scanner files it names."""
        builder = cls(prefix=config.prefix, verbose=config.verbose, debug=config.debug)
        for path in config.scanner_files:
            builder.registry.load_file(path)
        return builder

    # Scanning

    def scan_file(self, path: Path | str) -> ScanReport:
        return scan_file(path, self.registry, self.entries, verbose=self.verbose)

    def scan_dir(self, directory: Path | str, mask: str, recurse: bool = False) -> ScanReport:
        if self.verbose:
            logger.info("Scanning directory %s", directory)
        return scan_dir(directory, mask, recurse, self.registry, self.entries, verbose=self.verbose)

    def resolve_path(self, target: str, script_path: Path | str) -> Path:
        """
        Resolve a path named in a script.

        Absolute paths are used as they are. Relative paths are joined onto
        the configured prefix, or onto the script's own directory when no
        prefix is set.
        """
        path = Path(target)
        if path.is_absolute():
            return path
        if self.prefix is not None:
            return self.prefix / path
        return Path(script_path).parent / path

    # Script processing

    def process_script(self, script_path: Path | str) -> None:
        """
        Process every line of a script file.

        Raises:
            ScriptError: If the script cannot be read or a line is fatal.
        """
        script_path = Path(script_path)
        if self.verbose:
            logger.info("Processing script %s", script_path)
        try:
            text = script_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not open script file %s: %s", script_path, e)
            raise ScriptError(f"Could not open script file {script_path}: {e}") from e

        for line_number, line in enumerate(text.splitlines(), start=1):
            self.process_line(line, script_path, line_number)

    def process_line(self, line: str, script_path: Path | str, line_number: int = 0) -> None:
        """Interpret a single script line."""
        directive = parse_line(line)
        if directive is None:
            logger.warning("Ignoring unrecognized script line %d: %s", line_number, line)
            return
        self._run(directive, line, script_path, line_number)

    def _run(self, directive: Directive, line: str, script_path: Path | str, line_number: int) -> None:
        if isinstance(directive, Blank):
            return
        if isinstance(directive, Scan):
            self.scan_file(self.resolve_path(directive.path, script_path))
        elif isinstance(directive, ScanPath):
            directory = self.resolve_path(directive.directory, script_path)
            self.scan_dir(directory, directive.mask, directive.recurse)
        elif isinstance(directive, Rewrite):
            self.rewrite_rules.append(
                RewriteRule(directive.from_text, directive.to_text, directive.applies_to_id)
            )
        elif isinstance(directive, Debug):
            self.debug = directive.filter
        elif isinstance(directive, Exclude):
            self.exclude(directive.terms)
        elif isinstance(directive, DefineScanner):
            self._define_scanner(directive, line, line_number)
        elif isinstance(directive, Entry):
            self._add_entry(directive, line, line_number)

    def exclude(self, terms: tuple[str, ...] | list[str]) -> int:
        """Remove each term as uncategorized and under every scanner type."""
        categories = self.registry.types()
        return sum(self.entries.exclude(term, categories) for term in terms)

    def _define_scanner(self, directive: DefineScanner, line: str, line_number: int) -> None:
        try:
            scanner = make_scanner(
                directive.type,
                directive.scanner,
                directive.format,
                directive.term,
                section_filter=directive.section_filter,
                file_name_filter=directive.file_name_filter,
            )
        except ScannerDefinitionError as e:
            logger.error('Unable to process scanner definition in script line:\n  "%s"', line)
            raise ScriptError(str(e), line_number=line_number, line=line) from e
        self.registry.define(scanner)

    def _add_entry(self, directive: Entry, line: str, line_number: int) -> None:
        try:
            entry = build_literal_entry(directive)
        except re.error as e:
            logger.error('Unable to process regular expression in script line:\n  "%s"', line)
            raise ScriptError(
                f"Invalid regular expression on line {line_number}: {e}",
                line_number=line_number,
                line=line,
            ) from e
        except Exception:
            logger.error('Unable to process script line:\n  "%s"', line)
            raise

        if not self.entries.add(entry):
            logger.debug("Entry %s (%s) already indexed, keeping the first", entry.term, entry.category)


def build_literal_entry(directive: Entry) -> IndexEntry:
    """
    Build the index entry for a literal script entry.

    Without an explicit pattern the term is matched as a whole word.
    Patterns are case-insensitive.

    Raises:
        re.error: If the pattern or section id does not compile.
    """
    pattern = directive.pattern or rf"\b{re.escape(directive.term)}\b"
    section_id = re.compile(directive.section_id) if directive.section_id else None
    return IndexEntry(
        term=directive.term,
        search_pattern=re.compile(pattern, re.IGNORECASE),
        section_id=section_id,
        category=directive.category,
    )
