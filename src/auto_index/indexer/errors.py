"""Exceptions raised by the indexer.

Recoverable per-match problems during a file scan are not exceptions: they
are collected in ``ScanReport.failures``. Everything here aborts the run.
"""


class AutoIndexError(Exception):
    """Base class for all auto-index failures."""


class ScannerDefinitionError(AutoIndexError):
    """Raised when a scanner definition is incomplete or does not compile."""


class ScriptError(AutoIndexError):
    """Raised when a script cannot be read or one of its lines is fatal.

    Attributes:
        line_number: 1-based line in the script, or None if not line-specific.
        line: The offending script line, if any.
    """

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        super().__init__(message)
        self.line_number = line_number
        self.line = line
