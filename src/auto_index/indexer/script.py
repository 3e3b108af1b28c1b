"""Grammar of the index control script.

Every line of a script is classified once into one of the directive types
below. Tokens are bare words or double-quoted strings (``\\"`` and ``\\\\``
do not end a quoted token). Quotes are stripped from tokens but escapes are
left alone, so regular expressions pass through unchanged.
"""

import re
from dataclasses import dataclass

# A bare word or a double-quoted string with backslash escapes
TOKEN_PATTERN = r'[^"\s]+|"(?:[^"\\]|\\.)*"'

_TOKEN_RE = re.compile(TOKEN_PATTERN)
_COMMENT_RE = re.compile(r"\s*(?:#.*)?")

EXCLUDE_PREFIX = "!exclude "
EMPTY_TOKEN = '""'


@dataclass(frozen=True)
class Blank:
    """Blank line or comment."""


@dataclass(frozen=True)
class Scan:
    path: str


@dataclass(frozen=True)
class ScanPath:
    directory: str
    mask: str
    recurse: bool = False


@dataclass(frozen=True)
class Rewrite:
    from_text: str
    to_text: str
    applies_to_id: bool


@dataclass(frozen=True)
class Debug:
    filter: str


@dataclass(frozen=True)
class Exclude:
    terms: tuple[str, ...]


@dataclass(frozen=True)
class DefineScanner:
    type: str
    scanner: str
    format: str
    term: str
    section_filter: str = ""
    file_name_filter: str = ""


@dataclass(frozen=True)
class Entry:
    """A literal index entry: term plus optional pattern, section id and category."""

    term: str
    pattern: str = ""
    section_id: str = ""
    category: str = ""


Directive = Blank | Scan | ScanPath | Rewrite | Debug | Exclude | DefineScanner | Entry


def unquote(token: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return token


def tokenize(text: str) -> list[str] | None:
    """
    Split ``text`` into whitespace-separated tokens.

    Returns None if the text cannot be split cleanly, e.g. an unterminated
    quote or a quote glued to a bare word.
    """
    tokens: list[str] = []
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos == length:
            return tokens
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            return None
        pos = match.end()
        if pos < length and not text[pos].isspace():
            return None
        tokens.append(match.group())


def _scan(args: list[str]) -> Directive | None:
    if len(args) != 1:
        return None
    return Scan(unquote(args[0]))


def _scan_path(args: list[str]) -> Directive | None:
    if len(args) not in (2, 3):
        return None
    recurse = len(args) == 3 and unquote(args[2]) == "true"
    return ScanPath(unquote(args[0]), unquote(args[1]), recurse)


def _rewrite(applies_to_id: bool):
    def parse(args: list[str]) -> Directive | None:
        if len(args) != 2:
            return None
        return Rewrite(unquote(args[0]), unquote(args[1]), applies_to_id)

    return parse


def _debug(args: list[str]) -> Directive | None:
    if len(args) != 1:
        return None
    return Debug(unquote(args[0]))


def _exclude(args: list[str]) -> Directive | None:
    return Exclude(tuple(unquote(arg) for arg in args))


def _define_scanner(args: list[str]) -> Directive | None:
    if not 4 <= len(args) <= 6:
        return None
    return DefineScanner(*(unquote(arg) for arg in args))


_DIRECTIVES = {
    "scan": _scan,
    "scan-path": _scan_path,
    "rewrite-name": _rewrite(False),
    "rewrite-id": _rewrite(True),
    "debug": _debug,
    "exclude": _exclude,
    "define-scanner": _define_scanner,
}


def parse_line(line: str) -> Directive | None:
    """
    Classify one script line.

    Returns the directive, or None if the line is not well formed.
    """
    if _COMMENT_RE.fullmatch(line):
        return Blank()

    # Directives and terms must start the line
    if line[:1].isspace():
        return None
    text = line.rstrip()
    if text.startswith(EXCLUDE_PREFIX):
        # Tolerant: pick out whatever tokens are present
        return Exclude(tuple(unquote(t) for t in _TOKEN_RE.findall(text[len(EXCLUDE_PREFIX):])))

    tokens = tokenize(text)
    if not tokens:
        return None

    head, args = tokens[0], tokens[1:]
    if head.startswith("!"):
        parse = _DIRECTIVES.get(head[1:])
        if parse is None or EMPTY_TOKEN in args:
            return None
        return parse(args)

    if head == EMPTY_TOKEN or len(tokens) > 4:
        return None
    return Entry(*(unquote(token) for token in tokens))
