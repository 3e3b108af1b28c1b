"""YAML dump of a finished index for the renderer or for inspection."""

import logging
import re
import sys
from pathlib import Path
from typing import Any

import yaml

from auto_index.indexer.interpreter import IndexBuilder
from auto_index.indexer.models import IndexEntry, RewriteRule

logger = logging.getLogger(__name__)


def entry_to_dict(entry: IndexEntry) -> dict[str, Any]:
    return {
        "term": entry.term,
        "search_pattern": entry.search_pattern.pattern,
        "ignore_case": bool(entry.search_pattern.flags & re.IGNORECASE),
        "section_id": entry.section_id.pattern if entry.section_id is not None else None,
        "category": entry.category,
    }


def rule_to_dict(rule: RewriteRule) -> dict[str, Any]:
    return {
        "from": rule.from_text,
        "to": rule.to_text,
        "applies_to_id": rule.applies_to_id,
    }


def index_to_dict(builder: IndexBuilder) -> dict[str, Any]:
    """Collect the produced index: debug filter, entries in key order, rewrite rules."""
    return {
        "debug": builder.debug,
        "entries": [entry_to_dict(entry) for entry in builder.entries],
        "rewrite_rules": [rule_to_dict(rule) for rule in builder.rewrite_rules],
    }


def dump_index(builder: IndexBuilder) -> str:
    """Serialize the produced index as YAML."""
    return yaml.safe_dump(
        index_to_dict(builder),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def write_index(builder: IndexBuilder, path: Path | None = None) -> None:
    """Write the YAML index to ``path``, or to stdout when no path is given."""
    text = dump_index(builder)
    if path is None:
        sys.stdout.write(text)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %d index entries to %s", len(builder.entries), path)
