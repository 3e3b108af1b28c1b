"""Tests for the scanner registry."""

from pathlib import Path

import pytest

from auto_index.indexer.errors import ScannerDefinitionError
from auto_index.indexer.scanners import DEFAULT_SCANNERS, ScannerRegistry, make_scanner

BUILTIN_TYPES = ["class_name", "function_name", "macro_name", "typedef_name"]


def matches(registry: ScannerRegistry, type_: str, text: str) -> list[str]:
    scanner = registry.get(type_)
    return [m.expand(scanner.term_template) for m in scanner.scanner.finditer(text)]


class TestMakeScanner:
    def test_builds_scanner(self):
        scanner = make_scanner("todo", r"TODO: (\w+)", r"\1", r"\1")
        assert scanner.type == "todo"
        assert scanner.scanner.search("x TODO: fix").group(1) == "fix"
        assert scanner.section_filter == ""
        assert scanner.file_name_filter is None

    def test_file_name_filter(self):
        scanner = make_scanner("todo", r"TODO", r"TODO", r"TODO", file_name_filter=r".*\.txt")
        assert scanner.accepts("/a/notes.txt")
        assert not scanner.accepts("/a/notes.hpp")

    def test_invalid_scanner_regex(self):
        with pytest.raises(ScannerDefinitionError, match="Invalid scanner regex"):
            make_scanner("bad", r"(unclosed", r"\1", r"\1")

    def test_invalid_file_name_filter(self):
        with pytest.raises(ScannerDefinitionError, match="Invalid file name filter"):
            make_scanner("bad", r"\w+", r"\0", r"\0", file_name_filter="[")

    def test_invalid_section_filter(self):
        with pytest.raises(ScannerDefinitionError, match="Invalid section filter"):
            make_scanner("bad", r"\w+", r"\0", r"\0", section_filter="[")

    def test_empty_type(self):
        with pytest.raises(ScannerDefinitionError, match="must not be empty"):
            make_scanner("", r"\w+", "x", "x")

    def test_identity_is_type_only(self):
        a = make_scanner("same", r"a", "a", "a")
        b = make_scanner("same", r"b", "b", "b")
        assert a == b
        assert hash(a) == hash(b)


class TestInstallDefaults:
    def test_installs_builtin_types(self):
        registry = ScannerRegistry()
        registry.install_defaults()
        assert registry.types() == BUILTIN_TYPES

    def test_idempotent(self):
        registry = ScannerRegistry()
        registry.install_defaults()
        registry.install_defaults()
        registry.ensure_defaults()
        assert len(registry) == len(DEFAULT_SCANNERS)

    def test_ensure_defaults_installs_once(self):
        registry = ScannerRegistry()
        registry.ensure_defaults()
        assert "class_name" in registry

    def test_predefined_builtin_name_wins(self):
        registry = ScannerRegistry()
        custom = make_scanner("class_name", r"CLASS (\w+)", r"\1", r"\1")
        registry.define(custom)
        registry.install_defaults()
        assert registry.get("class_name").scanner.pattern == r"CLASS (\w+)"
        assert len(registry) == 4

    def test_define_collision_is_noop(self):
        registry = ScannerRegistry()
        assert registry.define(make_scanner("todo", r"a", "a", "a"))
        assert not registry.define(make_scanner("todo", r"b", "b", "b"))
        assert registry.get("todo").scanner.pattern == "a"

    def test_iterates_in_type_order(self):
        registry = ScannerRegistry()
        registry.define(make_scanner("zeta", r"z", "z", "z"))
        registry.install_defaults()
        registry.define(make_scanner("alpha", r"a", "a", "a"))
        assert [s.type for s in registry] == ["alpha", *BUILTIN_TYPES, "zeta"]


class TestDefaultPatterns:
    @pytest.fixture
    def registry(self) -> ScannerRegistry:
        registry = ScannerRegistry()
        registry.install_defaults()
        return registry

    def test_class_declarations(self, registry):
        text = "class Foo {\n};\nstruct Bar : public Foo {\n};\n"
        assert matches(registry, "class_name", text) == ["Foo", "Bar"]

    def test_class_with_specifier_macro(self, registry):
        text = "class BOOST_SYMBOL_VISIBLE bad_expression : public std::runtime_error\n{\n};\n"
        assert matches(registry, "class_name", text) == ["bad_expression"]

    def test_class_template_and_partial_specialisation(self, registry):
        text = "template <class T>\nclass holder<T*> {\n};\n"
        assert matches(registry, "class_name", text) == ["holder"]

    def test_class_forward_declaration_ignored(self, registry):
        assert matches(registry, "class_name", "class Foo;\n") == []

    def test_typedef(self, registry):
        assert matches(registry, "typedef_name", "typedef unsigned long size_type;") == ["size_type"]

    def test_macro(self, registry):
        assert matches(registry, "macro_name", "#  define BOOST_REGEX_MAX 3\n") == ["BOOST_REGEX_MAX"]

    def test_function(self, registry):
        assert matches(registry, "function_name", "bool regex_match(const char* s);") == ["regex_match"]

    def test_class_search_pattern_finds_declaration(self, registry):
        scanner = registry.get("class_name")
        match = scanner.scanner.search("class Foo {\n};")
        search_text = match.expand(scanner.format_template)
        assert search_text == r"class[^;{]+\bFoo\b[^;{]+\{"

    def test_function_search_pattern(self, registry):
        scanner = registry.get("function_name")
        match = scanner.scanner.search("void reset(int n);")
        assert match.expand(scanner.format_template) == (
            r"\b\w+\b\s+\breset\b\s*\([^;{]*\)\s*[;{]"
        )


class TestLoadFile:
    def test_loads_fixture_scanners(self, fixtures_root: Path):
        registry = ScannerRegistry()
        added = registry.load_file(fixtures_root / "scanners.yaml")
        assert added == 1
        scanner = registry.get("concept_name")
        assert scanner.section_filter == r"concepts\..*"
        assert scanner.accepts("/x/widget.hpp")

    def test_accepts_plain_list(self, tmp_path: Path):
        path = tmp_path / "s.yaml"
        path.write_text("- {type: todo, scanner: 'TODO (\\w+)', format: '\\1', term: '\\1'}\n")
        registry = ScannerRegistry()
        assert registry.load_file(path) == 1
        assert "todo" in registry

    def test_missing_keys(self, tmp_path: Path):
        path = tmp_path / "s.yaml"
        path.write_text("- type: todo\n  scanner: TODO\n")
        with pytest.raises(ScannerDefinitionError, match="missing: format, term"):
            ScannerRegistry().load_file(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "s.yaml"
        path.write_text("scanners: [unclosed\n")
        with pytest.raises(ScannerDefinitionError, match="Invalid YAML"):
            ScannerRegistry().load_file(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ScannerDefinitionError, match="Cannot read"):
            ScannerRegistry().load_file(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "s.yaml"
        path.write_text("")
        assert ScannerRegistry().load_file(path) == 0
