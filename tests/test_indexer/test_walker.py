"""Tests for file system helpers."""

from pathlib import Path

from auto_index.indexer.walker import compile_mask, iter_children, read_text


class TestReadText:
    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "a.hpp"
        path.write_text("class A {};")
        assert read_text(path) == "class A {};"

    def test_missing_file_is_empty(self, tmp_path: Path):
        assert read_text(tmp_path / "missing.hpp") == ""

    def test_directory_is_empty(self, tmp_path: Path):
        assert read_text(tmp_path) == ""

    def test_invalid_utf8_is_replaced(self, tmp_path: Path):
        path = tmp_path / "latin1.hpp"
        path.write_bytes(b"// caf\xe9\nclass A {};")
        assert "class A {};" in read_text(path)


class TestIterChildren:
    def test_sorted_by_name(self, tmp_path: Path):
        for name in ("b.hpp", "a.hpp", "c"):
            (tmp_path / name).touch()
        assert [p.name for p in iter_children(tmp_path)] == ["a.hpp", "b.hpp", "c"]


class TestCompileMask:
    def test_regex_mask(self):
        mask = compile_mask(r".*\.hpp")
        assert mask.fullmatch("widget.hpp")
        assert not mask.fullmatch("widget.hpp.bak")

    def test_glob_fallback(self):
        mask = compile_mask("*.hpp")
        assert mask.fullmatch("widget.hpp")
        assert not mask.fullmatch("widget.cpp")
