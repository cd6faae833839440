"""Tests for file utilities."""

import os
from datetime import date

import pytest

from blogue.file_utils import (
    ParseError,
    dump_post,
    has_frontmatter,
    list_markdown_files,
    parse_frontmatter,
    read_post,
    write_file_atomic,
)


@pytest.mark.asyncio
async def test_write_file_atomic(tmp_path):
    """Test atomic file writing."""
    test_file = tmp_path / "nested" / "test.md"
    content = "# Test\nThis is a test file."

    await write_file_atomic(test_file, content)
    assert test_file.exists()
    assert test_file.read_text(encoding="utf-8") == content

    # Temp file should be cleaned up
    assert not test_file.with_suffix(".md.tmp").exists()


@pytest.mark.asyncio
async def test_write_file_atomic_replaces_existing(tmp_path):
    test_file = tmp_path / "test.md"
    test_file.write_text("old")

    await write_file_atomic(str(test_file), "new")
    assert test_file.read_text() == "new"


def test_has_frontmatter():
    """Test frontmatter detection."""
    assert has_frontmatter("---\ntitle: Test\n---\nContent")
    assert has_frontmatter("\ufeff---\ntitle: Test\n---\nContent")
    assert not has_frontmatter("# Just content")
    assert not has_frontmatter("")
    assert not has_frontmatter("---\ntitle: Test")


class TestParseFrontmatter:
    def test_valid(self):
        metadata, body = parse_frontmatter("---\ntitle: Test\ntags: [a, b]\n---\n\n# Body")
        assert metadata == {"title": "Test", "tags": ["a", "b"]}
        assert "# Body" in body

    def test_dates(self):
        metadata, _ = parse_frontmatter("---\nquoted: '2024-01-15'\nbare: 2024-01-15\n---\n")
        assert metadata["quoted"] == "2024-01-15"
        assert metadata["bare"] == date(2024, 1, 15)

    def test_no_frontmatter(self):
        metadata, body = parse_frontmatter("# Just content")
        assert metadata == {}
        assert body == "# Just content"

    def test_invalid_yaml(self):
        with pytest.raises(ParseError, match="Invalid frontmatter"):
            parse_frontmatter("---\ntitle: [unclosed\n---\n\nbody")


class TestDumpPost:
    def test_key_order_and_block_lists(self):
        text = dump_post({"title": "Hello", "tags": ["a", "b"], "draft": True}, "# Hello")

        assert text.startswith("---\ntitle: Hello\ntags:\n- a\n- b\ndraft: true\n---\n")
        assert "# Hello" in text

    def test_empty_list(self):
        assert "tags: []" in dump_post({"tags": []}, "")

    def test_date_quoting(self):
        text = dump_post({"asString": "2024-01-15", "asDate": date(2024, 1, 15)}, "")
        assert "asString: '2024-01-15'" in text
        assert "asDate: 2024-01-15\n" in text

    def test_round_trip_keeps_representation(self):
        metadata = {"title": "T", "date": "2024-01-15", "pubDate": date(2024, 1, 15)}
        parsed, _ = parse_frontmatter(dump_post(metadata, "body"))
        assert parsed == metadata

    def test_no_metadata(self):
        assert dump_post({}, "just body") == "just body"


class TestListMarkdownFiles:
    def test_newest_first_then_name(self, tmp_path):
        for name, mtime in [("b.md", 1_000), ("a.md", 1_000), ("new.md", 2_000)]:
            path = tmp_path / name
            path.write_text("x")
            os.utime(path, (mtime, mtime))

        assert [p.name for p in list_markdown_files(tmp_path)] == ["new.md", "a.md", "b.md"]

    def test_extension_filter(self, tmp_path):
        (tmp_path / "a.md").write_text("x")
        (tmp_path / "B.MD").write_text("x")
        (tmp_path / "c.mdx").write_text("x")
        (tmp_path / "d.txt").write_text("x")
        (tmp_path / "sub.md").mkdir()

        assert sorted(p.name for p in list_markdown_files(tmp_path)) == ["B.MD", "a.md"]
        names = sorted(p.name for p in list_markdown_files(tmp_path, (".md", ".mdx")))
        assert names == ["B.MD", "a.md", "c.mdx"]


class TestReadPost:
    def test_reads(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("---\ntitle: T\n---\n\nbody", encoding="utf-8")
        metadata, body = read_post(path)
        assert metadata == {"title": "T"}
        assert body.strip() == "body"

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_post(tmp_path / "missing.md")
