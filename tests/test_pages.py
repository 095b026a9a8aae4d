"""Tests for markdown frontmatter parsing and page discovery."""

import pytest

from pooltable.services.pages import parse_frontmatter, read_markdown_pages

_POOL_MD = """---
template: PoolDetailPage
memberSince: 2021-06-01
identities:
  - type: twitter
    id: "@armada"
---

# Armada pool

Some body text.
"""


class TestParseFrontmatter:
    def test_mapping_is_returned(self):
        data = parse_frontmatter(_POOL_MD)
        assert data["template"] == "PoolDetailPage"
        assert data["identities"] == [{"type": "twitter", "id": "@armada"}]

    def test_no_frontmatter(self):
        assert parse_frontmatter("# Just a heading\n") == {}

    def test_empty_frontmatter(self):
        assert parse_frontmatter("---\n---\nbody") == {}

    def test_byte_order_mark_is_ignored(self):
        assert parse_frontmatter("\ufeff---\ntitle: x\n---\n") == {"title": "x"}

    def test_unterminated_block_raises(self):
        with pytest.raises(ValueError):
            parse_frontmatter("---\ntitle: x\n")

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            parse_frontmatter("---\n- a\n- b\n---\n")


class TestReadMarkdownPages:
    def test_filename_comes_from_file_stem(self, tmp_path):
        pools = tmp_path / "stake-pools"
        pools.mkdir()
        (pools / "pool1abc.md").write_text(_POOL_MD, encoding="utf-8")

        [page] = read_markdown_pages(tmp_path)

        assert page.params.filename == "pool1abc"
        assert page.is_pool_page
        assert page.identities == [{"type": "twitter", "id": "@armada"}]
        assert page.member_since is not None

    def test_other_templates_are_read_but_not_pool_pages(self, tmp_path):
        (tmp_path / "about.md").write_text("---\ntemplate: ContentPage\ntitle: About\n---\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text("plain markdown", encoding="utf-8")

        pages = read_markdown_pages(tmp_path)

        assert [p.params.filename for p in pages] == ["about", "notes"]
        assert not any(p.is_pool_page for p in pages)

    def test_explicit_params_filename_wins(self, tmp_path):
        (tmp_path / "x.md").write_text(
            "---\ntemplate: PoolDetailPage\nparams:\n  filename: pool1xyz\n---\n", encoding="utf-8"
        )

        [page] = read_markdown_pages(tmp_path)

        assert page.params.filename == "pool1xyz"

    def test_broken_frontmatter_is_skipped(self, tmp_path):
        (tmp_path / "broken.md").write_text("---\ntemplate: [unclosed\n---\n", encoding="utf-8")
        (tmp_path / "ok.md").write_text(_POOL_MD, encoding="utf-8")

        pages = read_markdown_pages(tmp_path)

        assert [p.params.filename for p in pages] == ["ok"]

    def test_missing_directory(self, tmp_path):
        assert read_markdown_pages(tmp_path / "nope") == []
