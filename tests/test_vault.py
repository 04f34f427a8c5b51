"""
Tests for the Markdown parser and the vault metadata cache.
"""

import pytest

from graph_analysis.vault.metadata_cache import MetadataCache
from graph_analysis.vault.parser import get_linkpath, parse_markdown

from conftest import write_vault


class TestMarkdownParser:
    """Test extraction of the structural cache."""

    def test_wikilinks_and_embeds(self):
        cache = parse_markdown("See [[Alpha|the alpha]] and ![[image.png]] then [[Beta#Part]].")

        assert [link.link for link in cache.links] == ["Alpha", "Beta#Part"]
        assert cache.links[0].display_text == "the alpha"
        assert cache.links[0].position.start.col == 4
        assert cache.links[0].position.end.col == 23
        assert [embed.link for embed in cache.embeds] == ["image.png"]

    def test_markdown_links_skip_urls(self):
        cache = parse_markdown("[local](Some%20Note.md) and [web](https://example.com)")

        assert [link.link for link in cache.links] == ["Some Note.md"]

    def test_inline_tags(self):
        cache = parse_markdown("Tagged #project/alpha and #2024 but not a#b")

        assert [tag.tag for tag in cache.tags] == ["#project/alpha"]
        assert cache.tags[0].position.start.col == 7

    def test_code_is_ignored(self):
        text = "```\n[[Hidden]] #hidden\n```\nUse `[[Inline]]` and [[Shown]]"
        cache = parse_markdown(text)

        assert [link.link for link in cache.links] == ["Shown"]
        assert cache.tags == []
        assert [s.type for s in cache.sections] == ["code", "paragraph"]

    def test_frontmatter(self):
        text = "---\ntitle: Note\ntags: [alpha, '#beta']\n---\nBody #inline"
        cache = parse_markdown(text)

        assert cache.frontmatter["title"] == "Note"
        assert cache.frontmatter_tags == ["#alpha", "#beta"]
        assert cache.sections[0].type == "yaml"
        assert cache.sections[0].position.end.line == 3
        assert [tag.tag for tag in cache.tags] == ["#inline"]

    def test_frontmatter_string_tags(self):
        cache = parse_markdown("---\ntags: one, two three\n---\n")
        assert cache.frontmatter_tags == ["#one", "#two", "#three"]

    def test_headings_and_sections(self):
        text = "# Title\n\nFirst para\nstill first\n\n## Sub ##\n---\n> quote"
        cache = parse_markdown(text)

        assert [(h.heading, h.level) for h in cache.headings] == [("Title", 1), ("Sub", 2)]
        assert [s.type for s in cache.sections] == [
            "heading", "paragraph", "heading", "thematicBreak", "blockquote"
        ]
        paragraph = cache.sections[1]
        assert (paragraph.position.start.line, paragraph.position.end.line) == (2, 3)

    def test_list_hierarchy(self):
        text = "Intro\n\n- one\n    - two\n        - three\n- four\n  continued"
        cache = parse_markdown(text)

        parents = [item.parent for item in cache.list_items]
        assert parents == [-3, 2, 3, -3]
        assert cache.list_items[3].position.end.line == 6
        assert [s.type for s in cache.sections] == ["paragraph", "list"]

    def test_task_items(self):
        cache = parse_markdown("- [x] done\n- [ ] todo")
        assert [item.task for item in cache.list_items] == ["x", " "]

    def test_get_linkpath(self):
        assert get_linkpath("Note#Heading") == "Note"
        assert get_linkpath("#Heading") == ""
        assert get_linkpath("folder/Note") == "folder/Note"


class TestMetadataCache:
    """Test vault scanning and link resolution."""

    @pytest.fixture
    def vault(self, tmp_path):
        return write_vault(tmp_path, {
            "Alpha.md": "Links to [[Beta]], [[sub/Gamma]], [[Missing]] and ![[pic.png]] #tag",
            "Beta.md": "---\ntags: [fm]\n---\nBack to [[alpha]] and [[Gamma]]",
            "sub/Gamma.md": "Nothing here",
            "other/Gamma.md": "Same name elsewhere [[Gamma]]",
            "pic.png": "not really an image",
            ".obsidian/config.md": "[[Alpha]]",
        })

    @pytest.mark.asyncio
    async def test_refresh_indexes_files(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        assert set(metadata.iter_notes()) == {"Alpha.md", "Beta.md", "sub/Gamma.md", "other/Gamma.md"}
        assert "pic.png" in metadata.files
        assert metadata.get_file_cache(".obsidian/config.md") is None

    @pytest.mark.asyncio
    async def test_resolved_and_unresolved_links(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        assert metadata.resolved_links["Alpha.md"] == {"Beta.md": 1, "sub/Gamma.md": 1, "pic.png": 1}
        assert metadata.unresolved_links["Alpha.md"] == {"Missing": 1}
        assert metadata.resolved_links["sub/Gamma.md"] == {}

    @pytest.mark.asyncio
    async def test_resolution_prefers_same_folder_then_shortest_path(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        assert metadata.get_first_linkpath_dest("Gamma", "other/Gamma.md").path == "other/Gamma.md"
        assert metadata.get_first_linkpath_dest("Gamma", "Beta.md").path == "sub/Gamma.md"
        assert metadata.get_first_linkpath_dest("ALPHA", "").path == "Alpha.md"
        assert metadata.get_first_linkpath_dest("Beta.md", "").path == "Beta.md"
        assert metadata.get_first_linkpath_dest("Missing", "") is None
        assert metadata.get_first_linkpath_dest("", "Beta.md").path == "Beta.md"

    @pytest.mark.asyncio
    async def test_paths_differing_only_by_case_stay_distinct(self, tmp_path):
        write_vault(tmp_path, {
            "Notes.md": "Upper",
            "notes.md": "Lower",
            "S.md": "[[Notes]]",
            "T.md": "[[notes]]",
        })
        metadata = MetadataCache(tmp_path)
        await metadata.refresh()

        assert metadata.resolved_links["S.md"] == {"Notes.md": 1}
        assert metadata.resolved_links["T.md"] == {"notes.md": 1}
        assert metadata.get_first_linkpath_dest("Notes.md", "").path == "Notes.md"
        assert metadata.get_first_linkpath_dest("notes.md", "").path == "notes.md"
        assert metadata.get_first_linkpath_dest("NOTES", "").path == "Notes.md"

    @pytest.mark.asyncio
    async def test_tags(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        tags = metadata.get_note_tags()
        assert tags["Alpha.md"] == ["#tag"]
        assert tags["Beta.md"] == ["#fm"]

    @pytest.mark.asyncio
    async def test_cached_read(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        assert await metadata.cached_read("sub/Gamma.md") == "Nothing here"

    @pytest.mark.asyncio
    async def test_missing_vault_raises(self, tmp_path):
        metadata = MetadataCache(tmp_path / "nope")
        with pytest.raises(FileNotFoundError):
            await metadata.refresh()

    @pytest.mark.asyncio
    async def test_stats(self, vault):
        metadata = MetadataCache(vault)
        await metadata.refresh()

        stats = metadata.get_stats()
        assert stats["total_notes"] == 4
        assert stats["total_files"] == 5
        assert stats["unresolved_links"] == 1
