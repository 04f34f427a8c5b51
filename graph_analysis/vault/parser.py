"""
Markdown parser that extracts the structural cache of a note.

The parser is line based: it recognises YAML frontmatter, ATX headings,
(nested) list items, fenced code, blockquotes and paragraphs, and records
wikilinks, embeds, local Markdown links and inline tags with their spans.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import unquote

import yaml

from .models import (
    FileCache,
    HeadingCache,
    LinkCache,
    ListItemCache,
    Loc,
    Pos,
    SectionCache,
    TagCache,
)

logger = logging.getLogger(__name__)

WIKILINK_PATTERN = re.compile(r'(!?)\[\[([^\[\]\n]+?)\]\]')
MARKDOWN_LINK_PATTERN = re.compile(r'(!?)\[([^\[\]\n]*)\]\(([^()\s]+)\)')
TAG_PATTERN = re.compile(r'(?:(?<=\s)|^)#([\w/-]+)')
NUMERIC_TAG_PATTERN = re.compile(r'^[\d/-]+$')
HEADING_PATTERN = re.compile(r'^(#{1,6})(?:[ \t]+(.*))?$')
LIST_ITEM_PATTERN = re.compile(r'^([ \t]*)([-*+]|\d+[.)])(?:[ \t]+|$)(?:\[(.)\][ \t]+)?')
FENCE_PATTERN = re.compile(r'^[ \t]*(`{3,}|~{3,})')
THEMATIC_BREAK_PATTERN = re.compile(r'^[ \t]{0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$')
BLOCKQUOTE_PATTERN = re.compile(r'^[ \t]{0,3}>')
INLINE_CODE_PATTERN = re.compile(r'(`+)(.+?)\1')
URL_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


class _Block:
    """Currently open top-level block."""

    def __init__(self, type_: str, start: int):
        self.type = type_
        self.start = start
        self.end = start


class MarkdownParser:
    """Parser producing a :class:`FileCache` from raw note text."""

    def parse(self, text: str) -> FileCache:
        lines = text.split("\n")
        cache = FileCache()
        body_start = self._parse_frontmatter(lines, cache)
        self._parse_blocks(lines, body_start, cache)
        return cache

    def _parse_frontmatter(self, lines: List[str], cache: FileCache) -> int:
        """Parse a leading ``---`` YAML block; returns the first body line."""
        if not lines or lines[0].rstrip() != "---":
            return 0

        for end in range(1, len(lines)):
            if lines[end].rstrip() in ("---", "..."):
                break
        else:
            return 0

        try:
            data = yaml.safe_load("\n".join(lines[1:end])) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Invalid frontmatter: {e}")
            data = {}
        if not isinstance(data, dict):
            data = {}

        cache.frontmatter = data
        cache.frontmatter_tags = self._frontmatter_tags(data)
        cache.sections.append(
            SectionCache("yaml", Pos(Loc(0, 0), Loc(end, len(lines[end]))))
        )
        return end + 1

    @staticmethod
    def _frontmatter_tags(data: dict) -> List[str]:
        raw = data.get("tags", data.get("tag"))
        if isinstance(raw, str):
            items = re.split(r"[,\s]+", raw)
        elif isinstance(raw, list):
            items = [str(t) for t in raw if t is not None]
        else:
            items = []

        tags = []
        for item in items:
            name = item.strip().lstrip("#")
            if name:
                tags.append("#" + name)
        return tags

    def _parse_blocks(self, lines: List[str], start: int, cache: FileCache):
        block: Optional[_Block] = None
        fence: Optional[str] = None
        list_start = 0
        stack: List[tuple] = []  # (indent, line) of open list items
        current_item: Optional[ListItemCache] = None

        def close():
            nonlocal block
            if block is not None:
                end_col = len(lines[block.end])
                cache.sections.append(
                    SectionCache(block.type, Pos(Loc(block.start, 0), Loc(block.end, end_col)))
                )
            block = None

        for i in range(start, len(lines)):
            line = lines[i]

            if fence is not None:
                block.end = i
                closing = FENCE_PATTERN.match(line)
                if closing and closing.group(1)[0] == fence[0] and len(closing.group(1)) >= len(fence):
                    close()
                    fence = None
                continue

            opening = FENCE_PATTERN.match(line)
            if opening:
                close()
                block = _Block("code", i)
                fence = opening.group(1)
                continue

            if not line.strip():
                if block is not None and block.type == "list" and self._list_continues(lines, i):
                    continue
                close()
                continue

            heading = HEADING_PATTERN.match(line)
            if heading:
                close()
                text = re.sub(r"[ \t]+#+[ \t]*$", "", heading.group(2) or "").strip()
                position = Pos.on_line(i, 0, len(line))
                cache.headings.append(HeadingCache(text, len(heading.group(1)), position))
                cache.sections.append(SectionCache("heading", position))
                self._parse_inline(line, i, cache)
                continue

            if THEMATIC_BREAK_PATTERN.match(line):
                close()
                cache.sections.append(SectionCache("thematicBreak", Pos.on_line(i, 0, len(line))))
                continue

            item = LIST_ITEM_PATTERN.match(line)
            if item:
                if block is None or block.type != "list":
                    close()
                    block = _Block("list", i)
                    list_start = i
                    stack = []
                indent = len(item.group(1).expandtabs(4))
                while stack and stack[-1][0] >= indent:
                    stack.pop()
                parent = stack[-1][1] if stack else -(list_start + 1)
                current_item = ListItemCache(
                    parent=parent,
                    position=Pos.on_line(i, len(item.group(1)), len(line)),
                    task=item.group(3),
                )
                cache.list_items.append(current_item)
                stack.append((indent, i))
                block.end = i
            elif block is not None and block.type == "list":
                current_item.position.end = Loc(i, len(line))
                block.end = i
            elif BLOCKQUOTE_PATTERN.match(line) and (block is None or block.type != "blockquote"):
                close()
                block = _Block("blockquote", i)
            elif block is not None and block.type in ("paragraph", "blockquote"):
                block.end = i
            else:
                close()
                block = _Block("paragraph", i)

            self._parse_inline(line, i, cache)

        if fence is not None:
            logger.debug("Unterminated code fence at end of note")
        close()

    @staticmethod
    def _list_continues(lines: List[str], i: int) -> bool:
        """A blank line keeps a list open when the next content is an item or indented."""
        for j in range(i + 1, len(lines)):
            nxt = lines[j]
            if nxt.strip():
                return bool(LIST_ITEM_PATTERN.match(nxt)) or nxt[0] in " \t"
        return False

    def _parse_inline(self, line: str, i: int, cache: FileCache):
        masked = INLINE_CODE_PATTERN.sub(lambda m: " " * len(m.group(0)), line)

        for match in WIKILINK_PATTERN.finditer(masked):
            target, _, alias = match.group(2).partition("|")
            link = LinkCache(
                link=target.strip(),
                original=line[match.start():match.end()],
                position=Pos.on_line(i, match.start(), match.end()),
                display_text=alias.strip() or None,
            )
            (cache.embeds if match.group(1) else cache.links).append(link)

        for match in MARKDOWN_LINK_PATTERN.finditer(masked):
            target = match.group(3)
            if URL_SCHEME_PATTERN.match(target):
                continue
            link = LinkCache(
                link=unquote(target),
                original=line[match.start():match.end()],
                position=Pos.on_line(i, match.start(), match.end()),
                display_text=match.group(2) or None,
            )
            (cache.embeds if match.group(1) else cache.links).append(link)

        for match in TAG_PATTERN.finditer(masked):
            name = match.group(1)
            if NUMERIC_TAG_PATTERN.match(name):
                continue
            cache.tags.append(
                TagCache("#" + name, Pos.on_line(i, match.start(), match.end()))
            )


def parse_markdown(text: str) -> FileCache:
    """Parse ``text`` into a :class:`FileCache`."""
    return MarkdownParser().parse(text)


def get_linkpath(link: str) -> str:
    """Strip the ``#heading`` / ``#^block`` subpath from a link target."""
    return link.split("#", 1)[0].strip()
