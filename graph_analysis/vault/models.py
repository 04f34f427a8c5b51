"""
Data models for the per-note structural cache.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Loc:
    """A zero-based line/column location inside a note."""
    line: int
    col: int


@dataclass
class Pos:
    """Span between two locations; ``end.col`` is exclusive."""
    start: Loc
    end: Loc

    @classmethod
    def on_line(cls, line: int, start_col: int, end_col: int) -> "Pos":
        return cls(Loc(line, start_col), Loc(line, end_col))

    def encloses(self, other: "Pos") -> bool:
        """Whether ``other`` lies within the lines covered by this span."""
        return self.start.line <= other.start.line and other.end.line <= self.end.line


@dataclass
class LinkCache:
    """A wikilink, embed or local Markdown link."""
    link: str
    original: str
    position: Pos
    display_text: Optional[str] = None


@dataclass
class TagCache:
    """An inline ``#tag`` occurrence."""
    tag: str
    position: Pos


@dataclass
class HeadingCache:
    heading: str
    level: int
    position: Pos


@dataclass
class ListItemCache:
    """
    A list item.

    ``parent`` is the start line of the parent item, or a negative number
    (``-(first line of the list + 1)``) for root items of a list.
    """
    parent: int
    position: Pos
    task: Optional[str] = None


@dataclass
class SectionCache:
    """A top-level block: yaml, heading, paragraph, list, code, blockquote, thematicBreak."""
    type: str
    position: Pos


@dataclass
class FileCache:
    """Structural metadata for a single note."""
    links: List[LinkCache] = field(default_factory=list)
    embeds: List[LinkCache] = field(default_factory=list)
    tags: List[TagCache] = field(default_factory=list)
    headings: List[HeadingCache] = field(default_factory=list)
    list_items: List[ListItemCache] = field(default_factory=list)
    sections: List[SectionCache] = field(default_factory=list)
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    frontmatter_tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class VaultFile:
    """A file inside the vault, identified by its vault-relative POSIX path."""
    path: str

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def basename(self) -> str:
        name = self.name
        return name.rsplit(".", 1)[0] if "." in name else name

    @property
    def extension(self) -> str:
        name = self.name
        return name.rsplit(".", 1)[1].lower() if "." in name else ""
