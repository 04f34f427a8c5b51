"""
Vault metadata: Markdown parsing and link resolution.
"""

from .metadata_cache import MetadataCache
from .models import (
    FileCache,
    HeadingCache,
    LinkCache,
    ListItemCache,
    Loc,
    Pos,
    SectionCache,
    TagCache,
    VaultFile,
)
from .parser import MarkdownParser, get_linkpath, parse_markdown

__all__ = [
    "FileCache",
    "HeadingCache",
    "LinkCache",
    "ListItemCache",
    "Loc",
    "MarkdownParser",
    "MetadataCache",
    "Pos",
    "SectionCache",
    "TagCache",
    "VaultFile",
    "get_linkpath",
    "parse_markdown",
]
