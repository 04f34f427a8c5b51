"""
Metadata cache for a Markdown vault on disk.

Walks the vault, parses every note and exposes resolved / unresolved link
adjacency, per-note structural caches and raw note text.
"""

import asyncio
import logging
import posixpath
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import FileCache, VaultFile
from .parser import MarkdownParser, get_linkpath

logger = logging.getLogger(__name__)

LinkCounts = Dict[str, Dict[str, int]]


class MetadataCache:
    """Read-only metadata about the notes of a vault."""

    def __init__(self, vault_path: Path, parser: Optional[MarkdownParser] = None):
        self.vault_path = Path(vault_path)
        self.parser = parser or MarkdownParser()

        self.files: Dict[str, VaultFile] = {}
        self.caches: Dict[str, FileCache] = {}
        self.resolved_links: LinkCounts = {}
        self.unresolved_links: LinkCounts = {}

        self._contents: Dict[str, str] = {}
        self._by_path: Dict[str, List[str]] = {}  # lowercased path -> paths
        self._by_name: Dict[str, List[str]] = {}  # lowercased name / stem -> paths

    async def refresh(self):
        """
        Re-scan the vault and rebuild every index.

        The new state replaces the old one only once the scan completed, so a
        read failure leaves the previous metadata untouched.

        Raises:
            OSError: if the vault or one of its notes cannot be read.
        """
        if not self.vault_path.is_dir():
            raise FileNotFoundError(f"Vault directory {self.vault_path} does not exist")

        files: Dict[str, VaultFile] = {}
        for file_path in sorted(self.vault_path.rglob("*")):
            relative = file_path.relative_to(self.vault_path)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if file_path.is_file():
                vault_file = VaultFile(relative.as_posix())
                files[vault_file.path] = vault_file

        contents: Dict[str, str] = {}
        caches: Dict[str, FileCache] = {}
        for path, vault_file in files.items():
            if vault_file.extension != "md":
                continue
            text = await self._read_file(path)
            contents[path] = text
            caches[path] = self.parser.parse(text)

        self.files = files
        self.caches = caches
        self._contents = contents
        self._build_indexes()
        self._resolve_links()

        logger.info(
            f"Indexed {len(self.caches)} notes and {len(self.files) - len(self.caches)} "
            f"other files from {self.vault_path}"
        )

    async def _read_file(self, path: str) -> str:
        return await asyncio.to_thread((self.vault_path / path).read_text, encoding="utf-8")

    def _build_indexes(self):
        by_path: Dict[str, List[str]] = defaultdict(list)
        by_name: Dict[str, List[str]] = defaultdict(list)
        for path, vault_file in self.files.items():
            by_path[path.lower()].append(path)
            by_name[vault_file.name.lower()].append(path)
            if vault_file.extension == "md":
                by_name[vault_file.basename.lower()].append(path)
        self._by_path = dict(by_path)
        self._by_name = dict(by_name)

    def _resolve_links(self):
        resolved: LinkCounts = {}
        unresolved: LinkCounts = {}
        for source, cache in self.caches.items():
            resolved[source] = {}
            for link in [*cache.links, *cache.embeds]:
                linkpath = get_linkpath(link.link)
                dest = self.get_first_linkpath_dest(linkpath, source)
                if dest is not None:
                    resolved[source][dest.path] = resolved[source].get(dest.path, 0) + 1
                elif linkpath:
                    unresolved.setdefault(source, {})
                    unresolved[source][linkpath] = unresolved[source].get(linkpath, 0) + 1
        self.resolved_links = resolved
        self.unresolved_links = unresolved

    def get_first_linkpath_dest(self, linkpath: str, source_path: str = "") -> Optional[VaultFile]:
        """
        Resolve a link target to a vault file.

        Tries the path relative to the source note (for ``./`` links) and the
        exact path, with and without ``.md``, then the same paths ignoring
        case, then a case-insensitive name match preferring the source's
        folder and otherwise the shortest path. Files whose paths differ only
        by case stay distinct, and an exact match always wins.

        Returns:
            The matching file, or None if the target does not exist.
        """
        linkpath = linkpath.strip()
        if not linkpath:
            return self.files.get(source_path)

        source_dir = posixpath.dirname(source_path)
        keys = [linkpath]
        if linkpath.startswith("."):
            keys.insert(0, posixpath.normpath(posixpath.join(source_dir, linkpath)))

        for key in keys:
            for candidate in (key, key + ".md"):
                if candidate in self.files:
                    return self.files[candidate]

        for key in keys:
            for candidate in (key.lower(), key.lower() + ".md"):
                paths = self._by_path.get(candidate)
                if paths:
                    return self.files[paths[0]]

        key = keys[-1].lower()
        if "/" in key:
            matches = [
                path for lower, paths in self._by_path.items()
                if lower.endswith("/" + key) or lower.endswith("/" + key + ".md")
                for path in paths
            ]
        else:
            matches = self._by_name.get(key, [])
        if not matches:
            return None

        same_folder = [path for path in matches if posixpath.dirname(path) == source_dir]
        if same_folder:
            return self.files[same_folder[0]]
        best = min(matches, key=lambda path: (path.count("/"), len(path), path))
        return self.files[best]

    def get_file_cache(self, path: str) -> Optional[FileCache]:
        return self.caches.get(path)

    def get_file(self, path: str) -> Optional[VaultFile]:
        return self.files.get(path)

    async def cached_read(self, path: str) -> str:
        """Return the text of a note, reading it from disk if it is not cached."""
        if path not in self._contents:
            self._contents[path] = await self._read_file(path)
        return self._contents[path]

    @staticmethod
    def get_all_tags(cache: Optional[FileCache]) -> List[str]:
        """Frontmatter tags followed by inline tags, all prefixed with ``#``."""
        if cache is None:
            return []
        return [*cache.frontmatter_tags, *(tag.tag for tag in cache.tags)]

    def get_note_tags(self) -> Dict[str, List[str]]:
        return {path: self.get_all_tags(cache) for path, cache in self.caches.items()}

    def iter_notes(self) -> Iterable[str]:
        return iter(self.caches)

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about the indexed vault."""
        return {
            "total_files": len(self.files),
            "total_notes": len(self.caches),
            "resolved_links": sum(len(dests) for dests in self.resolved_links.values()),
            "unresolved_links": sum(len(dests) for dests in self.unresolved_links.values()),
            "tags": len({tag for tags in self.get_note_tags().values() for tag in tags}),
        }
