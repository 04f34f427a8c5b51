"""
Co-citation scorer.

For a note ``a``, every note linking to ``a`` is read and the other links,
embeds and tags it contains are scored by how close they sit to the links to
``a``. Scores are the maximum evidence per document, summed across documents.
"""

import logging
from typing import List

from ..algorithms.models import CoCitation, CoCitationEntry, CoCitationMap
from ..config import MD_EXTENSION, GraphAnalysisSettings
from ..graph.note_graph import NoteGraph
from ..text.utils import round_number
from ..vault.metadata_cache import MetadataCache
from ..vault.models import FileCache, LinkCache, TagCache
from ..vault.parser import get_linkpath
from .context import (
    CacheItem,
    DocumentContext,
    PreCocitation,
    PreCocitations,
    extract_own_link_details,
    score_candidate,
)

logger = logging.getLogger(__name__)


class CoCitationScorer:
    """Scores co-citations of a note across the documents linking to it."""

    def __init__(self, graph: NoteGraph, metadata: MetadataCache, settings: GraphAnalysisSettings):
        self.graph = graph
        self.metadata = metadata
        self.settings = settings

    def _accepts_extension(self, extension: str) -> bool:
        return self.settings.all_file_extensions or extension == "md"

    def own_links(self, a: str, source: str, cache: FileCache) -> List[LinkCache]:
        """Links and embeds of ``source`` that resolve to ``a``."""
        own = []
        for link in [*cache.links, *cache.embeds]:
            dest = self.metadata.get_first_linkpath_dest(get_linkpath(link.link), source)
            if dest is not None and dest.path == a and self._accepts_extension(dest.extension):
                own.append(link)
        return own

    def candidates(self, cache: FileCache) -> List[CacheItem]:
        items: List[CacheItem] = [*cache.links, *cache.embeds]
        if self.settings.co_tags:
            items.extend(cache.tags)
        return items

    def candidate_key(self, item: CacheItem, source: str):
        """Key a candidate is scored under: resolved path, tag, or raw linkpath."""
        if isinstance(item, TagCache):
            return item.tag
        linkpath = get_linkpath(item.link)
        dest = self.metadata.get_first_linkpath_dest(linkpath, source)
        if dest is None:
            return linkpath or None
        if not self._accepts_extension(dest.extension):
            return None
        return dest.path

    async def score(self, a: str) -> CoCitationMap:
        """
        Compute co-citation scores for note ``a``.

        Returns:
            Mapping from target (path, synthesized unresolved path or ``#tag``)
            to its entry. ``a`` itself is always present with measure 0.
        """
        results: CoCitationMap = {}

        for source in self.graph.in_neighbors(a):
            doc = await self._document(a, source)
            if doc is None:
                continue

            for item in self.candidates(doc.cache):
                link_path = self.candidate_key(item, source)
                if not link_path or link_path == a:
                    continue
                score_candidate(item, link_path, doc)

            if self.settings.co_tags:
                self._add_document_tags(doc)

            self._merge(results, doc.pre_cocitations)

        for entry in results.values():
            entry.measure = round_number(entry.measure)
        results[a] = CoCitationEntry(0, [], True)

        logger.debug(f"Co-citations of {a}: {len(results) - 1} targets")
        return results

    async def _document(self, a: str, source: str):
        vault_file = self.metadata.get_file(source)
        cache = self.metadata.get_file_cache(source)
        if vault_file is None or cache is None:
            return None

        own_links = self.own_links(a, source, cache)
        if not own_links:
            return None

        try:
            text = await self.metadata.cached_read(source)
        except FileNotFoundError:
            logger.warning(f"Skipping {source}: note no longer exists")
            return None

        lines = text.split("\n")
        details = extract_own_link_details(own_links, cache, lines)
        return DocumentContext(source, lines, cache, details)

    def _add_document_tags(self, doc: DocumentContext):
        """Tags not already scored get the document's minimum score."""
        min_score = doc.details.min_score
        for tag in self.metadata.get_all_tags(doc.cache):
            if tag not in doc.pre_cocitations:
                doc.pre_cocitations[tag] = PreCocitation(
                    min_score, [CoCitation(["", tag, ""], min_score, doc.source, 0)]
                )

    def _merge(self, results: CoCitationMap, pre_cocitations: PreCocitations):
        for key, pre in pre_cocitations.items():
            dest = self.metadata.get_first_linkpath_dest(key, "")
            resolved = True
            if dest is not None:
                name = dest.path
            elif key.startswith("#"):
                name = key
            elif self.settings.add_unresolved:
                name = key + MD_EXTENSION
                resolved = False
            else:
                continue

            if name in results:
                results[name].measure += pre.measure
                results[name].co_citations.extend(pre.co_citations)
            else:
                results[name] = CoCitationEntry(pre.measure, list(pre.co_citations), resolved)


async def score_cocitations(graph: NoteGraph, metadata: MetadataCache,
                            settings: GraphAnalysisSettings, a: str) -> CoCitationMap:
    return await CoCitationScorer(graph, metadata, settings).score(a)
