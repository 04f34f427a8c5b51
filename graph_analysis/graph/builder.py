"""
Graph Builder: turns link adjacency into a filtered NoteGraph.
"""

import logging
from typing import Dict, List, Mapping, Optional, Pattern

from ..config import MD_EXTENSION, GraphAnalysisSettings
from .note_graph import NoteGraph

logger = logging.getLogger(__name__)

LinkCounts = Mapping[str, Mapping[str, int]]


class GraphBuilder:
    """Applies the inclusion policy while building the note graph."""

    def __init__(self, settings: GraphAnalysisSettings):
        self.settings = settings
        # Compiled eagerly so a malformed pattern fails before any graph work
        self.regex: Optional[Pattern] = settings.compile_exclusion_regex()

    def include_tags(self, tags: Optional[List[str]]) -> bool:
        excluded = self.settings.exclusion_tags
        if not excluded or not tags:
            return True
        return not any(tag in excluded for tag in tags)

    def include_regex(self, node: str) -> bool:
        return self.regex is None or not self.regex.search(node)

    def include_extension(self, node: str) -> bool:
        return self.settings.all_file_extensions or node.endswith(MD_EXTENSION)

    def is_included(self, node: str, note_tags: Mapping[str, List[str]]) -> bool:
        return (
            self.include_tags(note_tags.get(node))
            and self.include_regex(node)
            and self.include_extension(node)
        )

    def build(
        self,
        resolved_links: LinkCounts,
        unresolved_links: LinkCounts,
        note_tags: Mapping[str, List[str]],
    ) -> NoteGraph:
        """
        Build the note graph.

        Args:
            resolved_links: source -> {dest: count} for links to existing files
            unresolved_links: source -> {raw target: count} for dangling links
            note_tags: note -> tags (with ``#``) used for tag exclusion

        Returns:
            A freshly built NoteGraph
        """
        graph = NoteGraph()

        for source, dests in resolved_links.items():
            if not self.is_included(source, note_tags):
                continue
            graph.add_node_if_missing(source)
            for dest in dests:
                if self.is_included(dest, note_tags):
                    graph.add_link(source, dest, resolved=True)

        if self.settings.add_unresolved:
            for source, dests in unresolved_links.items():
                if not self.is_included(source, note_tags):
                    continue
                graph.add_node_if_missing(source)
                for dest in dests:
                    dest_md = dest + MD_EXTENSION
                    if self.include_regex(dest_md):
                        graph.add_link(source, dest_md, resolved=False)

        logger.info(
            f"Built graph with {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges"
        )
        return graph


def build_graph(
    resolved_links: LinkCounts,
    unresolved_links: LinkCounts,
    note_tags: Dict[str, List[str]],
    settings: GraphAnalysisSettings,
) -> NoteGraph:
    """Build a NoteGraph from link adjacency using ``settings``."""
    return GraphBuilder(settings).build(resolved_links, unresolved_links, note_tags)
