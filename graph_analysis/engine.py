"""
Graph Analysis Engine - owns the note graph and dispatches analysis requests.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .algorithms.models import AlgorithmResult, Subtype
from .algorithms.registry import AnalysisContext, get_algorithm, parse_subtype
from .config import GraphAnalysisSettings
from .graph.builder import GraphBuilder
from .graph.note_graph import NoteGraph
from .vault.metadata_cache import MetadataCache

logger = logging.getLogger(__name__)

REFRESH_FAILED_NOTICE = "An error occurred while refreshing the graph. Check the log for details."


@dataclass
class AnalysisOutcome:
    """Result of an engine operation plus any user-facing notices."""
    result: Optional[Any] = None
    notices: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GraphAnalysisEngine:
    """
    Builds the note graph from vault metadata and runs algorithms on it.

    A refresh replaces the graph only after metadata and graph were rebuilt
    successfully; queries always see a complete graph.
    """

    def __init__(self, settings: GraphAnalysisSettings, metadata: Optional[MetadataCache] = None):
        self.settings = settings
        self.metadata = metadata or MetadataCache(settings.vault_path)
        self.graph = NoteGraph()

    @property
    def context(self) -> AnalysisContext:
        return AnalysisContext(self.graph, self.metadata, self.settings)

    async def refresh_graph(self) -> AnalysisOutcome:
        """
        Re-read the vault and rebuild the graph.

        Raises:
            ConfigurationError: if the settings are invalid (e.g. a malformed
                exclusion regex). Nothing is rebuilt in that case.
        """
        builder = GraphBuilder(self.settings)

        try:
            await self.metadata.refresh()
        except (OSError, UnicodeDecodeError) as e:
            logger.exception(f"Error refreshing vault metadata: {e}")
            return AnalysisOutcome(notices=[REFRESH_FAILED_NOTICE], error=str(e))

        self.graph = builder.build(
            self.metadata.resolved_links,
            self.metadata.unresolved_links,
            self.metadata.get_note_tags(),
        )
        return AnalysisOutcome(result=self.graph.get_stats())

    async def run_algorithm(self, name, source: str, **params: Any) -> AlgorithmResult:
        """
        Run one algorithm for ``source``.

        Raises:
            UnknownAlgorithmError: if ``name`` is not a known algorithm.
        """
        algorithm = get_algorithm(name)
        logger.debug(f"Running {parse_subtype(name).value} for {source}")
        return await algorithm(self.context, source, **params)

    async def analyze(self, name, source: str, **params: Any) -> AnalysisOutcome:
        """Run an algorithm and collect notices instead of raising for missing nodes."""
        subtype = parse_subtype(name)
        notices: List[str] = []
        if subtype == Subtype.LOUVAIN and not self.graph.has_node(source):
            notices.append(f'Node "{source}" not found in the graph.')

        result = await self.run_algorithm(subtype, source, **params)
        return AnalysisOutcome(result=result, notices=notices)

    def resolve_note(self, name: str) -> str:
        """Map user input (path, name or basename) to a graph node id."""
        if self.graph.has_node(name):
            return name
        vault_file = self.metadata.get_first_linkpath_dest(name, "")
        if vault_file is not None and self.graph.has_node(vault_file.path):
            return vault_file.path
        return name

    def nodes(self) -> List[str]:
        return self.graph.nodes()

    def has_node(self, node: str) -> bool:
        return self.graph.has_node(node)

    def neighbors(self, node: str) -> List[str]:
        return self.graph.neighbors(node)

    def in_neighbors(self, node: str) -> List[str]:
        return self.graph.in_neighbors(node)

    def get_stats(self):
        """Get statistics about the vault and the graph."""
        return {**self.metadata.get_stats(), **self.graph.get_stats()}
