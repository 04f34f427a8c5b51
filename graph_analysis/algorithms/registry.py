"""
Algorithm registry.

Maps every Subtype to an async callable ``(context, a, **params)``. Whole-graph
algorithms ignore ``a`` but keep the uniform signature.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict

from ..cocitation.scorer import CoCitationScorer
from ..config import GraphAnalysisSettings
from ..errors import UnknownAlgorithmError
from ..graph.note_graph import NoteGraph
from ..vault.metadata_cache import MetadataCache
from .centrality import betweenness_centrality, hits, pagerank
from .community import clustering_coefficient, label_propagation, louvain
from .models import ANALYSIS_TYPES, AlgorithmInfo, AlgorithmResult, Subtype
from .similarity import adamic_adar, common_neighbours, jaccard, overlap

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """What an algorithm may read: the graph, vault metadata and settings."""
    graph: NoteGraph
    metadata: MetadataCache
    settings: GraphAnalysisSettings


Algorithm = Callable[..., Awaitable[AlgorithmResult]]


def _graph_algorithm(fn: Callable[[NoteGraph, str], AlgorithmResult]) -> Algorithm:
    async def run(context: AnalysisContext, a: str, **params: Any) -> AlgorithmResult:
        return fn(context.graph, a)

    run.__name__ = fn.__name__
    run.__doc__ = fn.__doc__
    return run


async def _co_citations(context: AnalysisContext, a: str, **params: Any) -> AlgorithmResult:
    scorer = CoCitationScorer(context.graph, context.metadata, context.settings)
    return await scorer.score(a)


async def _label_propagation(context: AnalysisContext, a: str, **params: Any) -> AlgorithmResult:
    iterations = params.get("iterations")
    if iterations is None:
        iterations = context.settings.label_propagation_iterations
    return label_propagation(context.graph, a, iterations)


async def _louvain(context: AnalysisContext, a: str, **params: Any) -> AlgorithmResult:
    resolution = params.get("resolution")
    if resolution is None:
        resolution = context.settings.louvain_resolution
    seed = params.get("seed", context.settings.louvain_seed)
    return louvain(context.graph, a, resolution=resolution, seed=seed)


ALGORITHMS: Dict[Subtype, Algorithm] = {
    Subtype.CO_CITATIONS: _co_citations,
    Subtype.HITS: _graph_algorithm(hits),
    Subtype.PAGERANK: _graph_algorithm(pagerank),
    Subtype.BETWEENNESS_CENTRALITY: _graph_algorithm(betweenness_centrality),
    Subtype.ADAMIC_ADAR: _graph_algorithm(adamic_adar),
    Subtype.COMMON_NEIGHBOURS: _graph_algorithm(common_neighbours),
    Subtype.JACCARD: _graph_algorithm(jaccard),
    Subtype.OVERLAP: _graph_algorithm(overlap),
    Subtype.LABEL_PROPAGATION: _label_propagation,
    Subtype.LOUVAIN: _louvain,
    Subtype.CLUSTERING_COEFFICIENT: _graph_algorithm(clustering_coefficient),
}

_missing = set(Subtype) - set(ALGORITHMS)
if _missing:
    raise RuntimeError(f"No algorithm registered for: {sorted(s.value for s in _missing)}")


def parse_subtype(name) -> Subtype:
    """Accept a Subtype or its display value (case-insensitive)."""
    if isinstance(name, Subtype):
        return name
    for subtype in Subtype:
        if subtype.value.lower() == str(name).strip().lower():
            return subtype
    raise UnknownAlgorithmError(name)


def get_algorithm(name) -> Algorithm:
    return ALGORITHMS[parse_subtype(name)]


def get_algorithm_info(name) -> AlgorithmInfo:
    """Category and descriptions of an algorithm."""
    subtype = parse_subtype(name)
    return next(info for info in ANALYSIS_TYPES if info.subtype == subtype)


def get_algorithm_display_name(subtype: Subtype, settings: GraphAnalysisSettings) -> str:
    """Display name, with a user rename shown as ``"Custom (Subtype)"``."""
    custom = settings.algorithm_renames.get(subtype.value)
    if custom and custom.strip():
        return f"{custom} ({subtype.value})"
    return subtype.value
