"""
Whole-graph centrality measures computed with networkx.
"""

import logging
from typing import Dict

import networkx as nx

from ..graph.note_graph import NoteGraph
from ..text.utils import round_number
from .models import ResultEntry, ResultMap

logger = logging.getLogger(__name__)

HITS_MAX_ITERATIONS = 300


def _to_result_map(graph: NoteGraph, scores: Dict[str, float]) -> ResultMap:
    return {
        node: ResultEntry(round_number(scores.get(node, 0.0)), [])
        for node in graph.nodes()
    }


def hits(graph: NoteGraph, a: str) -> ResultMap:
    """Authority score as the measure, hub score as extra evidence."""
    try:
        hubs, authorities = nx.hits(graph.view, max_iter=HITS_MAX_ITERATIONS)
    except (nx.NetworkXException, ValueError, RuntimeError) as e:
        logger.warning(f"HITS did not produce scores: {e}")
        hubs, authorities = {}, {}

    results: ResultMap = {}
    for node in graph.nodes():
        hub = round_number(hubs.get(node, 0.0))
        results[node] = ResultEntry(round_number(authorities.get(node, 0.0)), [f"hub: {hub}"])
    return results


def pagerank(graph: NoteGraph, a: str) -> ResultMap:
    try:
        ranks = nx.pagerank(graph.view)
    except nx.PowerIterationFailedConvergence as e:
        logger.warning(f"PageRank did not converge: {e}")
        ranks = {}
    return _to_result_map(graph, ranks)


def betweenness_centrality(graph: NoteGraph, a: str) -> ResultMap:
    centrality = nx.betweenness_centrality(graph.view, normalized=False)
    return _to_result_map(graph, centrality)
