"""
Community detection and local clustering.
"""

import logging
from collections import defaultdict
from itertools import combinations
from typing import Dict, List, Optional

import networkx as nx

from ..graph.note_graph import NoteGraph
from ..text.utils import get_counts, get_max_key, round_number
from .models import Communities, ResultEntry, ResultMap

logger = logging.getLogger(__name__)


def label_propagation(graph: NoteGraph, a: str, iterations: int) -> Communities:
    """
    Synchronous label propagation.

    Every node starts with its own identifier as label. In each round every
    node adopts the most frequent label among its neighbours as they were in
    the previous round; nodes without neighbours keep their label.

    Returns:
        Mapping from label to the nodes carrying it
    """
    labels: Dict[str, str] = {node: node for node in graph.nodes()}

    for _ in range(iterations):
        new_labels: Dict[str, str] = {}
        for node in graph.nodes():
            neighbours = graph.neighbors(node)
            if neighbours:
                counts = get_counts(labels[n] for n in neighbours)
                new_labels[node] = get_max_key(counts)
            else:
                new_labels[node] = labels[node]
        labels = new_labels

    return gather_communities(labels)


def gather_communities(labels: Dict[str, str]) -> Communities:
    communities: Dict[str, List[str]] = defaultdict(list)
    for node, label in labels.items():
        communities[label].append(node)
    return dict(communities)


def louvain(graph: NoteGraph, a: str, resolution: float = 10.0, seed: Optional[int] = None) -> List[str]:
    """Members of the Louvain community containing ``a`` (empty if ``a`` is absent)."""
    if not graph.has_node(a):
        logger.warning(f'Node "{a}" not found in the graph')
        return []

    partition = nx.community.louvain_communities(graph.view, resolution=resolution, seed=seed)
    for community in partition:
        if a in community:
            return [node for node in graph.nodes() if node in community]
    return [a]


def clustering_coefficient(graph: NoteGraph, a: str) -> ResultMap:
    """Local clustering coefficient of every node on the undirected view.

    ``extra`` lists each closed triangle as ``"node, u, v"``.
    """
    undirected = graph.view.to_undirected(as_view=True)
    coefficients = nx.clustering(undirected)

    results: ResultMap = {}
    for node in graph.nodes():
        neighbours = [n for n in graph.neighbors(node) if n != node]
        triangles = [
            f"{node}, {u}, {v}"
            for u, v in combinations(neighbours, 2)
            if undirected.has_edge(u, v)
        ]
        results[node] = ResultEntry(round_number(coefficients.get(node, 0.0)), triangles)
    return results
