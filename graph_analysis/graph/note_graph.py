"""
Note graph container backed by a networkx DiGraph.
"""

import logging
from typing import Any, Dict, List

import networkx as nx

logger = logging.getLogger(__name__)


class NoteGraph:
    """Directed graph of notes.

    Nodes are note identifiers carrying an insertion index ``i``; edges carry a
    ``resolved`` flag. Lookups against absent nodes return empty results.
    """

    def __init__(self):
        self._graph = nx.DiGraph()
        self._next_index = 0

    @property
    def view(self) -> nx.DiGraph:
        """Read-only view for networkx algorithms."""
        return self._graph.copy(as_view=True)

    def add_node_if_missing(self, node: str) -> int:
        """Add ``node`` with the next insertion index; returns its index."""
        if node not in self._graph:
            self._graph.add_node(node, i=self._next_index)
            self._next_index += 1
        return self._graph.nodes[node]["i"]

    def add_link(self, source: str, dest: str, resolved: bool = True):
        """Add (or update) the directed edge ``source -> dest``."""
        self.add_node_if_missing(source)
        self.add_node_if_missing(dest)
        self._graph.add_edge(source, dest, resolved=resolved)

    def has_node(self, node: str) -> bool:
        return node in self._graph

    def has_edge(self, source: str, dest: str) -> bool:
        return self._graph.has_edge(source, dest)

    def nodes(self) -> List[str]:
        """Node identifiers in insertion order."""
        return list(self._graph.nodes)

    def node_index(self, node: str) -> int:
        return self._graph.nodes[node]["i"]

    def edges(self) -> List[tuple]:
        return list(self._graph.edges)

    def edge_attributes(self, source: str, dest: str) -> Dict[str, Any]:
        return dict(self._graph.edges[source, dest])

    def neighbors(self, node: str) -> List[str]:
        """Union of in- and out-neighbours, in insertion order."""
        if node not in self._graph:
            return []
        merged = set(self._graph.successors(node)) | set(self._graph.predecessors(node))
        return sorted(merged, key=self.node_index)

    def in_neighbors(self, node: str) -> List[str]:
        if node not in self._graph:
            return []
        return sorted(self._graph.predecessors(node), key=self.node_index)

    def out_neighbors(self, node: str) -> List[str]:
        if node not in self._graph:
            return []
        return sorted(self._graph.successors(node), key=self.node_index)

    def out_degree(self, node: str) -> int:
        if node not in self._graph:
            return 0
        return self._graph.out_degree(node)

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def __contains__(self, node: str) -> bool:
        return node in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the graph."""
        unresolved = sum(1 for _, _, resolved in self._graph.edges(data="resolved") if not resolved)
        return {
            "total_nodes": self._graph.number_of_nodes(),
            "total_edges": self._graph.number_of_edges(),
            "unresolved_edges": unresolved,
            "weakly_connected_components": (
                nx.number_weakly_connected_components(self._graph) if len(self._graph) else 0
            ),
        }
