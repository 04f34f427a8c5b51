"""
Tests for the similarity, centrality and community algorithms.
"""

import math

import pytest

from graph_analysis.algorithms.centrality import betweenness_centrality, hits, pagerank
from graph_analysis.algorithms.community import (
    clustering_coefficient,
    gather_communities,
    label_propagation,
    louvain,
)
from graph_analysis.algorithms.similarity import adamic_adar, common_neighbours, jaccard, overlap
from graph_analysis.graph.note_graph import NoteGraph

from conftest import make_graph

MAP_ALGORITHMS = [jaccard, overlap, adamic_adar, common_neighbours, hits, pagerank,
                  betweenness_centrality, clustering_coefficient]


@pytest.fixture
def two_triangles():
    return make_graph(
        ("a.md", "b.md"), ("b.md", "c.md"), ("c.md", "a.md"),
        ("d.md", "e.md"), ("e.md", "f.md"), ("f.md", "d.md"),
    )


class TestSimilarity:
    """Test neighbourhood similarity measures."""

    @pytest.mark.parametrize("algorithm", [jaccard, overlap])
    def test_bounded(self, sample_graph, algorithm):
        for a in sample_graph.nodes():
            for entry in algorithm(sample_graph, a).values():
                assert 0 <= entry.measure <= 1

    def test_jaccard_self_similarity(self, sample_graph):
        for a in sample_graph.nodes():
            assert jaccard(sample_graph, a)[a].measure == 1

    def test_jaccard_symmetric(self, sample_graph):
        nodes = sample_graph.nodes()
        for a in nodes:
            results = jaccard(sample_graph, a)
            for b in nodes:
                assert results[b].measure == jaccard(sample_graph, b)[a].measure

    def test_jaccard_value(self, sample_graph):
        # N(A) = {B, C}, N(B) = {A, C}
        results = jaccard(sample_graph, "A.md")
        assert results["B.md"].measure == round(1 / 3, 4)
        assert results["B.md"].extra == ["C.md"]

    def test_overlap_uses_smaller_neighbourhood(self, sample_graph):
        # N(A) = {B, C}, N(D) = {C, E, F}
        assert overlap(sample_graph, "A.md")["D.md"].measure == 0.5

    def test_isolated_node_scores_zero(self):
        graph = make_graph(("a.md", "b.md"))
        graph.add_node_if_missing("lonely.md")
        assert jaccard(graph, "lonely.md")["lonely.md"].measure == 0
        assert overlap(graph, "lonely.md")["a.md"].measure == 0

    def test_common_neighbours_counts_intersection(self, xyz_graph):
        results = common_neighbours(xyz_graph, "X.md")
        assert results["Z.md"].measure == 1
        assert results["Z.md"].extra == ["Y.md"]
        assert results["X.md"].measure == 2

    def test_adamic_adar_ignores_degree_one(self):
        graph = make_graph(("a.md", "s.md"), ("b.md", "s.md"), ("s.md", "t.md"))
        assert adamic_adar(graph, "a.md")["b.md"].measure == 0

        graph.add_link("s.md", "u.md")
        assert adamic_adar(graph, "a.md")["b.md"].measure == round(1 / math.log(2), 4)


class TestCentrality:
    """Test whole-graph centrality measures."""

    def test_pagerank_sums_to_one(self, sample_graph):
        results = pagerank(sample_graph, "A.md")
        assert sum(entry.measure for entry in results.values()) == pytest.approx(1, abs=1e-3)

    def test_betweenness_unnormalised(self):
        graph = make_graph(("a.md", "b.md"), ("b.md", "c.md"))
        results = betweenness_centrality(graph, "a.md")
        assert results["b.md"].measure == 1
        assert results["a.md"].measure == 0

    def test_hits_authority_and_hub(self, xyz_graph):
        results = hits(xyz_graph, "X.md")
        assert results["Z.md"].measure > results["X.md"].measure
        assert all(entry.extra[0].startswith("hub: ") for entry in results.values())

    def test_hits_degenerate_graph(self):
        graph = NoteGraph()
        graph.add_node_if_missing("only.md")
        results = hits(graph, "only.md")
        assert math.isfinite(results["only.md"].measure)


class TestCommunities:
    """Test community detection."""

    def test_zero_iterations_gives_singletons(self, sample_graph):
        communities = label_propagation(sample_graph, "A.md", 0)
        assert communities == {node: [node] for node in sample_graph.nodes()}

    def test_label_propagation_finds_triangles(self, two_triangles):
        communities = label_propagation(two_triangles, "a.md", 10)
        assert communities == {
            "a.md": ["a.md", "b.md", "c.md"],
            "d.md": ["d.md", "e.md", "f.md"],
        }

    def test_label_propagation_is_deterministic(self, sample_graph):
        first = label_propagation(sample_graph, "A.md", 5)
        assert label_propagation(sample_graph, "A.md", 5) == first

    def test_gather_communities(self):
        assert gather_communities({"x": "l1", "y": "l2", "z": "l1"}) == {"l1": ["x", "z"], "l2": ["y"]}

    def test_louvain_community_of_node(self, two_triangles):
        members = louvain(two_triangles, "e.md", resolution=1.0, seed=7)
        assert members == ["d.md", "e.md", "f.md"]

    def test_louvain_absent_node(self, two_triangles):
        assert louvain(two_triangles, "missing.md") == []

    def test_clustering_coefficient(self):
        graph = make_graph(("a.md", "b.md"), ("b.md", "c.md"), ("c.md", "a.md"), ("a.md", "d.md"))
        results = clustering_coefficient(graph, "a.md")

        assert results["a.md"].measure == round(1 / 3, 4)
        assert results["b.md"].measure == 1
        assert results["d.md"].measure == 0
        assert results["b.md"].extra == ["b.md, a.md, c.md"]


class TestResultCoverage:
    """Every per-node algorithm reports every node."""

    @pytest.mark.parametrize("algorithm", MAP_ALGORITHMS)
    def test_entry_for_every_node(self, sample_graph, algorithm):
        results = algorithm(sample_graph, "A.md")
        assert set(results) == set(sample_graph.nodes())
        assert all(math.isfinite(entry.measure) for entry in results.values())
