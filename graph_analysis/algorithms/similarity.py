"""
Neighbourhood-based similarity and link-prediction measures.
"""

import math
from typing import List

from ..graph.note_graph import NoteGraph
from ..text.utils import intersection, round_number
from .models import ResultEntry, ResultMap


def jaccard(graph: NoteGraph, a: str) -> ResultMap:
    """Shared neighbours over the union of both neighbourhoods."""
    results: ResultMap = {}
    na = graph.neighbors(a)
    for to in graph.nodes():
        nb = graph.neighbors(to)
        nab = intersection(na, nb)
        union_size = len(na) + len(nb) - len(nab)
        measure = round_number(len(nab) / union_size) if union_size > 0 else 0
        results[to] = ResultEntry(measure, nab)
    return results


def overlap(graph: NoteGraph, a: str) -> ResultMap:
    """Shared neighbours over the size of the smaller neighbourhood."""
    results: ResultMap = {}
    na = graph.neighbors(a)
    for to in graph.nodes():
        nb = graph.neighbors(to)
        nab = intersection(na, nb)
        min_degree = min(len(na), len(nb))
        measure = round_number(len(nab) / min_degree) if min_degree > 0 else 0
        results[to] = ResultEntry(measure, nab)
    return results


def adamic_adar(graph: NoteGraph, a: str) -> ResultMap:
    """Sum of ``1 / ln(out_degree)`` over shared neighbours.

    Shared neighbours with out-degree <= 1 contribute nothing (``ln(1) == 0``).
    """
    results: ResultMap = {}
    na = graph.neighbors(a)
    for to in graph.nodes():
        nab = intersection(na, graph.neighbors(to))
        contributions: List[float] = [
            1 / math.log(degree)
            for degree in (graph.out_degree(n) for n in nab)
            if degree > 1
        ]
        results[to] = ResultEntry(round_number(sum(contributions)), nab)
    return results


def common_neighbours(graph: NoteGraph, a: str) -> ResultMap:
    results: ResultMap = {}
    na = graph.neighbors(a)
    for to in graph.nodes():
        nab = intersection(na, graph.neighbors(to))
        results[to] = ResultEntry(len(nab), nab)
    return results
