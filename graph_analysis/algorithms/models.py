"""
Data models for the algorithm library.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union


class Subtype(str, Enum):
    """The closed set of analysis algorithms."""
    CO_CITATIONS = "Co-Citations"
    HITS = "HITS"
    PAGERANK = "PageRank"
    BETWEENNESS_CENTRALITY = "Betweenness Centrality"
    ADAMIC_ADAR = "Adamic Adar"
    COMMON_NEIGHBOURS = "Common Neighbours"
    JACCARD = "Jaccard"
    OVERLAP = "Overlap"
    LABEL_PROPAGATION = "Label Propagation"
    LOUVAIN = "Louvain"
    CLUSTERING_COEFFICIENT = "Clustering Coefficient"


@dataclass
class ResultEntry:
    """Measure for one target node plus supporting evidence."""
    measure: float
    extra: List[str] = field(default_factory=list)


@dataclass
class CoCitation:
    """One occurrence of a co-citation inside a source document.

    ``sentence`` is the containing line split around the matched span(s):
    three parts for a single span, five parts when the own-link and the
    candidate share a line.
    """
    sentence: List[str]
    measure: float
    source: str
    line: int


@dataclass
class CoCitationEntry:
    """Aggregated co-citation score for one target."""
    measure: float
    co_citations: List[CoCitation] = field(default_factory=list)
    resolved: bool = True


ResultMap = Dict[str, ResultEntry]
CoCitationMap = Dict[str, CoCitationEntry]
Communities = Dict[str, List[str]]
AlgorithmResult = Union[ResultMap, CoCitationMap, Communities, List[str]]


@dataclass(frozen=True)
class AlgorithmInfo:
    """Descriptive metadata shown next to an algorithm."""
    anl: str
    subtype: Subtype
    desc: str
    short_desc: str
    global_: bool = False
    nlp: bool = False


ANALYSIS_TYPES: List[AlgorithmInfo] = [
    AlgorithmInfo(
        "Co-Citations", Subtype.CO_CITATIONS,
        "See which notes are most often referenced together with the current note.",
        "Find notes that are cited together.",
    ),
    AlgorithmInfo(
        "Centrality", Subtype.HITS,
        "Authorities receive many links, hubs send out many links.",
        "Identify information hubs and authorities.",
        global_=True,
    ),
    AlgorithmInfo(
        "Centrality", Subtype.PAGERANK,
        "Rates a note by the number and quality of its incoming links.",
        "Rank notes by link structure.",
        global_=True,
    ),
    AlgorithmInfo(
        "Centrality", Subtype.BETWEENNESS_CENTRALITY,
        "Measures how often a note lies on shortest paths between other notes.",
        "Measure how much a note acts as a bridge.",
        global_=True,
    ),
    AlgorithmInfo(
        "Link Prediction", Subtype.ADAMIC_ADAR,
        "Predicts which notes should link to the current note based on graph structure.",
        "Predict links from shared neighbours.",
    ),
    AlgorithmInfo(
        "Link Prediction", Subtype.COMMON_NEIGHBOURS,
        "Counts the neighbours two notes have in common.",
        "Count shared neighbours.",
    ),
    AlgorithmInfo(
        "Similarity", Subtype.JACCARD,
        "Shared neighbours divided by the total number of neighbours of both notes.",
        "Find structurally similar notes.",
    ),
    AlgorithmInfo(
        "Similarity", Subtype.OVERLAP,
        "Like Jaccard, but divides the shared neighbours by the size of the smaller "
        "neighbourhood. The shared count is not squared, so the measure stays within 0 and 1.",
        "Jaccard variant normalised by the smaller neighbourhood.",
    ),
    AlgorithmInfo(
        "Community Detection", Subtype.LABEL_PROPAGATION,
        "Every note starts with its own label and repeatedly adopts the most "
        "common label among its neighbours.",
        "Discover natural groups of notes.",
        global_=True,
    ),
    AlgorithmInfo(
        "Community Detection", Subtype.LOUVAIN,
        "Shows the Louvain community that contains the current note.",
        "Detect communities by maximising modularity.",
    ),
    AlgorithmInfo(
        "Community Detection", Subtype.CLUSTERING_COEFFICIENT,
        "How likely the neighbours of a note are connected to each other.",
        "Measure how tightly knit a note's neighbourhood is.",
        global_=True,
    ),
]
