"""
Algorithm library: similarity, link prediction, centrality and community measures.
"""

from .models import (
    ANALYSIS_TYPES,
    AlgorithmInfo,
    CoCitation,
    CoCitationEntry,
    ResultEntry,
    Subtype,
)

__all__ = [
    "ANALYSIS_TYPES",
    "AlgorithmInfo",
    "CoCitation",
    "CoCitationEntry",
    "ResultEntry",
    "Subtype",
]
