"""
Co-citation scoring: structural proximity of links inside citing documents.
"""

from .context import CONTEXT_RULES, DocumentContext, OwnLinkDetails, extract_own_link_details
from .scorer import CoCitationScorer, score_cocitations

__all__ = [
    "CONTEXT_RULES",
    "CoCitationScorer",
    "DocumentContext",
    "OwnLinkDetails",
    "extract_own_link_details",
    "score_cocitations",
]
