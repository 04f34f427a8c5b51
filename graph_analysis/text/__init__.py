"""
Text-structure utilities used by the co-citation scorer.
"""

from .sentences import split_sentences
from .utils import (
    find_sentence,
    get_counts,
    get_max_key,
    intersection,
    round_number,
    split_around,
)

__all__ = [
    "find_sentence",
    "get_counts",
    "get_max_key",
    "intersection",
    "round_number",
    "split_around",
    "split_sentences",
]
