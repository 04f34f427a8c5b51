"""
Small numeric and collection helpers shared by the algorithms.
"""

import math
from collections import Counter
from typing import Dict, Hashable, Iterable, List, Sequence, Tuple

from ..config import DECIMALS

EPSILON = 1e-12


def round_number(num: float, dec: int = DECIMALS) -> float:
    """Round to ``dec`` places, mapping NaN, infinities and near-zero values to 0."""
    if num is None or math.isnan(num) or math.isinf(num) or abs(num) < EPSILON:
        return 0.0
    return round(num, dec)


def intersection(a: Sequence[str], b: Iterable[str]) -> List[str]:
    """Items of ``a`` that also appear in ``b``, in the order of ``a``."""
    b_set = set(b)
    return [item for item in a if item in b_set]


def get_counts(items: Iterable[Hashable]) -> Dict[Hashable, int]:
    return dict(Counter(items))


def get_max_key(counts: Dict[str, int]) -> str:
    """Key with the highest count; ties resolve to the lexicographically smallest key."""
    best = max(counts.values())
    return min(key for key, count in counts.items() if count == best)


def find_sentence(sentences: Sequence[str], end_col: int) -> Tuple[int, int, int]:
    """
    Locate the sentence containing a span that ends at ``end_col``.

    Sentence lengths are accumulated; the span belongs to the first sentence
    whose cumulative length reaches ``end_col``.

    Returns:
        (sentence index, sentence start column, sentence end column); the index
        is -1 when no sentence matches.
    """
    aggregate = 0
    for count, sentence in enumerate(sentences):
        next_length = aggregate + len(sentence)
        if end_col <= next_length:
            return count, aggregate, next_length
        aggregate = next_length
    return -1, 0, aggregate


def split_around(line: str, start_col: int, end_col: int) -> List[str]:
    """Split ``line`` into the text before, inside and after a span."""
    return [line[:start_col], line[start_col:end_col], line[end_col:]]
