"""
Tests for the text and numeric helpers.
"""

import math

import pytest

from graph_analysis.text.sentences import mask_spans, split_sentences
from graph_analysis.text.utils import (
    find_sentence,
    get_counts,
    get_max_key,
    intersection,
    round_number,
    split_around,
)


class TestRoundNumber:
    """Test rounding of algorithm measures."""

    def test_rounds_to_four_decimals(self):
        assert round_number(0.123456) == 0.1235
        assert round_number(2 / 3) == 0.6667

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None, 1e-15])
    def test_degenerate_values_become_zero(self, value):
        assert round_number(value) == 0

    def test_custom_precision(self):
        assert round_number(1.23456, dec=2) == 1.23


class TestCollections:
    """Test intersection and counting helpers."""

    def test_intersection_keeps_order_of_first(self):
        assert intersection(["c", "a", "b"], {"a", "c"}) == ["c", "a"]

    def test_intersection_empty(self):
        assert intersection([], ["a"]) == []
        assert intersection(["a"], []) == []

    def test_get_counts(self):
        assert get_counts(["a", "b", "a"]) == {"a": 2, "b": 1}

    def test_get_max_key_breaks_ties_deterministically(self):
        assert get_max_key({"b": 2, "a": 2, "c": 1}) == "a"
        assert get_max_key({"x": 1, "y": 3}) == "y"


class TestSentences:
    """Test sentence segmentation and lookup."""

    def test_split_preserves_text(self):
        text = "First sentence here. Second one follows. Third!"
        sentences = split_sentences(text)
        assert len(sentences) == 3
        assert "".join(sentences) == text

    def test_split_empty(self):
        assert split_sentences("") == []

    def test_mask_spans_keeps_length(self):
        assert mask_spans("see [[A.b]] now", [(4, 11)]) == "see xxxxxxx now"
        assert mask_spans("short", [(3, 40)]) == "shoxx"

    def test_punctuation_inside_links_does_not_split(self):
        text = "[[A]] and ![[pic.png]]"
        assert split_sentences(text, [(0, 5), (10, 22)]) == [text]

        text = "[[A]] and [[What? Notes]] together"
        assert split_sentences(text, [(0, 5), (10, 25)]) == [text]

    def test_masked_split_returns_original_text(self):
        text = "See [[Why? Now]]. Then [[B]] again."
        sentences = split_sentences(text, [(4, 16), (23, 28)])
        assert sentences == ["See [[Why? Now]]. ", "Then [[B]] again."]

    def test_find_sentence_uses_cumulative_lengths(self):
        sentences = ["Alpha beta. ", "Gamma delta. ", "Epsilon."]
        assert find_sentence(sentences, 5) == (0, 0, 12)
        assert find_sentence(sentences, 12) == (0, 0, 12)
        assert find_sentence(sentences, 13) == (1, 12, 25)
        assert find_sentence(sentences, 33) == (2, 25, 33)

    def test_find_sentence_out_of_range(self):
        assert find_sentence(["abc"], 10) == (-1, 0, 3)
        assert find_sentence([], 1) == (-1, 0, 0)

    def test_split_around(self):
        assert split_around("see [[A]] now", 4, 9) == ["see ", "[[A]]", " now"]
