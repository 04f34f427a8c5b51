"""
Sentence segmentation backed by spaCy's rule-based sentencizer.
"""

import logging
from functools import lru_cache
from typing import Iterable, List, Tuple

import spacy

logger = logging.getLogger(__name__)

MASK_CHAR = "x"


@lru_cache(maxsize=1)
def _load_nlp():
    nlp = spacy.blank("en")
    if "sentencizer" not in nlp.pipe_names:
        nlp.add_pipe("sentencizer")
    logger.debug("Loaded blank spaCy pipeline with sentencizer")
    return nlp


def mask_spans(text: str, spans: Iterable[Tuple[int, int]]) -> str:
    """Replace each ``(start, end)`` column span with a same-length run of ``x``."""
    chars = list(text)
    for start, end in spans:
        start, end = max(start, 0), min(end, len(chars))
        chars[start:end] = MASK_CHAR * max(end - start, 0)
    return "".join(chars)


def split_sentences(text: str, spans: Iterable[Tuple[int, int]] = ()) -> List[str]:
    """
    Split a line of text into sentences, preserving whitespace.

    Joining the returned sentences reproduces ``text`` exactly, so cumulative
    sentence lengths can be compared with column offsets.

    Args:
        text: The line to segment
        spans: Column spans (links, embeds) that must not be split; they are
            masked before segmentation
    """
    if not text:
        return []
    doc = _load_nlp()(mask_spans(text, spans))

    sentences: List[str] = []
    offset = 0
    for sent in doc.sents:
        length = len(sent.text_with_ws)
        sentences.append(text[offset:offset + length])
        offset += length
    return sentences
