"""
Structural context of a document and the ordered co-citation scoring rules.

Each rule inspects one candidate (link, embed or tag) against the document's
own-links. Rules are evaluated in order and the first rule that applies
records its evidence and stops the evaluation.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..algorithms.models import CoCitation
from ..text.sentences import split_sentences
from ..text.utils import find_sentence, split_around
from ..vault.models import (
    FileCache,
    HeadingCache,
    LinkCache,
    ListItemCache,
    SectionCache,
    TagCache,
)

CacheItem = Union[LinkCache, TagCache]

SENTENCE_DISTANCE_SCORES = {0: 1.0, 1: 0.85, 2: 0.7, 3: 0.6}
DISTANT_SENTENCE_SCORE = 0.5
SIBLING_LIST_ITEM_SCORE = 0.4
ANCESTOR_LIST_ITEM_SCORES = {1: 0.6, 2: 0.5, 3: 0.4}
SAME_SECTION_SCORE = 0.3


@dataclass
class LineSentences:
    """Sentence segmentation of the line holding an own-link."""
    sentences: List[str]
    link: LinkCache
    line: int
    link_sentence: int
    link_sentence_start: int
    link_sentence_end: int


@dataclass
class OwnLinkDetails:
    """Everything a document reveals about its links to the analysed note."""
    own_links: List[LinkCache] = field(default_factory=list)
    own_sentences: List[LineSentences] = field(default_factory=list)
    own_list_items: List[ListItemCache] = field(default_factory=list)
    own_sections: List[SectionCache] = field(default_factory=list)
    own_headings: List[Tuple[HeadingCache, float]] = field(default_factory=list)
    min_heading_level: int = 1
    max_heading_level: int = 1

    @property
    def min_score(self) -> float:
        return 1 / 2 ** (4 + self.max_heading_level - self.min_heading_level)


@dataclass
class PreCocitation:
    """Running co-citation score for one target within one document."""
    measure: float = 0.0
    co_citations: List[CoCitation] = field(default_factory=list)


PreCocitations = Dict[str, PreCocitation]


@dataclass
class DocumentContext:
    """A document linking to the analysed note, with its own-link details."""
    source: str
    lines: List[str]
    cache: FileCache
    details: OwnLinkDetails
    pre_cocitations: PreCocitations = field(default_factory=dict)

    def line(self, index: int) -> str:
        return self.lines[index] if 0 <= index < len(self.lines) else ""

    def add(self, link_path: str, measure: float, sentence: List[str], line: int):
        """Record evidence; the per-document score is the maximum seen."""
        entry = self.pre_cocitations.setdefault(link_path, PreCocitation())
        entry.measure = max(entry.measure, measure)
        entry.co_citations.append(CoCitation(sentence, measure, self.source, line))

    def item_sentence(self, item: CacheItem) -> List[str]:
        position = item.position
        return split_around(self.line(position.start.line), position.start.col, position.end.col)


def extract_own_link_details(own_links: List[LinkCache], cache: FileCache, lines: List[str]) -> OwnLinkDetails:
    """
    Collect the structural context around the own-links of a document.

    The heading levels span all headings of the document and default to 1
    when it has none, so the fallback score is ``1 / 2**(4 + max - min)``.
    """
    details = OwnLinkDetails(own_links=own_links)

    for link in own_links:
        line_index = link.position.end.line
        line = lines[line_index] if line_index < len(lines) else ""
        sentences = split_sentences(line, _link_spans(cache, line_index))
        index, start, end = find_sentence(sentences, link.position.end.col)
        details.own_sentences.append(LineSentences(sentences, link, line_index, index, start, end))

    details.own_list_items = [
        item for item in cache.list_items
        if any(item.position.encloses(link.position) for link in own_links)
    ]
    details.own_sections = [
        section for section in cache.sections
        if any(section.position.encloses(link.position) for link in own_links)
    ]

    if cache.headings and own_links:
        levels = [heading.level for heading in cache.headings]
        details.min_heading_level = min(levels)
        details.max_heading_level = max(levels)

        for link in own_links:
            link_line = link.position.start.line
            for index, heading in enumerate(cache.headings):
                if heading.position.start.line > link_line:
                    continue
                end_line = _heading_end_line(cache.headings, index)
                if link_line < end_line:
                    details.own_headings.append((heading, end_line))

    return details


def _link_spans(cache: FileCache, line_index: int) -> List[Tuple[int, int]]:
    """Column spans of the links and embeds lying on one line."""
    return [
        (link.position.start.col, link.position.end.col)
        for link in [*cache.links, *cache.embeds]
        if link.position.start.line == line_index == link.position.end.line
    ]


def _heading_end_line(headings: List[HeadingCache], index: int) -> float:
    """First line of the next heading of the same or a higher level."""
    level = headings[index].level
    for heading in headings[index + 1:]:
        if heading.level <= level:
            return heading.position.start.line
    return math.inf


def same_line_context(item: CacheItem, link_path: str, doc: DocumentContext) -> bool:
    """Score by sentence distance when the candidate shares a line with an own-link."""
    found = False
    position = item.position
    for own in doc.details.own_sentences:
        if position.start.line != own.line:
            continue
        found = True

        item_index, item_start, item_end = find_sentence(own.sentences, position.end.col)
        link_position = own.link.position
        content = doc.line(own.line)
        first_start = min(position.start.col, link_position.start.col)
        first_end = min(position.end.col, link_position.end.col)
        second_start = max(position.start.col, link_position.start.col)
        second_end = max(position.end.col, link_position.end.col)
        sentence = [
            content[min(item_start, own.link_sentence_start):first_start],
            content[first_start:first_end],
            content[first_end:second_start],
            content[second_start:second_end],
            content[second_end:max(item_end, own.link_sentence_end)],
        ]

        distance = abs(item_index - own.link_sentence)
        measure = SENTENCE_DISTANCE_SCORES.get(distance, DISTANT_SENTENCE_SCORE)
        doc.add(link_path, measure, sentence, own.line)
    return found


def _ancestor_distance(start: ListItemCache, target: ListItemCache, list_items: List[ListItemCache]) -> int:
    """Distance from ``start`` up to its ancestor ``target`` (0 if not within 3 levels)."""
    current, distance = start, 1
    while current.parent >= 0 and distance <= 3:
        if current.parent == target.position.start.line:
            return distance
        parent = next(
            (li for li in list_items if li.position.start.line == current.parent), None
        )
        if parent is None:
            break
        current = parent
        distance += 1
    return 0


def list_hierarchy_context(item: CacheItem, link_path: str, doc: DocumentContext) -> bool:
    """Score siblings and near ancestors/descendants in the same list."""
    list_items = doc.cache.list_items
    list_item = next((li for li in list_items if li.position.encloses(item.position)), None)
    if list_item is None:
        return False

    found = False
    sentence = doc.item_sentence(item)
    for own_item in doc.details.own_list_items:
        if own_item.parent == list_item.parent:
            measure = SIBLING_LIST_ITEM_SCORE
        else:
            distance = (
                _ancestor_distance(own_item, list_item, list_items)
                or _ancestor_distance(list_item, own_item, list_items)
            )
            if not distance:
                continue
            measure = ANCESTOR_LIST_ITEM_SCORES[distance]
        doc.add(link_path, measure, sentence, item.position.start.line)
        found = True
    return found


def same_section_context(item: CacheItem, link_path: str, doc: DocumentContext) -> bool:
    """Score candidates inside a block (paragraph, list, quote) that holds an own-link."""
    if not any(section.position.encloses(item.position) for section in doc.details.own_sections):
        return False
    doc.add(link_path, SAME_SECTION_SCORE, doc.item_sentence(item), item.position.start.line)
    return True


def same_heading_context(item: CacheItem, link_path: str, doc: DocumentContext) -> bool:
    """Score candidates under a heading whose section holds an own-link.

    Deeper shared headings score higher: ``1 / 2**(2 + max_level - level)``.
    """
    line = item.position.start.line
    levels = [
        heading.level
        for heading, end_line in doc.details.own_headings
        if heading.position.start.line <= line < end_line
    ]
    if not levels:
        return False
    measure = 1 / 2 ** (2 + doc.details.max_heading_level - max(levels))
    doc.add(link_path, measure, doc.item_sentence(item), line)
    return True


ContextRule = Callable[[CacheItem, str, DocumentContext], bool]

CONTEXT_RULES: List[ContextRule] = [
    same_line_context,
    list_hierarchy_context,
    same_section_context,
    same_heading_context,
]


def score_candidate(item: CacheItem, link_path: str, doc: DocumentContext,
                    rules: Optional[List[ContextRule]] = None):
    """Apply the first matching rule, or fall back to the document's minimum score."""
    for rule in rules if rules is not None else CONTEXT_RULES:
        if rule(item, link_path, doc):
            return
    doc.add(link_path, doc.details.min_score, doc.item_sentence(item), item.position.start.line)
