"""
Ranking and presentation helpers for algorithm results.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .algorithms.models import CoCitation, CoCitationEntry, Communities
from .algorithms.registry import get_algorithm_display_name
from .config import MD_EXTENSION, GraphAnalysisSettings

LinkCounts = Mapping[str, Mapping[str, int]]

__all__ = [
    "RankedResult",
    "add_md",
    "best_evidence",
    "drop_ext",
    "drop_path",
    "get_algorithm_display_name",
    "group_by_source",
    "is_linked",
    "present_path",
    "rank_communities",
    "rank_results",
]


@dataclass
class RankedResult:
    """One row of a ranked result list."""
    to: str
    measure: float
    linked: bool
    resolved: bool
    extra: List[str] = field(default_factory=list)
    co_citations: List[CoCitation] = field(default_factory=list)

    @property
    def evidence_count(self) -> int:
        return len(self.co_citations) if self.co_citations else len(self.extra)


def drop_path(path: str) -> str:
    return path.split("/")[-1]


def drop_ext(path: str) -> str:
    parts = path.split(".")
    return path if len(parts) == 1 else ".".join(parts[:-1])


def present_path(path: str) -> str:
    """``folder/Note.md`` -> ``Note``."""
    return drop_ext(drop_path(path))


def add_md(name: str) -> str:
    return name if name.endswith(MD_EXTENSION) else name + MD_EXTENSION


def is_linked(resolved_links: LinkCounts, from_: str, to: str, directed: bool = True) -> bool:
    """
    Whether ``from_`` links to ``to`` (names with or without ``.md``).

    When not directed, a link in either direction counts.
    """
    from_, to = add_md(from_), add_md(to)
    if to in resolved_links.get(from_, {}):
        return True
    return not directed and from_ in resolved_links.get(to, {})


def rank_results(
    results: Mapping,
    source: str,
    resolved_links: LinkCounts,
    settings: Optional[GraphAnalysisSettings] = None,
    asc: bool = False,
    in_vault: Optional[Callable[[str], bool]] = None,
) -> List[RankedResult]:
    """
    Turn a ResultMap or CoCitationMap into a sorted list of rows.

    Rows are ordered by measure, then by the amount of evidence; descending
    unless ``asc``. The source node is never included.

    Args:
        results: Algorithm output keyed by target node
        source: The analysed note
        resolved_links: ``{source: {dest: count}}`` used for the linked flag
        settings: Supplies the no_zero / no_infinity / exclude_linked filters
        asc: Sort ascending
        in_vault: Decides whether a ``.md`` target exists (defaults to True)
    """
    rows: List[RankedResult] = []
    for to, entry in results.items():
        if to == source:
            continue
        linked = is_linked(resolved_links, source, to, directed=False)
        if isinstance(entry, CoCitationEntry):
            row = RankedResult(to, entry.measure, linked, entry.resolved, co_citations=entry.co_citations)
        else:
            resolved = not to.endswith(MD_EXTENSION) or in_vault is None or in_vault(to)
            row = RankedResult(to, entry.measure, linked, resolved, extra=list(entry.extra))
        rows.append(row)

    if settings is not None:
        if settings.no_zero:
            rows = [row for row in rows if row.measure != 0]
        if settings.no_infinity:
            rows = [row for row in rows if not math.isinf(row.measure)]
        if settings.exclude_linked:
            rows = [row for row in rows if not row.linked]

    rows.sort(key=lambda row: (row.measure, row.evidence_count), reverse=not asc)
    return rows


def rank_communities(communities: Communities) -> List[Tuple[str, List[str]]]:
    """Communities as ``(label, members)``, largest first, ties by label."""
    return sorted(communities.items(), key=lambda item: (-len(item[1]), item[0]))


def best_evidence(co_citations: List[CoCitation]) -> Optional[CoCitation]:
    """The highest scoring co-citation occurrence, earliest first on ties."""
    best: Optional[CoCitation] = None
    for co_citation in co_citations:
        if best is None or co_citation.measure > best.measure:
            best = co_citation
    return best


def group_by_source(co_citations: List[CoCitation]) -> Dict[str, List[CoCitation]]:
    grouped: Dict[str, List[CoCitation]] = {}
    for co_citation in co_citations:
        grouped.setdefault(co_citation.source, []).append(co_citation)
    return grouped
