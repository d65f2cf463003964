"""
Merge — Range validation, ignore patterns and deduplication

Findings from independent detectors are reconciled by dedup key
(start, end, original). For each key one finding survives:
1. one with a suggestion beats one without
2. then the better source tag in the priority order
3. then whichever was seen first (detector registration order)

Output is sorted by (start, end, original), so identical inputs always
produce identical lists.
"""

from typing import Callable, Iterable, List, Pattern, Sequence, Tuple

from ..core.errors import InvalidRangeError
from ..core.findings import Finding, SourceTag

PriorityRank = Callable[[SourceTag], int]


def validate_range(finding: Finding, source: str) -> None:
    """
    Raises:
        InvalidRangeError: Offsets are not integers, fall outside the source,
            or no longer point at `finding.original`
    """
    length = len(source)
    start, end = finding.start, finding.end
    if not all(isinstance(n, int) and not isinstance(n, bool) for n in (start, end)):
        raise InvalidRangeError(f"offsets {start!r}, {end!r} are not integers", start, end, length)
    if not (0 <= start <= end <= length):
        raise InvalidRangeError(
            f"range [{start}, {end}) outside source of length {length}",
            start, end, length,
        )
    if source[start:end] != finding.original:
        raise InvalidRangeError(
            f"range [{start}, {end}) does not contain {finding.original!r}",
            start, end, length,
        )


def ignored_spans(source: str, patterns: Iterable[Pattern]) -> List[Tuple[int, int]]:
    """Non-empty spans matched by any ignore pattern."""
    spans = []
    for pattern in patterns:
        spans.extend(m.span() for m in pattern.finditer(source) if m.end() > m.start())
    return spans


def is_ignored(finding: Finding, spans: Sequence[Tuple[int, int]]) -> bool:
    """True if the finding lies entirely inside one ignored span."""
    return any(start <= finding.start and finding.end <= end for start, end in spans)


def _better(candidate: Finding, current: Finding, rank: PriorityRank) -> bool:
    if candidate.has_suggestion != current.has_suggestion:
        return candidate.has_suggestion
    return rank(candidate.source_tag) < rank(current.source_tag)


def merge_findings(findings: Iterable[Finding], rank: PriorityRank) -> List[Finding]:
    """Deduplicate by key and return in (start, end, original) order."""
    best = {}
    for finding in findings:
        current = best.get(finding.key)
        if current is None or _better(finding, current, rank):
            best[finding.key] = finding
    return sorted(best.values(), key=lambda f: (f.start, f.end, f.original))
