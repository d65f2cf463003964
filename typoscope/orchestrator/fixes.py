"""
Fixes — Offset-safe application of suggestions

Edits are applied back-to-front (descending start), so each splice only
shifts text to the right of positions that have already been edited.

Overlapping findings are not reconciled: the leftmost edit is applied
last and overwrites whatever the earlier edits did inside its range.
"""

import logging
from typing import Iterable, List

from ..core.findings import Finding, Severity, severity_rank

logger = logging.getLogger(__name__)


def select_fixes(source: str, findings: Iterable[Finding], threshold: Severity = Severity.INFO) -> List[Finding]:
    """
    Findings that will be applied, in application order.

    Keeps findings with a suggestion whose severity rank is at or below
    the threshold rank (critical=0 ... info=3). Findings whose range does
    not fit the source are skipped.
    """
    limit = severity_rank(threshold)
    length = len(source)
    selected = []
    for finding in findings:
        if finding.suggestion is None:
            continue
        if severity_rank(finding.severity) > limit:
            continue
        if not (0 <= finding.start <= finding.end <= length):
            logger.warning(
                "Skipping fix for %r: range [%d, %d) outside source of length %d",
                finding.original, finding.start, finding.end, length,
            )
            continue
        selected.append(finding)

    # Stable sort: equal starts keep their input order
    selected.sort(key=lambda f: f.start, reverse=True)
    return selected


def apply_fixes(source: str, findings: Iterable[Finding], threshold: Severity = Severity.INFO) -> str:
    """Rewrite `source` with every selected suggestion applied."""
    text = source
    for finding in select_fixes(source, findings, threshold):
        text = text[:finding.start] + finding.suggestion + text[finding.end:]
    return text
