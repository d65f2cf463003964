"""
Findings — The data model shared by every detector

Defines:
- Severity: info < warning < error < critical
- SourceTag: which kind of detector produced a finding
- Finding: one detected issue with half-open character offsets
- AnalysisResult: the finalized, deduplicated output of one analyze() call

Design principles:
- Findings and results are immutable after creation
- Offsets are only meaningful against the exact source snapshot analyzed
- Ids are derived from content, so identical inputs give identical ids
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import xxhash


class Severity(Enum):
    """Issue severity, ordered from least to most severe."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class SourceTag(Enum):
    """Which detector family produced a finding."""
    LEXICAL = "lexical"
    STRUCTURAL = "structural"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"  # Lexical finding enriched by a semantic provider


# Lower rank = more severe. Auto-fix applies to ranks <= threshold rank.
_SEVERITY_RANKS = {
    Severity.CRITICAL: 0,
    Severity.ERROR: 1,
    Severity.WARNING: 2,
    Severity.INFO: 3,
}


def severity_rank(severity: 'Severity') -> int:
    """Rank used for auto-fix thresholds (critical=0 ... info=3)."""
    return _SEVERITY_RANKS[Severity(severity)]


def _finding_id(tag: str, start: int, end: int, original: str, rule_id: Optional[str]) -> str:
    key = f"{tag}:{start}:{end}:{original}:{rule_id or ''}"
    return xxhash.xxh64(key.encode('utf-8')).hexdigest()[:12]


@dataclass(frozen=True)
class Finding:
    """
    A single detected issue.

    Attributes:
        original: Exact substring of the source that triggered the finding
        start: Inclusive character offset into the analyzed source
        end: Exclusive character offset into the analyzed source
        severity: How serious the issue is
        source_tag: Detector family that produced it
        suggestion: Replacement text, if any
        context: Surrounding snippet for display only, never for offsets
        rule_id: Identifier of the rule that fired
        id: Opaque identifier, derived from the fields above when omitted
    """
    original: str
    start: int
    end: int
    severity: Severity = Severity.WARNING
    source_tag: SourceTag = SourceTag.LEXICAL
    suggestion: Optional[str] = None
    context: Optional[str] = None
    rule_id: Optional[str] = None
    id: str = ""

    def __post_init__(self):
        # Accept plain strings for the enum fields
        object.__setattr__(self, 'severity', Severity(self.severity))
        object.__setattr__(self, 'source_tag', SourceTag(self.source_tag))
        if not self.id:
            object.__setattr__(self, 'id', _finding_id(
                self.source_tag.value, self.start, self.end, self.original, self.rule_id
            ))

    @property
    def key(self) -> Tuple[int, int, str]:
        """Dedup key: findings sharing it describe the same source location."""
        return (self.start, self.end, self.original)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def has_suggestion(self) -> bool:
        return self.suggestion is not None

    def overlaps(self, other: 'Finding') -> bool:
        """True if the two half-open ranges intersect."""
        return self.start < other.end and other.start < self.end

    def with_changes(self, **changes: Any) -> 'Finding':
        """Copy with updated fields. The id is kept unless given."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "original": self.original,
            "start": self.start,
            "end": self.end,
            "severity": self.severity.value,
            "source_tag": self.source_tag.value,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        if self.context is not None:
            data["context"] = self.context
        if self.rule_id is not None:
            data["rule_id"] = self.rule_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Finding':
        return cls(
            original=data["original"],
            start=int(data["start"]),
            end=int(data["end"]),
            severity=data.get("severity", "warning"),
            source_tag=data.get("source_tag", "lexical"),
            suggestion=data.get("suggestion"),
            context=data.get("context"),
            rule_id=data.get("rule_id"),
            id=data.get("id", ""),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Finalized findings of one analyze() call plus run metadata."""
    findings: Tuple[Finding, ...]
    duration_ms: float
    timestamp: str
    engine_version: str
    source_length: int = 0
    detectors_run: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.findings)

    @property
    def fixable(self) -> Tuple[Finding, ...]:
        """Findings that carry a suggestion."""
        return tuple(f for f in self.findings if f.suggestion is not None)

    def by_severity(self, severity: Severity) -> Tuple[Finding, ...]:
        severity = Severity(severity)
        return tuple(f for f in self.findings if f.severity == severity)

    def by_source(self, tag: SourceTag) -> Tuple[Finding, ...]:
        tag = SourceTag(tag)
        return tuple(f for f in self.findings if f.source_tag == tag)

    def sorted_by_position(self) -> Tuple[Finding, ...]:
        """Display order: by start, then end."""
        return tuple(sorted(self.findings, key=lambda f: (f.start, f.end, f.original)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
            "engine_version": self.engine_version,
            "source_length": self.source_length,
            "detectors_run": list(self.detectors_run),
        }
