"""
LexicalScanner — Known-bad token matcher

Matches a fixed corpus of misspellings in one left-to-right pass using a
single compiled alternation. Tokens only match as whole words, so
"thne" is found in "x.thne()" but not inside "athnes".

Suggestions are deliberately left empty here. Other detectors and the
augmentation step fill them in.
"""

import re
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..core.findings import Finding, Severity, SourceTag
from ..core.wordlists import COMMON_TYPOS
from .base import Detector, context_snippet

if TYPE_CHECKING:
    from ..config import AnalyzerOptions

RULE_ID = "common-typo"


def compile_corpus(tokens: Iterable[str], case_sensitive: bool = False) -> Optional["re.Pattern"]:
    """Compile tokens into one boundary-aware alternation, longest first."""
    unique = sorted({t for t in tokens if t}, key=lambda t: (-len(t), t))
    if not unique:
        return None
    alternation = "|".join(re.escape(t) for t in unique)
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", flags)


class LexicalScanner(Detector):
    """Flags every whole-word occurrence of a known misspelling."""

    id = "lexical"
    name = "Common typo scanner"
    source_tag = SourceTag.LEXICAL

    def __init__(self, corpus: Iterable[str] = COMMON_TYPOS, case_sensitive: bool = False):
        self.corpus = frozenset(corpus)
        self._pattern = compile_corpus(self.corpus, case_sensitive)

    def analyze(self, source: str, options: 'AnalyzerOptions' = None) -> List[Finding]:
        if self._pattern is None or not source:
            return []

        return [
            Finding(
                original=match.group(0),
                start=match.start(),
                end=match.end(),
                severity=Severity.WARNING,
                source_tag=SourceTag.LEXICAL,
                suggestion=None,
                context=context_snippet(source, match.start(), match.end()),
                rule_id=RULE_ID,
            )
            for match in self._pattern.finditer(source)
        ]
