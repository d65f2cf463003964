"""
SpellingDetector — Dictionary-backed unknown-word detector

Splits identifiers and prose into sub-words (camelCase, PascalCase,
snake_case and acronyms), then flags sub-words the DictionaryStore does
not know but can suggest a close replacement for.

Unknown words without any suggestion are not reported; they are far more
likely to be names than misspellings.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.dictionary import DictionaryStore, levenshtein, max_suggestion_distance
from ..core.findings import Finding, Severity, SourceTag
from .base import Detector, context_snippet

if TYPE_CHECKING:
    from ..config import AnalyzerOptions

logger = logging.getLogger(__name__)

RULE_ID = "unknown-word"
AUTO_CORRECT_RULE_ID = "auto-correct"

# Capitalized or lower word | acronym not followed by a lower-case letter
_SUBWORD = re.compile(r'[A-Z]?[a-z]+|[A-Z]+(?![a-z])')


def match_case(original: str, word: str) -> str:
    """Apply the casing pattern of `original` to `word`."""
    if len(original) > 1 and original.isupper():
        return word.upper()
    if original[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


class SpellingDetector(Detector):
    """Flags unknown sub-words that have a close dictionary match."""

    id = "spelling"
    name = "Dictionary spelling check"
    source_tag = SourceTag.LEXICAL

    def __init__(self, dictionary: DictionaryStore, min_length: int = 4, candidates: int = 5):
        self.dictionary = dictionary
        self.min_length = min_length
        self.candidates = candidates

    def analyze(self, source: str, options: 'AnalyzerOptions' = None) -> List[Finding]:
        language = options.language if options is not None else None
        cache: Dict[str, Optional[Tuple[str, str]]] = {}
        findings = []

        for match in _SUBWORD.finditer(source):
            word = match.group(0)
            if len(word) < self.min_length:
                continue

            if word not in cache:
                cache[word] = self._correction(word, language)
            correction = cache[word]
            if correction is None:
                continue

            suggestion, rule_id = correction
            findings.append(Finding(
                original=word,
                start=match.start(),
                end=match.end(),
                severity=Severity.WARNING,
                source_tag=SourceTag.LEXICAL,
                suggestion=suggestion,
                context=context_snippet(source, match.start(), match.end()),
                rule_id=rule_id,
            ))

        logger.debug("Spelling check flagged %d of %d distinct words", sum(
            1 for value in cache.values() if value is not None), len(cache))
        return findings

    def _correction(self, word: str, language: Optional[str]) -> Optional[Tuple[str, str]]:
        preferred = self.dictionary.auto_correction(word)
        if preferred:
            return match_case(word, preferred), AUTO_CORRECT_RULE_ID

        if self.dictionary.contains(word, language=language):
            return None

        bound = max_suggestion_distance(word)
        folded = word.casefold()
        for candidate in self.dictionary.suggest(word, self.candidates):
            if candidate.casefold() == folded:
                continue
            suggestion = match_case(word, candidate)
            if suggestion != word and levenshtein(word, suggestion) <= bound:
                return suggestion, RULE_ID
        return None
