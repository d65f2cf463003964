"""
Detectors — Pluggable producers of Findings

- Detector: Plug-in contract
- LexicalScanner: Known-bad token corpus matcher
- SpellingDetector: Dictionary-backed unknown-word check
- StructuralAnalyzer: Naming conventions over a syntax tree
- naming: Casing predicates and converters
"""

from .base import Detector, context_snippet, CONTEXT_RADIUS
from .lexical import LexicalScanner, compile_corpus
from .spelling import SpellingDetector, match_case
from .structural import StructuralAnalyzer
from .naming import (
    is_camel_case, is_pascal_case, is_snake_case, is_constant_case,
    to_camel_case, to_pascal_case, to_snake_case, split_words, check_name
)

__all__ = [
    "Detector", "context_snippet", "CONTEXT_RADIUS",
    "LexicalScanner", "compile_corpus",
    "SpellingDetector", "match_case",
    "StructuralAnalyzer",
    "is_camel_case", "is_pascal_case", "is_snake_case", "is_constant_case",
    "to_camel_case", "to_pascal_case", "to_snake_case", "split_words", "check_name",
]
