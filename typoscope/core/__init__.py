"""
Core — Data layer for Typoscope

Contains the foundational pieces every other layer builds on:
- Findings: Finding / AnalysisResult data model, severities, source tags
- Errors: Failure taxonomy
- Dictionary: Named known-good word sets with fuzzy suggestion
- Persistence: Dictionary load/save boundary (JSON files)
- Wordlists: Built-in typo corpus and programming vocabulary
- Events: Side-channel for structured run events
- Cancellation: Cooperative cancellation tokens
"""

from .errors import (
    TyposcopeError, DictionaryError, ConfigurationError, ParseError,
    ExternalServiceError, InvalidRangeError, AnalysisCancelled, EngineClosedError
)
from .findings import Severity, SourceTag, Finding, AnalysisResult, severity_rank
from .dictionary import (
    DictionaryEntry, DictionaryStore, DEFAULT_USER_DICTIONARY,
    levenshtein, max_suggestion_distance
)
from .persistence import DictionaryRepository, JsonDictionaryRepository
from .wordlists import COMMON_TYPOS, PROGRAMMING_WORDS
from .events import EventType, AnalysisEvent, EventBus
from .cancellation import CancellationToken

__all__ = [
    # Errors
    "TyposcopeError", "DictionaryError", "ConfigurationError", "ParseError",
    "ExternalServiceError", "InvalidRangeError", "AnalysisCancelled", "EngineClosedError",
    # Findings
    "Severity", "SourceTag", "Finding", "AnalysisResult", "severity_rank",
    # Dictionary
    "DictionaryEntry", "DictionaryStore", "DEFAULT_USER_DICTIONARY",
    "levenshtein", "max_suggestion_distance",
    # Persistence
    "DictionaryRepository", "JsonDictionaryRepository",
    # Wordlists
    "COMMON_TYPOS", "PROGRAMMING_WORDS",
    # Events
    "EventType", "AnalysisEvent", "EventBus",
    # Cancellation
    "CancellationToken",
]
