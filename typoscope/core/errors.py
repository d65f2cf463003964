"""
Errors — Failure taxonomy for the analysis engine

Only DictionaryError, ConfigurationError and EngineClosedError are meant
to reach the host. Everything else is raised inside a component and recovered at that
component's boundary:

- ParseError: StructuralAnalyzer, becomes "no structural findings"
- ExternalServiceError: semantic adapters, becomes "no augmentation"
- InvalidRangeError: orchestrator merge step, finding is dropped
- AnalysisCancelled: raised by analyze() when its token fires
"""

from typing import Optional


class TyposcopeError(Exception):
    """Base class for all engine errors."""


class DictionaryError(TyposcopeError):
    """Malformed dictionary entries, or a dictionary load/save failure."""

    def __init__(self, message: str, dictionary: Optional[str] = None):
        super().__init__(message)
        self.dictionary = dictionary


class ConfigurationError(TyposcopeError):
    """Structurally invalid options or detector registration."""


class ParseError(TyposcopeError):
    """Parser could not produce a syntax tree for the source."""

    def __init__(self, message: str, language: Optional[str] = None):
        super().__init__(message)
        self.language = language


class ExternalServiceError(TyposcopeError):
    """Timeout, bad response or auth failure from a semantic provider."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class InvalidRangeError(TyposcopeError):
    """Finding offsets fall outside the source they claim to describe."""

    def __init__(self, message: str, start: int, end: int, length: int):
        super().__init__(message)
        self.start = start
        self.end = end
        self.length = length


class AnalysisCancelled(TyposcopeError):
    """analyze() was cancelled; no result is produced."""


class EngineClosedError(TyposcopeError):
    """analyze() was called after the orchestrator was shut down."""
