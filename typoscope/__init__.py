"""
Typoscope — Pluggable code-quality analysis engine

Detects lexical typos, unknown words and naming-convention violations in
source text, reconciles findings from independent detectors, and applies
accepted corrections without corrupting offsets.

Usage:
    from typoscope import build_orchestrator

    with build_orchestrator() as engine:
        result = engine.analyze("funtion myFunc() { consle.log() }")
        fixed = engine.apply_fixes(source, result.findings)

Layers:
- core: Findings, dictionary store, errors, events, cancellation
- detectors: Lexical, spelling and structural detectors
- parsing: tree-sitter parser collaborator and language configs
- semantic: Best-effort augmentation via hosted models
- orchestrator: Execution, merging, fix application
"""

from typing import Optional

__version__ = "0.1.0"

# Core layer (data)
from .core import (
    TyposcopeError, DictionaryError, ConfigurationError, ParseError,
    ExternalServiceError, InvalidRangeError, AnalysisCancelled, EngineClosedError,
    Severity, SourceTag, Finding, AnalysisResult,
    DictionaryEntry, DictionaryStore, JsonDictionaryRepository,
    COMMON_TYPOS, PROGRAMMING_WORDS,
    EventBus, EventType, AnalysisEvent, CancellationToken,
)

# Configuration
from .config import AnalyzerOptions, NamingOptions, SemanticConfig, Config, ConfigManager, get_config

# Detectors and parsing
from .detectors import Detector, LexicalScanner, SpellingDetector, StructuralAnalyzer
from .parsing import TreeSitterParser, SyntaxParser, LanguageRegistry

# Semantic augmentation
from .semantic import SemanticAugmenter, NullAugmenter, get_augmenter

# Orchestration
from .orchestrator import AnalysisOrchestrator, EngineConfig, ENGINE_VERSION


def build_orchestrator(
    config: Optional[Config] = None,
    engine: Optional[EngineConfig] = None,
    parser: Optional[SyntaxParser] = None,
    events: Optional[EventBus] = None,
) -> AnalysisOrchestrator:
    """
    Wire up the default engine.

    Loads PROGRAMMING_WORDS as the "programming" dictionary and registers
    the lexical, spelling and structural detectors. The semantic provider
    comes from config and falls back to NullAugmenter without an API key.

    Args:
        config: Application configuration (default: loaded from config files)
        engine: Execution limits (default: from environment)
        parser: Parser collaborator (default: TreeSitterParser)
        events: Event bus to emit to

    Returns:
        A ready AnalysisOrchestrator
    """
    config = config or get_config()
    engine = engine or EngineConfig.from_env()

    store = DictionaryStore()
    store.load("programming", PROGRAMMING_WORDS)

    return AnalysisOrchestrator(
        dictionary=store,
        augmenter=get_augmenter(config.semantic, engine),
        options=config.analysis,
        config=engine,
        events=events,
        detectors=[
            LexicalScanner(),
            SpellingDetector(store),
            StructuralAnalyzer(parser if parser is not None else TreeSitterParser()),
        ],
    )


__all__ = [
    "__version__",
    # Core
    "TyposcopeError", "DictionaryError", "ConfigurationError", "ParseError",
    "ExternalServiceError", "InvalidRangeError", "AnalysisCancelled", "EngineClosedError",
    "Severity", "SourceTag", "Finding", "AnalysisResult",
    "DictionaryEntry", "DictionaryStore", "JsonDictionaryRepository",
    "COMMON_TYPOS", "PROGRAMMING_WORDS",
    "EventBus", "EventType", "AnalysisEvent", "CancellationToken",
    # Configuration
    "AnalyzerOptions", "NamingOptions", "SemanticConfig", "Config", "ConfigManager", "get_config",
    # Detectors and parsing
    "Detector", "LexicalScanner", "SpellingDetector", "StructuralAnalyzer",
    "TreeSitterParser", "SyntaxParser", "LanguageRegistry",
    # Semantic
    "SemanticAugmenter", "NullAugmenter", "get_augmenter",
    # Orchestration
    "AnalysisOrchestrator", "EngineConfig", "ENGINE_VERSION",
    "build_orchestrator",
]
