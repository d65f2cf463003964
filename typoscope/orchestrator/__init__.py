"""
Orchestrator — Detector execution, merging and fix application

Components:
- EngineConfig: Execution limits loaded from environment variables
- WorkerPool / RateLimiter / RequestBudget: Thread pools and outbound limits
- merge: Range validation, ignore patterns, deduplication
- fixes: Back-to-front suggestion application
- AnalysisOrchestrator: The composition root

Usage:
    from typoscope.orchestrator import AnalysisOrchestrator

    with AnalysisOrchestrator(dictionary=store, detectors=[LexicalScanner()]) as engine:
        result = engine.analyze(source)
"""

from .config import EngineConfig
from .pools import WorkerPool, PendingCall, PoolStats, RateLimiter, RequestBudget
from .merge import validate_range, merge_findings, ignored_spans, is_ignored
from .fixes import apply_fixes, select_fixes
from .engine import AnalysisOrchestrator, ENGINE_VERSION

__all__ = [
    'EngineConfig',
    'WorkerPool',
    'PendingCall',
    'PoolStats',
    'RateLimiter',
    'RequestBudget',
    'validate_range',
    'merge_findings',
    'ignored_spans',
    'is_ignored',
    'apply_fixes',
    'select_fixes',
    'AnalysisOrchestrator',
    'ENGINE_VERSION',
]
