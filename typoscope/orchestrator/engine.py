"""
AnalysisOrchestrator — Composition root of the analysis engine

Pipeline for one analyze() call:
1. Run every enabled detector against the source snapshot
2. Drop findings with invalid or stale ranges, and ignored findings
3. Optionally augment the first K lexical findings via SemanticAugmenter
4. Deduplicate by (start, end, original) and sort
5. Return an AnalysisResult

No lock is held while analyzing. Options and the detector list are
snapshotted at the start of the call, so a concurrent configure() only
affects later calls.

State machine:
    Idle -> Configuring -> Idle   (configure, synchronous)
    Idle -> Analyzing -> Idle     (analyze, one transaction per call)
"""

import logging
import math
import threading
import time
from concurrent.futures import FIRST_COMPLETED, wait as wait_for
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import AnalyzerOptions
from ..core.cancellation import CancellationToken
from ..core.dictionary import DictionaryStore
from ..core.errors import AnalysisCancelled, ConfigurationError, EngineClosedError, InvalidRangeError
from ..core.events import EventBus, EventType
from ..core.findings import AnalysisResult, Finding, Severity, SourceTag, severity_rank
from ..detectors.base import Detector
from ..semantic.augmenter import NullAugmenter, SemanticAugmenter
from ..semantic.prompts import context_window
from .config import EngineConfig
from .fixes import apply_fixes as _apply_fixes, select_fixes
from .merge import ignored_spans, is_ignored, merge_findings, validate_range
from .pools import PendingCall, WorkerPool

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"

POLL_INTERVAL = 0.05  # seconds between cancellation checks while waiting


class AnalysisOrchestrator:
    """
    Runs registered detectors and reconciles their findings.

    Usage:
        orchestrator = AnalysisOrchestrator(dictionary=store)
        orchestrator.register(LexicalScanner())
        result = orchestrator.analyze("funtion foo() {}")
        fixed = orchestrator.apply_fixes(source, result.findings)
    """

    def __init__(
        self,
        dictionary: Optional[DictionaryStore] = None,
        augmenter: Optional[SemanticAugmenter] = None,
        options: Optional[AnalyzerOptions] = None,
        config: Optional[EngineConfig] = None,
        events: Optional[EventBus] = None,
        detectors: Iterable[Detector] = (),
    ):
        self.dictionary = dictionary if dictionary is not None else DictionaryStore()
        self.augmenter = augmenter if augmenter is not None else NullAugmenter()
        self.config = config if config is not None else EngineConfig.from_env()
        self.config.validate()
        self.events = events if events is not None else EventBus()

        options = options if options is not None else AnalyzerOptions()
        options.validate()
        self._options = options

        self._detectors: Dict[str, Detector] = {}  # registration order
        self._lock = threading.Lock()
        self._closed = False

        self._detector_pool = WorkerPool(self.config.detector_workers, name="typoscope-detect")
        self._augment_pool = WorkerPool(self.config.augment_concurrent, name="typoscope-augment")

        for detector in detectors:
            self.register(detector)

    # =========================================================================
    # Registry and configuration
    # =========================================================================

    @property
    def options(self) -> AnalyzerOptions:
        return self._options

    @property
    def detectors(self) -> Tuple[Detector, ...]:
        with self._lock:
            return tuple(self._detectors.values())

    def register(self, detector: Detector) -> bool:
        """
        Add a detector to the registry.

        Returns False (and logs a warning) if the id is already registered.

        Raises:
            ConfigurationError: The object is not a usable detector
        """
        detector_id = getattr(detector, "id", None)
        if not isinstance(detector_id, str) or not detector_id:
            raise ConfigurationError(f"detector {detector!r} has no id")
        if not callable(getattr(detector, "analyze", None)):
            raise ConfigurationError(f"detector '{detector_id}' has no analyze()")

        with self._lock:
            if detector_id in self._detectors:
                logger.warning("Detector '%s' is already registered; ignoring", detector_id)
                return False
            configure = getattr(detector, "configure", None)
            if callable(configure):
                try:
                    configure(self._options)
                except Exception as e:
                    raise ConfigurationError(f"detector '{detector_id}' rejected options: {e}") from e
            self._detectors[detector_id] = detector

        self.events.emit(EventType.DETECTOR_REGISTERED, detector=detector_id)
        return True

    def unregister(self, detector_id: str) -> bool:
        """Remove a detector. Returns False if it was not registered."""
        with self._lock:
            if self._detectors.pop(detector_id, None) is None:
                return False
        self.events.emit(EventType.DETECTOR_UNREGISTERED, detector=detector_id)
        return True

    def configure(self, options: AnalyzerOptions) -> None:
        """
        Atomically replace the active options and pass them to every detector.

        Raises:
            ConfigurationError: The options are structurally invalid
        """
        options.validate()
        with self._lock:
            self._options = options
            detectors = list(self._detectors.values())
            for detector in detectors:
                configure = getattr(detector, "configure", None)
                if not callable(configure):
                    continue
                try:
                    configure(options)
                except Exception:
                    logger.exception("Detector '%s' rejected new options", detector.id)

        self.events.emit(EventType.OPTIONS_CHANGED, options=options.to_dict())

    # =========================================================================
    # Analysis
    # =========================================================================

    def analyze(
        self,
        source: str,
        cancel: Optional[CancellationToken] = None,
        options: Optional[AnalyzerOptions] = None,
    ) -> AnalysisResult:
        """
        Analyze one source snapshot.

        Args:
            source: Full source text
            cancel: Token polled between stages and while waiting on workers
            options: Per-call override of the active options

        Returns:
            Deduplicated findings sorted by (start, end, original)

        Raises:
            AnalysisCancelled: The token fired; no result is produced
            ConfigurationError: `options` is structurally invalid
            EngineClosedError: shutdown() has already been called
        """
        if self._closed:
            raise EngineClosedError("orchestrator has been shut down")
        started = time.perf_counter()
        timestamp = datetime.now(timezone.utc).isoformat()

        if options is not None:
            options.validate()
        with self._lock:
            options = options if options is not None else self._options
            detectors = [d for d in self._detectors.values() if options.is_enabled(d.id)]

        detector_ids = tuple(d.id for d in detectors)
        self.events.emit(EventType.ANALYSIS_STARTED, source_length=len(source), detectors=list(detector_ids))

        try:
            self._check_cancel(cancel)
            raw = self._run_detectors(source, detectors, options, cancel)

            self._check_cancel(cancel)
            spans = ignored_spans(source, options.ignore_regexes()) if options.ignore_patterns else []
            findings = self._drop_ignored(self._validate(source, raw), spans)

            if options.enable_semantic and options.augment_cap > 0:
                if self.augmenter.is_available:
                    findings = self._drop_ignored(self._augment(source, findings, options, cancel), spans)
                else:
                    logger.debug("Semantic augmentation skipped: no provider available")

            self._check_cancel(cancel)
            merged = merge_findings(findings, options.priority_rank)
        except AnalysisCancelled:
            self.events.emit(EventType.ANALYSIS_CANCELLED, source_length=len(source))
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        result = AnalysisResult(
            findings=tuple(merged),
            duration_ms=duration_ms,
            timestamp=timestamp,
            engine_version=ENGINE_VERSION,
            source_length=len(source),
            detectors_run=detector_ids,
        )

        logger.info(
            "Analysis complete: %d findings from %d detectors in %.1fms",
            result.count, len(detector_ids), duration_ms,
        )
        self.events.emit(
            EventType.ANALYSIS_COMPLETED,
            findings=result.count,
            duration_ms=round(duration_ms, 2),
            detectors=list(detector_ids),
        )
        return result

    @staticmethod
    def _check_cancel(cancel: Optional[CancellationToken]) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled()

    def _run_detector(self, detector: Detector, source: str, options: AnalyzerOptions) -> List[Finding]:
        findings = list(detector.analyze(source, options) or [])
        logger.debug("Detector '%s' produced %d findings", detector.id, len(findings))
        return findings

    def _detector_failed(self, detector: Detector, error: BaseException) -> None:
        logger.error("Detector '%s' failed: %s", detector.id, error, exc_info=error)
        self.events.emit(EventType.DETECTOR_FAILED, detector=detector.id, error=str(error))

    def _run_detectors(
        self,
        source: str,
        detectors: Sequence[Detector],
        options: AnalyzerOptions,
        cancel: Optional[CancellationToken],
    ) -> List[Finding]:
        """Run detectors; results are concatenated in registration order."""
        if not self.config.parallel_detectors or len(detectors) < 2:
            collected: List[Finding] = []
            for detector in detectors:
                self._check_cancel(cancel)
                try:
                    collected.extend(self._run_detector(detector, source, options))
                except Exception as e:
                    self._detector_failed(detector, e)
            return collected

        pending = [
            self._detector_pool.submit(self._run_detector, detector, source, options)
            for detector in detectors
        ]
        futures = [p.future for p in pending]

        while True:
            if cancel is not None and cancel.cancelled:
                for future in futures:
                    future.cancel()
                raise AnalysisCancelled("analysis was cancelled")
            _, not_done = wait_for(futures, timeout=POLL_INTERVAL)
            if not not_done:
                break

        collected = []
        for detector, future in zip(detectors, futures):
            try:
                collected.extend(future.result())
            except Exception as e:
                self._detector_failed(detector, e)
        return collected

    def _validate(self, source: str, findings: Iterable[Any]) -> List[Finding]:
        """Drop anything that is not a Finding, and findings whose range is out of bounds or stale."""
        valid = []
        for finding in findings:
            if not isinstance(finding, Finding):
                logger.warning("Dropping malformed finding %r: not a Finding", finding)
                self.events.emit(
                    EventType.FINDING_DROPPED,
                    finding=repr(finding),
                    reason="not a Finding",
                )
                continue
            try:
                validate_range(finding, source)
            except InvalidRangeError as e:
                logger.warning("Dropping %s finding %r: %s", finding.source_tag.value, finding.original, e)
                self.events.emit(
                    EventType.FINDING_DROPPED,
                    finding=finding.to_dict(),
                    reason=str(e),
                )
                continue
            valid.append(finding)
        return valid

    @staticmethod
    def _drop_ignored(findings: List[Finding], spans: Sequence[Tuple[int, int]]) -> List[Finding]:
        if not spans:
            return findings
        return [f for f in findings if not is_ignored(f, spans)]

    # =========================================================================
    # Semantic augmentation
    # =========================================================================

    def _augment(
        self,
        source: str,
        findings: List[Finding],
        options: AnalyzerOptions,
        cancel: Optional[CancellationToken],
    ) -> List[Finding]:
        """
        Ask the augmenter about the first K lexical findings.

        A differing suggestion relabels the finding as hybrid and raises its
        severity to at least `augment_severity`. Calls that fail or exceed
        the timeout leave their finding untouched.
        """
        findings = list(findings)
        selected: List[int] = []
        seen = set()
        for index in sorted(range(len(findings)), key=lambda i: (findings[i].start, findings[i].end)):
            finding = findings[index]
            if finding.source_tag != SourceTag.LEXICAL or finding.key in seen:
                continue
            seen.add(finding.key)
            selected.append(index)
            if len(selected) >= options.augment_cap:
                break

        if not selected:
            return findings

        calls: List[PendingCall] = []
        for index in selected:
            finding = findings[index]
            window = context_window(source, finding.start, finding.end)
            call = self._augment_pool.submit(self.augmenter.suggest, finding.original, window)
            call.payload = ("suggest", index)
            calls.append(call)
            if options.semantic_context_scan:
                call = self._augment_pool.submit(
                    self.augmenter.analyze_context, source, finding.start, finding.original
                )
                call.payload = ("context", index)
                calls.append(call)

        extra: List[Finding] = []
        for call, outcome in self._collect(calls, cancel):
            kind, index = call.payload
            original = findings[index]
            if kind == "suggest":
                if isinstance(outcome, str) and outcome and outcome.lower() != original.original.lower():
                    findings[index] = self._hybrid(original, outcome, options)
                    self.events.emit(
                        EventType.FINDING_AUGMENTED,
                        original=original.original,
                        suggestion=outcome,
                        start=original.start,
                    )
            elif isinstance(outcome, (list, tuple)):
                extra.extend(outcome)

        return findings + self._validate(source, extra)

    @staticmethod
    def _hybrid(finding: Finding, suggestion: str, options: AnalyzerOptions) -> Finding:
        severity = Severity(options.augment_severity)
        if severity_rank(finding.severity) < severity_rank(severity):
            severity = finding.severity
        return finding.with_changes(
            suggestion=suggestion,
            source_tag=SourceTag.HYBRID,
            severity=severity,
        )

    def _collect(self, calls: List[PendingCall], cancel: Optional[CancellationToken]):
        """
        Wait for augmentation calls, yielding (call, result) for each success.

        A running call is abandoned once it has run longer than the timeout.
        A call still queued after every worker slot could have timed out in
        turn is abandoned too.
        """
        timeout = self.config.augment_timeout
        rounds = math.ceil(len(calls) / max(1, self.config.augment_concurrent))
        queue_limit = timeout * (rounds + 1)
        pending = list(calls)

        while pending:
            if cancel is not None and cancel.cancelled:
                for call in pending:
                    call.future.cancel()
                raise AnalysisCancelled("analysis was cancelled")

            wait_for([c.future for c in pending], timeout=POLL_INTERVAL, return_when=FIRST_COMPLETED)
            now = time.monotonic()

            for call in list(pending):
                if call.future.done():
                    pending.remove(call)
                    if call.future.cancelled():
                        continue
                    error = call.future.exception()
                    if error is not None:
                        self._augmentation_failed(call, str(error))
                        continue
                    yield call, call.future.result()
                    continue

                elapsed = call.elapsed(now)
                if elapsed is not None and elapsed > timeout:
                    pending.remove(call)
                    self._augmentation_failed(call, f"timed out after {timeout:.1f}s")
                elif elapsed is None and now - call.submitted_at > queue_limit:
                    pending.remove(call)
                    call.future.cancel()
                    self._augmentation_failed(call, "never started")

    def _augmentation_failed(self, call: PendingCall, reason: str) -> None:
        kind, index = call.payload
        logger.warning("Semantic %s call for finding #%d abandoned: %s", kind, index, reason)
        self.events.emit(EventType.AUGMENTATION_FAILED, kind=kind, reason=reason)

    # =========================================================================
    # Fix application
    # =========================================================================

    def apply_fixes(
        self,
        source: str,
        findings: Iterable[Finding],
        threshold: Optional[Severity] = None,
    ) -> str:
        """
        Apply suggestions back-to-front.

        Args:
            source: The exact source the findings were produced from
            findings: Findings to consider
            threshold: Least severe severity to fix (default: options.auto_fix_threshold)

        Returns:
            Rewritten source
        """
        threshold = Severity(threshold if threshold is not None else self._options.auto_fix_threshold)
        findings = list(findings)
        if not findings:
            return source

        applied = select_fixes(source, findings, threshold)
        text = _apply_fixes(source, applied, threshold)
        self.events.emit(EventType.FIXES_APPLIED, applied=len(applied), considered=len(findings))
        return text

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_closed(self) -> bool:
        return self._closed

    def shutdown(self, wait: bool = True) -> None:
        """Stop worker pools. Queued work is cancelled."""
        self._closed = True
        self._detector_pool.shutdown(wait=wait)
        self._augment_pool.shutdown(wait=wait)

    def __enter__(self) -> 'AnalysisOrchestrator':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=self.config.shutdown_wait)
