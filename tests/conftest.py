"""
Shared pytest fixtures for Typoscope test suite.

Provides dictionaries, engine settings and orchestrators built from the
test doubles in tests/factories.py. No fixture needs network access or
tree-sitter.

Usage in tests:
    def test_something(orchestrator_factory, lexical):
        engine = orchestrator_factory(detectors=[lexical])
        result = engine.analyze("funtion foo() {}")

    def test_with_events(orchestrator_factory, recorded_events):
        engine = orchestrator_factory(events=recorded_events.bus)
        ...
        assert recorded_events.types() == [...]
"""

import pytest

from typoscope.core.dictionary import DictionaryStore
from typoscope.core.events import EventBus
from typoscope.core.wordlists import PROGRAMMING_WORDS
from typoscope.detectors import LexicalScanner, SpellingDetector
from typoscope.orchestrator import AnalysisOrchestrator, EngineConfig


@pytest.fixture
def dictionary():
    """DictionaryStore with the built-in programming vocabulary loaded."""
    store = DictionaryStore()
    store.load("programming", PROGRAMMING_WORDS)
    return store


@pytest.fixture
def lexical():
    return LexicalScanner()


@pytest.fixture
def spelling(dictionary):
    return SpellingDetector(dictionary)


@pytest.fixture
def engine_config():
    """
    Engine settings tuned for fast tests.

    Short augmentation timeout so timeout paths finish quickly; high
    rate limit so the limiter never slows a test down.
    """
    return EngineConfig(
        parallel_detectors=True,
        detector_workers=4,
        augment_concurrent=3,
        augment_rate_limit=1000.0,
        augment_timeout=0.3,
        augment_max_requests=0,
        shutdown_wait=False,
    )


class RecordedEvents:
    """EventBus plus every event emitted on it."""

    def __init__(self):
        self.bus = EventBus()
        self.events = []
        self.bus.subscribe(self.events.append)

    def types(self):
        return [e.type for e in self.events]

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def recorded_events():
    return RecordedEvents()


@pytest.fixture
def orchestrator_factory(dictionary, engine_config):
    """
    Build AnalysisOrchestrators that are shut down after the test.

    Keyword arguments are passed to AnalysisOrchestrator; dictionary and
    config default to the fixtures above.
    """
    created = []

    def factory(**kwargs):
        kwargs.setdefault("dictionary", dictionary)
        kwargs.setdefault("config", engine_config)
        orchestrator = AnalysisOrchestrator(**kwargs)
        created.append(orchestrator)
        return orchestrator

    yield factory

    for orchestrator in created:
        orchestrator.shutdown(wait=False)
