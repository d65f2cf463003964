"""
Detector — Plug-in contract for the orchestrator

A detector turns source text into Findings. Detectors:
- have a stable `id` (registry key) and a display `name`
- declare the `source_tag` their findings carry
- must not depend on each other's output or on shared mutable state,
  so the orchestrator may run them in parallel
"""

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

from ..core.findings import Finding, SourceTag

if TYPE_CHECKING:
    from ..config import AnalyzerOptions

CONTEXT_RADIUS = 20


class Detector(ABC):
    """Abstract base for detectors."""

    id: str = ""
    name: str = ""
    source_tag: SourceTag = SourceTag.LEXICAL

    def configure(self, options: 'AnalyzerOptions') -> None:
        """Receive new options at registration and on reconfiguration."""
        pass

    @abstractmethod
    def analyze(self, source: str, options: 'AnalyzerOptions') -> List[Finding]:
        """
        Detect issues in one source snapshot.

        Args:
            source: Full source text
            options: Options in effect for this call

        Returns:
            Findings with offsets into `source`
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def context_snippet(source: str, start: int, end: int, radius: int = CONTEXT_RADIUS) -> str:
    """Text surrounding [start, end), for display only."""
    return source[max(0, start - radius):min(len(source), end + radius)]
