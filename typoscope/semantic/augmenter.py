"""
SemanticAugmenter — Capability interface for contextual analysis providers

Both operations are best-effort. Implementations must:
- return [] / None instead of raising on any provider failure
- log the failure
- enforce their own outbound rate limit and request budget

The orchestrator only ever holds a SemanticAugmenter, never a concrete
provider type.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.findings import Finding


@dataclass
class AugmentationResponse:
    """Uniform provider response: findings plus how long the call took."""
    findings: List[Finding] = field(default_factory=list)
    latency_ms: float = 0.0


class SemanticAugmenter(ABC):
    """Abstract capability for semantic augmentation."""

    name: str = "semantic"

    @abstractmethod
    def analyze_context(self, source: str, position: int, token: str) -> List[Finding]:
        """
        Additional findings from the code around `position`.

        Args:
            source: Full source text
            position: Character offset of the token of interest
            token: The token at `position`

        Returns:
            Findings with offsets into `source` (never raises)
        """
        pass

    @abstractmethod
    def suggest(self, token: str, context_window: str) -> Optional[str]:
        """Single best replacement for `token`, or None (never raises)."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is configured and ready."""
        pass


class NullAugmenter(SemanticAugmenter):
    """Augmenter used when no provider is configured."""

    name = "none"

    def analyze_context(self, source: str, position: int, token: str) -> List[Finding]:
        return []

    def suggest(self, token: str, context_window: str) -> Optional[str]:
        return None

    @property
    def is_available(self) -> bool:
        return False
