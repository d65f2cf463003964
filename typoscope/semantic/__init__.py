"""
Semantic — Best-effort augmentation from contextual analysis providers

- SemanticAugmenter: The capability the orchestrator depends on
- NullAugmenter: No-op implementation
- ClaudeAugmenter / OpenAIAugmenter: Hosted-model adapters
- prompts: Provider-neutral request building and response parsing
"""

from .augmenter import SemanticAugmenter, NullAugmenter, AugmentationResponse
from .prompts import (
    AugmentationRequest, build_request, code_window, context_window,
    build_suggestion_prompt, build_context_prompt,
    parse_suggestion, parse_context_findings,
    CONTEXT_RADIUS, LINES_BEFORE, LINES_AFTER,
)
from .providers import (
    ClaudeAugmenter, OpenAIAugmenter, AUGMENTERS, get_augmenter, get_augmenter_status
)

__all__ = [
    "SemanticAugmenter", "NullAugmenter", "AugmentationResponse",
    "AugmentationRequest", "build_request", "code_window", "context_window",
    "build_suggestion_prompt", "build_context_prompt",
    "parse_suggestion", "parse_context_findings",
    "CONTEXT_RADIUS", "LINES_BEFORE", "LINES_AFTER",
    "ClaudeAugmenter", "OpenAIAugmenter", "AUGMENTERS", "get_augmenter", "get_augmenter_status",
]
