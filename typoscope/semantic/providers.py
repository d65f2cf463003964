"""
Semantic Providers — SemanticAugmenter adapters for hosted models

Supports: Claude (anthropic SDK), OpenAI (openai SDK).
Each adapter implements the capability on its own; they share only the
provider-neutral prompt helpers.

Every adapter:
- owns a RateLimiter and a RequestBudget
- uses the SDK client's own timeout and never retries
- converts every SDK failure into ExternalServiceError internally, then
  logs it and degrades to [] / None at the public methods
"""

import logging
import time
from typing import Any, List, Optional

from ..config import PROVIDERS, SemanticConfig
from ..core.errors import ExternalServiceError
from ..core.findings import Finding
from ..orchestrator.config import EngineConfig
from ..orchestrator.pools import RateLimiter, RequestBudget
from .augmenter import AugmentationResponse, NullAugmenter, SemanticAugmenter
from .prompts import (
    AugmentationRequest, build_context_prompt, build_request,
    build_suggestion_prompt, parse_context_findings, parse_suggestion,
)

logger = logging.getLogger(__name__)


class ClaudeAugmenter(SemanticAugmenter):
    """Anthropic Claude adapter."""

    name = "claude"

    def __init__(
        self,
        config: Optional[SemanticConfig] = None,
        client: Any = None,
        limiter: Optional[RateLimiter] = None,
        budget: Optional[RequestBudget] = None,
        timeout: float = 10.0,
        max_tokens: int = 512,
    ):
        self.config = config or SemanticConfig(provider="claude")
        self.limiter = limiter or RateLimiter()
        self.budget = budget or RequestBudget()
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._client = client
        if self._client is None:
            self._init_client()

    def _init_client(self):
        api_key = self.config.api_key
        if not api_key:
            return
        try:
            import anthropic
        except ImportError:
            logger.warning("anthropic is not installed; Claude augmentation disabled")
            return
        self._client = anthropic.Anthropic(api_key=api_key, timeout=self.timeout, max_retries=0)

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def _complete(self, system: str, user: str) -> str:
        if self._client is None:
            raise ExternalServiceError("Claude client not initialized", provider=self.name)
        if not self.budget.consume():
            raise ExternalServiceError("request budget exhausted", provider=self.name)
        if not self.limiter.acquire(timeout=self.timeout):
            raise ExternalServiceError("rate limit timeout", provider=self.name)

        try:
            message = self._client.messages.create(
                model=self.config.effective_model,
                max_tokens=self.max_tokens,
                system=system,
                messages=[{"role": "user", "content": user}]
            )
        except Exception as e:
            raise ExternalServiceError(f"Claude request failed: {e}", provider=self.name) from e
        finally:
            self.limiter.release()

        try:
            return message.content[0].text
        except (AttributeError, IndexError, TypeError):
            raise ExternalServiceError("unexpected Claude response shape", provider=self.name)

    def suggest(self, token: str, context_window: str) -> Optional[str]:
        system, user = build_suggestion_prompt(token, context_window)
        try:
            return parse_suggestion(self._complete(system, user))
        except ExternalServiceError as e:
            logger.warning("Claude suggestion for %r failed: %s", token, e)
            return None

    def analyze_context(self, source: str, position: int, token: str) -> List[Finding]:
        return self.request_context(source, build_request(source, position, token)).findings

    def request_context(self, source: str, request: AugmentationRequest) -> AugmentationResponse:
        started = time.monotonic()
        try:
            text = self._complete(*build_context_prompt(request))
            findings = parse_context_findings(text, request, source)
        except ExternalServiceError as e:
            logger.warning("Claude context analysis at line %d failed: %s", request.line, e)
            findings = []
        return AugmentationResponse(findings=findings, latency_ms=(time.monotonic() - started) * 1000)


class OpenAIAugmenter(SemanticAugmenter):
    """OpenAI chat-completions adapter."""

    name = "openai"

    def __init__(
        self,
        config: Optional[SemanticConfig] = None,
        client: Any = None,
        limiter: Optional[RateLimiter] = None,
        budget: Optional[RequestBudget] = None,
        timeout: float = 10.0,
        max_tokens: int = 512,
    ):
        self.config = config or SemanticConfig(provider="openai")
        self.limiter = limiter or RateLimiter()
        self.budget = budget or RequestBudget()
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._client = client
        if self._client is None:
            self._init_client()

    def _init_client(self):
        api_key = self.config.api_key
        if not api_key:
            return
        try:
            import openai
        except ImportError:
            logger.warning("openai is not installed; OpenAI augmentation disabled")
            return
        self._client = openai.OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def _complete(self, system: str, user: str) -> str:
        if self._client is None:
            raise ExternalServiceError("OpenAI client not initialized", provider=self.name)
        if not self.budget.consume():
            raise ExternalServiceError("request budget exhausted", provider=self.name)
        if not self.limiter.acquire(timeout=self.timeout):
            raise ExternalServiceError("rate limit timeout", provider=self.name)

        try:
            response = self._client.chat.completions.create(
                model=self.config.effective_model,
                max_completion_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user}
                ]
            )
        except Exception as e:
            raise ExternalServiceError(f"OpenAI request failed: {e}", provider=self.name) from e
        finally:
            self.limiter.release()

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            raise ExternalServiceError("unexpected OpenAI response shape", provider=self.name)
        return content or ""

    def suggest(self, token: str, context_window: str) -> Optional[str]:
        system, user = build_suggestion_prompt(token, context_window)
        try:
            return parse_suggestion(self._complete(system, user))
        except ExternalServiceError as e:
            logger.warning("OpenAI suggestion for %r failed: %s", token, e)
            return None

    def analyze_context(self, source: str, position: int, token: str) -> List[Finding]:
        return self.request_context(source, build_request(source, position, token)).findings

    def request_context(self, source: str, request: AugmentationRequest) -> AugmentationResponse:
        started = time.monotonic()
        try:
            text = self._complete(*build_context_prompt(request))
            findings = parse_context_findings(text, request, source)
        except ExternalServiceError as e:
            logger.warning("OpenAI context analysis at line %d failed: %s", request.line, e)
            findings = []
        latency_ms = (time.monotonic() - started) * 1000
        logger.debug("OpenAI context analysis returned %d findings in %.0fms", len(findings), latency_ms)
        return AugmentationResponse(findings=findings, latency_ms=latency_ms)


AUGMENTERS = {
    "claude": ClaudeAugmenter,
    "openai": OpenAIAugmenter,
}


def get_augmenter(config: SemanticConfig, engine: Optional[EngineConfig] = None) -> SemanticAugmenter:
    """
    Get semantic augmenter based on configuration.

    Args:
        config: Semantic provider configuration
        engine: Limits for the adapter (defaults from environment)

    Returns:
        Configured adapter, or NullAugmenter if none is available
    """
    augmenter_class = AUGMENTERS.get(config.provider)
    if augmenter_class is None:
        logger.warning("Unknown semantic provider '%s'; augmentation disabled", config.provider)
        return NullAugmenter()

    engine = engine or EngineConfig.from_env()
    augmenter = augmenter_class(
        config,
        limiter=RateLimiter(
            max_concurrent=engine.augment_concurrent,
            rate_limit=engine.augment_rate_limit
        ),
        budget=RequestBudget(engine.augment_max_requests),
        timeout=engine.augment_timeout,
    )
    if augmenter.is_available:
        return augmenter

    logger.debug("Semantic provider '%s' not configured (%s unset)", config.provider, config.api_key_env)
    return NullAugmenter()


def get_augmenter_status(config: SemanticConfig) -> str:
    """Get human-readable provider status."""
    if config.provider not in PROVIDERS:
        return f"Unknown semantic provider '{config.provider}'"

    if not config.api_key:
        return f"Semantic augmentation not configured (set {config.api_key_env} environment variable)"

    package_map = {
        "claude": ("anthropic", "pip install anthropic"),
        "openai": ("openai", "pip install openai"),
    }
    module_name, install_cmd = package_map[config.provider]
    try:
        __import__(module_name)
    except ImportError:
        return f"Provider package missing: {install_cmd}"

    return f"{config.provider.title()}: {config.effective_model}"
