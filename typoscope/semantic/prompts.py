"""
Prompts — Provider-neutral request building and response parsing

Everything a provider adapter needs except the SDK call itself:
- character windows around a finding (suggest)
- line windows around a position (analyze_context), with the offset of
  the window so snippet-relative offsets map back to the full source
- prompt text for both operations
- tolerant parsing of model output into suggestions and Findings
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import orjson

from ..core.errors import ExternalServiceError
from ..core.findings import Finding, Severity, SourceTag

CONTEXT_RADIUS = 50      # characters each side, for suggest()
LINES_BEFORE = 4
LINES_AFTER = 4

SEMANTIC_RULE_ID = "semantic-context"

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_INTEGER = re.compile(r"-?\d+")
_NULL_ANSWERS = {"", "null", "none", "n/a"}


def context_window(source: str, start: int, end: int, radius: int = CONTEXT_RADIUS) -> str:
    """Characters around [start, end), clamped to the source."""
    return source[max(0, start - radius):min(len(source), end + radius)]


def code_window(
    source: str,
    position: int,
    before: int = LINES_BEFORE,
    after: int = LINES_AFTER,
) -> Tuple[str, int, int, int]:
    """
    Lines around `position`.

    Returns:
        (snippet, snippet_start_offset, line, column) with 1-based line
        and 0-based column of `position`
    """
    position = max(0, min(position, len(source)))
    lines = source.splitlines(keepends=True) or [""]

    offset = 0
    line_index = 0
    for index, text in enumerate(lines):
        if offset + len(text) > position or index == len(lines) - 1:
            line_index = index
            break
        offset += len(text)
    column = position - offset

    first = max(0, line_index - before)
    last = min(len(lines), line_index + after + 1)
    snippet_start = sum(len(text) for text in lines[:first])
    snippet = "".join(lines[first:last])
    return snippet, snippet_start, line_index + 1, column


@dataclass(frozen=True)
class AugmentationRequest:
    """Uniform request handed to every provider adapter."""
    code_window: str
    token: str
    line: int
    column: int
    window_start: int = 0

    @property
    def window_end(self) -> int:
        return self.window_start + len(self.code_window)


def build_request(source: str, position: int, token: str) -> AugmentationRequest:
    snippet, start, line, column = code_window(source, position)
    return AugmentationRequest(
        code_window=snippet, token=token, line=line, column=column, window_start=start
    )


# =============================================================================
# Prompt text
# =============================================================================

SUGGESTION_SYSTEM = (
    "You are a code-aware spell checker. Given a possibly misspelled token and "
    "the code around it, reply with the single best replacement token only. "
    "Reply with null if the token is already correct."
)

CONTEXT_SYSTEM = (
    "You review code for typos and naming mistakes that depend on context. "
    "Reply with a JSON array only. Each item has: original (exact text from the "
    "snippet), start and end (character offsets into the snippet, end exclusive), "
    "suggestion, severity (info, warning, error or critical) and an optional "
    "rule_id. Reply with [] when there is nothing to report."
)


def build_suggestion_prompt(token: str, window: str) -> Tuple[str, str]:
    user = (
        f"Token: {token}\n"
        f"Context:\n{window}\n\n"
        "Best replacement:"
    )
    return SUGGESTION_SYSTEM, user


def build_context_prompt(request: AugmentationRequest) -> Tuple[str, str]:
    user = (
        f"Focus token: {request.token} (line {request.line}, column {request.column})\n"
        f"Snippet:\n{request.code_window}"
    )
    return CONTEXT_SYSTEM, user


# =============================================================================
# Response parsing
# =============================================================================

def parse_suggestion(text: Optional[str]) -> Optional[str]:
    """
    Single replacement token from model output, or None.

    Takes the first non-blank line and strips quotes and backticks. Anything
    that is not a single token is rejected.
    """
    if not text:
        return None
    for line in text.strip().splitlines():
        candidate = line.strip().strip("`'\"").strip()
        if candidate:
            break
    else:
        return None

    if candidate.lower() in _NULL_ANSWERS:
        return None
    if any(ch.isspace() for ch in candidate):
        return None
    return candidate


def _strip_fences(text: str) -> str:
    match = _FENCE.search(text)
    return match.group(1).strip() if match else text.strip()


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value)
    return None


def parse_context_findings(text: Optional[str], request: AugmentationRequest, source: str) -> List[Finding]:
    """
    Findings from a JSON array reply, with offsets made absolute.

    Items whose offsets do not point at `original` are relocated to the
    first occurrence of `original` inside the window, or dropped.

    Raises:
        ExternalServiceError: The reply is not a JSON array (or {"findings": [...]})
    """
    if not text or not text.strip():
        return []

    try:
        data = orjson.loads(_strip_fences(text))
    except orjson.JSONDecodeError as e:
        raise ExternalServiceError(f"malformed context response: {e}")

    if isinstance(data, dict):
        data = data.get("findings", [])
    if not isinstance(data, list):
        raise ExternalServiceError("context response is not a list")

    findings = []
    for item in data:
        if not isinstance(item, dict):
            continue
        original = item.get("original") or item.get("token")
        if not isinstance(original, str) or not original:
            continue

        start = _as_int(item.get("start", item.get("startIndex")))
        located = _locate(original, start, request, source)
        if located is None:
            continue
        abs_start, abs_end = located

        suggestion = item.get("suggestion")
        if not isinstance(suggestion, str) or not suggestion.strip():
            suggestion = None

        try:
            severity = Severity(str(item.get("severity", "warning")).lower())
        except ValueError:
            severity = Severity.WARNING

        rule_id = item.get("rule_id") or item.get("ruleId") or SEMANTIC_RULE_ID

        findings.append(Finding(
            original=original,
            start=abs_start,
            end=abs_end,
            severity=severity,
            source_tag=SourceTag.SEMANTIC,
            suggestion=suggestion,
            context=context_window(source, abs_start, abs_end),
            rule_id=str(rule_id),
        ))
    return findings


def _locate(
    original: str,
    start: Optional[int],
    request: AugmentationRequest,
    source: str,
) -> Optional[Tuple[int, int]]:
    if start is not None:
        abs_start = request.window_start + start
        abs_end = abs_start + len(original)
        if 0 <= abs_start and source[abs_start:abs_end] == original:
            return abs_start, abs_end

    relative = request.code_window.find(original)
    if relative < 0:
        return None
    abs_start = request.window_start + relative
    return abs_start, abs_start + len(original)
