"""Presentation and bookkeeping helpers around AI results."""
from __future__ import annotations

import json
import math
from collections.abc import Sequence
from typing import Any

from chartwise.models.insight import AIConfigStatus, DataQuality, Recommendation

_PRIORITY_ORDER = {"high": 1, "medium": 2, "low": 3}

# (minimum score, rating, color), highest first
_QUALITY_BANDS = [
    (90, "Excellent", "green"),
    (75, "Good", "blue"),
    (60, "Fair", "yellow"),
]


def estimate_tokens(text: str | None) -> int:
    """Rough token count at ~4 characters per token."""
    if not text:
        return 0
    return math.ceil(len(text) / 4)


def truncate_context(data: Any, max_tokens: int = 3000) -> Any:
    """Shorten a list so its JSON form fits ``max_tokens``; other values pass through."""
    estimated = estimate_tokens(json.dumps(data, default=str))
    if estimated <= max_tokens or not isinstance(data, list):
        return data
    target = math.floor(len(data) * (max_tokens / estimated) * 0.9)
    return data[: max(1, target)]


def format_recommendations(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    return sorted(recommendations, key=lambda r: _PRIORITY_ORDER.get(r.priority, 2))


def rate_data_quality(quality: DataQuality | None) -> DataQuality | None:
    if quality is None:
        return None
    for threshold, rating, color in _QUALITY_BANDS:
        if quality.score >= threshold:
            return quality.model_copy(update={"rating": rating, "color": color})
    return quality.model_copy(update={"rating": "Poor", "color": "red"})


def ai_config_status(enabled: bool, api_key: str | None) -> AIConfigStatus:
    if not enabled:
        return AIConfigStatus(configured=False, message="AI features are disabled in configuration")
    if not api_key:
        return AIConfigStatus(
            configured=False,
            message="OpenAI API key is not set. Please add OPENAI_API_KEY to your environment.",
        )
    if not api_key.startswith("sk-"):
        return AIConfigStatus(
            configured=False,
            message='Invalid OpenAI API key format. Key should start with "sk-"',
        )
    return AIConfigStatus(configured=True, message="OpenAI is configured and ready")


_KIND_MESSAGES = {
    "authentication": "Invalid API key. Please check your OpenAI API key in Settings.",
    "rate_limit": "Rate limit exceeded. Please wait a few moments and try again.",
    "transient": "OpenAI service is temporarily unavailable. Please try again later.",
    "malformed_response": "The AI returned an unexpected response. Please try again.",
}


def describe_ai_error(exc: BaseException | None) -> str:
    """User-facing message for a failed AI call.

    Works for domain ``AIError``s and for API client errors alike; both carry
    a ``kind`` plus the server text as ``message`` or ``detail``.
    """
    if exc is None:
        return "An unknown error occurred"
    kind = getattr(exc, "kind", None)
    if kind in _KIND_MESSAGES:
        return _KIND_MESSAGES[kind]

    text = str(getattr(exc, "message", None) or getattr(exc, "detail", None) or exc)
    if kind in ("configuration", "local_rate_limit"):
        return text
    lowered = text.lower()
    if "token" in lowered or "context length" in lowered:
        return "Data is too large. Try with a smaller dataset or fewer columns."
    if "network" in lowered or "connection" in lowered:
        return "Network error. Please check your internet connection."
    return text or "Failed to connect to AI service"
