"""LLMClient protocol used by the insight client.

Covers the one call the insight features need: a chat completion that
returns the first choice's content together with its token usage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Completion:
    content: str
    usage: dict[str, int] | None = None


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for chat completion calls returning a ``Completion``."""

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Return the first choice's content and the call's token usage."""
        ...


class OpenAILLMClient:
    """Adapter wrapping the OpenAI SDK client.

    The SDK's own retries are disabled; ``RetryPolicy`` owns retrying.
    """

    def __init__(self, openai_client: Any | None = None, api_key: str | None = None) -> None:
        self._client = openai_client
        self._api_key = api_key

    @property
    def client(self) -> Any:
        if self._client is None:
            from openai import OpenAI  # lazy import

            from chartwise.config import settings

            self._client = OpenAI(api_key=self._api_key or settings.openai_api_key, max_retries=0)
        return self._client

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Delegate to the OpenAI SDK."""
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
        }
        if response_format is not None:
            kwargs["response_format"] = response_format
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        response = self.client.chat.completions.create(**kwargs)
        usage = getattr(response, "usage", None)
        return Completion(
            content=response.choices[0].message.content or "",
            usage=(
                {
                    "prompt_tokens": usage.prompt_tokens,
                    "completion_tokens": usage.completion_tokens,
                    "total_tokens": usage.total_tokens,
                }
                if usage is not None
                else None
            ),
        )
