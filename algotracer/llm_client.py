"""LLM client layer — the transport the analyzer uses to reach a provider."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from . import constants

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """Abstract base for LLM API clients."""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int = constants.DEFAULT_MAX_TOKENS,
    ) -> str:
        """Send a prompt to the LLM and return the raw text response."""
        ...


class ClaudeLLMClient(LLMClient):
    """Wraps anthropic.Anthropic() with lazy import and DI."""

    _LAZY_IMPORT = object()

    def __init__(
        self,
        model: str = constants.DEFAULT_CLAUDE_MODEL,
        client: Any = _LAZY_IMPORT,
    ):
        if client is ClaudeLLMClient._LAZY_IMPORT:
            import anthropic

            self._client = anthropic.Anthropic()
        else:
            self._client = client
        self._model = model

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int = constants.DEFAULT_MAX_TOKENS,
    ) -> str:
        logger.debug(
            "ClaudeLLMClient.complete: model=%s, max_tokens=%d", self._model, max_tokens
        )
        response = self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_message}],
        )
        if not response.content:
            return ""
        return response.content[0].text


class _OpenAICompatibleClient(LLMClient):
    """Shared chat-completions call for OpenAI and OpenAI-compatible servers."""

    def __init__(self, model: str, client: Any):
        self._client = client
        self._model = model

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int = constants.DEFAULT_MAX_TOKENS,
    ) -> str:
        logger.debug(
            "%s.complete: model=%s, max_tokens=%d",
            type(self).__name__,
            self._model,
            max_tokens,
        )
        response = self._client.chat.completions.create(
            model=self._model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


class OpenAILLMClient(_OpenAICompatibleClient):
    """Wraps openai.OpenAI() with lazy import and DI."""

    _LAZY_IMPORT = object()

    def __init__(
        self,
        model: str = constants.DEFAULT_OPENAI_MODEL,
        client: Any = _LAZY_IMPORT,
    ):
        if client is OpenAILLMClient._LAZY_IMPORT:
            import openai

            client = openai.OpenAI()
        super().__init__(model=model, client=client)


class OllamaLLMClient(_OpenAICompatibleClient):
    """Wraps Ollama's OpenAI-compatible API (localhost:11434 by default)."""

    _LAZY_IMPORT = object()

    def __init__(
        self,
        model: str = constants.DEFAULT_OLLAMA_MODEL,
        client: Any = _LAZY_IMPORT,
        base_url: str = constants.DEFAULT_OLLAMA_URL,
    ):
        if client is OllamaLLMClient._LAZY_IMPORT:
            import openai

            client = openai.OpenAI(base_url=base_url, api_key="ollama")
        super().__init__(model=model, client=client)


def get_llm_client(
    provider: str = constants.PROVIDER_OPENAI,
    model: str = "",
    client: Any = None,
    base_url: str = "",
) -> LLMClient:
    """Factory for LLM clients.

    Args:
        provider: "claude", "openai", or "ollama"
        model: Model name override (empty string = use default)
        client: Pre-built API client for DI/testing
        base_url: Server URL override (ollama only)
    """
    kwargs: dict[str, Any] = {}
    if model:
        kwargs["model"] = model
    if client is not None:
        kwargs["client"] = client

    if provider == constants.PROVIDER_CLAUDE:
        return ClaudeLLMClient(**kwargs)

    if provider == constants.PROVIDER_OPENAI:
        return OpenAILLMClient(**kwargs)

    if provider == constants.PROVIDER_OLLAMA:
        if base_url:
            kwargs["base_url"] = base_url
        return OllamaLLMClient(**kwargs)

    raise ValueError(f"Unknown LLM provider: {provider}")
