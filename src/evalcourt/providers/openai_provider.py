"""OpenAI judge provider.

Sends the judgment prompt as a single user message to the chat
completion API and returns the message content.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from evalcourt.providers.base import BaseJudgeProvider


class OpenAIProvider(BaseJudgeProvider):
    """Provider for the OpenAI chat completion API.

    Uses lazy-initialized AsyncOpenAI client that reads OPENAI_API_KEY
    from the environment automatically.
    """

    default_model = "gpt-4o-mini"

    def __init__(self) -> None:
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncOpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as exc:
                raise ImportError("The openai judge provider needs the SDK: pip install 'evalcourt[openai]'") from exc

            self._client = AsyncOpenAI()
        return self._client

    async def call(self, prompt: str, config: Mapping[str, Any]) -> str:
        client = self._get_client()

        messages: list[dict[str, Any]] = []
        if config.get("system_prompt"):
            messages.append({"role": "system", "content": config["system_prompt"]})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": config.get("model") or self.default_model,
            "messages": messages,
        }
        if config.get("temperature") is not None:
            kwargs["temperature"] = config["temperature"]
        if config.get("max_tokens") is not None:
            kwargs["max_tokens"] = config["max_tokens"]
        if config.get("seed") is not None:
            kwargs["seed"] = config["seed"]

        # Pass through provider-specific extras
        kwargs.update(config.get("extras") or {})

        response = await client.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""

    def provider_name(self) -> str:
        return "openai"
