"""BaseJudgeProvider ABC - the wire-level contract of an LLM judge.

A provider takes a fully rendered judgment prompt plus a config mapping
and returns the raw response text. Parsing that text into a verdict is
the judge's job, not the provider's.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class BaseJudgeProvider(ABC):
    """Abstract base class for all judge providers.

    Subclasses implement call(). Failures are raised as exceptions;
    SimpleJudge wraps them in ProviderTransportError.
    """

    @abstractmethod
    async def call(self, prompt: str, config: Mapping[str, Any]) -> str:
        """Send a judgment prompt and return the raw response text.

        Args:
            prompt: The rendered judgment prompt.
            config: Provider settings such as model, temperature,
                max_tokens, plus provider-specific extras.

        Returns:
            The model's response text.
        """
        ...

    def provider_name(self) -> str:
        """Return the provider name for this provider.

        Default implementation returns the class name.
        Subclasses may override for custom naming.
        """
        return type(self).__name__
