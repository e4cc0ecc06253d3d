"""Judge providers - wire-level access to the LLMs that render judgments."""

from evalcourt.providers.base import BaseJudgeProvider
from evalcourt.providers.registry import get_provider
from evalcourt.providers.retry import RetryingProvider
from evalcourt.providers.static import StaticProvider

__all__ = [
    "BaseJudgeProvider",
    "RetryingProvider",
    "StaticProvider",
    "get_provider",
]
