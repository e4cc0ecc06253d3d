"""Name-to-provider resolution for judge specs.

A judge spec's ``provider`` is either a builtin name or an import path
to a BaseJudgeProvider subclass (``my_pkg.judges:LocalProvider`` or
``my_pkg.judges.LocalProvider``). build_judge calls get_provider once per
simple judge, so every judge gets its own provider instance.
"""

from __future__ import annotations

from evalcourt.importing import resolve_import_path
from evalcourt.providers.base import BaseJudgeProvider

BUILTIN_PROVIDERS: dict[str, str] = {
    "openai": "evalcourt.providers.openai_provider:OpenAIProvider",
    "anthropic": "evalcourt.providers.anthropic_provider:AnthropicProvider",
    "static": "evalcourt.providers.static:StaticProvider",
}


def get_provider(name: str) -> BaseJudgeProvider:
    """Return a new provider instance for a builtin name or import path.

    Raises:
        ValueError: If *name* is neither a builtin nor an import path.
        ImportError: If the import path does not resolve.
        TypeError: If the path names something other than a provider class.
    """
    path = BUILTIN_PROVIDERS.get(name)
    if path is None:
        if ":" not in name and "." not in name:
            raise ValueError(
                f"Unknown judge provider '{name}'; "
                f"use one of {', '.join(sorted(BUILTIN_PROVIDERS))} or an import path"
            )
        path = name

    provider_cls = resolve_import_path(path)
    if not (isinstance(provider_cls, type) and issubclass(provider_cls, BaseJudgeProvider)):
        raise TypeError(f"'{path}' is not a subclass of BaseJudgeProvider")
    return provider_cls()
