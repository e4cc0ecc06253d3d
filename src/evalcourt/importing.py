"""Resolve ``module:attribute`` import paths.

Dataset files name their response and setup functions this way, and
judge specs may name a custom provider class the same way.
"""

from __future__ import annotations

import importlib
from typing import Any


def resolve_import_path(path: str) -> Any:
    """Import ``module:attr.sub`` (or dotted ``module.attr``) and return the object.

    Raises:
        ImportError: If the path is malformed, the module cannot be
            imported, or the attribute chain does not exist.
    """
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")
    if not module_path or not attr_path:
        raise ImportError(f"Invalid import path '{path}'. Expected 'module:attribute'.")

    target: Any = importlib.import_module(module_path)
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ImportError(f"Module '{module_path}' has no attribute '{attr_path}'.") from None
    return target
