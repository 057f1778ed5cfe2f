"""Resolve the configured adapter name to a model gateway instance.

"anthropic" is builtin; any other vision backend can be plugged in by
giving the dotted path of a BaseAdapter subclass in uxassert.yaml.
"""

from __future__ import annotations

import importlib

from uxassert.adapters.base import BaseAdapter

BUILTIN_ADAPTERS: dict[str, str] = {
    "anthropic": "uxassert.adapters.anthropic_adapter.AnthropicAdapter",
}


def _import_class(dotted_path: str) -> object:
    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(
            f"Invalid adapter path '{dotted_path}', expected 'package.module.ClassName'"
        )
    module = importlib.import_module(module_path)
    if not hasattr(module, class_name):
        raise ImportError(f"Module '{module_path}' has no attribute '{class_name}'")
    return getattr(module, class_name)


def get_adapter(name: str) -> BaseAdapter:
    """Instantiate the adapter registered as name, or at dotted path name.

    Raises:
        ValueError: Unknown short name or malformed dotted path.
        ImportError: The module or class cannot be imported (for the
            builtin adapter this usually means the SDK is missing).
        TypeError: The class is not a BaseAdapter subclass.
    """
    dotted_path = BUILTIN_ADAPTERS.get(name)
    if dotted_path is None:
        if "." not in name:
            builtins = ", ".join(sorted(BUILTIN_ADAPTERS))
            raise ValueError(
                f"Unknown adapter '{name}' (builtin: {builtins}); "
                "use a dotted path for a custom adapter"
            )
        dotted_path = name

    try:
        cls = _import_class(dotted_path)
    except ModuleNotFoundError as exc:
        if name in BUILTIN_ADAPTERS:
            raise ImportError(
                f"The '{name}' adapter needs the {name} SDK: pip install {name}"
            ) from exc
        raise

    if not (isinstance(cls, type) and issubclass(cls, BaseAdapter)):
        raise TypeError(f"'{dotted_path}' is not a subclass of BaseAdapter")
    return cls()
