"""Strategy registry -- maps strategy names to strategy classes."""

from __future__ import annotations

from uxassert.adapters.base import BaseAdapter
from uxassert.evaluation.strategies.base import BaseStrategy, ProgressCallback
from uxassert.evaluation.strategies.batch import BatchStrategy
from uxassert.evaluation.strategies.single import SingleStrategy
from uxassert.evaluation.strategies.two_pass import TwoPassStrategy
from uxassert.models.config import ValidatorConfig

STRATEGY_REGISTRY: dict[str, type[BaseStrategy]] = {
    "two-pass": TwoPassStrategy,
    "batch": BatchStrategy,
    "single": SingleStrategy,
}


def get_strategy(
    name: str,
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    progress_callback: ProgressCallback | None = None,
) -> BaseStrategy:
    """Look up and instantiate a strategy by name.

    Raises:
        ValueError: If *name* is not in the registry.
    """
    cls = STRATEGY_REGISTRY.get(name)
    if cls is None:
        available = sorted(STRATEGY_REGISTRY.keys())
        raise ValueError(
            f"Unknown strategy {name!r}. Available strategies: {available}"
        )
    return cls(adapter, settings, progress_callback=progress_callback)


__all__ = [
    "BaseStrategy",
    "BatchStrategy",
    "ProgressCallback",
    "STRATEGY_REGISTRY",
    "SingleStrategy",
    "TwoPassStrategy",
    "get_strategy",
]
