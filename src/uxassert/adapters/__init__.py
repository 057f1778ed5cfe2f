"""uxassert adapters - model backend abstraction layer.

Re-exports the BaseAdapter ABC, the content block and turn result
dataclasses, and the adapter registry function.
"""

from uxassert.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    ContentBlock,
    ImageBlock,
    Message,
    TextBlock,
    TokenUsage,
    ToolResultBlock,
    ToolUseBlock,
    TransportError,
)
from uxassert.adapters.registry import get_adapter

__all__ = [
    "AdapterConfig",
    "AdapterTurnResult",
    "BaseAdapter",
    "ContentBlock",
    "ImageBlock",
    "Message",
    "TextBlock",
    "TokenUsage",
    "ToolResultBlock",
    "ToolUseBlock",
    "TransportError",
    "get_adapter",
]
