"""BaseAdapter ABC and unified message/content dataclasses.

All model backends subclass BaseAdapter and implement send_turn().
The dataclasses here are the content blocks and turn results that
flow between the strategies, the agent loop, and the adapters.

These are plain dataclasses (not Pydantic) to avoid overhead in the
hot path of adapter calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union


class TransportError(Exception):
    """Raised when the model backend cannot be reached or rejects a request.

    Covers network, authentication and rate-limit failures. Never
    retried; the fixed strategies and the agent loop let it propagate.
    """


@dataclass
class TextBlock:
    """Plain text content."""

    text: str
    type: str = field(default="text", init=False)


@dataclass
class ImageBlock:
    """Base64-encoded image content."""

    data: str
    media_type: str = "image/png"
    type: str = field(default="image", init=False)


@dataclass
class ToolUseBlock:
    """A tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)
    type: str = field(default="tool_use", init=False)


@dataclass
class ToolResultBlock:
    """The result of a tool invocation, matched to it by tool_use_id."""

    tool_use_id: str
    content: str
    is_error: bool = False
    type: str = field(default="tool_result", init=False)


ContentBlock = Union[TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock]


@dataclass
class Message:
    """A single message in the conversation history.

    Roles: system, user, assistant. Content is either a plain string
    or an ordered list of content blocks.
    """

    role: str
    content: str | list[ContentBlock]


@dataclass
class TokenUsage:
    """Token usage counts from a single adapter turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


@dataclass
class AdapterTurnResult:
    """Result of a single send_turn() call to a model backend.

    Captures the ordered response content blocks, the stop reason
    ("tool_use" when the model is waiting on tool results), token usage
    and the raw provider response (for debugging).
    """

    content: list[ContentBlock]
    stop_reason: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str | None:
        """Text of the first text block, or None if the model sent none."""
        for block in self.content:
            if isinstance(block, TextBlock):
                return block.text
        return None

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        """All tool invocation blocks, in response order."""
        return [block for block in self.content if isinstance(block, ToolUseBlock)]


@dataclass
class AdapterConfig:
    """Configuration passed to an adapter for a single call.

    Holds model name, generation parameters, and provider-specific
    extras such as tool_choice.
    """

    model: str
    max_tokens: int = 8192
    temperature: float | None = None
    extras: dict[str, Any] = field(default_factory=dict)


class BaseAdapter(ABC):
    """Abstract base class for all model backends.

    Adapters are stateless: they perform no retries and keep no
    conversation state between calls. Callers own the history.
    """

    @abstractmethod
    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        """Send a single request/response exchange to the model.

        Args:
            messages: Conversation history. A leading system message is
                used as the system prompt.
            tools: Optional list of tool definitions (name, description,
                parameters).
            config: Optional adapter configuration for this call.

        Returns:
            AdapterTurnResult with the model's response.

        Raises:
            TransportError: If the backend call fails.
        """
        ...

    def provider_name(self) -> str:
        """Return the provider name for this adapter.

        Default implementation returns the class name.
        """
        return type(self).__name__
