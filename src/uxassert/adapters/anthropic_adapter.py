"""Anthropic vision adapter.

Maps content blocks (text, base64 images, tool_use, tool_result) onto
the Messages API and maps the reply back into an AdapterTurnResult.
"""

from __future__ import annotations

from typing import Any

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

DEFAULT_MODEL = "claude-sonnet-4-5"

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


class AnthropicAdapter(BaseAdapter):
    """Model gateway backed by the Anthropic Messages API.

    The AsyncAnthropic client is created on first use and picks up
    ANTHROPIC_API_KEY from the environment.
    """

    def __init__(self) -> None:
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            from anthropic import AsyncAnthropic

            self._client = AsyncAnthropic()
        return self._client

    def _extract_system(
        self, messages: list[Message]
    ) -> tuple[str | None, list[Message]]:
        """Split off the system prompt, which the API takes as a parameter."""
        system_prompt: str | None = None
        conversation = []
        for msg in messages:
            if msg.role != "system":
                conversation.append(msg)
            elif isinstance(msg.content, str):
                system_prompt = msg.content
        return system_prompt, conversation

    def _convert_block(self, block: ContentBlock) -> dict[str, Any]:
        if isinstance(block, TextBlock):
            return {"type": "text", "text": block.text}
        if isinstance(block, ImageBlock):
            source = {"type": "base64", "media_type": block.media_type, "data": block.data}
            return {"type": "image", "source": source}
        if isinstance(block, ToolUseBlock):
            return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
        if isinstance(block, ToolResultBlock):
            return {
                "type": "tool_result",
                "tool_use_id": block.tool_use_id,
                "content": block.content,
                "is_error": block.is_error,
            }
        raise TypeError(f"Unsupported content block: {type(block).__name__}")

    def _convert_message(self, msg: Message) -> dict[str, Any]:
        content: Any = msg.content
        if not isinstance(content, str):
            content = [self._convert_block(block) for block in content]
        return {"role": msg.role, "content": content}

    def _convert_tools(self, tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Rename each tool's 'parameters' to the API's 'input_schema'."""
        converted = []
        for tool in tools:
            converted.append({
                "name": tool["name"],
                "description": tool.get("description", ""),
                "input_schema": tool.get("parameters", _EMPTY_SCHEMA),
            })
        return converted

    def _build_request(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None,
        config: AdapterConfig,
    ) -> dict[str, Any]:
        system_prompt, conversation = self._extract_system(messages)
        request: dict[str, Any] = {
            "model": config.model,
            "max_tokens": config.max_tokens,
            "messages": [self._convert_message(msg) for msg in conversation],
        }
        if system_prompt is not None:
            request["system"] = system_prompt
        if tools:
            request["tools"] = self._convert_tools(tools)
        if config.temperature is not None:
            request["temperature"] = config.temperature
        request.update(config.extras)
        return request

    def _convert_response_block(self, block: Any) -> ContentBlock | None:
        """Map one reply block; thinking and other unused types map to None."""
        if block.type == "text":
            return TextBlock(text=block.text)
        if block.type == "tool_use":
            return ToolUseBlock(id=block.id, name=block.name, input=block.input or {})
        return None

    def _to_turn_result(self, response: Any) -> AdapterTurnResult:
        blocks = (self._convert_response_block(block) for block in response.content)
        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens
        return AdapterTurnResult(
            content=[block for block in blocks if block is not None],
            stop_reason=response.stop_reason or "end_turn",
            usage=TokenUsage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
            raw_response=response.model_dump(),
        )

    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        """Send one request to the Messages API.

        Raises:
            TransportError: Wrapping any anthropic.APIError.
        """
        import anthropic

        request = self._build_request(
            messages, tools, config or AdapterConfig(model=DEFAULT_MODEL)
        )
        try:
            response = await self._get_client().messages.create(**request)
        except anthropic.APIError as exc:
            raise TransportError(f"Anthropic request failed: {exc}") from exc
        return self._to_turn_result(response)

    def provider_name(self) -> str:
        return "anthropic"
