"""Agentic evaluation path: tool definitions, executor and orchestrator."""

from uxassert.agent.harvest import HarvestAccumulator
from uxassert.agent.orchestrator import AgentOrchestrator
from uxassert.agent.tools import (
    TOOL_DEFINITIONS,
    ToolContext,
    ToolResultEnvelope,
    UnknownToolError,
    execute_tool,
)

__all__ = [
    "AgentOrchestrator",
    "HarvestAccumulator",
    "TOOL_DEFINITIONS",
    "ToolContext",
    "ToolResultEnvelope",
    "UnknownToolError",
    "execute_tool",
]
