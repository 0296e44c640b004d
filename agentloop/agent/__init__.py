"""
Agent System
============

The agent drives a conversation between the model and the tools until
the model answers, the backend fails, or the strategy stops it.

This module provides:
- Agent: The loop that owns the conversation history
- PromptExecutor / OpenAIExecutor: One model round-trip per call
- ToolCall / FinalAnswer / ExecutionError: What an executor returns
- Strategy: Decides whether to continue after a tool call
"""

from agentloop.agent.context import ConversationHistory, Message, Role
from agentloop.agent.core import Agent
from agentloop.agent.executor import (
    ExecutionError,
    ExecutionResult,
    FinalAnswer,
    OpenAIExecutor,
    OpenAIModels,
    PromptExecutor,
    ToolCall,
)
from agentloop.agent.strategy import (
    MaxIterationsStrategy,
    SingleRunStrategy,
    Strategy,
    max_iterations_strategy,
    single_run_strategy,
)

__all__ = [
    "Agent",
    "ConversationHistory",
    "Message",
    "Role",
    "PromptExecutor",
    "OpenAIExecutor",
    "OpenAIModels",
    "ExecutionResult",
    "ToolCall",
    "FinalAnswer",
    "ExecutionError",
    "Strategy",
    "SingleRunStrategy",
    "MaxIterationsStrategy",
    "single_run_strategy",
    "max_iterations_strategy",
]
