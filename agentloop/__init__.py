"""
agentloop - Tool-Calling Coding Agent
=====================================

An agent loop that lets a chat model work on a codebase through tools.

This package provides:
- Agent loop driving the exchange between model and tools
- OpenAI chat completions executor
- File system tools with read-only and read-write providers
- MCP bridge that registers tools from a remote MCP server
"""

__version__ = "1.0.0"
