"""
agentloop - Main Entry Point
============================

Runs the coding agent against a project directory:
1. Loads configuration (OPENAI_API_KEY from the environment or .env)
2. Registers the file system tools
3. Discovers Git tools from the MCP server, if one is running
4. Runs the agent on the task and prints the result

Run with:
    python -m agentloop /path/to/project "Add a function to calculate fibonacci numbers"

Or after installing:
    agentloop /path/to/project "Add a function to calculate fibonacci numbers"
"""

import argparse
import asyncio
import sys

from agentloop import __version__
from agentloop.agent import Agent, OpenAIExecutor, max_iterations_strategy
from agentloop.agent.prompts import CODING_SYSTEM_PROMPT, format_task
from agentloop.mcp_tools import MCPClient, MCPToolDiscovery
from agentloop.tools import ToolRegistry
from agentloop.tools.filesystem import (
    READ_ONLY,
    READ_WRITE,
    CreateFileTool,
    EditFileTool,
    ListDirectoryTool,
    ReadFileTool,
)
from agentloop.utils.config import Config, ConfigError, get_config
from agentloop.utils.logger import Logger, parse_log_level, set_global_level

main_logger = Logger("Main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentloop",
        description="Run an LLM coding agent with file system and MCP tools on a project",
    )
    parser.add_argument("--version", action="version", version=f"agentloop {__version__}")
    parser.add_argument("project_path", help="Absolute path of the project to work on")
    parser.add_argument("task", help="What the agent should do")
    return parser


def configure_file_tools(registry: ToolRegistry) -> None:
    """Reads go through a read-only provider, writes through a read-write one."""
    registry.register(ListDirectoryTool(READ_ONLY))
    registry.register(ReadFileTool(READ_ONLY))
    registry.register(CreateFileTool(READ_WRITE))
    registry.register(EditFileTool(READ_WRITE))


async def build_agent(config: Config) -> Agent:
    """
    Assemble the agent from configuration.

    MCP discovery runs here, before the first iteration, so the registry
    is complete by the time the loop starts.
    """
    registry = ToolRegistry(configure_file_tools)

    if config.mcp.enabled:
        client = MCPClient(config.mcp.server_url, timeout=config.mcp.timeout)
        discovery = MCPToolDiscovery(client, verbose=config.agent.verbose)
        await discovery.discover_and_register(registry)

    executor = OpenAIExecutor(
        api_key=config.openai.api_key,
        model=config.openai.model,
        base_url=config.openai.base_url,
        connect_timeout=config.openai.connect_timeout,
        read_timeout=config.openai.read_timeout,
    )

    return Agent(
        executor=executor,
        registry=registry,
        system_prompt=CODING_SYSTEM_PROMPT,
        strategy=max_iterations_strategy(config.agent.max_iterations),
        max_iterations=config.agent.max_iterations,
        verbose=config.agent.verbose,
    )


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ConfigError as e:
        main_logger.error("Failed to load configuration", e)
        return 1

    set_global_level(parse_log_level(config.log_level))

    agent = await build_agent(config)

    main_logger.info("Starting AI Agent...")
    main_logger.info(f"Project: {args.project_path}")
    main_logger.info(f"Task: {args.task}")
    print("=" * 80)

    result = await agent.run(format_task(args.project_path, args.task))

    print("\n" + "=" * 80)
    print("FINAL RESULT:")
    print(result)
    return 0


def run() -> None:
    """Synchronous entry point for the `agentloop` command."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
