"""
Agent Core
==========

The agent loop that drives the exchange between the model and the tools.

Agent Loop:
    Reset history to [system, user]
         │
         ▼
    Prompt executor (history + tools) ◄─────────────┐
         │                                          │
         ├── FinalAnswer ──► return content         │
         ├── Error ────────► return "Error: ..."    │
         │                                          │
         ▼                                          │
    ToolCall: append assistant message              │
         │                                          │
         ├── unknown tool ─► append "not found" ────┤  (strategy not asked)
         │                                          │
         ▼                                          │
    Execute tool, append tool message               │
         │                                          │
    Strategy says continue? ── yes ─────────────────┘
         │
         no
         ▼
    "Agent stopped after N iterations"

Tool failures and unknown tool names are fed back to the model as tool
messages so it can change approach. Only backend failures end a run
early. A run always returns a string.
"""

from agentloop.agent.context import ConversationHistory, Message
from agentloop.agent.executor import (
    ExecutionError,
    ExecutionResult,
    FinalAnswer,
    PromptExecutor,
    ToolCall,
)
from agentloop.agent.strategy import Strategy, single_run_strategy
from agentloop.tools import Tool, ToolError, ToolRegistry, ToolResult
from agentloop.utils.logger import Logger

logger = Logger("Agent")


class Agent:
    """
    Orchestrates one conversation between the model and the tools.

    The agent owns its conversation history for the duration of `run`.
    It has no internal locking: concurrent runs need one Agent each.

    Example:
        agent = Agent(
            executor=OpenAIExecutor(api_key),
            registry=registry,
            system_prompt="You are a highly skilled programmer...",
            strategy=max_iterations_strategy(50),
        )

        result = await agent.run("Add a function to calculate fibonacci numbers")
    """

    def __init__(
        self,
        executor: PromptExecutor,
        registry: ToolRegistry,
        system_prompt: str,
        strategy: Strategy | None = None,
        max_iterations: int = 100,
        verbose: bool = True,
    ):
        """
        Initialize the agent.

        Args:
            executor: Backend that performs one model round-trip per iteration
            registry: Tools offered to the model every turn
            system_prompt: First message of every run
            strategy: Consulted after each handled tool call (default: single run)
            max_iterations: Upper bound on model round-trips per run
            verbose: Log iteration progress at INFO instead of DEBUG
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be positive")

        self.executor = executor
        self.registry = registry
        self.system_prompt = system_prompt
        self.strategy = strategy or single_run_strategy()
        self.max_iterations = max_iterations
        self.verbose = verbose

        self.history = ConversationHistory()

    def _trace(self, message: str, data: dict | None = None) -> None:
        if self.verbose:
            logger.info(message, data)
        else:
            logger.debug(message, data)

    async def run(self, user_input: str) -> str:
        """
        Run the loop until a final answer, an error, or a stop.

        Args:
            user_input: The task for the model

        Returns:
            The model's final answer, "Error: <message>" for backend
            failures, or "Agent stopped after N iterations"
        """
        self.history.reset(self.system_prompt, user_input)

        iteration = 0
        last_result: ExecutionResult | None = None

        while iteration < self.max_iterations:
            iteration += 1
            self._trace(f"=== Iteration {iteration} ===")

            result = await self.executor.execute(self.history.messages, self.registry.get_all())
            last_result = result

            if isinstance(result, ToolCall):
                self._trace(f"Tool called: {result.tool_name}", {"arguments": result.arguments})

                self.history.append(Message.assistant_tool_calls(result.to_tool_calls()))

                tool = self.registry.get(result.tool_name)
                if tool is None:
                    logger.warning(f"Tool not found: {result.tool_name}")
                    self.history.append(Message.tool_result(
                        tool_call_id=result.id,
                        name=result.tool_name,
                        content=f"Tool not found: {result.tool_name}",
                    ))
                    # Unknown tools skip the strategy; only max_iterations bounds this path
                    continue

                tool_result = await self._execute_tool(tool, result)
                if isinstance(tool_result, ToolError):
                    self._trace(f"Tool error: {tool_result.message}")
                else:
                    self._trace(f"Tool result: {tool_result.output}")

                self.history.append(Message.tool_result(
                    tool_call_id=result.id,
                    name=result.tool_name,
                    content=tool_result.to_message(),
                ))

                if not self.strategy.should_continue(iteration, result):
                    self._trace(f"Strategy stopped the run after iteration {iteration}")
                    break

            elif isinstance(result, FinalAnswer):
                self._trace(f"Final answer: {result.content}")
                return result.content

            elif isinstance(result, ExecutionError):
                logger.warning(f"Execution error: {result.message}")
                return f"Error: {result.message}"

            else:
                raise TypeError(f"Unknown execution result: {result!r}")

        # FinalAnswer always returns inside the loop, so this branch is never taken
        if isinstance(last_result, FinalAnswer):
            return last_result.content

        logger.warning(f"Agent stopped after {iteration} iterations")
        return f"Agent stopped after {iteration} iterations"

    async def _execute_tool(self, tool: Tool, call: ToolCall) -> ToolResult:
        try:
            return await tool.execute(call.arguments)
        except Exception as e:
            logger.error(f"Tool raised: {call.tool_name}", e)
            return ToolError(f"Tool '{call.tool_name}' raised: {e}")
