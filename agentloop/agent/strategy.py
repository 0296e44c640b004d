"""
Continuation strategies.

After the agent handles a tool call it asks its strategy whether to keep
going. Strategies are pure: the answer depends only on the iteration
number and the result just handled.
"""

from abc import ABC, abstractmethod

from agentloop.agent.executor import ExecutionResult, ToolCall


class Strategy(ABC):
    @abstractmethod
    def should_continue(self, iteration: int, result: ExecutionResult) -> bool:
        """Return True to run another iteration."""


class SingleRunStrategy(Strategy):
    """Keep going while the model calls tools; the agent's own cap bounds it."""

    def should_continue(self, iteration: int, result: ExecutionResult) -> bool:
        return isinstance(result, ToolCall)


class MaxIterationsStrategy(Strategy):
    """
    Like SingleRunStrategy, but stops once `iteration >= max_iterations`.

    This cap is independent of the agent's own max_iterations; whichever
    is tighter ends the run.
    """

    def __init__(self, max_iterations: int):
        if max_iterations < 1:
            raise ValueError("max_iterations must be positive")
        self.max_iterations = max_iterations

    def should_continue(self, iteration: int, result: ExecutionResult) -> bool:
        if iteration >= self.max_iterations:
            return False
        return isinstance(result, ToolCall)

    def __repr__(self) -> str:
        return f"MaxIterationsStrategy(max_iterations={self.max_iterations})"


def single_run_strategy() -> Strategy:
    return SingleRunStrategy()


def max_iterations_strategy(max_iterations: int) -> Strategy:
    return MaxIterationsStrategy(max_iterations)
