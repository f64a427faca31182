"""Exception types for the newsletter agent.

The Hacker News and Firecrawl clients never raise for network faults; they
degrade to empty or failed results. These exceptions cover the layers above
them: the LLM call, tool dispatch and the agent loop.
"""

from typing import Any


class NewsletterError(Exception):
    """Base exception for newsletter generation errors."""

    def __init__(self, message: str, **context: Any):
        """Initialize error with context.

        Args:
            message: Error message
            **context: Additional context information
        """
        super().__init__(message)
        self.context = context


class LLMRequestError(NewsletterError):
    """Raised when a completion request to the LLM provider fails.

    The original exception is attached as the cause via exception chaining.
    """


class ToolExecutionError(NewsletterError):
    """Raised for unknown tools or invalid tool arguments."""

    def __init__(self, message: str, tool_name: str, **context: Any):
        super().__init__(message, **context)
        self.tool_name = tool_name

    def __str__(self) -> str:
        return f"[{self.tool_name}] {super().__str__()}"


class AgentTurnLimitExceeded(NewsletterError):
    """Raised when the agent keeps calling tools past the turn limit."""

    def __init__(self, max_turns: int, **context: Any):
        super().__init__(
            f"Agent did not produce a final answer within {max_turns} turns",
            **context,
        )
        self.max_turns = max_turns
