"""Newsletter Agent - writes a newsletter from today's Hacker News stories.

Runs a tool-calling loop against the configured LLM. The model decides
which stories to list, which articles to read and when the newsletter
is finished; this module only executes its tool calls and feeds the
results back.

Public API:
    run_newsletter_agent: Run the agent until it returns a final answer
    NewsletterResult: Immutable dataclass holding the newsletter and run stats

Example:
    >>> result = await run_newsletter_agent()
    >>> print(result.content)
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from hn_newsletter.agents.tools import execute_tool, tool_schemas
from hn_newsletter.errors import AgentTurnLimitExceeded
from hn_newsletter.integrations.llm_client import complete_chat
from hn_newsletter.integrations.prompts import (
    NEWSLETTER_AGENT_PROMPT_V1,
    NEWSLETTER_SYSTEM_PROMPT_V1,
)
from hn_newsletter.utils.config import get_settings
from hn_newsletter.utils.logging_config import get_logger


def _get_logger():
    """Get logger instance lazily to avoid module-level import issues."""
    return get_logger(__name__)


@dataclass(frozen=True)
class NewsletterResult:
    """Outcome of a newsletter agent run.

    Attributes:
        content: The final newsletter in Markdown
        turns: Number of LLM calls made
        tool_calls: Names of the tools called, in call order
    """

    content: str
    turns: int
    tool_calls: tuple[str, ...]


def _assistant_message(message: Any) -> dict[str, Any]:
    """Convert a provider message into a plain dict for the next request."""
    entry: dict[str, Any] = {"role": "assistant", "content": message.content}
    if message.tool_calls:
        entry["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.function.name,
                    "arguments": call.function.arguments,
                },
            }
            for call in message.tool_calls
        ]
    return entry


async def _run_tool_calls(tool_calls: list[Any]) -> list[dict[str, Any]]:
    """Execute all tool calls of one turn concurrently.

    Returns:
        One ``tool`` message per call, in call order
    """
    logger = _get_logger()
    for call in tool_calls:
        logger.info(
            "Tool call: %s",
            call.function.name,
            extra={"extra_fields": {"tool": call.function.name, "tool_call_id": call.id}},
        )

    outputs = await asyncio.gather(
        *(execute_tool(call.function.name, call.function.arguments) for call in tool_calls)
    )

    return [
        {
            "role": "tool",
            "tool_call_id": call.id,
            "name": call.function.name,
            "content": output,
        }
        for call, output in zip(tool_calls, outputs)
    ]


async def run_newsletter_agent(
    prompt: str | None = None,
    *,
    model: str | None = None,
    max_turns: int | None = None,
) -> NewsletterResult:
    """Run the newsletter agent until the model stops calling tools.

    Args:
        prompt: Task prompt (default: NEWSLETTER_AGENT_PROMPT_V1)
        model: Optional LLM model override
        max_turns: Maximum number of LLM calls (default: AGENT_MAX_TURNS)

    Returns:
        NewsletterResult with the final newsletter text

    Raises:
        ValueError: If max_turns is not positive or the final answer is empty
        AgentTurnLimitExceeded: If the model is still calling tools after max_turns
        LLMRequestError: If an LLM call fails
    """
    settings = get_settings()
    logger = _get_logger()

    if max_turns is None:
        max_turns = settings.AGENT_MAX_TURNS
    if max_turns < 1:
        raise ValueError("max_turns must be at least 1")

    messages: list[dict[str, Any]] = [
        {"role": "system", "content": NEWSLETTER_SYSTEM_PROMPT_V1},
        {"role": "user", "content": prompt or NEWSLETTER_AGENT_PROMPT_V1},
    ]
    schemas = tool_schemas()
    called: list[str] = []

    logger.info("Starting newsletter generation")
    for turn in range(1, max_turns + 1):
        message = await complete_chat(messages, tools=schemas, model=model)

        if not message.tool_calls:
            content = (message.content or "").strip()
            if not content:
                raise ValueError("LLM returned an empty newsletter")

            logger.info(
                "Newsletter generated",
                extra={"extra_fields": {"turns": turn, "tool_calls": len(called)}},
            )
            return NewsletterResult(content=content, turns=turn, tool_calls=tuple(called))

        messages.append(_assistant_message(message))
        messages.extend(await _run_tool_calls(message.tool_calls))
        called.extend(call.function.name for call in message.tool_calls)

    raise AgentTurnLimitExceeded(max_turns, tool_calls=len(called))
