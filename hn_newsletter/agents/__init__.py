"""Newsletter agent and the tools it can call."""

from hn_newsletter.agents.newsletter_agent import NewsletterResult, run_newsletter_agent
from hn_newsletter.agents.tools import TOOLS, Tool, execute_tool, get_tool, tool_schemas

__all__ = [
    "run_newsletter_agent",
    "NewsletterResult",
    "TOOLS",
    "Tool",
    "execute_tool",
    "get_tool",
    "tool_schemas",
]
