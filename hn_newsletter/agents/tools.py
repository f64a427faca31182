"""Tools exposed to the newsletter agent.

Each tool validates its arguments with a Pydantic model, calls the
integration clients and returns a JSON string for the model to read.
Tool calls never raise: bad arguments, unknown tools and unexpected
failures come back as ``{"error": ...}`` payloads.

Public API:
    TOOLS: All registered tools
    get_tool: Look up a tool by name
    tool_schemas: Function-calling schemas for every tool
    execute_tool: Validate arguments and run a tool by name
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, Field, ValidationError

from hn_newsletter.errors import ToolExecutionError
from hn_newsletter.integrations.firecrawl_client import (
    PageMetadata,
    ScrapeOptions,
    scrape_url,
)
from hn_newsletter.integrations.hackernews_client import (
    HNItem,
    algolia_to_item,
    get_items,
    get_story_ids,
    get_todays_top_stories,
    search_stories,
)
from hn_newsletter.utils.config import get_settings

logger = logging.getLogger(__name__)

MAX_STORY_LIMIT = 50


class ListHackerNewsInput(BaseModel):
    """Arguments for list_hacker_news."""

    category: Literal["top", "new", "best", "today"] = Field(
        description=(
            "The category of stories to fetch. 'today' gets top stories "
            "from the last 24 hours."
        )
    )
    limit: int = Field(
        default=30,
        ge=1,
        description=f"Maximum number of stories to fetch (default: 30, max: {MAX_STORY_LIMIT})",
    )


class SearchHackerNewsInput(BaseModel):
    """Arguments for search_hacker_news."""

    query: str = Field(min_length=1, description="Keywords to search for")
    tags: str = Field(
        default="story",
        description="Algolia tag filter, e.g. 'story', 'show_hn', 'ask_hn'",
    )
    numeric_filters: str | None = Field(
        default=None,
        description="Optional numeric filters, e.g. 'points>100,created_at_i>1700000000'",
    )


class FetchArticleInput(BaseModel):
    """Arguments for fetch_article."""

    url: str = Field(description="The URL of the article to fetch and summarize")
    story_title: str | None = Field(
        default=None, description="The title of the story (for context)"
    )


@dataclass(frozen=True)
class Tool:
    """A callable tool offered to the agent.

    Attributes:
        name: Tool name the model calls
        description: What the tool does, shown to the model
        input_model: Pydantic model validating the arguments
        handler: Coroutine taking the validated arguments, returning JSON
    """

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[Any], Awaitable[str]]

    def to_openai_schema(self) -> dict[str, Any]:
        """Function-calling schema in the OpenAI format LiteLLM accepts."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _meta_text(value: str | list[str] | None) -> str | None:
    if isinstance(value, list):
        return ", ".join(value) or None
    return value


def _format_stories(stories: list[HNItem]) -> list[dict[str, Any]]:
    return [
        {
            "rank": rank,
            "id": story.id,
            "title": story.title or "No title",
            "url": story.link,
            "author": story.by or "unknown",
            "score": story.score or 0,
            "comments": story.descendants or 0,
            "time": datetime.fromtimestamp(story.time, tz=timezone.utc).isoformat(),
        }
        for rank, story in enumerate(stories, start=1)
    ]


async def list_hacker_news(args: ListHackerNewsInput) -> str:
    """Fetch a story feed and render it as JSON."""
    limit = min(args.limit, MAX_STORY_LIMIT)

    if args.category == "today":
        stories = await get_todays_top_stories(limit)
    else:
        story_ids = await get_story_ids(args.category, limit)
        stories = await get_items(story_ids)

    return _dump(
        {
            "category": args.category,
            "count": len(stories),
            "stories": _format_stories(stories),
        }
    )


async def search_hacker_news(args: SearchHackerNewsInput) -> str:
    """Search stories by keyword and render them as JSON."""
    result = await search_stories(args.query, args.tags, args.numeric_filters)
    stories = [algolia_to_item(hit) for hit in result.hits]

    return _dump(
        {
            "query": args.query,
            "total_hits": result.nb_hits,
            "count": len(stories),
            "stories": _format_stories(stories),
        }
    )


async def fetch_article(args: FetchArticleInput) -> str:
    """Scrape an article and render its content and metadata as JSON."""
    settings = get_settings()
    result = await scrape_url(
        args.url,
        settings.get_firecrawl_api_key(),
        ScrapeOptions(timeout=settings.FIRECRAWL_TIMEOUT_MS),
    )

    if result.note:
        return _dump({"url": args.url, "story_title": args.story_title, "note": result.note})

    if not result.success or result.data is None:
        return _dump(
            {
                "url": args.url,
                "story_title": args.story_title,
                "error": result.error or "Failed to fetch article content",
            }
        )

    metadata = result.data.metadata or PageMetadata()
    return _dump(
        {
            "url": args.url,
            "story_title": args.story_title,
            "content": result.data.markdown or "No content available",
            "metadata": {
                "title": _meta_text(metadata.title),
                "description": _meta_text(metadata.description),
                "author": _meta_text(metadata.og_site_name),
            },
        }
    )


TOOLS: tuple[Tool, ...] = (
    Tool(
        name="list_hacker_news",
        description=(
            "Fetch stories from Hacker News. Can get top stories, new stories, "
            "best stories, or today's top stories. Returns a list of story titles, "
            "URLs, authors, scores, and comment counts."
        ),
        input_model=ListHackerNewsInput,
        handler=list_hacker_news,
    ),
    Tool(
        name="search_hacker_news",
        description=(
            "Search Hacker News stories by keywords. Returns up to 30 matching "
            "stories with titles, URLs, authors, scores, and comment counts."
        ),
        input_model=SearchHackerNewsInput,
        handler=search_hacker_news,
    ),
    Tool(
        name="fetch_article",
        description=(
            "Fetch the full content of a news article from its URL using Firecrawl. "
            "Returns the article's markdown content, title, description, and metadata. "
            "Use this to get detailed information about a specific story."
        ),
        input_model=FetchArticleInput,
        handler=fetch_article,
    ),
)

_TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> Tool:
    """Look up a registered tool.

    Raises:
        ToolExecutionError: If no tool has this name
    """
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise ToolExecutionError(
            f"Unknown tool. Available tools: {sorted(_TOOLS_BY_NAME)}", tool_name=name
        ) from None


def tool_schemas() -> list[dict[str, Any]]:
    """Function-calling schemas for every registered tool."""
    return [tool.to_openai_schema() for tool in TOOLS]


def _parse_arguments(tool: Tool, arguments: str | dict[str, Any] | None) -> BaseModel:
    if arguments is None or arguments == "":
        arguments = {}
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as exc:
            raise ToolExecutionError(
                f"Arguments are not valid JSON: {exc}", tool_name=tool.name
            ) from exc

    try:
        return tool.input_model.model_validate(arguments)
    except ValidationError as exc:
        raise ToolExecutionError(
            f"Invalid arguments: {exc.errors(include_url=False)}", tool_name=tool.name
        ) from exc


async def execute_tool(name: str, arguments: str | dict[str, Any] | None) -> str:
    """Validate arguments and run a tool by name.

    Args:
        name: Registered tool name
        arguments: JSON string or dict of arguments as produced by the model

    Returns:
        The tool's JSON output, or a JSON ``{"error": ...}`` payload
    """
    try:
        tool = get_tool(name)
        parsed = _parse_arguments(tool, arguments)
    except ToolExecutionError as exc:
        logger.warning("Rejected tool call: %s", exc)
        return _dump({"error": str(exc)})

    logger.info("Running tool %s", name)
    try:
        return await tool.handler(parsed)
    except Exception as exc:
        logger.exception("Tool %s failed", name)
        return _dump({"error": str(exc) or "Unknown error occurred"})
