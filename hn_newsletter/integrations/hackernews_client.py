"""Hacker News client.

Fetches feeds and items from the Hacker News Firebase API and keyword
search results from the Algolia search API.

Public API:
    get_item: Fetch a single item by id
    get_story_ids / get_top_stories / get_new_stories / get_best_stories:
        Fetch a feed's item ids, truncated to a limit
    get_items: Resolve ids into items with concurrent fetches
    get_todays_top_stories: Top stories posted within the last 24 hours
    search_stories: Full-text search via Algolia
    algolia_to_item: Map a search hit to the canonical HNItem shape
    format_story: Human-readable rendering of a story

Failed requests are logged and degrade to None, [] or an empty
SearchResult. Only invalid arguments raise.
"""

import asyncio
import logging
import time
from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hn_newsletter.utils.config import get_settings

logger = logging.getLogger(__name__)

HN_DISCUSSION_URL = "https://news.ycombinator.com/item?id={item_id}"
ONE_DAY_SECONDS = 24 * 60 * 60
SEARCH_HITS_PER_PAGE = 30

FeedName = Literal["top", "new", "best"]
ItemType = Literal["story", "comment", "job", "poll", "pollopt"]

FEEDS: tuple[str, ...] = ("top", "new", "best")


class HNItem(BaseModel):
    """A Hacker News item (story, comment, job, poll or poll option).

    Mirrors the Firebase item JSON. Unknown fields are ignored and the
    model is immutable once parsed.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    type: ItemType
    by: str | None = None
    time: int
    title: str | None = None
    url: str | None = None
    score: int | None = None
    descendants: int | None = None
    kids: list[int] | None = None
    text: str | None = None
    dead: bool = False
    deleted: bool = False
    parent: int | None = None
    poll: int | None = None
    parts: list[int] | None = None

    @property
    def discussion_url(self) -> str:
        """URL of the item's Hacker News discussion page."""
        return HN_DISCUSSION_URL.format(item_id=self.id)

    @property
    def link(self) -> str:
        """External URL, or the discussion page for self-posts."""
        return self.url or self.discussion_url


class SearchHit(BaseModel):
    """A single Algolia search hit. Field aliases match the wire names."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    object_id: str = Field(alias="objectID")
    title: str | None = None
    url: str | None = None
    author: str | None = None
    points: int | None = None
    num_comments: int | None = None
    created_at_i: int


class SearchResult(BaseModel):
    """Algolia search response: hits plus the total match count."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    hits: list[SearchHit] = Field(default_factory=list)
    nb_hits: int = Field(default=0, alias="nbHits")


def _new_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=float(get_settings().API_TIMEOUT))


async def _fetch_item(client: httpx.AsyncClient, item_id: int) -> HNItem | None:
    url = f"{get_settings().HN_API_BASE_URL}/item/{item_id}.json"
    try:
        response = await client.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Could not load item %s: %s", item_id, exc)
        return None

    # The API answers null for ids that do not exist
    if data is None:
        logger.debug("Item %s does not exist", item_id)
        return None

    try:
        return HNItem.model_validate(data)
    except ValidationError as exc:
        logger.warning("Unexpected payload for item %s: %s", item_id, exc)
        return None


async def get_item(
    item_id: int,
    *,
    client: httpx.AsyncClient | None = None,
) -> HNItem | None:
    """Fetch a single Hacker News item.

    Args:
        item_id: Numeric item identifier
        client: Optional shared client; a short-lived one is opened otherwise

    Returns:
        The parsed item, or None if it is missing or the request failed
    """
    if client is not None:
        return await _fetch_item(client, item_id)

    async with _new_client() as own_client:
        return await _fetch_item(own_client, item_id)


async def get_story_ids(feed: FeedName, limit: int = 30) -> list[int]:
    """Fetch the ids of a story feed in feed order.

    Args:
        feed: One of "top", "new" or "best"
        limit: Maximum number of ids to return

    Returns:
        The first ``limit`` ids of the feed, or [] if the request failed

    Raises:
        ValueError: If limit is not positive or the feed is unknown
    """
    if limit <= 0:
        raise ValueError("Limit must be positive")
    if feed not in FEEDS:
        raise ValueError(f"Unknown feed '{feed}', expected one of {list(FEEDS)}")

    url = f"{get_settings().HN_API_BASE_URL}/{feed}stories.json"
    logger.debug("Loading %s story ids from %s", feed, url)
    try:
        async with _new_client() as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Could not load %s stories: %s", feed, exc)
        return []

    if not isinstance(data, list):
        logger.warning("Unexpected response for %s stories: %r", feed, data)
        return []

    return data[:limit]


async def get_top_stories(limit: int = 30) -> list[int]:
    """Fetch the ids of the current top stories."""
    return await get_story_ids("top", limit)


async def get_new_stories(limit: int = 30) -> list[int]:
    """Fetch the ids of the newest stories."""
    return await get_story_ids("new", limit)


async def get_best_stories(limit: int = 30) -> list[int]:
    """Fetch the ids of the best stories."""
    return await get_story_ids("best", limit)


async def get_items(item_ids: list[int]) -> list[HNItem]:
    """Resolve item ids into items.

    All fetches run concurrently on one client and are joined before
    filtering. Ids that fail to resolve are dropped; the survivors keep
    their input order.

    Args:
        item_ids: Item identifiers to resolve

    Returns:
        Resolved items in input order
    """
    if not item_ids:
        return []

    async with _new_client() as client:
        results = await asyncio.gather(
            *(get_item(item_id, client=client) for item_id in item_ids),
            return_exceptions=True,
        )

    items: list[HNItem] = []
    for item_id, result in zip(item_ids, results):
        if isinstance(result, BaseException):
            logger.warning("Fetching item %s failed: %s", item_id, result)
            continue
        if result is not None:
            items.append(result)

    logger.debug("Resolved %d of %d items", len(items), len(item_ids))
    return items


async def get_todays_top_stories(count: int = 30) -> list[HNItem]:
    """Fetch top stories posted within the last 24 hours.

    The cutoff is taken from the wall clock at call time, so repeated calls
    against the live feed can differ.

    Args:
        count: Number of top story ids to inspect

    Returns:
        Items of type "story" no older than 24 hours, in feed order
    """
    story_ids = await get_top_stories(count)
    stories = await get_items(story_ids)

    cutoff = time.time() - ONE_DAY_SECONDS
    todays = [story for story in stories if story.type == "story" and story.time >= cutoff]

    logger.info("Found %d stories from the last 24 hours out of %d", len(todays), len(stories))
    return todays


async def search_stories(
    query: str,
    tags: str = "story",
    numeric_filters: str | None = None,
) -> SearchResult:
    """Search Hacker News through the Algolia API.

    Args:
        query: Full-text search query
        tags: Algolia tag filter (default: "story")
        numeric_filters: Optional numeric filter expression,
            e.g. "created_at_i>1700000000,points>100"

    Returns:
        Up to 30 hits; an empty result if the request failed

    Raises:
        ValueError: If query is empty
    """
    if not query or not query.strip():
        raise ValueError("Query cannot be empty")

    params: dict[str, str | int] = {
        "query": query,
        "tags": tags,
        "hitsPerPage": SEARCH_HITS_PER_PAGE,
    }
    if numeric_filters:
        params["numericFilters"] = numeric_filters

    url = f"{get_settings().HN_SEARCH_API_BASE_URL}/search"
    try:
        async with _new_client() as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Error searching stories for %r: %s", query, exc)
        return SearchResult()

    return _parse_search_result(payload)


def _parse_search_result(payload: object) -> SearchResult:
    # Hits are validated one at a time so a malformed hit only drops itself
    if not isinstance(payload, dict):
        logger.warning("Unexpected search payload of type %s", type(payload).__name__)
        return SearchResult()

    raw_hits = payload.get("hits")
    hits: list[SearchHit] = []
    for raw_hit in raw_hits if isinstance(raw_hits, list) else []:
        try:
            hits.append(SearchHit.model_validate(raw_hit))
        except ValidationError as exc:
            logger.warning("Skipping malformed search hit: %s", exc)

    nb_hits = payload.get("nbHits")
    if not isinstance(nb_hits, int):
        nb_hits = len(hits)
    return SearchResult(hits=hits, nb_hits=nb_hits)


def algolia_to_item(hit: SearchHit) -> HNItem:
    """Map an Algolia search hit to the canonical HNItem shape.

    Examples:
        >>> hit = SearchHit.model_validate(
        ...     {"objectID": "123", "title": "T", "author": "a",
        ...      "points": 5, "num_comments": 2, "created_at_i": 1000}
        ... )
        >>> algolia_to_item(hit).score
        5
    """
    return HNItem(
        id=int(hit.object_id),
        type="story",
        by=hit.author,
        time=hit.created_at_i,
        title=hit.title,
        url=hit.url,
        score=hit.points,
        descendants=hit.num_comments,
    )


def format_story(story: HNItem) -> str:
    """Render a story as a short multi-line block for terminal output."""
    title = story.title or "No title"
    author = story.by or "unknown"
    points = story.score or 0
    comments = story.descendants or 0

    return (
        f"📰 {title}\n"
        f"   👤 {author} | ⬆️ {points} points | 💬 {comments} comments\n"
        f"   🔗 {story.link}"
    )
