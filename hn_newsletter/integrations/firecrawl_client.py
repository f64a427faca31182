"""Firecrawl scraping client.

Fetches the readable content of an article URL through the Firecrawl
``/scrape`` endpoint. See https://docs.firecrawl.dev/api-reference/endpoint/scrape

Public API:
    scrape_url: Scrape a URL, always returning a ScrapeResult
    is_discussion_url: True for Hacker News discussion pages
    ScrapeOptions, ScrapeResult, ScrapeData, PageMetadata
"""

import logging
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

from hn_newsletter.utils.config import get_settings

logger = logging.getLogger(__name__)

HN_DISCUSSION_MARKER = "news.ycombinator.com/item"

DISCUSSION_PAGE_NOTE = (
    "This is a Hacker News discussion page, not an external article. "
    "It contains comments and discussion but no article content to scrape."
)
MISSING_API_KEY_ERROR = (
    "FIRECRAWL_API_KEY environment variable is not set. "
    "Please set it to use article summarization."
)

# Seconds added to the scrape timeout for the HTTP round trip itself
CLIENT_TIMEOUT_MARGIN = 10.0

ScrapeFormat = Literal["markdown", "html", "rawHtml", "screenshot", "links"]
MetaText = str | list[str] | None


class ScrapeOptions(BaseModel):
    """Request options for a scrape.

    Attributes:
        formats: Output formats to request
        only_main_content: Strip navigation, headers and footers
        timeout: Scrape timeout in milliseconds
        include_tags: Only keep these HTML tags
        exclude_tags: Drop these HTML tags
        headers: Extra headers Firecrawl sends to the target site
        wait_for: Milliseconds to wait for the page before scraping
    """

    model_config = ConfigDict(frozen=True)

    formats: tuple[ScrapeFormat, ...] = ("markdown",)
    only_main_content: bool = True
    timeout: int = Field(default=30000, gt=0)
    include_tags: tuple[str, ...] | None = None
    exclude_tags: tuple[str, ...] | None = None
    headers: dict[str, str] | None = None
    wait_for: int | None = None

    def to_payload(self, url: str) -> dict[str, Any]:
        """Build the camelCase JSON body for the scrape endpoint."""
        payload: dict[str, Any] = {
            "url": url,
            "formats": list(self.formats),
            "onlyMainContent": self.only_main_content,
            "timeout": self.timeout,
        }
        optional = {
            "includeTags": list(self.include_tags) if self.include_tags is not None else None,
            "excludeTags": list(self.exclude_tags) if self.exclude_tags is not None else None,
            "headers": self.headers,
            "waitFor": self.wait_for,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


class PageMetadata(BaseModel):
    """Page metadata reported by Firecrawl. Unlisted keys are kept.

    Text fields mirror the page's meta tags, and a page that repeats a tag
    comes back as a list, so each accepts a string or a list of strings.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: MetaText = None
    description: MetaText = None
    language: MetaText = None
    keywords: MetaText = None
    og_title: MetaText = Field(default=None, alias="ogTitle")
    og_description: MetaText = Field(default=None, alias="ogDescription")
    og_url: MetaText = Field(default=None, alias="ogUrl")
    og_image: MetaText = Field(default=None, alias="ogImage")
    og_site_name: MetaText = Field(default=None, alias="ogSiteName")
    source_url: MetaText = Field(default=None, alias="sourceURL")
    status_code: int | None = Field(default=None, alias="statusCode")


class ScrapeData(BaseModel):
    """Scraped content in the requested formats."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    markdown: str | None = None
    html: str | None = None
    raw_html: str | None = Field(default=None, alias="rawHtml")
    screenshot: str | None = None
    links: list[str] | None = None
    metadata: PageMetadata | None = None


class ScrapeResult(BaseModel):
    """Outcome of a scrape request.

    Successful responses are the service's JSON as-is. Failures carry
    ``error``; skipped discussion pages carry ``url`` and ``note``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool
    data: ScrapeData | None = None
    error: str | None = None
    url: str | None = None
    note: str | None = None


def is_discussion_url(url: str) -> bool:
    """Check whether a URL points at a Hacker News discussion page."""
    return HN_DISCUSSION_MARKER in url


async def scrape_url(
    url: str,
    api_key: str | None,
    options: ScrapeOptions | None = None,
) -> ScrapeResult:
    """Scrape an article through Firecrawl.

    Discussion pages and a missing API key are answered without touching
    the network. HTTP errors and transport failures become a failed
    ScrapeResult instead of an exception.

    Args:
        url: Article URL to scrape
        api_key: Firecrawl API key
        options: Scrape options (default: markdown, main content, 30s)

    Returns:
        ScrapeResult describing the content or the failure
    """
    if is_discussion_url(url):
        logger.info("Skipping Hacker News discussion page %s", url)
        return ScrapeResult(success=False, url=url, note=DISCUSSION_PAGE_NOTE)

    if not api_key:
        logger.warning("Cannot scrape %s: FIRECRAWL_API_KEY is not set", url)
        return ScrapeResult(success=False, error=MISSING_API_KEY_ERROR)

    options = options or ScrapeOptions()
    endpoint = f"{get_settings().FIRECRAWL_API_BASE_URL}/scrape"

    logger.info("Fetching article content from %s", url)
    try:
        async with httpx.AsyncClient(
            timeout=options.timeout / 1000 + CLIENT_TIMEOUT_MARGIN
        ) as client:
            response = await client.post(
                endpoint,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=options.to_payload(url),
            )

            if not response.is_success:
                logger.warning("Firecrawl returned %s for %s", response.status_code, url)
                return ScrapeResult(
                    success=False,
                    error=f"Firecrawl API error: {response.status_code} - {response.text}",
                )

            return ScrapeResult.model_validate(response.json())
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Error scraping URL %s: %s", url, exc)
        return ScrapeResult(success=False, error=str(exc) or "Unknown error")
