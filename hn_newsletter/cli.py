"""Command line entry point.

Usage:
    hn-newsletter                          # generate today's newsletter
    hn-newsletter --output newsletter.md   # write it to a file
    hn-newsletter --stories today --limit 20   # list stories, no LLM
"""

import argparse
import asyncio
import sys
from pathlib import Path

from hn_newsletter.agents.newsletter_agent import run_newsletter_agent
from hn_newsletter.agents.tools import MAX_STORY_LIMIT
from hn_newsletter.errors import NewsletterError
from hn_newsletter.integrations.hackernews_client import (
    format_story,
    get_items,
    get_story_ids,
    get_todays_top_stories,
)
from hn_newsletter.utils.logging_config import setup_logging

DEFAULT_STORY_LIMIT = 30


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hn-newsletter",
        description="Generate a newsletter from today's Hacker News stories.",
    )
    parser.add_argument(
        "--stories",
        choices=["top", "new", "best", "today"],
        default=None,
        help="Only list stories from this category instead of running the agent.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_STORY_LIMIT,
        help=f"Number of stories to list with --stories (max {MAX_STORY_LIMIT}).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the newsletter to this file instead of stdout.",
    )
    parser.add_argument("--model", default=None, help="Override LLM_DEFAULT_MODEL.")
    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Override AGENT_MAX_TURNS.",
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON lines.")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    return parser.parse_args(argv)


async def print_stories(category: str, limit: int) -> int:
    """Print a story feed to stdout. Returns the number of stories printed."""
    limit = min(limit, MAX_STORY_LIMIT)

    if category == "today":
        stories = await get_todays_top_stories(limit)
    else:
        stories = await get_items(await get_story_ids(category, limit))

    if not stories:
        print("⚠️  No stories found")
        return 0

    for story in stories:
        print(format_story(story))
        print()
    return len(stories)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(
        use_json=args.json_logs,
        force_reconfigure=True,
        level="DEBUG" if args.verbose else None,
    )

    try:
        if args.stories:
            asyncio.run(print_stories(args.stories, args.limit))
            return 0

        result = asyncio.run(
            run_newsletter_agent(model=args.model, max_turns=args.max_turns)
        )

        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.content + "\n", encoding="utf-8")
            print(f"✅ Newsletter written to {args.output}")
        else:
            print(result.content)
    except (NewsletterError, ValueError, OSError) as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1
    return 0
