"""Clients for Hacker News, Firecrawl and the LLM provider."""
