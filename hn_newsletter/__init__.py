"""Hacker News newsletter agent."""

__version__ = "0.1.0"
