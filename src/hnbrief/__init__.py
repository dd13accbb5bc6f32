"""Hacker News top stories, summarised by an LLM and posted to Slack."""

__version__ = "0.1.0"
