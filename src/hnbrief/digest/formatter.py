"""Slack message formatting for article summaries."""

import time

from hnbrief.digest import Article

COLOR = "#FF6600"
SLACK_DEFAULT_APP_ICON = "https://platform.slack-edge.com/img/default_application_icon.png"
_FALLBACK_LEN = 100
_FALLBACK_LABEL = "News item"
_EMPTY_TEXT = "No information to display."


def _now() -> int:
    return int(time.time())


def article_timestamp(article: Article | None) -> int:
    """Publish time as epoch seconds, or the current time if unavailable."""
    if article is None:
        return _now()
    try:
        return int(article.published_at.timestamp())
    except (AttributeError, OverflowError, OSError, ValueError):
        return _now()


def format_metadata(article: Article) -> str:
    """Join the enrichment fields that are present, e.g. ``120 points | by pg``."""
    parts: list[str] = []
    if article.score is not None:
        parts.append(f"{article.score} points")
    if article.author:
        parts.append(f"by {article.author}")
    if article.comment_count is not None:
        parts.append(f"{article.comment_count} comments")
    if article.category and article.category != "Story":
        parts.append(f"[{article.category}]")
    return " | ".join(parts)


def default_footer(model: str) -> str:
    return f"Hacker News Summarizer (Model: {model})"


def format_footer(article: Article, model: str) -> str:
    metadata = format_metadata(article)
    if metadata:
        return f"{metadata} • Summarized by {model}"
    return default_footer(model)


def build_attachment(
    text: str,
    model: str,
    title: str | None = None,
    link: str | None = None,
    footer: str | None = None,
    ts: int | None = None,
) -> dict:
    """Build one legacy Slack attachment.

    ``title`` renders as a header; it becomes clickable only when ``link``
    is also given.
    """
    attachment: dict = {
        "fallback": (title or text or _FALLBACK_LABEL)[:_FALLBACK_LEN],
        "color": COLOR,
        "text": text or _EMPTY_TEXT,
        "mrkdwn_in": ["text"],
        "footer": footer or default_footer(model),
        "footer_icon": SLACK_DEFAULT_APP_ICON,
        "ts": ts if ts is not None else _now(),
    }
    if title:
        attachment["title"] = title
        if link:
            attachment["title_link"] = link
    return attachment


def build_article_attachment(article: Article, summary_text: str, model: str) -> dict:
    return build_attachment(
        summary_text,
        model,
        title=article.title,
        link=article.link,
        footer=format_footer(article, model),
        ts=article_timestamp(article),
    )


def build_payload(
    channel: str,
    attachment: dict,
    username: str = "",
    icon_emoji: str = "",
    icon_url: str = "",
) -> dict:
    """chat.postMessage body; content lives in the attachment, ``text`` is empty."""
    payload: dict = {
        "channel": channel,
        "text": "",
        "attachments": [attachment],
    }
    if username:
        payload["username"] = username
    if icon_emoji:
        payload["icon_emoji"] = icon_emoji
    elif icon_url:
        payload["icon_url"] = icon_url
    return payload
