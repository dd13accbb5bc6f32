"""Hacker News article source.

Fetches the ranked top-story IDs, resolves each story and a bounded
window of its top-level comments, and returns normalized, deduplicated
Article objects. Upstream failures never raise: a failed story or
comment is skipped, a failed ID list yields an empty result.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

import requests
from bs4 import BeautifulSoup

from hnbrief import __version__
from hnbrief.digest import Article, discussion_url

logger = logging.getLogger(__name__)

# Over-fetched ID pool; absorbs per-story failures without under-filling
MAX_STORY_IDS_TO_PROCESS = 30
DEFAULT_MAX_COMMENTS = 10

_HEADERS = {
    "User-Agent": f"hnbrief/{__version__}",
    "Accept": "application/json",
}

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Collapse runs of whitespace and trim. Case is preserved."""
    return _WHITESPACE_RE.sub(" ", title).strip()


def unique_by_title(articles: Iterable[Article]) -> Iterator[Article]:
    """Yield articles whose normalized title was not seen before (first wins).

    Lazy, so a caller can stop pulling once it has enough.
    """
    seen: set[str] = set()
    for article in articles:
        key = normalize_title(article.title)
        if key in seen:
            logger.info("Dropping duplicate story %d: %s", article.hn_id, key)
            continue
        seen.add(key)
        yield article


def dedupe_by_title(articles: Iterable[Article]) -> list[Article]:
    return list(unique_by_title(articles))


def detect_category(title: str) -> str:
    """Classify a story from its title prefix."""
    lower = title.lower()
    if lower.startswith("show hn:"):
        return "Show HN"
    if lower.startswith("ask hn:"):
        return "Ask HN"
    if lower.startswith("tell hn:"):
        return "Tell HN"
    if "hiring" in lower or "freelancer" in lower:
        return "Job"
    return "Story"


def clean_html_text(text: str) -> str:
    """Convert an HN HTML fragment (``<p>``, ``<a>``, entities) to plain text."""
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for p in soup.find_all("p"):
        p.insert_before("\n")
    return soup.get_text().strip()


class HackerNewsSource:
    """Client for the public Hacker News Firebase API."""

    def __init__(
        self,
        base_url: str = "https://hacker-news.firebaseio.com/v0",
        max_comments: int = DEFAULT_MAX_COMMENTS,
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_comments = max_comments
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(_HEADERS)

    @classmethod
    def from_settings(
        cls, settings, session: requests.Session | None = None
    ) -> "HackerNewsSource":
        return cls(
            base_url=settings.hn_api_base,
            max_comments=settings.max_comments,
            timeout=settings.request_timeout,
            session=session,
        )

    # ---- HTTP ----

    def _get_json(self, path: str) -> object | None:
        """GET ``path`` and decode JSON. None on any non-200 or bad body."""
        url = f"{self.base_url}/{path}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return None
        if resp.status_code != 200:
            logger.warning("Request to %s returned status %d", url, resp.status_code)
            return None
        try:
            return resp.json()
        except ValueError:
            logger.warning("Malformed JSON from %s", url)
            return None

    # ---- Stories ----

    def fetch_top_articles(self, limit: int = 10) -> list[Article]:
        """Return up to ``limit`` unique articles in ranking order."""
        if limit <= 0:
            return []

        logger.info("Fetching Hacker News top story IDs...")
        story_ids = self._get_json("topstories.json")
        if not isinstance(story_ids, list) or not story_ids:
            logger.warning("No story IDs received from Hacker News")
            return []

        candidates = story_ids[:MAX_STORY_IDS_TO_PROCESS]
        logger.info(
            "Received %d story IDs, checking up to %d candidates",
            len(story_ids),
            len(candidates),
        )

        articles: list[Article] = []
        for article in unique_by_title(self._iter_articles(candidates)):
            articles.append(article)
            if len(articles) >= limit:
                break

        logger.info("Found %d articles from Hacker News", len(articles))
        return articles

    def _iter_articles(self, story_ids: list[int]) -> Iterator[Article]:
        """Fetch stories one at a time, skipping unusable ones."""
        for story_id in story_ids:
            article = self.fetch_article(story_id)
            if article is not None:
                yield article

    def fetch_article(self, story_id: int) -> Article | None:
        """Fetch and normalize one story. None when it is unusable."""
        try:
            item = self._get_json(f"item/{story_id}.json")
            if not isinstance(item, dict):
                return None
            if item.get("deleted") or item.get("dead"):
                logger.info("Story %s is deleted or dead", story_id)
                return None

            title = normalize_title(str(item.get("title") or ""))
            published = item.get("time")
            if not title or not isinstance(published, (int, float)) or isinstance(published, bool):
                logger.warning("Story %s is missing title or time", story_id)
                return None

            hn_id = int(item.get("id", story_id))
            kids = item.get("kids") or []
            comments = self.fetch_comments(kids) if kids else []
            body = clean_html_text(item.get("text") or "") or title

            return Article(
                hn_id=hn_id,
                title=title,
                link=item.get("url") or discussion_url(hn_id),
                published_at=datetime.fromtimestamp(published, tz=timezone.utc),
                body=body,
                comments=tuple(comments),
                score=_optional_int(item.get("score")),
                author=item.get("by") or None,
                comment_count=_optional_int(item.get("descendants")),
                category=detect_category(title),
            )
        except (ValueError, TypeError, OverflowError, OSError):
            logger.exception("Error processing story %s", story_id)
            return None

    # ---- Comments ----

    def fetch_comments(self, comment_ids: list[int]) -> list[str]:
        """Fetch up to ``max_comments`` live comments.

        Walks at most ``max_comments * 2`` IDs in source order, so a few
        deleted or dead replies don't leave the list short.
        """
        if self.max_comments <= 0:
            return []
        comments: list[str] = []
        for comment_id in comment_ids[: self.max_comments * 2]:
            if len(comments) >= self.max_comments:
                break
            text = self.fetch_comment(comment_id)
            if text:
                comments.append(text)
        return comments

    def fetch_comment(self, comment_id: int) -> str | None:
        """Text of one live comment, or None. Never raises for bad data."""
        data = self._get_json(f"item/{comment_id}.json")
        if not isinstance(data, dict):
            return None
        if data.get("deleted") or data.get("dead"):
            return None
        try:
            return clean_html_text(data.get("text") or "") or None
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping unreadable comment %s: %s", comment_id, exc)
            return None


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)
