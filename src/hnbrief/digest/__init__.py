"""Hacker News digest — data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

SAFETY_BLOCKED_TEXT = "Summary generation was blocked for safety reasons."
GENERATION_FAILED_TEXT = "No summary text was received."


def discussion_url(hn_id: int) -> str:
    return f"https://news.ycombinator.com/item?id={hn_id}"


class DigestError(Exception):
    """Base class for errors raised by the digest pipeline."""


class SummarizationError(DigestError):
    """The text-generation endpoint failed or returned an error status."""


class SlackPostError(DigestError):
    """Slack rejected a message or could not be reached."""

    def __init__(self, message: str, code: str = "") -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Article:
    """A normalized Hacker News story."""

    hn_id: int
    title: str
    link: str
    published_at: datetime
    body: str
    comments: tuple[str, ...] = ()
    score: int | None = None
    author: str | None = None
    comment_count: int | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Article title must not be empty")
        if self.published_at is None:
            raise ValueError("Article published_at is required")

    @property
    def discussion_url(self) -> str:
        return discussion_url(self.hn_id)


class SummaryStatus(Enum):
    VALID = "valid"
    BLOCKED = "blocked"  # withheld by the provider's safety filter
    EMPTY = "empty"  # provider answered without text


@dataclass(frozen=True)
class Summary:
    """Outcome of one generation call, classified where the response is parsed."""

    status: SummaryStatus
    content: str = ""
    reason: str = ""

    @classmethod
    def valid(cls, text: str) -> "Summary":
        text = text.strip()
        if not text:
            return cls.empty()
        return cls(SummaryStatus.VALID, content=text)

    @classmethod
    def blocked(cls, reason: str = "") -> "Summary":
        return cls(SummaryStatus.BLOCKED, reason=reason)

    @classmethod
    def empty(cls) -> "Summary":
        return cls(SummaryStatus.EMPTY)

    @property
    def is_valid(self) -> bool:
        return self.status is SummaryStatus.VALID

    @property
    def text(self) -> str:
        """Display text: the summary itself, or a fixed failure message."""
        if self.status is SummaryStatus.BLOCKED:
            return SAFETY_BLOCKED_TEXT
        if self.status is SummaryStatus.EMPTY:
            return GENERATION_FAILED_TEXT
        return self.content


@dataclass
class ProcessResult:
    """Per-article outcome, used only to count successful posts."""

    article_title: str
    success: bool
    reason: str = ""

    @classmethod
    def ok(cls, article: Article) -> "ProcessResult":
        return cls(article_title=article.title, success=True)

    @classmethod
    def failed(cls, article: Article, reason: str) -> "ProcessResult":
        return cls(article_title=article.title, success=False, reason=reason)


@dataclass
class RunReport:
    """Aggregate of one digest run."""

    results: list[ProcessResult] = field(default_factory=list)

    @property
    def posted(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failures(self) -> list[ProcessResult]:
        return [r for r in self.results if not r.success]

    def message(self) -> str:
        return f"{self.posted} summaries posted."
