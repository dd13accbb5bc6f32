"""Digest run: fetch stories, summarise each, post each to Slack.

Articles are processed strictly one after another. A failure on one
article is reported to the channel and the run moves on; only an error
outside per-article handling aborts the run, and it is re-raised after
being reported.
"""

import logging

import requests

from hnbrief.digest import Article, DigestError, ProcessResult, RunReport
from hnbrief.digest.llm import Summarizer
from hnbrief.digest.notifier import SlackNotifier
from hnbrief.digest.pacing import Pacer
from hnbrief.digest.sources import HackerNewsSource

logger = logging.getLogger(__name__)

NO_NEWS_MESSAGE = "No recent news found on Hacker News."


def post_quietly(notifier: SlackNotifier, text: str, what: str) -> None:
    """Best-effort post; a failure here is only logged."""
    try:
        notifier.post_message(text)
    except Exception:
        logger.exception("Failed to post %s message to Slack", what)


def _general_error_text(exc: Exception) -> str:
    return f"An unexpected error occurred during the digest run: {exc}"


class DigestJob:
    def __init__(
        self,
        source: HackerNewsSource,
        summarizer: Summarizer,
        notifier: SlackNotifier,
        article_count: int = 3,
        generation_pacer: Pacer | None = None,
        post_pacer: Pacer | None = None,
    ) -> None:
        self.source = source
        self.summarizer = summarizer
        self.notifier = notifier
        self.article_count = article_count
        self.generation_pacer = generation_pacer or Pacer(1.0, name="generation")
        self.post_pacer = post_pacer or Pacer(2.0, name="post")

    @classmethod
    def from_settings(
        cls,
        settings,
        notifier: SlackNotifier,
        hn_session: requests.Session | None = None,
    ) -> "DigestJob":
        return cls(
            source=HackerNewsSource.from_settings(settings, session=hn_session),
            summarizer=Summarizer.from_settings(settings),
            notifier=notifier,
            article_count=settings.article_count,
            generation_pacer=Pacer(settings.generation_delay, name="generation"),
            post_pacer=Pacer(settings.post_delay, name="post"),
        )

    def run(self) -> str:
        """Run the whole pipeline and return a short result line."""
        try:
            logger.info("Fetching recent news from Hacker News...")
            articles = self.source.fetch_top_articles(self.article_count)

            if not articles:
                logger.info("No news articles found")
                post_quietly(self.notifier, NO_NEWS_MESSAGE, "no news")
                return NO_NEWS_MESSAGE

            logger.info("Found %d articles, summarising and posting each...", len(articles))
            report = RunReport()
            for article in articles:
                report.results.append(self.process_article(article))

            logger.info(
                "Processing complete. %d of %d articles summarised and posted",
                report.posted,
                len(articles),
            )
            for failure in report.failures:
                logger.warning("Not posted: %r (%s)", failure.article_title, failure.reason)
            return report.message()
        except Exception as exc:
            logger.exception("Digest run failed")
            post_quietly(self.notifier, _general_error_text(exc), "general error")
            raise

    def process_article(self, article: Article) -> ProcessResult:
        """Summarise and post one article; report any failure to the channel."""
        try:
            self.generation_pacer.wait()
            summary = self.summarizer.summarize(article)

            if not summary.is_valid:
                reason = summary.text
                logger.warning("Summary unavailable for %r: %s", article.title, reason)
                self._report(
                    f"Could not summarise this article ({article.title} - {article.link}). "
                    f"Reason: {reason}",
                    article,
                )
                return ProcessResult.failed(article, reason)

            self.post_pacer.wait()
            self.notifier.post_article(article, summary.text)
            logger.info("Posted summary for %r", article.title)
            return ProcessResult.ok(article)

        except Exception as exc:
            if isinstance(exc, DigestError):
                logger.error("Failed to process article %r: %s", article.title, exc)
            else:
                logger.exception("Unexpected error processing article %r", article.title)
            self._report(
                f"An error occurred while processing or posting this article "
                f"({article.title} - {article.link}): {exc}",
                article,
            )
            return ProcessResult.failed(article, str(exc))

    def _report(self, text: str, article: Article) -> None:
        self.post_pacer.wait()
        post_quietly(self.notifier, text, f"error for {article.title!r}")


def run_digest(settings) -> str:
    """Build the components from ``settings`` and run one digest.

    Setup failures (e.g. an LLM client that cannot be created) are
    reported to the channel like run failures, then re-raised.
    """
    with requests.Session() as hn_session, requests.Session() as slack_session:
        notifier = SlackNotifier.from_settings(
            settings, model=settings.llm_model, session=slack_session
        )
        try:
            job = DigestJob.from_settings(settings, notifier, hn_session=hn_session)
        except Exception as exc:
            logger.exception("Failed to set up the digest run")
            post_quietly(notifier, _general_error_text(exc), "setup error")
            raise
        return job.run()
