"""Slack Web API notifier.

Posts article summaries as rich attachments and plain informational or
error messages. Every failure raises: a message that did not reach the
channel must be visible to the caller.
"""

import logging

import requests

from hnbrief.digest import Article, SlackPostError
from hnbrief.digest.formatter import (
    build_article_attachment,
    build_attachment,
    build_payload,
)

logger = logging.getLogger(__name__)


class SlackNotifier:
    def __init__(
        self,
        bot_token: str,
        channel_id: str,
        model: str,
        username: str = "",
        icon_emoji: str = "",
        icon_url: str = "",
        base_url: str = "https://slack.com/api",
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.channel_id = channel_id
        self.model = model
        self.username = username
        self.icon_emoji = icon_emoji
        self.icon_url = icon_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings,
        model: str | None = None,
        session: requests.Session | None = None,
    ) -> "SlackNotifier":
        return cls(
            bot_token=settings.slack_bot_token,
            channel_id=settings.slack_channel_id,
            model=model or settings.llm_model,
            username=settings.slack_username,
            icon_emoji=settings.slack_icon_emoji,
            icon_url=settings.slack_icon_url,
            base_url=settings.slack_api_base,
            timeout=settings.request_timeout,
            session=session,
        )

    def _validate(self, text: str | None) -> None:
        if text is None:
            raise ValueError("Message text cannot be None")
        if not self.channel_id:
            raise ValueError("Slack channel ID is required")
        if not self.bot_token:
            raise ValueError("Slack bot token is required")
        if not self.model:
            raise ValueError("Model name is required for the footer")

    def post_article(self, article: Article, summary_text: str) -> dict:
        """Post one summary with the article title, link and metadata."""
        self._validate(summary_text)
        logger.info("Posting article to Slack: %s", article.title)
        attachment = build_article_attachment(article, summary_text, self.model)
        return self._send(attachment)

    def post_message(
        self,
        text: str,
        title: str | None = None,
        link: str | None = None,
    ) -> dict:
        """Post a message that is not tied to an article."""
        self._validate(text)
        logger.info("Posting message to Slack. Title: %s", title or "N/A")
        attachment = build_attachment(text, self.model, title=title, link=link)
        return self._send(attachment)

    def _send(self, attachment: dict) -> dict:
        payload = build_payload(
            self.channel_id,
            attachment,
            username=self.username,
            icon_emoji=self.icon_emoji,
            icon_url=self.icon_url,
        )
        url = f"{self.base_url}/chat.postMessage"
        try:
            resp = self.session.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.bot_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SlackPostError(f"Slack request failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code != 200 or not body.get("ok"):
            code = body.get("error") or "unknown_error"
            logger.error("Slack API error: %d, %s", resp.status_code, body)
            raise SlackPostError(f"Slack API error: {code}", code=code)

        logger.info("Message successfully posted to Slack")
        return body
