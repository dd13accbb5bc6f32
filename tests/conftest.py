"""Shared fixtures."""

import pytest

from hnbrief.config import Settings
from hnbrief.digest import Article
from tests.fakes import HN, SLACK, make_article


@pytest.fixture
def article() -> Article:
    return make_article()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        llm_api_key="key",
        slack_bot_token="xoxb-token",
        slack_channel_id="C123",
        hn_api_base=HN,
        slack_api_base=SLACK,
    )
