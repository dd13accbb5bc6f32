"""Runtime configuration, read once from the environment (and .env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from hnbrief.digest.prompts import MAIN_PROMPT_TEMPLATE, OUTPUT_FORMAT_INSTRUCTION

HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
SLACK_API_BASE = "https://slack.com/api"

# Provider name → model used when LLM_MODEL is empty
DEFAULT_MODELS: dict[str, str] = {
    "google": "gemini-1.5-pro",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
}


class ConfigError(ValueError):
    """A required setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """All values the digest run needs. Built once, passed everywhere."""

    llm_api_key: str
    slack_bot_token: str
    slack_channel_id: str

    llm_provider: str = "google"
    llm_model: str = DEFAULT_MODELS["google"]

    slack_username: str = "Hacker News"
    slack_icon_emoji: str = ""
    slack_icon_url: str = ""

    article_count: int = 3
    max_comments: int = 10
    summary_language: str = "English"

    # Pacing, in seconds
    generation_delay: float = 1.0
    post_delay: float = 2.0

    request_timeout: float = 15.0
    hn_api_base: str = HN_API_BASE
    slack_api_base: str = SLACK_API_BASE

    output_format_instruction: str = OUTPUT_FORMAT_INSTRUCTION
    main_prompt_template: str = MAIN_PROMPT_TEMPLATE

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Loads ``.env`` first when reading the real process environment.
        Raises ConfigError when a required variable is missing.
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        provider = env.get("LLM_PROVIDER", "").strip().lower() or "google"
        if provider not in DEFAULT_MODELS:
            raise ConfigError(
                f"Unknown LLM_PROVIDER: {provider!r}. "
                f"Choose from: {', '.join(DEFAULT_MODELS)}"
            )

        return cls(
            llm_api_key=_require(env, "LLM_API_KEY", "GEMINI_API_KEY"),
            slack_bot_token=_require(env, "SLACK_BOT_TOKEN"),
            slack_channel_id=_require(env, "SLACK_CHANNEL_ID"),
            llm_provider=provider,
            llm_model=env.get("LLM_MODEL", "") or DEFAULT_MODELS[provider],
            slack_username=env.get("SLACK_USERNAME", "Hacker News"),
            slack_icon_emoji=env.get("SLACK_ICON_EMOJI", ""),
            slack_icon_url=env.get("SLACK_ICON_URL", ""),
            article_count=_int(env, "ARTICLE_COUNT", 3),
            max_comments=_int(env, "MAX_COMMENTS", 10),
            summary_language=env.get("SUMMARY_LANGUAGE", "") or "English",
            generation_delay=_int(env, "GENERATION_DELAY_MS", 1000) / 1000,
            post_delay=_int(env, "POST_DELAY_MS", 2000) / 1000,
            request_timeout=float(_int(env, "REQUEST_TIMEOUT", 15)),
            hn_api_base=env.get("HN_API_BASE", "") or HN_API_BASE,
            slack_api_base=env.get("SLACK_API_BASE", "") or SLACK_API_BASE,
            output_format_instruction=_read_template(
                env, "OUTPUT_FORMAT_INSTRUCTION_FILE", OUTPUT_FORMAT_INSTRUCTION
            ),
            main_prompt_template=_read_template(
                env, "MAIN_PROMPT_TEMPLATE_FILE", MAIN_PROMPT_TEMPLATE
            ),
            log_level=(env.get("LOG_LEVEL", "") or "INFO").upper(),
        )


def _require(env: dict[str, str], *names: str) -> str:
    """Return the first non-empty value among ``names``."""
    for name in names:
        value = env.get(name, "").strip()
        if value:
            return value
    raise ConfigError(f"{' or '.join(names)} is required but not set")


def _int(env: dict[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def _read_template(env: dict[str, str], name: str, default: str) -> str:
    path = env.get(name, "").strip()
    if not path:
        return default
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"{name}: cannot read {path}: {exc}") from exc
