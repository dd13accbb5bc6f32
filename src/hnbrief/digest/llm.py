"""LLM summarization of single articles.

Supports Google Gemini (default), OpenAI, and Anthropic. Each provider
receives two ordered text segments (the output-format instruction, then
the prompt carrying the article context) and returns a classified
Summary. Provider and transport errors are raised as SummarizationError.
"""

import logging
from abc import ABC, abstractmethod

from hnbrief.digest import Article, Summary, SummarizationError

logger = logging.getLogger(__name__)

SUBJECT = "Hacker News"
MAX_CONTEXT_COMMENTS = 3
MAX_COMMENT_CHARS = 200


def _clean_comment(comment: str) -> str:
    return comment.replace("\n", " ").replace("`", "'")[:MAX_COMMENT_CHARS]


def build_article_context(article: Article) -> str:
    """Format the article facts the model summarises."""
    lines = [
        f"## Story: {article.title}",
        f"- Link: {article.link}",
    ]
    if article.body and article.body != article.title:
        lines.append(f"- Text on Hacker News: {article.body}")
    lines.append(f"- Date: {article.published_at:%Y-%m-%d %H:%M} UTC")

    if article.comments:
        lines.append("- Top comments:")
        lines.extend(
            f"  - {_clean_comment(c)}" for c in article.comments[:MAX_CONTEXT_COMMENTS]
        )
    return "\n".join(lines) + "\n"


def _fill(template: str, **values: str) -> str:
    # str.replace so stray braces in user-supplied templates are harmless
    for key, value in values.items():
        template = template.replace("{" + key + "}", value)
    return template


def build_prompt_parts(
    article: Article,
    output_format_instruction: str,
    main_prompt_template: str,
    language: str = "English",
) -> tuple[str, str]:
    """Return (instruction, prompt) in the order they are sent."""
    instruction = _fill(output_format_instruction, subject=SUBJECT, language=language)
    prompt = _fill(
        main_prompt_template,
        subject=SUBJECT,
        language=language,
        article_context=build_article_context(article),
    )
    return instruction, prompt


# ---------------------------------------------------------------------------
# Provider interface
# ---------------------------------------------------------------------------


class LLMProvider(ABC):
    """Abstract text-generation provider."""

    model: str

    @abstractmethod
    def generate(self, instruction: str, prompt: str) -> Summary:
        """Send both segments, classify the response.

        Raises SummarizationError on transport or API failure.
        """
        ...


# ---------------------------------------------------------------------------
# Google Gemini
# ---------------------------------------------------------------------------


class GoogleProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gemini-1.5-pro", timeout: float = 60) -> None:
        from google import genai
        from google.genai import types

        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self.model = model

    def generate(self, instruction: str, prompt: str) -> Summary:
        from google.genai import errors, types

        contents = [
            types.Content(
                role="user",
                parts=[types.Part(text=instruction), types.Part(text=prompt)],
            )
        ]
        try:
            response = self.client.models.generate_content(
                model=self.model, contents=contents
            )
        except errors.APIError as exc:
            raise SummarizationError(f"Gemini API error ({exc.code}): {exc.message}") from exc
        except Exception as exc:
            raise SummarizationError(f"Gemini request failed: {exc}") from exc

        candidate = response.candidates[0] if response.candidates else None
        if candidate is None:
            feedback = getattr(response, "prompt_feedback", None)
            if feedback is not None and getattr(feedback, "block_reason", None):
                logger.warning("Gemini blocked the prompt: %s", feedback.block_reason)
                return Summary.blocked(str(feedback.block_reason))
            return Summary.empty()

        if candidate.finish_reason == types.FinishReason.SAFETY:
            logger.warning(
                "Gemini content generation blocked due to safety ratings: %s",
                candidate.safety_ratings,
            )
            return Summary.blocked("SAFETY")

        parts = candidate.content.parts if candidate.content else None
        text = parts[0].text if parts else None
        return Summary.valid(text or "")


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 60) -> None:
        import openai

        self.client = openai.OpenAI(api_key=api_key, timeout=timeout)
        self.model = model

    def generate(self, instruction: str, prompt: str) -> Summary:
        import openai

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": prompt},
                ],
            )
        except openai.OpenAIError as exc:
            raise SummarizationError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            return Summary.empty()
        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            logger.warning("OpenAI content generation blocked by content filter")
            return Summary.blocked("content_filter")
        return Summary.valid(choice.message.content or "")


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class AnthropicProvider(LLMProvider):
    def __init__(
        self, api_key: str, model: str = "claude-3-5-haiku-latest", timeout: float = 60
    ) -> None:
        import anthropic

        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout)
        self.model = model

    def generate(self, instruction: str, prompt: str) -> Summary:
        import anthropic

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=1024,
                system=instruction,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as exc:
            raise SummarizationError(f"Anthropic API error: {exc}") from exc

        if response.stop_reason == "refusal":
            logger.warning("Anthropic content generation refused")
            return Summary.blocked("refusal")
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        return Summary.valid(text)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_PROVIDERS: dict[str, type[LLMProvider]] = {
    "google": GoogleProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(
    provider_name: str, api_key: str, model: str = "", timeout: float = 60
) -> LLMProvider:
    """Create an LLM provider by name."""
    cls = _PROVIDERS.get(provider_name)
    if cls is None:
        raise ValueError(
            f"Unknown LLM provider: {provider_name!r}. "
            f"Choose from: {', '.join(_PROVIDERS)}"
        )
    if model:
        return cls(api_key, model=model, timeout=timeout)
    return cls(api_key, timeout=timeout)


# ---------------------------------------------------------------------------
# Summarizer
# ---------------------------------------------------------------------------


class Summarizer:
    """Turns one Article into one Summary via the configured provider."""

    def __init__(
        self,
        provider: LLMProvider,
        output_format_instruction: str,
        main_prompt_template: str,
        language: str = "English",
    ) -> None:
        self.provider = provider
        self.output_format_instruction = output_format_instruction
        self.main_prompt_template = main_prompt_template
        self.language = language

    @classmethod
    def from_settings(cls, settings) -> "Summarizer":
        provider = get_provider(
            settings.llm_provider,
            settings.llm_api_key,
            model=settings.llm_model,
            timeout=max(settings.request_timeout, 60),
        )
        return cls(
            provider,
            settings.output_format_instruction,
            settings.main_prompt_template,
            language=settings.summary_language,
        )

    @property
    def model(self) -> str:
        return self.provider.model

    def summarize(self, article: Article) -> Summary:
        instruction, prompt = build_prompt_parts(
            article,
            self.output_format_instruction,
            self.main_prompt_template,
            language=self.language,
        )
        logger.info("Generating summary for %r with %s", article.title, self.model)
        summary = self.provider.generate(instruction, prompt)
        logger.info("Summary for %r: %s", article.title, summary.status.value)
        return summary
