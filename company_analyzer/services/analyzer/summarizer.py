"""Page summaries via the Anthropic API with graceful degradation.

``summarize`` never raises: without a credential it returns a placeholder,
and when the API call fails or comes back empty it returns a templated
fallback naming the page context.
"""

import logging
from typing import Optional

import anthropic

from company_analyzer.services.analyzer.constants import (
    SUMMARY_INPUT_LIMIT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_OUTPUT_LIMIT,
)

logger = logging.getLogger(__name__)

HOMEPAGE_PROMPT = (
    "Analyze this company homepage content and create a professional 2-3 "
    "sentence summary focusing on:\n"
    "- What the company does\n"
    "- Key services or products\n"
    "- Target market or unique value proposition\n\n"
    'Content: "{content}"\n\n'
    "Provide a clear, concise business summary:"
)

ABOUT_PROMPT = (
    "Analyze this company's About page and summarize in 2-3 sentences:\n"
    "- Company mission and values\n"
    "- History or founding story\n"
    "- Key differentiators\n\n"
    'Content: "{content}"\n\n'
    "Provide a professional summary:"
)

GENERIC_PROMPT = (
    "Summarize the following {context} content in 2-3 sentences, focusing on key "
    "business information, value propositions, and main offerings:\n\n"
    'Content: "{content}"\n\n'
    "Summary:"
)


def build_prompt(text: str, context: str) -> str:
    """Build the context-specific prompt for *text*."""
    content = text[:SUMMARY_INPUT_LIMIT]
    if context == "homepage":
        return HOMEPAGE_PROMPT.format(content=content)
    if context == "about":
        return ABOUT_PROMPT.format(content=content)
    return GENERIC_PROMPT.format(context=context, content=content)


# Wording for summary text; prompts are still chosen by the bare context.
CONTEXT_LABELS = {"about": "about page"}


def context_label(context: str) -> str:
    return CONTEXT_LABELS.get(context, context)


def unavailable_summary(context: str) -> str:
    label = context_label(context)
    article = "an" if label[:1].lower() in ("a", "e", "i", "o", "u") else "a"
    return (
        "AI summary not available - API key required. "
        f"This appears to be {article} {label} with relevant business information."
    )


def fallback_summary(context: str, title_hint: str = "") -> str:
    subject = title_hint.strip() or "this company"
    return f"This {context_label(context)} contains business information about {subject}."


class Summarizer:
    """Summarizes page text with Claude; degrades to templated strings."""

    def __init__(
        self,
        client: Optional[anthropic.AsyncAnthropic],
        model: str,
        *,
        max_tokens: int = SUMMARY_MAX_TOKENS,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_api_key(cls, api_key: Optional[str], model: str) -> "Summarizer":
        """Build a summarizer; a missing key yields degraded mode."""
        client = anthropic.AsyncAnthropic(api_key=api_key) if api_key else None
        return cls(client, model)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def summarize(self, text: str, context: str, title_hint: str = "") -> str:
        """Return a 2-3 sentence summary of *text* for the given page context."""
        if self.client is None:
            return unavailable_summary(context)

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": build_prompt(text, context)}],
            )
            summary = "".join(
                getattr(block, "text", "") for block in response.content
            ).strip()
        except Exception as e:
            logger.warning(f"Summary generation failed for {context}: {e}")
            return fallback_summary(context, title_hint)

        if not summary:
            logger.warning(f"Empty summary returned for {context}")
            return fallback_summary(context, title_hint)
        return summary[:SUMMARY_OUTPUT_LIMIT]
