"""Spoiler-free movie summary processing."""

from app.config.settings import settings
from app.schemas.ai import SummaryRequest
from app.utils.logger import get_logger
from app.utils.openai_client import CompletionOk, get_openai_chat_completion
from app.utils.prompt_registry import PromptRegistry

logger = get_logger(__name__)

MAX_OVERVIEW_CHARS = 800
MAX_SUMMARY_WORDS = 120


def truncate_overview(overview: str, max_len: int = MAX_OVERVIEW_CHARS) -> str:
    if len(overview) > max_len:
        return overview[: max_len - 3] + "..."
    return overview


def fallback_summary(title: str, overview: str) -> str:
    """Deterministic summary built from the raw title/overview."""
    trimmed = truncate_overview(overview)
    if title and overview:
        return f"{title} — {trimmed}"
    if overview:
        return trimmed if trimmed.strip() else "No overview provided."
    if title:
        return title
    return "No title or overview provided."


class MovieSummarizer:
    """Produces a short spoiler-free description, degrading to fallback_summary."""

    def __init__(self):
        self.prompt_registry = PromptRegistry("summary")

    def build_messages(self, request: SummaryRequest, prompt_version: int = 1):
        system_prompt = self.prompt_registry.render(
            "movie_summary_system", prompt_version, max_words=MAX_SUMMARY_WORDS
        )
        user_prompt = self.prompt_registry.render(
            "movie_summary_user",
            prompt_version,
            title=request.title,
            overview=request.overview,
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def summarize(self, request: SummaryRequest) -> str:
        if not settings.ai_enabled:
            logger.info("No OpenAI key configured; returning fallback summary")
            return fallback_summary(request.title, request.overview)

        result = get_openai_chat_completion(
            settings.OPENAI_MODEL,
            messages=self.build_messages(request),
            max_tokens=250,
            temperature=0.6,
            n=1,
        )
        if isinstance(result, CompletionOk):
            return result.text
        logger.warning("AI summary unavailable, using fallback: %s", result.reason)
        return fallback_summary(request.title, request.overview)
