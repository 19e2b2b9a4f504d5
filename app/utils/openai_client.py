"""OpenAI API client for making requests to the chat-completion service.

Calls are made exactly once: the SDK's own retry loop is disabled and any
failure is reported back as a ``CompletionFallback`` so callers can choose
their deterministic substitute explicitly.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Union

import openai

from app.config.settings import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompletionOk:
    text: str


@dataclass(frozen=True)
class CompletionFallback:
    reason: str


CompletionResult = Union[CompletionOk, CompletionFallback]


def get_openai_client():
    """Configure and return the OpenAI Python client instance."""
    return openai.OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_API_BASE_URL,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
        max_retries=0,
    )


def extract_choice_text(response: Any) -> str:
    """Return the first choice's message content (or legacy ``text``), or ''."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    choice = choices[0]
    message = getattr(choice, "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if not content:
        content = getattr(choice, "text", None)
    return str(content or "")


def _status_error_reason(exc: openai.APIStatusError) -> str:
    body = ""
    try:
        body = exc.response.text
    except Exception:
        body = ""
    return body or f"AI service responded {exc.status_code}"


def get_openai_chat_completion(model: str, messages: List[Dict[str, str]], **kwargs) -> CompletionResult:
    """Get a chat completion from the OpenAI API in a single attempt.

    Accepts extra payload params (max_tokens, temperature, n, ...) via kwargs.
    Never raises for upstream problems; returns CompletionFallback instead.
    """
    if not settings.ai_enabled:
        return CompletionFallback("no API key configured")

    try:
        client = get_openai_client()
        response = client.chat.completions.create(
            model=model, messages=messages, **kwargs
        )
    except openai.APIStatusError as e:
        reason = _status_error_reason(e)
        logger.error("OpenAI API returned status %s: %s", e.status_code, reason)
        return CompletionFallback(reason)
    except openai.OpenAIError as e:
        logger.error("OpenAI API request failed: %s", repr(e))
        return CompletionFallback(str(e) or e.__class__.__name__)
    except Exception as e:
        logger.error("Unexpected error calling OpenAI API: %s", repr(e), exc_info=True)
        return CompletionFallback(repr(e))

    text = extract_choice_text(response).strip()
    if not text:
        logger.warning("OpenAI API returned empty content for model %s", model)
        return CompletionFallback("empty model output")
    return CompletionOk(text)
