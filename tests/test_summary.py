import logging

import openai
import httpx

from app.process.summary import MovieSummarizer, fallback_summary, truncate_overview
from app.schemas.ai import SummaryRequest


def test_fallback_title_only():
    assert fallback_summary("Inception", "") == "Inception"


def test_fallback_neither():
    assert fallback_summary("", "") == "No title or overview provided."


def test_fallback_overview_only():
    assert fallback_summary("", "short overview") == "short overview"


def test_fallback_blank_overview_only():
    assert fallback_summary("", "   ") == "No overview provided."


def test_fallback_title_and_overview():
    assert fallback_summary("Her", "A lonely writer.") == "Her — A lonely writer."


def test_fallback_truncates_long_overview():
    result = fallback_summary("T", "X" * 900)
    assert result == "T — " + "X" * 797 + "..."
    assert len(result) == len("T — ") + 800


def test_truncate_overview_keeps_exactly_800_chars():
    overview = "Y" * 800
    assert truncate_overview(overview) == overview


def test_summary_request_coerces_missing_and_falsy_fields():
    req = SummaryRequest.model_validate({"title": None, "overview": 0})
    assert req.title == ""
    assert req.overview == ""
    assert SummaryRequest.model_validate({"title": 1984}).title == "1984"


def test_build_messages_substitutes_unknowns():
    messages = MovieSummarizer().build_messages(SummaryRequest())
    assert messages[0]["role"] == "system"
    assert "spoiler-free" in messages[0]["content"]
    assert "under 120 words" in messages[0]["content"]
    assert messages[1] == {
        "role": "user",
        "content": "Title: Unknown\nOverview: No overview provided.",
    }


def test_summarize_without_key_skips_upstream(fake_openai):
    completions = fake_openai(content="should not be used")
    req = SummaryRequest(title="Inception", overview="Dreams within dreams.")
    assert MovieSummarizer().summarize(req) == "Inception — Dreams within dreams."
    assert completions.calls == []


def test_summarize_uses_ai_text_trimmed(ai_key, fake_openai):
    completions = fake_openai(content="  A moody heist through layered dreams.  \n")
    req = SummaryRequest(title="Inception", overview="Dreams within dreams.")
    assert MovieSummarizer().summarize(req) == "A moody heist through layered dreams."

    call = completions.calls[0]
    assert call["model"] == "gpt-3.5-turbo"
    assert call["max_tokens"] == 250
    assert call["temperature"] == 0.6
    assert call["n"] == 1
    assert call["messages"][1]["content"] == "Title: Inception\nOverview: Dreams within dreams."


def test_summarize_falls_back_on_empty_output(ai_key, fake_openai):
    fake_openai(content="   ")
    req = SummaryRequest(title="Inception")
    assert MovieSummarizer().summarize(req) == "Inception"


def test_summarize_falls_back_on_upstream_error(ai_key, fake_openai):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.APIStatusError(
        "boom",
        response=httpx.Response(500, text="upstream exploded", request=request),
        body=None,
    )
    fake_openai(error=error)
    req = SummaryRequest(overview="Only an overview.")
    assert MovieSummarizer().summarize(req) == "Only an overview."


def test_upstream_failure_is_logged_as_error_once(ai_key, fake_openai, caplog):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    fake_openai(
        error=openai.APIStatusError(
            "boom",
            response=httpx.Response(502, text="bad gateway", request=request),
            body=None,
        )
    )
    with caplog.at_level(logging.INFO):
        assert MovieSummarizer().summarize(SummaryRequest(title="Heat")) == "Heat"

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "bad gateway" in errors[0].getMessage()
    assert any(r.levelno == logging.WARNING and "fallback" in r.getMessage() for r in caplog.records)
