from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.main import app


class FakeCompletions:
    """Stands in for client.chat.completions; records every create() call."""

    def __init__(self, content=None, error=None, text=None):
        self.content = content
        self.error = error
        self.text = text
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        choice = SimpleNamespace(message=SimpleNamespace(content=self.content), text=self.text)
        return SimpleNamespace(choices=[choice])


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch):
    """Every test starts with no upstream keys configured."""
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "OPENAI_MODEL", "gpt-3.5-turbo")
    monkeypatch.setattr(settings, "TMDB_API_KEY", None)
    return settings


@pytest.fixture
def ai_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    return "sk-test"


@pytest.fixture
def fake_openai(monkeypatch):
    """Install a fake OpenAI client; returns a setter for its behaviour."""
    state = {"completions": FakeCompletions(content="")}

    def install(content=None, error=None, text=None):
        state["completions"] = FakeCompletions(content=content, error=error, text=text)
        return state["completions"]

    monkeypatch.setattr(
        "app.utils.openai_client.get_openai_client",
        lambda: SimpleNamespace(chat=SimpleNamespace(completions=state["completions"])),
    )
    return install


@pytest.fixture
def client():
    return TestClient(app)
