from types import SimpleNamespace

import httpx
import openai
import pytest

from config import TestConfig
from llm_client import PromptDispatcher, RetryPolicy

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


def completion(content):
    """Minimal stand-in for an openai ChatCompletion."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def error_payload(message):
    return SimpleNamespace(error={"message": message}, choices=None)


def connection_error(message="Connection reset by peer"):
    return openai.APIConnectionError(message=message, request=httpx.Request("POST", GROQ_URL))


def status_error(status, message):
    response = httpx.Response(status, request=httpx.Request("POST", GROQ_URL))
    return openai.APIStatusError(f"Error code: {status}", response=response, body={"message": message})


class FakeClient:
    """Scripted `client.chat.completions.create`; the last item repeats once the script runs out."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        idx = min(len(self.calls), len(self.script)) - 1
        item = self.script[idx]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def prompts(self):
        return [c["messages"][-1]["content"] for c in self.calls]


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_dispatcher(sleeps):
    def _make(*script, max_retries=1, delay=1.0, api_key="test-key"):
        client = FakeClient(*script)
        dispatcher = PromptDispatcher(
            api_key=api_key,
            policy=RetryPolicy(max_retries=max_retries, delay=delay),
            client=client,
            sleep=sleeps.append,
        )
        return dispatcher, client
    return _make


@pytest.fixture
def make_client(make_dispatcher):
    """Flask test client wired to a scripted provider."""
    from app import create_app

    def _make(*script, **kwargs):
        dispatcher, fake = make_dispatcher(*script, delay=0.0, **kwargs)
        app = create_app(TestConfig, dispatcher=dispatcher, seed_source=lambda: 0.5)
        return app.test_client(), fake
    return _make
