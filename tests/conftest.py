"""Shared fixtures for Country Info tests."""

import json
import os
from typing import Any, Callable, Dict, List

import httpx
import pytest

FRANCE_REPLY = (
    '{"country":"France","country_population":67000000,"capital":"Paris",'
    '"capital_population":2148000,"gdp_usd":2800000000000}'
)

_MANAGED_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "COUNTRY_INFO_MAX_TOKENS",
    "COUNTRY_INFO_TIMEOUT",
    "COUNTRY_INFO_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run every test without provider keys and away from real .env files."""
    saved = dict(os.environ)
    for name in _MANAGED_VARS:
        monkeypatch.delenv(name, raising=False)

    workdir = tmp_path / "work"
    (workdir / ".git").mkdir(parents=True)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("HOME", str(home))

    yield

    # .env loading writes straight to os.environ
    os.environ.clear()
    os.environ.update(saved)


class RecordingTransport:
    """An httpx mock transport that records requests and replies from a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


def openai_completion(content: str, model: str = "gpt-3.5-turbo") -> Dict[str, Any]:
    """An OpenAI chat-completions response body."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 120, "completion_tokens": 40, "total_tokens": 160},
    }


def anthropic_message(content: str, model: str = "claude-3-haiku-20240307") -> Dict[str, Any]:
    """An Anthropic messages API response body."""
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "model": model,
        "content": [{"type": "text", "text": content}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 130, "output_tokens": 45},
    }


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Factory for recording transports."""
    return RecordingTransport
