import json

import httpx
import pytest

from ask_llm.config import Settings


SSE_STREAM = (
    'event: message_start\n'
    'data: {"type":"message_start","message":{"id":"msg_01","type":"message","role":"assistant",'
    '"content":[],"model":"claude-sonnet-4-5","stop_reason":null,"usage":{"input_tokens":12,"output_tokens":1}}}\n'
    '\n'
    'event: content_block_start\n'
    'data: {"type":"content_block_start","index":0,"content_block":{"type":"text","text":""}}\n'
    '\n'
    'event: ping\n'
    'data: {"type": "ping"}\n'
    '\n'
    'event: content_block_delta\n'
    'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"Hello"}}\n'
    '\n'
    'event: content_block_delta\n'
    'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":", wörld! ✓"}}\n'
    '\n'
    'event: content_block_stop\n'
    'data: {"type":"content_block_stop","index":0}\n'
    '\n'
    'event: message_delta\n'
    'data: {"type":"message_delta","delta":{"stop_reason":"end_turn","stop_sequence":null},'
    '"usage":{"output_tokens":15}}\n'
    '\n'
    'event: message_stop\n'
    'data: {"type":"message_stop"}\n'
    '\n'
)
SSE_TEXT = "Hello, wörld! ✓"


def message_body(text="Bonjour", model="claude-sonnet-4-5-20250929", input_tokens=1000, output_tokens=2000,
                 stop_reason="end_turn"):
    """Build a Messages API JSON reply."""
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "model": model,
        "stop_reason": stop_reason,
        "stop_sequence": None,
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


class RecordingTransport:
    """
    Mock transport that records request payloads and replies with a fixed handler.
    """

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def mock_env(monkeypatch):
    """Mock environment variables for the API key."""
    monkeypatch.setenv("CLAUDE_TOKEN", "sk-test-claude")


@pytest.fixture
def no_env(monkeypatch, tmp_path):
    """No credential in the environment and no .env file in reach.

    Variables are set before being deleted so that monkeypatch restores them
    even when a loaded .env file writes them back into os.environ.
    """
    for name in ("CLAUDE_TOKEN", "ASK_LLM_BASE_URL", "ASK_LLM_TIMEOUT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return Settings(api_key="sk-test-claude")


@pytest.fixture
def sse_bytes():
    return SSE_STREAM.encode("utf-8")
