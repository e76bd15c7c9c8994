"""Tests for the completion client, using a stand-in for the Anthropic SDK."""
from __future__ import annotations

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from src.services.completion import JSON_SYSTEM_PROMPT, CompletionClient
from src.services.errors import CompletionUnavailable


class _Messages:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.reply


def _sdk(reply=None, error=None):
    return SimpleNamespace(messages=_Messages(reply, error))


def _reply(text):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.mark.asyncio
async def test_returns_first_block_text():
    sdk = _sdk(_reply('{"days": []}'))
    client = CompletionClient(client=sdk, model="test-model", max_tokens=123)
    assert await client.complete("plan please") == '{"days": []}'

    call = sdk.messages.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 123
    assert call["messages"] == [{"role": "user", "content": "plan please"}]
    assert "system" not in call


@pytest.mark.asyncio
async def test_force_json_prefills_brace():
    sdk = _sdk(_reply('"items": [], "summary": "Nothing"}'))
    client = CompletionClient(client=sdk)
    text = await client.complete("eggs", force_json=True)

    assert text == '{"items": [], "summary": "Nothing"}'
    call = sdk.messages.calls[0]
    assert call["system"] == JSON_SYSTEM_PROMPT
    assert call["messages"][-1] == {"role": "assistant", "content": "{"}


@pytest.mark.asyncio
async def test_transport_failure_is_unavailable():
    error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
    client = CompletionClient(client=_sdk(error=error))
    with pytest.raises(CompletionUnavailable) as exc:
        await client.complete("plan please")
    assert exc.value.status_code == 503


@pytest.mark.asyncio
async def test_timeout_is_unavailable():
    error = anthropic.APITimeoutError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
    client = CompletionClient(client=_sdk(error=error))
    with pytest.raises(CompletionUnavailable):
        await client.complete("plan please")


@pytest.mark.asyncio
async def test_empty_content_is_unavailable():
    client = CompletionClient(client=_sdk(SimpleNamespace(content=[])))
    with pytest.raises(CompletionUnavailable):
        await client.complete("plan please")


@pytest.mark.asyncio
async def test_missing_api_key_is_unavailable():
    client = CompletionClient(api_key=None)
    assert client.client is None
    with pytest.raises(CompletionUnavailable) as exc:
        await client.complete("plan please")
    assert "ANTHROPIC_API_KEY" in exc.value.detail


def test_sdk_client_built_without_retries():
    client = CompletionClient(api_key="sk-test", timeout=12.5)
    assert isinstance(client.client, anthropic.AsyncAnthropic)
    assert client.client.max_retries == 0
    assert client.client.timeout == 12.5
