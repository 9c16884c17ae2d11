import asyncio
from types import SimpleNamespace
from typing import Any, Awaitable, Callable, Dict, List

import httpx
import pytest
from google.genai import errors, types

from jgtravel import gateway
from jgtravel.config import Settings
from jgtravel.gateway import (
    FALLBACK_REPLY,
    GatewayConfigError,
    extract_reply_text,
    generate_reply,
    to_contents,
)
from jgtravel.schemas import ChatMessage


def _messages() -> List[ChatMessage]:
    return [
        ChatMessage(role="system", content="Rules"),
        ChatMessage(role="user", content="Plan Goa"),
        ChatMessage(role="assistant", content="Sure"),
    ]


def _candidate_response(*texts: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part.from_text(text=t) for t in texts])
            )
        ]
    )


class DummyGenaiClient:
    """Stands in for ``genai.Client``; ``aio.models.generate_content`` runs the responder."""

    def __init__(self, responder: Callable[[], Awaitable[Any]], *args, api_key=None, http_options=None, **kwargs):
        self.api_key = api_key
        self.http_options = http_options
        self.requests: List[Dict[str, Any]] = []
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate_content))
        self._responder = responder

    async def _generate_content(self, model, contents, config=None):
        self.requests.append({"model": model, "contents": contents})
        return await self._responder()


def _install(monkeypatch, responder) -> List[DummyGenaiClient]:
    instances: List[DummyGenaiClient] = []

    def factory(*args, **kwargs):
        client = DummyGenaiClient(responder, *args, **kwargs)
        instances.append(client)
        return client

    monkeypatch.setattr(gateway.genai, "Client", factory)
    return instances


def _settings(**overrides) -> Settings:
    return Settings(gemini_api_key="test-key", **overrides)


def test_to_contents_maps_roles_for_gemini():
    contents = to_contents(_messages(), preamble="Be brief")

    assert [c.role for c in contents] == ["user", "user", "user", "model"]
    assert contents[0].parts[0].text == "Be brief"
    assert contents[3].parts[0].text == "Sure"
    assert [c.role for c in to_contents(_messages(), preamble=None)] == ["user", "user", "model"]


def test_extract_reply_text_joins_first_candidate_parts():
    response = _candidate_response("Day 1", "Day 2")
    response.candidates.append(types.Candidate(content=types.Content(parts=[types.Part.from_text(text="ignored")])))

    assert extract_reply_text(response) == "Day 1\nDay 2"


@pytest.mark.parametrize(
    "response",
    [
        None,
        types.GenerateContentResponse(),
        types.GenerateContentResponse(candidates=[]),
        types.GenerateContentResponse(candidates=[types.Candidate()]),
        _candidate_response("  "),
    ],
)
def test_extract_reply_text_returns_none_without_text(response):
    assert extract_reply_text(response) is None


def test_generate_reply_calls_configured_model_once(monkeypatch):
    async def run() -> None:
        async def respond():
            return _candidate_response("Hello")

        instances = _install(monkeypatch, respond)

        reply = await generate_reply(_messages(), _settings(gemini_model="gemini-test", gemini_timeout=12))

        assert reply == "Hello"
        assert len(instances) == 1
        client = instances[0]
        assert client.api_key == "test-key"
        assert client.http_options.timeout == 12000
        assert client.requests[0]["model"] == "gemini-test"
        assert client.requests[0]["contents"][0].parts[0].text == gateway.GATEWAY_PREAMBLE

    asyncio.run(run())


def test_generate_reply_keeps_api_key_out_of_the_url(monkeypatch):
    async def run() -> None:
        async def respond():
            return _candidate_response("Hello")

        instances = _install(monkeypatch, respond)

        await generate_reply(_messages(), _settings(gemini_api_base="https://proxy.example.com"))

        options = instances[0].http_options
        assert options.base_url == "https://proxy.example.com"
        assert "test-key" not in options.base_url

    asyncio.run(run())


async def _raise_timeout():
    raise httpx.ReadTimeout("timed out")


async def _raise_connect():
    raise httpx.ConnectError("refused")


async def _raise_server_error():
    raise errors.ServerError(500, {"error": {"code": 500, "message": "boom", "status": "INTERNAL"}})


async def _raise_rate_limit():
    raise errors.ClientError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})


async def _no_candidates():
    return types.GenerateContentResponse(candidates=[])


async def _blank_text():
    return _candidate_response("")


@pytest.mark.parametrize(
    "responder",
    [_raise_timeout, _raise_connect, _raise_server_error, _raise_rate_limit, _no_candidates, _blank_text],
)
def test_generate_reply_turns_upstream_failures_into_fallback(monkeypatch, responder):
    async def run() -> None:
        instances = _install(monkeypatch, responder)

        reply = await generate_reply(_messages(), _settings())

        assert reply == FALLBACK_REPLY
        assert len(instances) == 1
        assert len(instances[0].requests) == 1

    asyncio.run(run())


def test_generate_reply_requires_api_key(monkeypatch):
    async def run() -> None:
        async def respond():
            pytest.fail("upstream must not be called")

        instances = _install(monkeypatch, respond)

        with pytest.raises(GatewayConfigError):
            await generate_reply(_messages(), Settings(gemini_api_key=None))
        assert instances == []

    asyncio.run(run())
