import asyncio
import json

import httpx
import pytest

from conftest import build_settings
from placefinder.core.llm_connection import MAX_QUERY_LENGTH, QueryExtractor, build_provider
from placefinder.core.llm_providers import OllamaProvider, OpenAIProvider


def _extract(extractor: QueryExtractor, prompt: str) -> str:
    return asyncio.run(extractor.extract_query(prompt))


@pytest.mark.parametrize("prompt", [
    "best ramen near Shibuya station",
    "x" * 500,
    "  padded prompt  ",
    "日本語のプロンプト" * 30,
])
def test_disabled_llm_returns_truncated_prompt(http_client, upstream, prompt):
    extractor = QueryExtractor(build_provider(build_settings(LLM_DISABLED=True), http_client))
    assert extractor.provider is None
    assert _extract(extractor, prompt) == prompt[:MAX_QUERY_LENGTH]
    assert upstream.requests == []


def test_provider_none_disables_llm(http_client):
    assert build_provider(build_settings(LLM_DISABLED=False, LLM_PROVIDER="none"), http_client) is None


def test_provider_selection(http_client):
    openai = build_provider(build_settings(LLM_DISABLED=False, LLM_PROVIDER="openai", OPENAI_API_KEY="sk-test"), http_client)
    assert isinstance(openai, OpenAIProvider)

    # no key: falls back to the local endpoint
    keyless = build_provider(build_settings(LLM_DISABLED=False, LLM_PROVIDER="openai"), http_client)
    assert isinstance(keyless, OllamaProvider)

    assert isinstance(build_provider(build_settings(LLM_DISABLED=False, LLM_PROVIDER="ollama"), http_client), OllamaProvider)


def test_openai_request_and_response(http_client, upstream):
    upstream.openai = {"choices": [{"message": {"content": "  ramen in Shibuya \n"}}]}
    provider = OpenAIProvider(http_client, api_key="sk-test", model="gpt-4o-mini", base_url="https://llm.example/v1/")
    assert _extract(QueryExtractor(provider), "I want ramen around Shibuya") == "ramen in Shibuya"

    [request] = upstream.requests
    assert str(request.url) == "https://llm.example/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["max_tokens"] == 30
    assert body["temperature"] == 0.2
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"] == "I want ramen around Shibuya"


def test_ollama_request_and_response(http_client, upstream):
    provider = OllamaProvider(http_client, host="http://localhost:11434", model="llama3.1:latest")
    assert _extract(QueryExtractor(provider), "ramen please") == "ramen in Shibuya"

    [request] = upstream.calls_to("/api/chat")
    body = json.loads(request.content)
    assert body["stream"] is False
    assert body["options"] == {"temperature": 0.2}


def test_ollama_reads_last_message_when_message_missing(http_client, upstream):
    upstream.ollama = {"messages": [{"content": "first"}, {"content": "coffee shop in Boston"}]}
    provider = OllamaProvider(http_client, host="http://localhost:11434", model="m")
    assert _extract(QueryExtractor(provider), "coffee?") == "coffee shop in Boston"


@pytest.mark.parametrize("outcome", [
    httpx.ConnectError("connection refused"),
    httpx.ReadTimeout("timed out"),
    httpx.Response(500, json={"error": "boom"}),
    httpx.Response(200, content=b"not json"),
    {"choices": []},
    {"choices": [{"message": {"content": "   "}}]},
    {"unexpected": True},
])
def test_openai_failures_fall_back_to_prompt(http_client, upstream, outcome):
    upstream.openai = outcome
    provider = OpenAIProvider(http_client, api_key="sk-test", model="gpt-4o-mini")
    prompt = "a" * 200
    assert _extract(QueryExtractor(provider), prompt) == "a" * 128


@pytest.mark.parametrize("outcome", [
    httpx.ConnectError("connection refused"),
    {"message": {"content": ""}},
    {"message": "not an object"},
    ["unexpected", "list"],
])
def test_ollama_failures_fall_back_to_prompt(http_client, upstream, outcome):
    upstream.ollama = outcome
    provider = OllamaProvider(http_client, host="http://localhost:11434", model="m")
    assert _extract(QueryExtractor(provider), "tacos nearby") == "tacos nearby"
