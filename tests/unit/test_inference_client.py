"""Unit tests for the provider HTTP clients (mocked transport)."""

import asyncio
import json

import httpx
import pytest

from creator_radar.config.settings import Settings
from creator_radar.errors import (
    EmptyProviderResponse,
    MalformedResponse,
    ProviderConfigurationError,
    ProviderError,
)
from creator_radar.llm.client import AnalysisClient, TrendsClient

ANALYSIS_URL = "https://mino.test/v1/run"
TRENDS_URL = "https://perplexity.test/chat/completions"


class RecordingHandler:
    """MockTransport handler that answers with a fixed response."""

    def __init__(self, status_code=200, json_body=None, text=None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def sent_body(self) -> dict:
        return json.loads(self.requests[-1].content)


def run_analysis(handler, url=ANALYSIS_URL, api_key="mino-key", stage="A"):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = AnalysisClient(url, api_key, http_client=http)
            return await client.run_stage(
                stage=stage,
                input_payload={"content": "Hook: X."},
                shape={"segments": []},
                instructions="Split it.",
            )

    return asyncio.run(_run())


def run_trends(handler, api_key="pplx-key", structured_output=False, response_schema=None):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = TrendsClient(
                api_key,
                url=TRENDS_URL,
                structured_output=structured_output,
                http_client=http,
            )
            return await client.run_prompt(
                [{"role": "user", "content": "Topic: X"}],
                response_schema=response_schema,
            )

    return asyncio.run(_run())


class TestAnalysisClientRequest:
    """Request shape sent to the analysis provider."""

    def test_request_body_and_headers(self):
        handler = RecordingHandler(json_body={"output": {"segments": []}})
        run_analysis(handler)

        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == ANALYSIS_URL
        assert request.headers["Authorization"] == "Bearer mino-key"
        assert request.headers["Content-Type"] == "application/json"
        assert handler.sent_body == {
            "stage": "A",
            "input": {"content": "Hook: X."},
            "schema": {"segments": []},
            "instructions": "Split it.",
            "response_format": "json",
        }

    def test_exactly_one_request(self):
        handler = RecordingHandler(status_code=503, text="unavailable")
        with pytest.raises(ProviderError):
            run_analysis(handler)
        assert len(handler.requests) == 1

    @pytest.mark.parametrize("url,api_key", [(None, "k"), ("https://x", None), ("", "")])
    def test_missing_configuration(self, url, api_key):
        handler = RecordingHandler(json_body={})
        with pytest.raises(ProviderConfigurationError, match="Missing MINO_API_URL or MINO_API_KEY."):
            run_analysis(handler, url=url, api_key=api_key)
        assert handler.requests == []


class TestAnalysisClientEnvelope:
    """Answer extraction from the analysis envelope."""

    @pytest.mark.parametrize(
        "body",
        [
            {"output": {"ok": 1}},
            {"result": {"ok": 1}},
            {"data": {"ok": 1}},
            {"response": '{"ok": 1}'},
            {"choices": [{"message": {"content": 'Sure: {"ok": 1}'}}]},
            {"message": {"content": '```json\n{"ok": 1}\n```'}},
            {"output": "", "result": {"ok": 1}},
        ],
    )
    def test_envelope_locations(self, body):
        assert run_analysis(RecordingHandler(json_body=body)) == {"ok": 1}

    def test_priority_order(self):
        body = {"result": {"from": "result"}, "output": {"from": "output"}}
        assert run_analysis(RecordingHandler(json_body=body)) == {"from": "output"}

    def test_whole_body_fallback(self):
        body = {"segments": [{"id": 1, "text": "Hi", "purpose": "hook"}]}
        assert run_analysis(RecordingHandler(json_body=body)) == body

    def test_non_json_body_uses_raw_text(self):
        handler = RecordingHandler(text='Model says: {"ok": true}')
        assert run_analysis(handler) == {"ok": True}

    def test_non_json_body_without_object(self):
        with pytest.raises(MalformedResponse):
            run_analysis(RecordingHandler(text="plain text"))

    def test_empty_body_object(self):
        with pytest.raises(EmptyProviderResponse, match="Mino API returned empty response."):
            run_analysis(RecordingHandler(json_body={}))

    def test_provider_error_message(self):
        handler = RecordingHandler(status_code=500, text="boom")
        with pytest.raises(ProviderError) as exc_info:
            run_analysis(handler)
        assert str(exc_info.value) == "Mino API error: 500 boom"
        assert exc_info.value.status_code == 500


class TestTrendsClient:
    """Tests for the chat-completions trends client."""

    def test_request_body(self):
        handler = RecordingHandler(
            json_body={"choices": [{"message": {"content": '{"currentTrends": []}'}}]}
        )
        assert run_trends(handler) == {"currentTrends": []}

        request = handler.requests[0]
        assert request.headers["Authorization"] == "Bearer pplx-key"
        assert handler.sent_body == {
            "model": "sonar-pro",
            "temperature": 0.3,
            "messages": [{"role": "user", "content": "Topic: X"}],
        }

    def test_structured_output_adds_response_format(self):
        handler = RecordingHandler(json_body={"output": {"ok": 1}})
        schema = {"type": "object"}
        run_trends(handler, structured_output=True, response_schema=schema)
        assert handler.sent_body["response_format"] == {
            "type": "json_schema",
            "json_schema": {"schema": schema},
        }

    def test_structured_output_disabled_ignores_schema(self):
        handler = RecordingHandler(json_body={"output": {"ok": 1}})
        run_trends(handler, response_schema={"type": "object"})
        assert "response_format" not in handler.sent_body

    def test_missing_key(self):
        handler = RecordingHandler(json_body={})
        with pytest.raises(ProviderConfigurationError, match="Missing PERPLEXITY_API_KEY."):
            run_trends(handler, api_key=None)
        assert handler.requests == []

    def test_error_status(self):
        with pytest.raises(ProviderError, match="Perplexity API error: 429 rate limited"):
            run_trends(RecordingHandler(status_code=429, text="rate limited"))

    def test_empty_content_falls_back_to_whole_body(self):
        body = {"choices": [{"message": {"content": ""}}]}
        assert run_trends(RecordingHandler(json_body=body)) == body


class TestFromSettings:
    """Clients built from settings."""

    def test_analysis_client(self):
        settings = Settings(_env_file=None, mino_api_url="https://m", mino_api_key="k", request_timeout=30)
        client = AnalysisClient.from_settings(settings)
        assert client.url == "https://m"
        assert client.api_key == "k"
        assert client.timeout == 30

    def test_trends_client(self):
        settings = Settings(_env_file=None, perplexity_api_key="p", perplexity_model="sonar")
        client = TrendsClient.from_settings(settings)
        assert client.api_key == "p"
        assert client.model == "sonar"
        assert client.temperature == 0.3
