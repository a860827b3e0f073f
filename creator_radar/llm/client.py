"""HTTP clients for the two inference providers.

Both clients perform exactly one request per call, pick the answer out of
the response envelope, and hand it to a JSON resolver. They never retry:
a failed call fails the stage, and the caller resumes with a new run.
"""

from typing import Any, Callable, Optional, Sequence

import httpx
import structlog

from creator_radar.config.settings import Settings, get_settings
from creator_radar.errors import (
    EmptyProviderResponse,
    ProviderConfigurationError,
    ProviderError,
)
from creator_radar.llm.json_resolver import resolve_json_candidate

logger = structlog.get_logger(__name__)

EnvelopePath = tuple[Any, ...]
Resolver = Callable[[Any], Optional[Any]]


def _dig(data: Any, path: EnvelopePath) -> Any:
    """Follow a path of dict keys / list indexes, returning None on a miss."""
    current = data
    for part in path:
        if isinstance(part, int):
            if not isinstance(current, list) or len(current) <= part:
                return None
            current = current[part]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        if current is None:
            return None
    return current


class InferenceClient:
    """Shared request/extract/resolve flow for provider clients.

    Subclasses set `provider_name` and `candidate_paths`, the envelope
    locations tried in order. The first truthy value wins; the empty path
    means the whole body.
    """

    provider_name: str = "Inference"
    candidate_paths: Sequence[EnvelopePath] = ((),)

    def __init__(
        self,
        *,
        timeout: Optional[float] = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
        resolver: Resolver = resolve_json_candidate,
    ):
        self.timeout = timeout
        self.resolver = resolver
        self._http_client = http_client

    async def _post_json(self, url: str, api_key: str, body: dict[str, Any]) -> Any:
        """POST a JSON body with bearer auth and return the decoded envelope.

        Raises:
            ProviderError: On a non-success HTTP status.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        logger.debug("provider_request", provider=self.provider_name, url=url)

        if self._http_client is not None:
            response = await self._http_client.post(
                url, json=body, headers=headers, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body, headers=headers)

        if not response.is_success:
            logger.warning(
                "provider_error",
                provider=self.provider_name,
                status_code=response.status_code,
                body_preview=response.text[:200],
            )
            raise ProviderError(self.provider_name, response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    def extract_candidate(self, data: Any) -> Any:
        """Pick the answer out of a response envelope."""
        for path in self.candidate_paths:
            value = _dig(data, path)
            if value:
                return value
        return None

    def _resolve(self, data: Any) -> Any:
        candidate = self.extract_candidate(data)
        resolved = self.resolver(candidate)
        if not resolved:
            raise EmptyProviderResponse(self.provider_name)
        return resolved


class AnalysisClient(InferenceClient):
    """Client for the analysis provider (segmentation, engagement, audience, synthesis)."""

    provider_name = "Mino"
    candidate_paths = (
        ("output",),
        ("result",),
        ("data",),
        ("response",),
        ("choices", 0, "message", "content"),
        ("message", "content"),
        ("raw",),
        (),
    )

    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str],
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.url = url
        self.api_key = api_key

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "AnalysisClient":
        settings = settings or get_settings()
        return cls(
            url=settings.mino_api_url,
            api_key=settings.mino_api_key,
            timeout=settings.request_timeout,
            http_client=http_client,
        )

    async def run_stage(
        self,
        stage: str,
        input_payload: Any,
        shape: dict[str, Any],
        instructions: str,
    ) -> Any:
        """Run one analysis stage and return the resolved JSON object.

        Raises:
            ProviderConfigurationError: URL or key missing.
            ProviderError: Non-success HTTP status.
            MalformedResponse: Answer text held no parseable JSON.
            EmptyProviderResponse: Answer was empty.
        """
        if not self.url or not self.api_key:
            raise ProviderConfigurationError("Missing MINO_API_URL or MINO_API_KEY.")

        data = await self._post_json(
            self.url,
            self.api_key,
            {
                "stage": stage,
                "input": input_payload,
                "schema": shape,
                "instructions": instructions,
                "response_format": "json",
            },
        )
        return self._resolve(data)


class TrendsClient(InferenceClient):
    """Chat-completions client for the trends provider."""

    provider_name = "Perplexity"
    candidate_paths = (
        ("choices", 0, "message", "content"),
        ("output",),
        ("result",),
        (),
    )

    def __init__(
        self,
        api_key: Optional[str],
        url: str = "https://api.perplexity.ai/chat/completions",
        model: str = "sonar-pro",
        temperature: float = 0.3,
        structured_output: bool = False,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.url = url
        self.model = model
        self.temperature = temperature
        self.structured_output = structured_output

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "TrendsClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.perplexity_api_key,
            url=settings.perplexity_url,
            model=settings.perplexity_model,
            temperature=settings.perplexity_temperature,
            structured_output=settings.perplexity_structured_output,
            timeout=settings.request_timeout,
            http_client=http_client,
        )

    async def run_prompt(
        self,
        messages: list[dict[str, str]],
        response_schema: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a chat prompt and return the resolved JSON object.

        When structured output is enabled and a schema is given, the provider
        is asked to constrain its answer to it; brace-scanning still applies.
        """
        if not self.api_key:
            raise ProviderConfigurationError("Missing PERPLEXITY_API_KEY.")

        body: dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": messages,
        }
        if self.structured_output and response_schema:
            body["response_format"] = {
                "type": "json_schema",
                "json_schema": {"schema": response_schema},
            }

        data = await self._post_json(self.url, self.api_key, body)
        return self._resolve(data)
