"""Error taxonomy for the analysis pipeline.

Two families:
- PreconditionFailure: the request is rejected before any stage runs
  (HTTP 400 at the API boundary).
- StageFailure: a single stage failed; reported as one `error` event,
  after which the stream closes.
"""

from typing import Any, Optional


class CreatorRadarError(Exception):
    """Base class for all creator_radar errors."""

    pass


# =============================================================================
# Preconditions (checked before streaming starts)
# =============================================================================

class PreconditionFailure(CreatorRadarError):
    """Request cannot be started as submitted."""

    pass


class EmptyContentError(PreconditionFailure):
    """Content is empty after sanitization."""

    def __init__(self, message: str = "Please provide content to analyze."):
        super().__init__(message)


class MissingResumeDependency(PreconditionFailure):
    """Resuming from a later stage without the output of an earlier one."""

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"Missing Stage {stage} output for retry.")


# =============================================================================
# Stage-level failures (terminal for the current invocation)
# =============================================================================

class StageFailure(CreatorRadarError):
    """A stage could not produce a valid output."""

    pass


class ProviderConfigurationError(StageFailure):
    """Provider URL or API key is not configured."""

    pass


class ProviderError(StageFailure):
    """Inference provider answered with a non-success status."""

    def __init__(self, provider: str, status_code: int, body: str):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} API error: {status_code} {body}")


class EmptyProviderResponse(StageFailure):
    """Provider response held no usable JSON candidate."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} API returned empty response.")


class MalformedResponse(StageFailure):
    """Provider text did not contain a parseable JSON object."""

    pass


class SchemaViolation(StageFailure):
    """Resolved JSON does not match the stage's output contract."""

    def __init__(self, stage: str, errors: Optional[list[dict[str, Any]]] = None):
        self.stage = stage
        self.errors = errors or []
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg')}"
            for err in self.errors[:5]
        )
        message = f"Stage {stage} output failed schema validation"
        super().__init__(f"{message}: {details}" if details else message)


class StageTimeoutError(StageFailure):
    """Stage exceeded its configured deadline."""

    def __init__(self, stage: str, timeout_seconds: float):
        self.stage = stage
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Stage {stage} timed out after {timeout_seconds:g}s.")
