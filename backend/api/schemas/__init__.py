"""API schemas package."""

from .requests import AnalyzeRequest, PreviousOutputs
from .responses import ErrorResponse, HealthResponse

__all__ = [
    # Requests
    "AnalyzeRequest",
    "PreviousOutputs",
    # Responses
    "ErrorResponse",
    "HealthResponse",
]
