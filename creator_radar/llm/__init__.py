"""Inference provider clients and JSON resolution."""

from .client import AnalysisClient, InferenceClient, TrendsClient
from .json_resolver import extract_json_from_text, resolve_json_candidate

__all__ = [
    "InferenceClient",
    "AnalysisClient",
    "TrendsClient",
    "extract_json_from_text",
    "resolve_json_candidate",
]
