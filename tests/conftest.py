"""Pytest configuration and fixtures."""

import copy

import pytest

from creator_radar.pipeline import PipelineOrchestrator
from tests.stubs import (
    AUDIENCE_FIT,
    ENGAGEMENT,
    SEGMENTATION,
    SYNTHESIS,
    TRENDS,
    StubAnalysisClient,
    StubTrendsClient,
)


@pytest.fixture
def sample_content() -> str:
    return "Hook: X.\nValue: Y.\nCTA: Z."


@pytest.fixture
def stage_outputs() -> dict[str, dict]:
    """Canned valid outputs keyed by stage."""
    return copy.deepcopy(
        {
            "A": SEGMENTATION,
            "B": ENGAGEMENT,
            "C": AUDIENCE_FIT,
            "D": TRENDS,
            "E": SYNTHESIS,
        }
    )


@pytest.fixture
def analysis_client() -> StubAnalysisClient:
    return StubAnalysisClient()


@pytest.fixture
def trends_client() -> StubTrendsClient:
    return StubTrendsClient()


@pytest.fixture
def orchestrator(analysis_client, trends_client) -> PipelineOrchestrator:
    return PipelineOrchestrator(analysis_client, trends_client)
