"""
FastAPI dependencies.
"""

from fastapi import Depends

from creator_radar.config import Settings, get_settings
from creator_radar.pipeline import PipelineOrchestrator


def get_orchestrator(settings: Settings = Depends(get_settings)) -> PipelineOrchestrator:
    """Orchestrator for one request, wired from settings.

    Provider credentials are not checked here; a missing key fails the
    first stage that needs it.
    """
    return PipelineOrchestrator.from_settings(settings)
