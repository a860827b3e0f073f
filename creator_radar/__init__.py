"""Creator Radar - staged analysis of creator-authored content.

Content flows through five dependent stages (Segmentation, Engagement,
Audience Fit, Trends, Synthesis). Progress and results are streamed as
newline-delimited JSON events while the pipeline runs.

Usage:
    from creator_radar.pipeline import PipelineOrchestrator

    orchestrator = PipelineOrchestrator.from_settings()
    async for event in orchestrator.run("Hook: ..."):
        print(event.type, event.stage)
"""

__version__ = "1.0.0"
