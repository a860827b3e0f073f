"""Unit tests for the stream decoder and client state reducer."""

import asyncio
import json

import pytest

from creator_radar.models import (
    ErrorEvent,
    LogEvent,
    ResultEvent,
    StageCompleteEvent,
    StageKey,
    StageStartEvent,
    StageStatus,
)
from creator_radar.pipeline import PipelineOrchestrator
from creator_radar.pipeline.consumer import (
    NDJSONEventDecoder,
    StreamState,
    TimelineEntry,
    adecode_stream,
    apply_event,
    decode_stream,
    fold_events,
)
from creator_radar.pipeline.transport import encode_event
from tests.stubs import ENGAGEMENT, SEGMENTATION, StubAnalysisClient, StubTrendsClient, collect_events


class TestNDJSONEventDecoder:
    """Tests for incremental line decoding."""

    def test_split_across_chunks(self):
        decoder = NDJSONEventDecoder()
        line = encode_event(StageStartEvent(stage="Engagement"))
        assert decoder.feed(line[:10]) == []
        assert decoder.feed(line[10:]) == [StageStartEvent(stage="Engagement")]

    def test_multibyte_character_split(self):
        decoder = NDJSONEventDecoder()
        line = encode_event(LogEvent(message="café"))
        cut = line.index("é".encode("utf-8")) + 1
        events = decoder.feed(line[:cut]) + decoder.feed(line[cut:])
        assert events == [LogEvent(message="café")]

    def test_several_lines_in_one_chunk(self):
        data = b"".join(encode_event(LogEvent(message=m)) for m in ["a", "b", "c"])
        assert [e.message for e in NDJSONEventDecoder().feed(data)] == ["a", "b", "c"]

    def test_blank_lines_ignored(self):
        assert NDJSONEventDecoder().feed(b"\n\n  \n") == []

    def test_bad_line_skipped(self):
        decoder = NDJSONEventDecoder()
        data = b"not json\n" + b'{"type": "mystery"}\n' + encode_event(LogEvent(message="ok"))
        assert decoder.feed(data) == [LogEvent(message="ok")]
        assert decoder.skipped_lines == 2

    def test_flush_parses_unterminated_line(self):
        decoder = NDJSONEventDecoder()
        assert decoder.feed('{"type": "log", "message": "tail"}') == []
        assert decoder.flush() == [LogEvent(message="tail")]

    def test_decode_stream(self):
        chunks = [b'{"type": "stage_start", "st', b'age": "Trends"}\n{"type": "log", "message": "x"}']
        assert list(decode_stream(chunks)) == [
            StageStartEvent(stage="Trends"),
            LogEvent(message="x"),
        ]

    def test_adecode_stream(self):
        async def chunks():
            yield b'{"type": "error", "stage": "Trends", "message": "boom"}\n'

        async def _collect():
            return [event async for event in adecode_stream(chunks())]

        assert asyncio.run(_collect()) == [ErrorEvent(stage="Trends", message="boom")]


class TestApplyEvent:
    """Tests for the state reducer."""

    def test_initial_state(self):
        state = StreamState()
        assert set(state.stage_status.values()) == {StageStatus.IDLE}
        assert list(state.stage_status) == [
            "Segmentation",
            "Engagement",
            "Audience Fit",
            "Trends",
            "Synthesis",
        ]
        assert state.is_running

    def test_stage_start(self):
        state = apply_event(StreamState(), StageStartEvent(stage="Engagement"))
        assert state.stage_status["Engagement"] == StageStatus.RUNNING
        assert state.current_stage == "Engagement"
        assert state.timeline == (TimelineEntry("start", stage="Engagement"),)

    def test_pure(self):
        initial = StreamState()
        apply_event(initial, StageStartEvent(stage="Engagement"))
        assert initial.stage_status["Engagement"] == StageStatus.IDLE
        assert initial.timeline == ()

    def test_complete_non_final_keeps_running(self):
        state = apply_event(StreamState(), StageCompleteEvent(stage="Trends"))
        assert state.stage_status["Trends"] == StageStatus.DONE
        assert state.is_running

    def test_complete_synthesis_stops_running(self):
        state = apply_event(StreamState(), StageCompleteEvent(stage="Synthesis"))
        assert not state.is_running
        assert state.completed

    def test_log(self):
        state = apply_event(StreamState(), LogEvent(message="hello"))
        assert state.logs == ("hello",)
        assert state.timeline == (TimelineEntry("log", message="hello"),)

    def test_result_overwrites_slot(self):
        state = StreamState.resumed({StageKey.A: {"segments": []}})
        state = apply_event(state, ResultEvent(stage="Segmentation", payload=SEGMENTATION))
        assert state.output(StageKey.A) == SEGMENTATION
        assert state.timeline == ()

    def test_result_for_unknown_stage_ignored(self):
        state = StreamState()
        assert apply_event(state, ResultEvent(stage="Nope", payload={"a": 1})) is state

    def test_error(self):
        state = apply_event(StreamState(), ErrorEvent(stage="Audience Fit", message="bad"))
        assert state.stage_status["Audience Fit"] == StageStatus.ERROR
        assert state.error_stage == StageKey.C
        assert state.error_message == "bad"
        assert not state.is_running
        assert state.timeline[-1] == TimelineEntry("error", stage="Audience Fit", message="bad")

    def test_error_without_stage(self):
        state = apply_event(StreamState(), ErrorEvent())
        assert state.error_stage is None
        assert state.error_message == "Something went wrong."
        assert set(state.stage_status.values()) == {StageStatus.IDLE}


class TestFoldEvents:
    """Folding real orchestrator output."""

    def test_full_run(self, orchestrator, sample_content):
        state = fold_events(collect_events(orchestrator, sample_content))
        assert set(state.stage_status.values()) == {StageStatus.DONE}
        assert not state.is_running
        assert set(state.outputs) == set(StageKey)
        assert state.logs[-1] == "Analysis complete. Ready for next actions."

    def test_same_events_same_state(self, orchestrator, sample_content):
        events = collect_events(orchestrator, sample_content)
        assert fold_events(events) == fold_events(events)

    def test_failed_run_builds_retry_request(self, sample_content):
        analysis_client = StubAnalysisClient({"A": SEGMENTATION, "B": ENGAGEMENT, "C": {}})
        orchestrator = PipelineOrchestrator(analysis_client, StubTrendsClient())
        state = fold_events(collect_events(orchestrator, sample_content))

        assert state.error_stage == StageKey.C
        assert state.stage_status["Trends"] == StageStatus.IDLE
        request = state.retry_request(sample_content)
        assert request == {
            "content": sample_content,
            "fromStage": "C",
            "previous": {"stageA": SEGMENTATION, "stageB": ENGAGEMENT},
        }

    def test_retry_request_round_trips_through_orchestrator(self, sample_content):
        analysis_client = StubAnalysisClient({"A": SEGMENTATION, "B": ENGAGEMENT, "C": {}})
        failed = fold_events(
            collect_events(PipelineOrchestrator(analysis_client, StubTrendsClient()), sample_content)
        )
        request = json.loads(json.dumps(failed.retry_request(sample_content)))

        retry_client = StubAnalysisClient()
        events = collect_events(
            PipelineOrchestrator(retry_client, StubTrendsClient()),
            request["content"],
            from_stage=request["fromStage"],
            previous=request["previous"],
        )
        state = fold_events(events, StreamState.resumed(failed.outputs))
        assert retry_client.stages_called == ["C", "E"]
        assert state.completed
        assert set(state.outputs) == set(StageKey)

    def test_retry_request_without_error(self):
        with pytest.raises(ValueError):
            StreamState().retry_request("x")
