"""Unit tests for NDJSON encoding and the stream writer."""

import asyncio
import json

from creator_radar.models import ErrorEvent, LogEvent, ResultEvent, StageStartEvent
from creator_radar.pipeline.transport import encode_event, stream_ndjson


async def _events(items, closed):
    try:
        for item in items:
            yield item
    finally:
        closed.append(True)


def drain(events, is_disconnected=None):
    async def _drain():
        return [chunk async for chunk in stream_ndjson(events, is_disconnected)]

    return asyncio.run(_drain())


class TestEncodeEvent:
    """Tests for single-line encoding."""

    def test_one_line_per_event(self):
        line = encode_event(StageStartEvent(stage="Segmentation"))
        assert line.endswith(b"\n")
        assert line.count(b"\n") == 1
        assert json.loads(line) == {"type": "stage_start", "stage": "Segmentation"}

    def test_error_without_stage_omits_field(self):
        assert json.loads(encode_event(ErrorEvent(message="bad"))) == {
            "type": "error",
            "message": "bad",
        }

    def test_payload_newlines_are_escaped(self):
        event = ResultEvent(stage="Trends", payload={"currentTrends": ["a\nb"]})
        line = encode_event(event)
        assert line.count(b"\n") == 1
        assert json.loads(line)["payload"] == {"currentTrends": ["a\nb"]}

    def test_non_ascii_kept_as_utf8(self):
        line = encode_event(LogEvent(message="café"))
        assert "café".encode("utf-8") in line


class TestStreamNdjson:
    """Tests for the stream writer."""

    def test_writes_events_in_order(self):
        closed = []
        items = [LogEvent(message="one"), StageStartEvent(stage="Segmentation")]
        chunks = drain(_events(items, closed))
        assert [json.loads(c)["type"] for c in chunks] == ["log", "stage_start"]
        assert closed == [True]

    def test_stops_and_closes_source_on_disconnect(self):
        closed = []
        produced = []
        checks = iter([False, True])

        async def source():
            try:
                for i in range(5):
                    produced.append(i)
                    yield LogEvent(message=str(i))
            finally:
                closed.append(True)

        async def is_disconnected():
            return next(checks)

        chunks = drain(source(), is_disconnected)
        assert len(chunks) == 1
        assert produced == [0, 1]
        assert closed == [True]
