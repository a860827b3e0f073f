"""Event stream transport - newline-delimited JSON over a single response.

Events are written in the order the orchestrator yields them, one JSON
object per line. Nothing is buffered beyond the event being written.
"""

import json
from typing import AsyncIterator, Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel

from creator_radar.models import event_to_dict

logger = structlog.get_logger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

DisconnectCheck = Callable[[], Awaitable[bool]]


def encode_event(event: BaseModel) -> bytes:
    """Serialize one event as a single NDJSON line."""
    return (json.dumps(event_to_dict(event), ensure_ascii=False) + "\n").encode("utf-8")


async def stream_ndjson(
    events: AsyncIterator[BaseModel],
    is_disconnected: Optional[DisconnectCheck] = None,
) -> AsyncIterator[bytes]:
    """Encode events for delivery, stopping when the client goes away.

    The disconnect check runs before each write. Once the client is gone the
    event source is closed, so no further stage is started.
    """
    try:
        async for event in events:
            if is_disconnected is not None and await is_disconnected():
                logger.info("stream_client_disconnected", pending_event=event.type)
                break
            yield encode_event(event)
    finally:
        aclose = getattr(events, "aclose", None)
        if aclose is not None:
            await aclose()
