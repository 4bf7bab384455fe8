"""Server-Sent Events endpoint streaming progress events to observers.

Each connection subscribes one observer whose sink is a bounded queue. A
full queue makes the broadcaster drop the event for that observer only.
The observer is unsubscribed when the generator is closed, which
sse-starlette does when the client disconnects.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from sse_starlette import EventSourceResponse, ServerSentEvent
from starlette.requests import Request
from starlette.responses import Response

from core.broadcaster import Broadcaster
from core.events import ProgressEvent

logger = logging.getLogger(__name__)

EVENTS_PATH = "/events"
MAX_PENDING_EVENTS = 1000


async def event_generator(
    broadcaster: Broadcaster,
    *,
    max_pending: int = MAX_PENDING_EVENTS,
) -> AsyncIterator[ServerSentEvent]:
    queue: "asyncio.Queue[ProgressEvent]" = asyncio.Queue(maxsize=max(1, int(max_pending)))
    observer_id = broadcaster.subscribe(queue.put_nowait)
    logger.info("Event stream opened for observer %s", observer_id)
    try:
        yield ServerSentEvent(event="connected", data=json.dumps({"observerId": observer_id}))
        while True:
            event = await queue.get()
            yield ServerSentEvent(event=event.name, data=event.data_json())
    finally:
        broadcaster.unsubscribe(observer_id)
        logger.info("Event stream closed for observer %s", observer_id)


def register_event_stream(mcp: FastMCP, *, broadcaster: Broadcaster, keepalive_seconds: float) -> None:
    ping = max(1, int(keepalive_seconds))

    @mcp.custom_route(EVENTS_PATH, methods=["GET"])
    async def events(request: Request) -> Response:
        # sse-starlette sends a ": ping" comment every `ping` seconds
        return EventSourceResponse(event_generator(broadcaster), ping=ping)
