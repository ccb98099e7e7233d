"""Server-sent events: push session snapshots to every connected page."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from typing import Any, AsyncIterator, Optional, Set

# pending updates per client; a page that stops reading loses the oldest ones
MAX_PENDING = 32

# one queue per connected SSE client
subscribers: Set[asyncio.Queue] = set()


def state_event(state: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "state_update",
        "time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "state": state,
    }


def publish(state: dict[str, Any]) -> None:
    """Queue a state update for all subscribers. Safe to call from sync observers."""
    payload = state_event(state)
    for queue in list(subscribers):
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(payload)


def _format(data: dict[str, Any]) -> str:
    return f"data: {json.dumps(data, ensure_ascii=False)}\n\n"


async def event_generator(initial: Optional[dict[str, Any]] = None) -> AsyncIterator[str]:
    """Subscribe on first iteration and yield SSE events until the client goes away."""
    queue: asyncio.Queue = asyncio.Queue(maxsize=MAX_PENDING)
    subscribers.add(queue)
    try:
        if initial is not None:
            yield _format(state_event(initial))
        while True:
            data = await queue.get()
            yield _format(data)
    finally:
        subscribers.discard(queue)
