"""Polling feed of hub snapshots for web clients.

The feed is registered on the hub as an ``all`` observer and keeps a ring
buffer of recent snapshots. Each entry gets an increasing integer id so a
client can poll with ``since=<last id seen>`` and receive only newer entries.
"""

import threading
from collections import deque
from datetime import UTC, datetime

from pantry_pal.domain.sync import Snapshot

MAX_EVENTS = 300


class SnapshotFeed:
    """Bounded, cursor-addressable buffer of snapshots."""

    def __init__(self, max_events: int = MAX_EVENTS) -> None:
        self._lock = threading.Lock()
        self._events: deque[dict[str, object]] = deque(maxlen=max_events)
        self._next_id = 1

    def __call__(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._events.append(
                {
                    "id": self._next_id,
                    "kind": str(snapshot.kind),
                    "ts": datetime.now(tz=UTC).isoformat(),
                    "snapshot": snapshot,
                }
            )
            self._next_id += 1

    def get_events(self, since: int | None = None) -> dict[str, object]:
        """Return entries newer than ``since`` (exclusive) and the next cursor."""
        with self._lock:
            if since is None:
                events = list(self._events)
            else:
                events = [event for event in self._events if event["id"] > since]
            next_cursor = self._events[-1]["id"] if self._events else since or 0
        return {"events": events, "next_cursor": next_cursor}
