"""EventBus — thread-safe pub/sub for simulation events.

SimulationState.tick() publishes combat events here when a bus is passed
in: ``enemy_spawned``, ``enemy_reached_base``, ``attack_fired``,
``enemy_eliminated`` and ``base_defeated``.  Consumers (a UI thread, an
announcer, a recorder) each get their own bounded Queue, so a slow
consumer never blocks the frame that is publishing.

Messages have the shape ``{"type": event_type, "data": {...}}``.
"""

from __future__ import annotations

import queue
import threading


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._dropped = 0
        self._subscribers: list[tuple[queue.Queue, str | None]] = []

    def subscribe(self, event_type: str | None = None) -> queue.Queue:
        """Subscribe to events.  Returns a Queue that receives them.

        With *event_type* set, only messages of that type are delivered;
        otherwise the queue receives every event.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append((q, event_type))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, t) for s, t in self._subscribers if s is not q]

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, wanted in self._subscribers:
                if wanted is None or wanted == event_type:
                    self._offer(q, msg)

    @property
    def dropped(self) -> int:
        """Messages evicted from full subscriber queues so far."""
        return self._dropped

    def _offer(self, q: queue.Queue, msg: dict) -> None:
        # A full queue loses its oldest message, never the one being published
        while True:
            try:
                q.put_nowait(msg)
                return
            except queue.Full:
                pass
            try:
                q.get_nowait()
                self._dropped += 1
            except queue.Empty:
                pass
