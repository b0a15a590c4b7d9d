# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""EventBus -- topic-based publish/subscribe over thread-safe queues.

Publishers never call subscriber code.  Each subscriber owns a bounded
``queue.Queue`` and drains it on its own schedule, so a handler reacting to
``player_detected`` (for example by starting a new game) can never re-enter
the game state machine while it is still mutating the session.  When a
subscriber falls ``max_queue`` events behind, newer events for it are
dropped.

Usage::

    bus = EventBus()
    q = bus.subscribe("player_detected")
    bus.publish("player_detected", {"is_over": True})
    event = q.get_nowait()

Subscribing to ``"*"`` receives every topic as ``(topic, data)`` tuples.
"""

from __future__ import annotations

import queue
import threading

from loguru import logger

WILDCARD = "*"


class EventBus:
    """Thread-safe topic pub/sub.  Payloads are delivered as-is."""

    def __init__(self, max_queue: int = 100) -> None:
        self._subscribers: dict[str, list[queue.Queue]] = {}
        self._lock = threading.Lock()
        self._max_queue = max_queue

    def publish(self, topic: str, data: object) -> None:
        with self._lock:
            direct = list(self._subscribers.get(topic, []))
            wildcard = list(self._subscribers.get(WILDCARD, []))
        for q in direct:
            self._offer(q, topic, data)
        for q in wildcard:
            self._offer(q, topic, (topic, data))

    def subscribe(self, topic: str) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._max_queue)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(q)
        return q

    def unsubscribe(self, topic: str, q: queue.Queue) -> None:
        with self._lock:
            subs = self._subscribers.get(topic, [])
            if q in subs:
                subs.remove(q)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, []))

    @staticmethod
    def _offer(q: queue.Queue, topic: str, item: object) -> None:
        try:
            q.put_nowait(item)
        except queue.Full:
            logger.debug(f"Subscriber queue full, dropped '{topic}' event")
