"""Readiness flag shared by every request."""

from __future__ import annotations

import threading


class HealthState:
    """Single healthy/unhealthy cell, safe to read from any worker thread.

    The service starts unhealthy and is flipped once during startup, after
    the store has been probed. Nothing re-probes the store later, so an
    unhealthy process stays unhealthy until it is restarted.
    """

    def __init__(self, healthy: bool = False) -> None:
        self._lock = threading.Lock()
        self._healthy = healthy

    @property
    def is_healthy(self) -> bool:
        with self._lock:
            return self._healthy

    def mark_healthy(self) -> None:
        with self._lock:
            self._healthy = True

    def mark_unhealthy(self) -> None:
        with self._lock:
            self._healthy = False
