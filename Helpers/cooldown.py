"""
Helpers/cooldown.py
Per-report cooldowns: admit a report key at most once per rolling window.

``should_process`` runs a compare-and-swap loop over ``AtomicTimestampMap``,
whose only primitives are conditional insert and conditional replace. Any
number of threads may call it for the same key; exactly one of them wins a
given window.
"""

import threading
import time


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class AtomicTimestampMap:
    """dict of key -> timestamp (ms) with atomic conditional updates."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self._data.get(key)

    def put_if_absent(self, key, value):
        """Store ``value`` unless ``key`` exists. Returns the existing value, or None if stored."""
        with self._lock:
            previous = self._data.get(key)
            if previous is None:
                self._data[key] = value
            return previous

    def replace(self, key, expected, value) -> bool:
        """Swap ``expected`` for ``value``. False if the stored value moved on."""
        with self._lock:
            if self._data.get(key) != expected:
                return False
            self._data[key] = value
            return True

    def remove_if_equal(self, key, expected) -> bool:
        with self._lock:
            if self._data.get(key) != expected:
                return False
            del self._data[key]
            return True

    def items(self):
        with self._lock:
            return list(self._data.items())

    def __len__(self):
        with self._lock:
            return len(self._data)


class CooldownTracker:

    def __init__(self, window_seconds: float, clock=None):
        self.window_ms = int(window_seconds * 1000)
        self._clock = clock or _monotonic_ms
        self._timestamps = AtomicTimestampMap()

    def should_process(self, key) -> bool:
        """True exactly once per ``key`` per cooldown window."""
        now = self._clock()
        previous = self._timestamps.get(key)
        while True:
            if previous is None:
                previous = self._timestamps.put_if_absent(key, now)
                if previous is None:
                    return True
                # lost the insert race; judge against the winner's timestamp

            if now - previous <= self.window_ms:
                return False

            if self._timestamps.replace(key, previous, now):
                return True
            previous = self._timestamps.get(key)

    def remaining(self, key) -> float:
        """Seconds until ``key`` may be admitted again (0 when it already may)."""
        previous = self._timestamps.get(key)
        if previous is None:
            return 0.0
        return max(0, self.window_ms - (self._clock() - previous)) / 1000

    def purge(self, max_age_windows: int = 10) -> int:
        """Drop entries older than ``max_age_windows`` windows. Returns how many went."""
        cutoff = self._clock() - max_age_windows * self.window_ms
        removed = 0
        for key, stamp in self._timestamps.items():
            if stamp < cutoff and self._timestamps.remove_if_equal(key, stamp):
                removed += 1
        return removed

    def __len__(self):
        return len(self._timestamps)
