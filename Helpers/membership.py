"""
Helpers/membership.py
Guild membership checks used to authorize raid reports.

Two interchangeable strategies, both exposing ``is_member(uuid) -> bool``:

GuildMembershipCache
    Holds the whole guild roster, refetched when older than the TTL.
    One Wynncraft call per TTL regardless of traffic, but a new member
    waits up to one TTL before being recognised.

ProfileMembershipCheck
    Looks up the reporter's own profile on every report and compares its
    guild. Always current, at the price of one Wynncraft call per report.
"""

import threading
import time

from Helpers.errors import UpstreamLookupFailure
from Helpers.logger import log, INFO, WARN
from Helpers.variables import GUILD_TTL_SECONDS


class GuildMembershipCache:
    """
    Roster snapshot refreshed from ``fetch_members`` every ``ttl_seconds``.

    The snapshot is a frozenset swapped in whole, so readers see either the
    old roster or the new one. Refreshes are serialized by a lock; a failed
    refresh keeps the previous snapshot and leaves the cache stale so the
    next check retries.
    """

    def __init__(self, fetch_members, ttl_seconds: float = GUILD_TTL_SECONDS, clock=None):
        self._fetch_members = fetch_members
        self.ttl = ttl_seconds
        self._clock = clock or time.monotonic
        self._members = frozenset()
        self._last_refreshed = None
        self._refresh_lock = threading.Lock()

    @property
    def members(self) -> frozenset:
        return self._members

    @property
    def last_refreshed(self):
        return self._last_refreshed

    def is_fresh(self) -> bool:
        if self._last_refreshed is None:
            return False
        return self._clock() - self._last_refreshed <= self.ttl

    def refresh(self):
        """Fetch the roster and replace the snapshot. Raises ``UpstreamLookupFailure``."""
        with self._refresh_lock:
            self._refresh_locked()

    def _refresh_locked(self):
        try:
            fetched = frozenset(self._fetch_members())
        except UpstreamLookupFailure:
            raise
        except Exception as e:
            raise UpstreamLookupFailure(f"guild roster fetch failed: {e}") from e

        self._members = fetched
        self._last_refreshed = self._clock()
        log(INFO, f"Guild roster refreshed: {len(fetched)} members", context="membership")

    def ensure_fresh(self):
        if self.is_fresh():
            return
        with self._refresh_lock:
            # a caller queued behind a successful refresh can reuse its result
            if not self.is_fresh():
                self._refresh_locked()

    def is_member(self, uuid: str) -> bool:
        try:
            self.ensure_fresh()
        except UpstreamLookupFailure as e:
            log(WARN, f"Serving stale roster ({len(self._members)} members): {e}", context="membership")
        return uuid in self._members


class ProfileMembershipCheck:
    """Per-report lookup: a reporter is a member if their profile names ``guild``."""

    def __init__(self, fetch_player, guild: str):
        self._fetch_player = fetch_player
        self.guild = guild

    def is_member(self, uuid: str) -> bool:
        try:
            info = self._fetch_player(uuid)
        except UpstreamLookupFailure as e:
            log(WARN, f"Profile lookup for {uuid} failed, treating as non-member: {e}",
                context="membership")
            return False
        return info.get('guild') == self.guild
