"""
Helpers/relay.py
Decides what happens to a raid report and forwards accepted ones to Discord.

Checks run in a fixed order and stop at the first failure:

    1. unknown raid type   -> 400
    2. reporter not in guild -> 403
    3. cooldown not elapsed  -> 429
    4. webhook rejected      -> 500

Nothing past a failed check runs: an unauthorized report never touches the
cooldowns, and a rate-limited one never reaches the webhook.
"""

import threading
from enum import Enum

from Helpers.discord_webhook import raid_message, send_webhook
from Helpers.errors import (
    DeliveryFailure,
    RateLimited,
    RelayError,
    Unauthorized,
    UnknownRaidType,
    UpstreamLookupFailure,
)
from Helpers.logger import log, ERROR, INFO, SUCCESS, WARN
from Helpers.variables import PURGE_AFTER_WINDOWS, PURGE_EVERY, RAID_ICONS


class RaidOutcome(Enum):
    ACCEPTED = (200, "Raid message processed")
    UNKNOWN_RAID_TYPE = (400, "Unknown raid type")
    UNAUTHORIZED = (403, "Unauthorized")
    RATE_LIMITED = (429, "Raid message ignored due to cooldown")
    DELIVERY_FAILED = (500, "Failed to send raid message")

    def __init__(self, status, text):
        self.status = status
        self.text = text


_OUTCOMES = {
    UnknownRaidType: (RaidOutcome.UNKNOWN_RAID_TYPE, ERROR),
    Unauthorized: (RaidOutcome.UNAUTHORIZED, ERROR),
    RateLimited: (RaidOutcome.RATE_LIMITED, WARN),
    DeliveryFailure: (RaidOutcome.DELIVERY_FAILED, ERROR),
    # a lookup that could not be answered denies the report
    UpstreamLookupFailure: (RaidOutcome.UNAUTHORIZED, WARN),
}


def _outcome_for(error):
    for cls, result in _OUTCOMES.items():
        if isinstance(error, cls):
            return result
    return RaidOutcome.DELIVERY_FAILED, ERROR


class RaidRelay:

    def __init__(self, webhook_url, membership, cooldowns, send=send_webhook, icons=None):
        self.webhook_url = webhook_url
        self.membership = membership
        self.cooldowns = cooldowns
        self._send = send
        self.icons = RAID_ICONS if icons is None else icons
        self._admitted = 0
        self._admitted_lock = threading.Lock()

    def process(self, report) -> RaidOutcome:
        try:
            self._process(report)
        except RelayError as e:
            outcome, level = _outcome_for(e)
            log(level, str(e), context="relay")
            return outcome

        log(SUCCESS, f"Processed raid completion reported by {report.reporter_uuid} "
                     f"for '{report.raid_type}' with players: {list(report.players)}", context="relay")
        return RaidOutcome.ACCEPTED

    def _process(self, report):
        icon = self.icons.get(report.raid_type)
        if icon is None:
            raise UnknownRaidType(f"Unknown raid type: {report.raid_type}")

        if not self.membership.is_member(report.reporter_uuid):
            raise Unauthorized(f"Unauthorized raid report from UUID: {report.reporter_uuid}")

        if not self.cooldowns.should_process(report.cooldown_key):
            raise RateLimited(
                f"Raid message from {report.reporter_uuid} ignored due to cooldown "
                f"({self.cooldowns.remaining(report.cooldown_key):.1f}s remaining)"
            )
        self._after_admit()

        self._send(self.webhook_url, raid_message(report, icon))

    def _after_admit(self):
        with self._admitted_lock:
            self._admitted += 1
            due = self._admitted % PURGE_EVERY == 0
        if due:
            removed = self.cooldowns.purge(PURGE_AFTER_WINDOWS)
            log(INFO, f"Purged {removed} expired cooldowns, {len(self.cooldowns)} tracked", context="relay")
