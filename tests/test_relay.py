"""
Tests for Helpers/relay.py

Check order is: unknown raid type -> unauthorized -> rate limited -> delivery.
Each failed check stops processing before any later side effect.
"""

from unittest.mock import MagicMock

import pytest

from Helpers.cooldown import CooldownTracker
from Helpers.errors import DeliveryFailure, UpstreamLookupFailure
from Helpers.models import RaidReport
from Helpers.relay import RaidOutcome, RaidRelay
from Helpers.variables import PURGE_EVERY, RAID_ICONS

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"
MEMBER = "00000000-0000-0000-0000-000000000001"
OUTSIDER = "00000000-0000-0000-0000-000000000099"


class FakeClock:

    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += int(seconds * 1000)


class FakeMembership:

    def __init__(self, members):
        self.members = set(members)
        self.checked = []

    def is_member(self, uuid):
        self.checked.append(uuid)
        return uuid in self.members


def _report(raid="The Canyon Colossus", players=("A", "B"), reporter=MEMBER):
    return RaidReport(raid_type=raid, players=tuple(players), reporter_uuid=reporter,
                      gxp_gained="1B", sr_gained=2)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def send():
    return MagicMock()


@pytest.fixture
def relay(clock, send):
    return RaidRelay(WEBHOOK_URL, FakeMembership({MEMBER}), CooldownTracker(60, clock=clock), send=send)


# ===========================================================================
# TESTS
# ===========================================================================

class TestOutcomes:

    def test_outcome_status_codes(self):
        assert RaidOutcome.ACCEPTED.status == 200
        assert RaidOutcome.ACCEPTED.text == "Raid message processed"
        assert RaidOutcome.UNKNOWN_RAID_TYPE.status == 400
        assert RaidOutcome.UNAUTHORIZED.status == 403
        assert RaidOutcome.RATE_LIMITED.status == 429
        assert RaidOutcome.DELIVERY_FAILED.status == 500


class TestAccepted:

    def test_first_report_accepted_and_sent(self, relay, send):
        assert relay.process(_report()) is RaidOutcome.ACCEPTED

        send.assert_called_once()
        url, message = send.call_args[0]
        assert url == WEBHOOK_URL
        embed = message['embeds'][0]
        assert embed['title'] == "Completion: The Canyon Colossus"
        assert embed['thumbnail']['url'] == RAID_ICONS["The Canyon Colossus"]

    def test_repeat_within_window_rate_limited(self, relay, send, clock):
        assert relay.process(_report()) is RaidOutcome.ACCEPTED
        clock.advance(30)
        assert relay.process(_report()) is RaidOutcome.RATE_LIMITED
        send.assert_called_once()

    def test_repeat_after_window_accepted(self, relay, send, clock):
        relay.process(_report())
        clock.advance(61)
        assert relay.process(_report()) is RaidOutcome.ACCEPTED
        assert send.call_count == 2

    def test_different_party_is_a_different_completion(self, relay):
        assert relay.process(_report(players=("A", "B"))) is RaidOutcome.ACCEPTED
        assert relay.process(_report(players=("C", "D"))) is RaidOutcome.ACCEPTED

    def test_other_party_member_reporting_same_raid_is_rate_limited(self, relay):
        other = "00000000-0000-0000-0000-000000000002"
        relay.membership.members.add(other)
        assert relay.process(_report(reporter=MEMBER)) is RaidOutcome.ACCEPTED
        assert relay.process(_report(reporter=other)) is RaidOutcome.RATE_LIMITED


class TestRejections:

    def test_unknown_raid_type(self, relay, send):
        assert relay.process(_report(raid="Unknown Raid")) is RaidOutcome.UNKNOWN_RAID_TYPE
        send.assert_not_called()

    def test_unknown_raid_type_wins_over_unauthorized(self, relay):
        assert relay.process(_report(raid="Unknown Raid", reporter=OUTSIDER)) is RaidOutcome.UNKNOWN_RAID_TYPE
        assert relay.membership.checked == []

    def test_unknown_raid_type_wins_over_cooldown(self, relay, clock):
        relay.process(_report())
        assert relay.process(_report(raid="Unknown Raid")) is RaidOutcome.UNKNOWN_RAID_TYPE

    def test_unauthorized(self, relay, send):
        assert relay.process(_report(reporter=OUTSIDER)) is RaidOutcome.UNAUTHORIZED
        send.assert_not_called()

    def test_unauthorized_does_not_consume_cooldown(self, relay):
        assert relay.process(_report(reporter=OUTSIDER)) is RaidOutcome.UNAUTHORIZED
        assert len(relay.cooldowns) == 0
        assert relay.process(_report()) is RaidOutcome.ACCEPTED

    def test_unauthorized_wins_over_cooldown(self, relay):
        relay.process(_report())
        assert relay.process(_report(reporter=OUTSIDER)) is RaidOutcome.UNAUTHORIZED

    def test_delivery_failure(self, relay, send):
        send.side_effect = DeliveryFailure("webhook answered 500", status_code=500)
        assert relay.process(_report()) is RaidOutcome.DELIVERY_FAILED

    def test_delivery_failure_keeps_cooldown(self, relay, send):
        send.side_effect = [DeliveryFailure("webhook answered 500"), None]
        assert relay.process(_report()) is RaidOutcome.DELIVERY_FAILED
        assert relay.process(_report()) is RaidOutcome.RATE_LIMITED


class TestPurge:

    def test_purges_every_n_admits(self, clock, send):
        cooldowns = MagicMock()
        cooldowns.should_process.return_value = True
        relay = RaidRelay(WEBHOOK_URL, FakeMembership({MEMBER}), cooldowns, send=send)

        for _ in range(PURGE_EVERY):
            relay.process(_report())

        cooldowns.purge.assert_called_once()


class TestUpstreamFailure:

    def test_lookup_failure_reaching_relay_is_unauthorized(self, clock, send):
        membership = MagicMock()
        membership.is_member.side_effect = UpstreamLookupFailure("roster unavailable")
        cooldowns = CooldownTracker(60, clock=clock)
        relay = RaidRelay(WEBHOOK_URL, membership, cooldowns, send=send)

        assert relay.process(_report()) is RaidOutcome.UNAUTHORIZED
        assert len(cooldowns) == 0
        send.assert_not_called()


class TestRateLimitLog:

    def test_rate_limit_log_shows_time_remaining(self, relay, clock, capsys):
        relay.process(_report())
        clock.advance(15)
        capsys.readouterr()

        assert relay.process(_report()) is RaidOutcome.RATE_LIMITED
        assert "(45.0s remaining)" in capsys.readouterr().out
