from dataclasses import dataclass

from Helpers.errors import MalformedReport
from Helpers.variables import MAX_PLAYERS


def _require_str(payload, field):
    value = payload.get(field)
    if not isinstance(value, str):
        raise MalformedReport(f"'{field}' must be a string")
    return value


@dataclass(frozen=True)
class RaidReport:
    raid_type: str
    players: tuple
    reporter_uuid: str
    gxp_gained: str | None = None
    sr_gained: int | None = None

    @classmethod
    def from_json(cls, payload):
        """Parse the camelCase body posted by the client mod."""
        if not isinstance(payload, dict):
            raise MalformedReport("raid report must be a JSON object")

        raid_type = _require_str(payload, "raidType")
        reporter_uuid = _require_str(payload, "reporterUuid")

        players = payload.get("players")
        if not isinstance(players, list) or not all(isinstance(p, str) for p in players):
            raise MalformedReport("'players' must be a list of strings")
        if len(players) > MAX_PLAYERS:
            raise MalformedReport(f"a raid party has at most {MAX_PLAYERS} players, got {len(players)}")

        gxp = payload.get("gxpGained")
        if gxp is not None and not isinstance(gxp, str):
            raise MalformedReport("'gxpGained' must be a string")

        sr = payload.get("srGained")
        # bool is an int subclass; reject it explicitly
        if sr is not None and (isinstance(sr, bool) or not isinstance(sr, int)):
            raise MalformedReport("'srGained' must be an integer")

        return cls(
            raid_type=raid_type,
            players=tuple(players),
            reporter_uuid=reporter_uuid,
            gxp_gained=gxp,
            sr_gained=sr,
        )

    @property
    def cooldown_key(self):
        # Same raid with the same party (in the same order) is one completion,
        # whoever in the party reports it.
        return self.raid_type, self.players

    def player(self, index: int, default: str = "N/A") -> str:
        return self.players[index] if index < len(self.players) else default
