from unittest.mock import MagicMock

import pytest
import requests

from Helpers.errors import UpstreamLookupFailure
from Helpers.wynn_api import WynnAPI

GUILD_RESPONSE = {
    "name": "The Aquarium",
    "prefix": "TAq",
    "members": {
        "total": 3,
        "owner": {"Owner1": {"uuid": "uuid-owner", "contributed": 1}},
        "chief": {},
        "recruit": {
            "Recruit1": {"uuid": "uuid-r1"},
            "Recruit2": {"uuid": "uuid-r2"},
        },
    },
}


def _session(payload=None, status=200, exc=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value = resp
    return session


class TestGuildMembers:

    def test_collects_uuids_across_ranks(self):
        api = WynnAPI(session=_session(GUILD_RESPONSE))
        assert api.fetch_guild_members("The Aquarium") == {"uuid-owner", "uuid-r1", "uuid-r2"}

    def test_guild_name_is_url_quoted_and_token_sent(self):
        session = _session(GUILD_RESPONSE)
        api = WynnAPI(token="secret", timeout=3, session=session)
        api.fetch_guild_members("The Aquarium")

        args, kwargs = session.get.call_args
        assert args[0] == "https://api.wynncraft.com/v3/guild/The%20Aquarium"
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}
        assert kwargs["timeout"] == 3

    def test_no_token_no_auth_header(self):
        session = _session(GUILD_RESPONSE)
        WynnAPI(session=session).fetch_guild_members("TAq")
        assert session.get.call_args.kwargs["headers"] == {}

    def test_http_error_raises_upstream_failure(self):
        api = WynnAPI(session=_session(status=503))
        with pytest.raises(UpstreamLookupFailure):
            api.fetch_guild_members("The Aquarium")

    def test_network_error_raises_upstream_failure(self):
        api = WynnAPI(session=_session(exc=requests.ConnectionError("unreachable")))
        with pytest.raises(UpstreamLookupFailure):
            api.fetch_guild_members("The Aquarium")

    def test_unexpected_shape_raises_upstream_failure(self):
        api = WynnAPI(session=_session({"name": "The Aquarium"}))
        with pytest.raises(UpstreamLookupFailure):
            api.fetch_guild_members("The Aquarium")


class TestPlayerInfo:

    def test_player_in_guild(self):
        api = WynnAPI(session=_session({"username": "Player1", "guild": {"name": "The Aquarium"}}))
        assert api.fetch_player_info("uuid-1") == {"name": "Player1", "guild": "The Aquarium"}

    def test_guildless_player(self):
        api = WynnAPI(session=_session({"username": "Player1", "guild": None}))
        assert api.fetch_player_info("uuid-1") == {"name": "Player1", "guild": None}

    def test_invalid_json_raises_upstream_failure(self):
        session = _session()
        session.get.return_value.json.side_effect = ValueError("no json")
        with pytest.raises(UpstreamLookupFailure):
            WynnAPI(session=session).fetch_player_info("uuid-1")
