"""
Helpers/wynn_api.py
Thin Wynncraft v3 API client: guild rosters and player profiles.

Every failure (network error, non-2xx status, unexpected JSON) is raised as
``UpstreamLookupFailure`` so callers deal with exactly one exception type.
"""

from urllib.parse import quote

import requests

from Helpers.errors import UpstreamLookupFailure
from Helpers.variables import DEFAULT_HTTP_TIMEOUT, WYNN_API_BASE


class WynnAPI:

    def __init__(self, token=None, timeout=DEFAULT_HTTP_TIMEOUT, session=None):
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        url = f"{WYNN_API_BASE}/{path}"
        try:
            resp = self.session.get(url, timeout=self.timeout, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise UpstreamLookupFailure(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamLookupFailure(f"GET {url} returned invalid JSON") from e

    def fetch_guild_members(self, guild):
        """Return the set of member UUIDs across every rank of ``guild``."""
        data = self._get(f"guild/{quote(guild)}")
        try:
            members = data["members"]
            uuids = set()
            for rank, group in members.items():
                if rank == 'total':
                    continue
                for info in group.values():
                    uuid = info.get('uuid')
                    if uuid:
                        uuids.add(uuid)
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamLookupFailure(f"unexpected roster format for guild '{guild}'") from e
        return uuids

    def fetch_player_info(self, uuid):
        """Return ``{'name': ..., 'guild': ...}`` for ``uuid``; guild is None when guildless."""
        data = self._get(f"player/{quote(uuid)}")
        try:
            guild = data.get('guild')
            return {
                'name': data['username'],
                'guild': guild.get('name') if guild else None,
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamLookupFailure(f"unexpected profile format for player '{uuid}'") from e
