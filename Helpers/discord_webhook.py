import re

import requests

from Helpers.errors import DeliveryFailure
from Helpers.variables import DEFAULT_HTTP_TIMEOUT, NOTIFICATION_AUTHOR_ICON, RAID_SIGIL_ICON

_MARKDOWN = re.compile(r"([\\_*~`>|])")


def escape_markdown(text: str) -> str:
    return _MARKDOWN.sub(r"\\\1", text)


def _player_field(report, index):
    return {
        'name': f'Player {index + 1}',
        'value': escape_markdown(report.player(index)),
        'inline': True,
    }


def raid_message(report, raid_icon_url: str) -> dict:
    """Build the webhook body announcing ``report``."""
    sr = report.sr_gained if report.sr_gained is not None else 0
    gxp = escape_markdown(report.gxp_gained) if report.gxp_gained is not None else '0'

    embed = {
        'title': f'Completion: {escape_markdown(report.raid_type)}',
        'color': None,
        'fields': [
            _player_field(report, 0),
            _player_field(report, 1),
            # forces players 3 and 4 onto their own row
            {'name': '\t', 'value': '\t'},
            _player_field(report, 2),
            _player_field(report, 3),
        ],
        'footer': {
            'text': f'+{sr} SR, +{gxp} GXP',
            'icon_url': RAID_SIGIL_ICON,
        },
        'author': {
            'name': f'Guild Raid Notification (+ {sr}SR)',
            'icon_url': NOTIFICATION_AUTHOR_ICON,
        },
        'thumbnail': {'url': raid_icon_url},
    }
    return {'content': None, 'embeds': [embed], 'attachments': []}


def send_webhook(url: str, message: dict, timeout=DEFAULT_HTTP_TIMEOUT):
    """POST ``message`` to a Discord webhook. Raises ``DeliveryFailure`` unless Discord accepts it."""
    try:
        resp = requests.post(url, json=message, headers={"Content-Type": "application/json"},
                             timeout=timeout)
    except requests.RequestException as e:
        # requests errors quote the URL, which holds the webhook token
        raise DeliveryFailure(f"webhook request failed: {type(e).__name__}") from e
    if not resp.ok:
        raise DeliveryFailure(f"webhook answered {resp.status_code}", status_code=resp.status_code)
    return resp
