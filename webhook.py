import sys
from functools import partial

from flask import Flask, request
from flask_cors import CORS
from waitress import serve

from Helpers import logger
from Helpers.config import load_config
from Helpers.cooldown import CooldownTracker
from Helpers.discord_webhook import send_webhook
from Helpers.errors import ConfigurationError, MalformedReport
from Helpers.logger import log, SYSTEM, ERROR
from Helpers.membership import GuildMembershipCache, ProfileMembershipCheck
from Helpers.models import RaidReport
from Helpers.relay import RaidRelay
from Helpers.wynn_api import WynnAPI


def create_app(relay):
    app = Flask(__name__)
    CORS(app)
    app.config['CORS_HEADERS'] = 'Content-Type'

    @app.route('/raid', methods=['POST'])
    def raid():
        json_data = request.get_json(silent=True)
        try:
            report = RaidReport.from_json(json_data)
        except MalformedReport as e:
            log(ERROR, f"Malformed raid report: {e}", context="webhook")
            return "Malformed raid report", 400

        outcome = relay.process(report)
        return outcome.text, outcome.status

    return app


def build_relay(config):
    api = WynnAPI(token=config.wynn_token, timeout=config.http_timeout)
    if config.membership_mode == 'profile':
        membership = ProfileMembershipCheck(api.fetch_player_info, config.guild)
    else:
        membership = GuildMembershipCache(
            partial(api.fetch_guild_members, config.guild),
            ttl_seconds=config.guild_ttl_seconds,
        )
    return RaidRelay(
        config.webhook_url,
        membership,
        CooldownTracker(config.cooldown_seconds),
        send=partial(send_webhook, timeout=config.http_timeout),
    )


def main():
    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"Error: {e}. Please check your .env file.")
        sys.exit(-1)

    logger.init(config.log_webhook_url)
    logger.start()

    mode = "TEST" if config.test_mode else "PRODUCTION"
    log(SYSTEM, f"Starting raid relay in {mode} mode for guild '{config.guild}' "
                f"({config.membership_mode} membership, {config.cooldown_seconds:g}s cooldown)")

    app = create_app(build_relay(config))
    serve(app, host='0.0.0.0', port=config.port)


if __name__ == '__main__':
    main()
