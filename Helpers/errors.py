"""
Helpers/errors.py
Error taxonomy for the raid relay.

Everything raised while handling a single report derives from ``RelayError``;
``Helpers.relay`` decides which outcome (and HTTP status) each one becomes.
``ConfigurationError`` is the only fatal one: it stops the process at startup.
"""


class RelayError(Exception):
    pass


class ConfigurationError(RelayError):
    """Missing or malformed environment variable."""


class MalformedReport(RelayError):
    pass


class UnknownRaidType(RelayError):
    pass


class Unauthorized(RelayError):
    pass


class RateLimited(RelayError):
    pass


class UpstreamLookupFailure(RelayError):
    """The Wynncraft API was unreachable or answered with an error."""


class DeliveryFailure(RelayError):
    """The Discord webhook did not accept the message."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
