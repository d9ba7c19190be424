"""
Errors raised by the Lark client and the embed builder. Route handlers turn them into
500 {"error": message}; input validation is answered with 400 before these are reached.
"""


class ConfigurationError(RuntimeError):
    """A required environment value (secret, portal name, app credentials) is missing."""


class LarkAPIError(RuntimeError):
    """Open platform call failed: transport error, non-zero code, or missing payload."""
