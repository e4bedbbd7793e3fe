"""Error taxonomy shared by the store, the upstream clients and the gateway.

Every error except :class:`ConfigError` is caught at the HTTP boundary and
turned into a JSON body with the status code carried on the class.
"""
from __future__ import annotations


class GatewayError(Exception):
    status_code: int = 500
    code: str = "internal_error"
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class AuthError(GatewayError):
    """Bad or missing bearer credential."""

    status_code = 403
    code = "forbidden"
    default_detail = "Forbidden: Invalid API Key"


class ValidationError(GatewayError):
    """A required field is missing or has the wrong type."""

    status_code = 400
    code = "bad_request"
    default_detail = "Bad Request: Missing fields"


class NotFoundError(GatewayError):
    """Unknown submission id, or unknown/expired photo reference."""

    status_code = 404
    code = "not_found"
    default_detail = "Not Found"


class UpstreamError(GatewayError):
    """The Telegram Bot API failed or answered with an error."""

    status_code = 500
    code = "upstream_error"
    default_detail = "Upstream service failure"


class StorageError(GatewayError):
    """The database is unreachable or rejected the statement."""

    status_code = 500
    code = "storage_error"
    default_detail = "Storage failure"


class ConfigError(RuntimeError):
    """Required configuration is absent; raised at startup only."""
