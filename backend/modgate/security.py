from __future__ import annotations
import hmac
from typing import Protocol
from modgate.errors import AuthError


class Authenticator(Protocol):
    def verify(self, authorization: str | None) -> None:
        """Raise AuthError unless the Authorization header is acceptable."""
        ...


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class StaticBearerAuthenticator:
    """Single shared secret handed to the upstream bot."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("secret must not be empty")
        self._secret = secret.encode()

    def verify(self, authorization: str | None) -> None:
        token = bearer_token(authorization)
        if token is None or not hmac.compare_digest(token.encode(), self._secret):
            raise AuthError()
