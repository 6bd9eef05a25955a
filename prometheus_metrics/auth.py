"""Authorization modes for the metrics API."""

import base64
from dataclasses import dataclass, field

from prometheus_metrics.errors import ConfigError


@dataclass(frozen=True)
class NoAuth:
    def header(self) -> str | None:
        return None


@dataclass(frozen=True)
class BasicAuth:
    user: str
    password: str = field(repr=False)

    def header(self) -> str | None:
        token = base64.b64encode(f"{self.user}:{self.password}".encode()).decode("ascii")
        return f"Basic {token}"


@dataclass(frozen=True)
class BearerAuth:
    token: str = field(repr=False)

    def header(self) -> str | None:
        return f"Bearer {self.token}"


AuthMode = NoAuth | BasicAuth | BearerAuth


def split_auth(auth: str) -> tuple[str, str]:
    """Split a combined ``user:password`` string."""
    user, sep, password = auth.partition(":")
    if not user or not sep:
        raise ConfigError("auth must be in the form user:password")
    return user, password


def resolve_auth(
    auth: str | None = None,
    user: str | None = None,
    password: str | None = None,
    bearer: str | None = None,
) -> AuthMode:
    """Pick exactly one auth mode from the raw credential fields.

    Precedence: bearer token, then the combined ``user:password`` string,
    then separate user/password fields. Empty strings count as unset.
    """
    if bearer:
        return BearerAuth(bearer)

    if auth:
        return BasicAuth(*split_auth(auth))

    if user or password:
        if not user:
            raise ConfigError("--user is required when using --password")
        if not password:
            raise ConfigError("--password is required when using --user")
        return BasicAuth(user, password)

    return NoAuth()


def auth_headers(mode: AuthMode) -> dict[str, str]:
    """Headers to attach to every request for the given mode."""
    value = mode.header()
    return {"Authorization": value} if value else {}
