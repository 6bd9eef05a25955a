"""Environment and flag based configuration for prometheus-metrics."""

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from prometheus_metrics.auth import AuthMode, NoAuth, resolve_auth
from prometheus_metrics.errors import ConfigError

VERSION = "0.2.0"
DEFAULT_TIMEOUT = 30.0

# Environment variable names, keyed by the flag they back
ENV_VARS = {
    "base_url": "PROMQL_BASE_URL",
    "auth": "PROMQL_AUTH",
    "user": "PROMQL_USER",
    "password": "PROMQL_PASS",
    "bearer": "PROMQL_BEARER",
    "timeout": "PROMQL_TIMEOUT",
}


@dataclass(frozen=True)
class Config:
    base_url: str
    auth: AuthMode = field(default_factory=NoAuth)
    timeout: float = DEFAULT_TIMEOUT

    def url(self, path: str) -> str:
        """Join an API path onto the base URL, keeping any path prefix."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def _pick(flag: str | None, name: str, environ: Mapping[str, str]) -> str | None:
    if flag:
        return flag
    return environ.get(ENV_VARS[name]) or None


def _check_base_url(base_url: str) -> str:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"invalid base URL {base_url!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigError(f"invalid base URL {base_url!r}: expected http(s)://host[/prefix]")
    return base_url


def _parse_timeout(raw: str | float | None) -> float:
    if raw is None or raw == "":
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"invalid timeout {raw!r}: expected a number of seconds") from None
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(f"invalid timeout {raw!r}: must be a positive finite number")
    return timeout


def load_config(
    base_url: str | None = None,
    auth: str | None = None,
    user: str | None = None,
    password: str | None = None,
    bearer: str | None = None,
    timeout: float | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Merge flags over environment variables into one frozen Config.

    Args:
        base_url/auth/user/password/bearer/timeout: Flag values; ``None`` or
            empty means "not given on the command line".
        environ: Environment to read, ``os.environ`` by default.

    Raises:
        ConfigError: No base URL, malformed URL, credentials or timeout.
    """
    environ = os.environ if environ is None else environ

    resolved_url = _pick(base_url, "base_url", environ)
    if not resolved_url:
        raise ConfigError(
            f"no base URL configured: pass --base-url or set {ENV_VARS['base_url']}"
        )

    mode = resolve_auth(
        auth=_pick(auth, "auth", environ),
        user=_pick(user, "user", environ),
        password=_pick(password, "password", environ),
        bearer=_pick(bearer, "bearer", environ),
    )
    raw_timeout = timeout if timeout is not None else environ.get(ENV_VARS["timeout"])

    return Config(
        base_url=_check_base_url(resolved_url),
        auth=mode,
        timeout=_parse_timeout(raw_timeout),
    )
