"""Request builders for the Prometheus HTTP API endpoints."""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from prometheus_metrics.errors import ValidationError

DEFAULT_STEP = "60s"

LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
DURATION_RE = re.compile(
    r"^(?:(\d+)y)?(?:(\d+)w)?(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?(?:(\d+)ms)?$"
)
DURATION_UNITS = (365 * 86400, 7 * 86400, 86400, 3600, 60, 1, 0.001)


@dataclass(frozen=True)
class ApiRequest:
    path: str
    params: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class InstantQuery:
    expr: str
    time: str | None = None
    timeout: str | None = None


@dataclass(frozen=True)
class RangeQuery:
    expr: str
    start: str
    end: str
    step: str = DEFAULT_STEP
    timeout: str | None = None


@dataclass(frozen=True)
class LabelValues:
    label: str
    matches: tuple[str, ...] = ()


@dataclass(frozen=True)
class Jobs:
    pass


@dataclass(frozen=True)
class Metrics:
    # Applied client-side after retrieval, see output.filter_values
    filter: str | None = None


@dataclass(frozen=True)
class Series:
    matches: tuple[str, ...]
    start: str
    end: str


QueryRequest = InstantQuery | RangeQuery | LabelValues | Jobs | Metrics | Series


def parse_timestamp(value: str, name: str = "time") -> float:
    """Parse an RFC3339 or unix-seconds timestamp into unix seconds.

    RFC3339 values without an offset are taken as UTC.
    """
    value = value.strip()
    if not value:
        raise ValidationError(f"--{name} must not be empty")
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValidationError(f"invalid --{name} {value!r}: must be finite")
        return seconds
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            f"invalid --{name} {value!r}: expected RFC3339 or unix timestamp"
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def parse_duration(value: str, name: str = "step") -> float:
    """Parse a Prometheus duration ("1m30s", "500ms") or plain seconds."""
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        match = DURATION_RE.match(value)
        if not value or match is None:
            raise ValidationError(
                f"invalid --{name} {value!r}: expected a duration like 30s, 5m or 1h"
            ) from None
        seconds = sum(int(n) * unit for n, unit in zip(match.groups(), DURATION_UNITS) if n)
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValidationError(f"invalid --{name} {value!r}: must be positive")
    return seconds


def _require_expr(expr: str) -> str:
    if not expr or not expr.strip():
        raise ValidationError("query expression must not be empty")
    return expr


def _check_range(start: str, end: str) -> None:
    if parse_timestamp(start, "start") > parse_timestamp(end, "end"):
        raise ValidationError(f"--start ({start}) must not be after --end ({end})")


def _match_params(matches) -> list[tuple[str, str]]:
    return [("match[]", m) for m in matches]


def label_values_request(label: str, matches=()) -> ApiRequest:
    if not LABEL_NAME_RE.match(label or ""):
        raise ValidationError(f"invalid label name {label!r}")
    return ApiRequest(f"api/v1/label/{label}/values", _match_params(matches))


def build_request(request: QueryRequest) -> ApiRequest:
    """Validate a request and map it onto its API path and query parameters.

    Raises:
        ValidationError: Empty expression, bad timestamp or duration,
            start after end, bad label name or missing series matcher.
    """
    if isinstance(request, InstantQuery):
        params = [("query", _require_expr(request.expr))]
        if request.time is not None:
            parse_timestamp(request.time, "time")
            params.append(("time", request.time))
        if request.timeout is not None:
            parse_duration(request.timeout, "timeout")
            params.append(("timeout", request.timeout))
        return ApiRequest("api/v1/query", params)

    elif isinstance(request, RangeQuery):
        _require_expr(request.expr)
        _check_range(request.start, request.end)
        parse_duration(request.step, "step")
        params = [
            ("query", request.expr),
            ("start", request.start),
            ("end", request.end),
            ("step", request.step),
        ]
        if request.timeout is not None:
            parse_duration(request.timeout, "timeout")
            params.append(("timeout", request.timeout))
        return ApiRequest("api/v1/query_range", params)

    elif isinstance(request, LabelValues):
        return label_values_request(request.label, request.matches)

    elif isinstance(request, Jobs):
        return label_values_request("job")

    elif isinstance(request, Metrics):
        return label_values_request("__name__")

    elif isinstance(request, Series):
        matches = [m for m in request.matches if m and m.strip()]
        if not matches:
            raise ValidationError("--match is required for series queries")
        _check_range(request.start, request.end)
        params = _match_params(matches)
        params += [("start", request.start), ("end", request.end)]
        return ApiRequest("api/v1/series", params)

    else:
        raise TypeError(f"Unknown request type: {type(request).__name__}")
