"""Error types raised by prometheus-metrics, one per failure class."""


class PrometheusMetricsError(Exception):
    """Base class. Each subclass maps to a distinct process exit code."""

    exit_code = 1


class ConfigError(PrometheusMetricsError):
    """Missing or unusable base URL, credentials or timeout."""

    exit_code = 3


class ValidationError(PrometheusMetricsError):
    """Command arguments rejected before any request is sent."""

    exit_code = 4


class TransportError(PrometheusMetricsError):
    """Connection failure, timeout, non-2xx status or unreadable body."""

    exit_code = 5

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ServerError(PrometheusMetricsError):
    """The API answered with status "error"."""

    exit_code = 6

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        self.error_type = error_type


class FormatError(PrometheusMetricsError):
    """The requested output mode does not fit the response shape."""

    exit_code = 7
