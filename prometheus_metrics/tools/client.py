"""Send requests to a Prometheus-compatible API."""

import logging

import httpx

from prometheus_metrics.auth import auth_headers
from prometheus_metrics.config import VERSION, Config
from prometheus_metrics.errors import TransportError
from prometheus_metrics.tools.endpoints import ApiRequest
from prometheus_metrics.tools.response import parse_envelope, preview, raise_for_api_error

log = logging.getLogger("prometheus_metrics.client")

USER_AGENT = f"prometheus-metrics/{VERSION}"


def _raise_for_status(resp: httpx.Response) -> None:
    """Raise for a non-2xx response.

    Prometheus answers bad queries with 4xx/5xx and an error envelope; those
    surface as ServerError with the server's own message. Anything else is a
    TransportError carrying the status and a body preview.
    """
    if resp.is_success:
        return

    body = resp.text
    try:
        envelope = parse_envelope(body)
    except TransportError:
        envelope = None
    if envelope is not None and envelope.status == "error":
        raise_for_api_error(envelope)

    raise TransportError(
        f"HTTP {resp.status_code} from {resp.request.url}: {preview(body)}",
        status_code=resp.status_code,
        body=body,
    )


def send(
    config: Config,
    request: ApiRequest,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Execute a single GET against the configured API.

    Args:
        config: Resolved configuration (base URL, auth, timeout).
        request: Path and query parameters from build_request.
        transport: Optional httpx transport, used by tests.

    Returns:
        The raw response body of a 2xx response.
    """
    url = config.url(request.path)
    headers = {"User-Agent": USER_AGENT, **auth_headers(config.auth)}

    log.info("GET %s", url)
    log.debug("params=%s auth=%s", request.params, type(config.auth).__name__)

    try:
        with httpx.Client(timeout=config.timeout, headers=headers, transport=transport) as client:
            resp = client.get(url, params=request.params)
            body = resp.text
    except httpx.TimeoutException as e:
        raise TransportError(f"request to {url} timed out after {config.timeout:g}s") from e
    except httpx.HTTPError as e:
        raise TransportError(f"request to {url} failed: {e}") from e

    log.debug("HTTP %d, %d bytes", resp.status_code, len(body))
    _raise_for_status(resp)
    return body
