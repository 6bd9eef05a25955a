"""Command line entry point: query Prometheus/VictoriaMetrics endpoints."""

import logging

import click

from prometheus_metrics.config import VERSION, load_config
from prometheus_metrics.errors import PrometheusMetricsError
from prometheus_metrics.tools.client import send
from prometheus_metrics.tools.endpoints import (
    DEFAULT_STEP,
    InstantQuery,
    Jobs,
    LabelValues,
    Metrics,
    RangeQuery,
    Series,
    build_request,
)
from prometheus_metrics.tools.output import filter_values, render_data, render_json, render_lines
from prometheus_metrics.tools.response import decode_response

log = logging.getLogger("prometheus_metrics.cli")

VERBOSITY = {0: logging.NOTSET, 1: logging.INFO}

pretty_option = click.option("--pretty", is_flag=True, help="Pretty-print JSON output.")
result_option = click.option("--result", is_flag=True, help="Print only .data.result.")
lines_option = click.option("--lines", is_flag=True, help="Print one value per line.")


def _execute(ctx: click.Context, request, render) -> None:
    """Resolve config, build, send, decode and render one request.

    Output is only written once the whole result has rendered.
    """
    try:
        config = load_config(**ctx.obj["flags"])
        api_request = build_request(request)
        body = send(config, api_request, transport=ctx.obj.get("transport"))
        response = decode_response(body)
        for warning in response.warnings:
            click.echo(f"warning: {warning}", err=True)
        text = render(response.data)
    except PrometheusMetricsError as e:
        log.debug("%s (exit %d): %s", type(e).__name__, e.exit_code, e)
        click.echo(f"error: {e}", err=True)
        ctx.exit(e.exit_code)

    if text:
        click.echo(text)


def _list_renderer(lines: bool, pretty: bool):
    return render_lines if lines else (lambda data: render_json(data, pretty))


@click.group()
@click.option("--base-url", metavar="URL", help="API base URL  [env: PROMQL_BASE_URL]")
@click.option("--auth", metavar="USER:PASS", help="Basic auth as user:password  [env: PROMQL_AUTH]")
@click.option("--user", help="Basic auth user  [env: PROMQL_USER]")
@click.option("--password", help="Basic auth password  [env: PROMQL_PASS]")
@click.option("--bearer", metavar="TOKEN", help="Bearer token, overrides basic auth  [env: PROMQL_BEARER]")
@click.option(
    "--http-timeout",
    type=float,
    metavar="SECONDS",
    help="HTTP request timeout (default 30)  [env: PROMQL_TIMEOUT]",
)
@click.option("-v", "--verbose", count=True, help="Log requests (-v) or full detail (-vv) to stderr.")
@click.version_option(VERSION, prog_name="prometheus-metrics")
@click.pass_context
def cli(ctx, base_url, auth, user, password, bearer, http_timeout, verbose):
    """Query Prometheus/VictoriaMetrics endpoints."""
    ctx.ensure_object(dict)
    logging.getLogger("prometheus_metrics").setLevel(VERBOSITY.get(verbose, logging.DEBUG))
    ctx.obj["flags"] = {
        "base_url": base_url,
        "auth": auth,
        "user": user,
        "password": password,
        "bearer": bearer,
        "timeout": http_timeout,
    }


@cli.command()
@click.argument("expr")
@click.option("--time", "time_", metavar="TS", help="Evaluation timestamp (RFC3339 or Unix timestamp).")
@click.option("--timeout", metavar="DUR", help="Server-side query timeout (e.g. 30s).")
@result_option
@pretty_option
@click.pass_context
def query(ctx, expr, time_, timeout, result, pretty):
    """Instant query."""
    _execute(
        ctx,
        InstantQuery(expr, time=time_, timeout=timeout),
        lambda data: render_data(data, pretty=pretty, result_only=result),
    )


@cli.command("range")
@click.argument("expr")
@click.option("--start", required=True, metavar="TS", help="Range start (RFC3339 or Unix timestamp).")
@click.option("--end", required=True, metavar="TS", help="Range end (RFC3339 or Unix timestamp).")
@click.option("--step", default=DEFAULT_STEP, show_default=True, metavar="DUR", help="Step size.")
@click.option("--timeout", metavar="DUR", help="Server-side query timeout (e.g. 30s).")
@result_option
@pretty_option
@click.pass_context
def range_(ctx, expr, start, end, step, timeout, result, pretty):
    """Range query."""
    _execute(
        ctx,
        RangeQuery(expr, start=start, end=end, step=step, timeout=timeout),
        lambda data: render_data(data, pretty=pretty, result_only=result),
    )


@cli.command()
@click.argument("label")
@click.option("--match", "matches", multiple=True, metavar="SELECTOR", help="Series selector (repeatable).")
@lines_option
@pretty_option
@click.pass_context
def labels(ctx, label, matches, lines, pretty):
    """List values of a label."""
    _execute(ctx, LabelValues(label, tuple(matches)), _list_renderer(lines, pretty))


@cli.command()
@lines_option
@pretty_option
@click.pass_context
def jobs(ctx, lines, pretty):
    """List job label values."""
    _execute(ctx, Jobs(), _list_renderer(lines, pretty))


@cli.command()
@click.option("--filter", "filter_", metavar="SUBSTR", help="Case-insensitive substring filter.")
@lines_option
@pretty_option
@click.pass_context
def metrics(ctx, filter_, lines, pretty):
    """List metric names."""
    render = _list_renderer(lines, pretty)
    if filter_:
        _execute(ctx, Metrics(filter_), lambda data: render(filter_values(data, filter_)))
    else:
        _execute(ctx, Metrics(), render)


@cli.command()
@click.option(
    "--match", "matches", multiple=True, required=True, metavar="SELECTOR",
    help="Series selector (repeatable).",
)
@click.option("--start", required=True, metavar="TS", help="Range start (RFC3339 or Unix timestamp).")
@click.option("--end", required=True, metavar="TS", help="Range end (RFC3339 or Unix timestamp).")
@lines_option
@pretty_option
@click.pass_context
def series(ctx, matches, start, end, lines, pretty):
    """Find series matching selector(s)."""
    _execute(ctx, Series(tuple(matches), start=start, end=end), _list_renderer(lines, pretty))


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    cli(obj={})


if __name__ == "__main__":
    main()
