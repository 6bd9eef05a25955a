"""Shared fixtures: a recording httpx transport and CLI runner."""

import json

import httpx
import pytest
from click.testing import CliRunner

PROMQL_ENV = (
    "PROMQL_BASE_URL",
    "PROMQL_AUTH",
    "PROMQL_USER",
    "PROMQL_PASS",
    "PROMQL_BEARER",
    "PROMQL_TIMEOUT",
)


class FakeApi:
    """Serves one canned response and records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = json.dumps({"status": "success", "data": []})
        self.exc: Exception | None = None

    def respond(self, payload, status_code: int = 200):
        self.body = payload if isinstance(payload, str) else json.dumps(payload)
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in PROMQL_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def run(api):
    """Invoke the CLI against the fake API with a base URL in the environment."""
    from prometheus_metrics.cli import cli

    runner = CliRunner()

    def _run(*args, env=None):
        environ = {"PROMQL_BASE_URL": "https://x"}
        environ.update(env or {})
        return runner.invoke(cli, list(args), env=environ, obj={"transport": api.transport})

    return _run
