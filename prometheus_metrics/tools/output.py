"""Render decoded API responses for stdout."""

import json
from typing import Any

from prometheus_metrics.errors import FormatError


def render_json(value: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def extract_result(data: Any) -> Any:
    """Return ``data.result`` from a query or range response."""
    if not isinstance(data, dict) or "result" not in data:
        raise FormatError("--result requested but the response has no data.result")
    return data["result"]


def render_data(data: Any, pretty: bool = False, result_only: bool = False) -> str:
    """Render ``data``, or only ``data.result`` when result_only is set."""
    if result_only:
        data = extract_result(data)
    return render_json(data, pretty)


def format_series(labels: dict) -> str:
    """Format a label set as a series identifier: name{label="value",...}."""
    name = labels.get("__name__", "")
    label_str = ",".join(
        f"{k}={json.dumps(str(v), ensure_ascii=False)}" for k, v in labels.items() if k != "__name__"
    )
    if label_str or not name:
        return f"{name}{{{label_str}}}"
    return name


def _line(item: Any) -> str:
    # Empty or multi-line strings are quoted so each element stays on one line
    if isinstance(item, str) and item and "\n" not in item and "\r" not in item:
        return item
    if isinstance(item, dict):
        return format_series(item)
    return render_json(item)


def render_lines(data: Any) -> str:
    """Render a list response as one value per line, in server order.

    Label values print as-is, series label sets as series identifiers and
    anything else as compact JSON. Empty or multi-line strings are printed
    JSON-quoted.
    """
    if not isinstance(data, list):
        raise FormatError("expected an array response for lines output")
    return "\n".join(_line(item) for item in data)


def filter_values(data: Any, substring: str) -> list:
    """Keep the string entries containing substring, case-insensitively."""
    if not isinstance(data, list):
        raise FormatError("expected an array response to filter")
    needle = substring.lower()
    return [item for item in data if isinstance(item, str) and needle in item.lower()]
