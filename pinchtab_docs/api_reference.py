"""Synthesize Markdown documentation from the API-reference JSON schema.

The content repository describes its HTTP API as JSON rather than Markdown::

    {"endpoints": [{"method": "GET", "path": "/health", "cliExample": "..."}]}

:func:`build_api_reference_markdown` turns that document into a page with an
index table followed by per-group, per-path, per-method detail blocks.
Endpoints are sorted by path and then method, so the output does not depend on
the order of the source file. Malformed endpoint records are dropped; only a
malformed document as a whole is an error.
"""

from __future__ import annotations

import dataclasses as dc
import json
import re
import typing as typ

from ._jsonfmt import format_json
from .errors import MalformedReferenceError
from .registry import slugify, title_case

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(slots=True)
class ApiEndpoint:
    """One usable endpoint record from the reference document."""

    method: str
    path: str
    html: bool = False
    handler: str | None = None
    description: str | None = None
    tldr: str | None = None
    parameters: str | None = None
    payload: str | None = None
    curl: bool = False
    cli: bool = False
    curl_example: str | None = None
    cli_example: str | None = None
    examples: object = None

    @property
    def curl_snippet(self) -> str | None:
        """Return the curl example from ``curlExample`` or ``examples.curl``."""
        return self.curl_example or _example_from_map(self.examples, "curl")

    @property
    def cli_snippet(self) -> str | None:
        """Return the CLI example from ``cliExample`` or ``examples.cli``."""
        return self.cli_example or _example_from_map(self.examples, "cli")


def _non_empty(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _first_string(value: object) -> str | None:
    """Return ``value`` or the first non-empty string in a list."""
    if isinstance(value, str):
        return _non_empty(value)
    if isinstance(value, list):
        for entry in value:
            text = _non_empty(entry)
            if text:
                return text
    return None


def _example_from_map(examples: object, key: str) -> str | None:
    if isinstance(examples, dict):
        return _first_string(examples.get(key))
    return None


def parse_endpoint(entry: object) -> ApiEndpoint | None:
    """Return an :class:`ApiEndpoint` or ``None`` when the record is unusable.

    Examples
    --------
    >>> parse_endpoint({"method": " get ", "path": "/health "}).method
    'GET'
    >>> parse_endpoint({"method": "GET"}) is None
    True
    """
    if not isinstance(entry, dict):
        return None
    method = entry.get("method")
    path = entry.get("path")
    if not isinstance(method, str) or not isinstance(path, str):
        return None
    return ApiEndpoint(
        method=method.strip().upper(),
        path=path.strip(),
        html=bool(entry.get("html")),
        handler=_non_empty(entry.get("handler")),
        description=_non_empty(entry.get("description")),
        tldr=_non_empty(entry.get("tldr")),
        parameters=_non_empty(entry.get("parameters")),
        payload=_non_empty(entry.get("payload")),
        curl=bool(entry.get("curl")),
        cli=bool(entry.get("cli")),
        curl_example=_non_empty(entry.get("curlExample")),
        cli_example=_non_empty(entry.get("cliExample")),
        examples=entry.get("examples"),
    )


def load_endpoints(json_text: str, source_path: str) -> list[ApiEndpoint]:
    """Parse the reference document and return its well-formed endpoints.

    Raises
    ------
    MalformedReferenceError
        If the text is not JSON, not an object, or lacks an ``endpoints`` array.
    """
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {source_path}: {exc}"
        raise MalformedReferenceError(source_path, msg) from exc
    if not isinstance(parsed, dict):
        msg = f"Invalid API reference payload in {source_path}: expected JSON object"
        raise MalformedReferenceError(source_path, msg)
    raw_endpoints = parsed.get("endpoints")
    if not isinstance(raw_endpoints, list):
        msg = (
            f"Invalid API reference payload in {source_path}: "
            '"endpoints" must be an array'
        )
        raise MalformedReferenceError(source_path, msg)
    endpoints = (parse_endpoint(entry) for entry in raw_endpoints)
    return [endpoint for endpoint in endpoints if endpoint is not None]


def sort_endpoints(endpoints: cabc.Iterable[ApiEndpoint]) -> list[ApiEndpoint]:
    """Drop HTML-only endpoints and order the rest by path, then method."""
    visible = [endpoint for endpoint in endpoints if not endpoint.html]
    return sorted(visible, key=lambda endpoint: (endpoint.path, endpoint.method))


def path_anchor(path: str) -> str:
    """Return the base anchor for an endpoint path."""
    return slugify(path) or "root"


def assign_path_anchors(endpoints: cabc.Iterable[ApiEndpoint]) -> dict[str, str]:
    """Map each distinct path to a unique anchor, suffixing collisions."""
    used: set[str] = set()
    anchors: dict[str, str] = {}
    for endpoint in endpoints:
        if endpoint.path in anchors:
            continue
        base = path_anchor(endpoint.path)
        anchor = base
        suffix = 2
        while anchor in used:
            anchor = f"{base}-{suffix}"
            suffix += 1
        used.add(anchor)
        anchors[endpoint.path] = anchor
    return anchors


def path_group_label(path: str) -> str:
    """Return the display group for ``path`` from its first segment.

    Examples
    --------
    >>> path_group_label("/tabs/{tabId}/snapshot")
    'Tabs'
    >>> path_group_label("/")
    'Root'
    """
    first = path.lstrip("/").split("/")[0] or "root"
    clean = re.sub(r"[-_]+", " ", first.replace("{", "").replace("}", "")).strip()
    return title_case(clean) if clean else "Root"


def group_endpoints(
    endpoints: cabc.Iterable[ApiEndpoint],
) -> dict[str, dict[str, list[ApiEndpoint]]]:
    """Group sorted endpoints as ``{group_label: {path: [endpoints]}}``."""
    grouped: dict[str, dict[str, list[ApiEndpoint]]] = {}
    for endpoint in endpoints:
        paths = grouped.setdefault(path_group_label(endpoint.path), {})
        paths.setdefault(endpoint.path, []).append(endpoint)
    return grouped


def normalize_payload(payload: str | None) -> str | None:
    """Pretty-print a JSON payload, keeping the original text if it is not JSON."""
    if not payload:
        return None
    formatted = format_json(payload)
    return payload if formatted is None else formatted


def _fenced(label: str, language: str, body: str) -> list[str]:
    return [f"##### {label}", "", f"```{language}", body, "```", ""]


def _endpoint_block(endpoint: ApiEndpoint) -> list[str]:
    curl_example = endpoint.curl_snippet
    cli_example = endpoint.cli_snippet
    payload = normalize_payload(endpoint.payload)

    lines = [f"#### {endpoint.method}", ""]
    if endpoint.tldr:
        lines += [f"**TL;DR:** {endpoint.tldr}", ""]
    if endpoint.description and endpoint.description != endpoint.tldr:
        lines += [endpoint.description, ""]

    facts: list[str] = []
    if endpoint.handler:
        facts.append(f"- **Handler:** `{endpoint.handler}`")
    if endpoint.parameters:
        facts.append(f"- **Parameters:** {endpoint.parameters}")
    if endpoint.curl or curl_example:
        facts.append("- **curl:** supported")
    if cli_example:
        facts.append("- **CLI:** supported")
    if facts:
        lines += [*facts, ""]

    if payload:
        lines += _fenced("Payload", "json", payload)
    if curl_example:
        lines += _fenced("curl", "bash", curl_example)
    if cli_example:
        lines += _fenced("CLI", "bash", cli_example)
    return lines


def build_api_reference_markdown(json_text: str, source_path: str) -> str:
    """Render the API-reference JSON document as Markdown.

    Parameters
    ----------
    json_text : str
        Raw body of the reference document.
    source_path : str
        Normalized manifest path, quoted in the generated intro line and in
        error messages.

    Returns
    -------
    str
        Markdown containing a ``# API Reference`` title, an index table
        (method, linked path, CLI availability), and detail blocks grouped by
        the first path segment.

    Raises
    ------
    MalformedReferenceError
        If the document is not a JSON object with an ``endpoints`` array.
    """
    endpoints = sort_endpoints(load_endpoints(json_text, source_path))
    anchors = assign_path_anchors(endpoints)

    index_rows = [
        f"| {endpoint.method} | [{endpoint.path}](#{anchors[endpoint.path]}) "
        f"| {'✓' if endpoint.cli_snippet else 'X'} |"
        for endpoint in endpoints
    ]

    details: list[str] = []
    for group_label, paths in group_endpoints(endpoints).items():
        details += [f"## {group_label}", ""]
        for path, same_path in paths.items():
            details += [f"### {path}", "", f'<a id="{anchors[path]}"></a>', ""]
            for endpoint in same_path:
                details += _endpoint_block(endpoint)

    return "\n".join(
        [
            "# API Reference",
            "",
            f"Generated from `{source_path}` ({len(endpoints)} endpoints).",
            "",
            "## Index",
            "",
            "| Method | Path | CLI |",
            "| --- | --- | --- |",
            "\n".join(index_rows),
            "",
            "## Endpoint Details",
            "",
            "\n".join(details),
        ]
    )


__all__ = [
    "ApiEndpoint",
    "assign_path_anchors",
    "build_api_reference_markdown",
    "group_endpoints",
    "load_endpoints",
    "normalize_payload",
    "parse_endpoint",
    "path_anchor",
    "path_group_label",
    "sort_endpoints",
]
