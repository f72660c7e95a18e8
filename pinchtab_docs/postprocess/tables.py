"""Restyle Markdown tables, with badge rendering for API endpoint tables."""

from __future__ import annotations

import dataclasses as dc
import re

from .base import PostProcessContext, decode_entities, render_template, strip_tags

TABLE_PATTERN = re.compile(
    r"<table\b[^>]*>\s*<thead>(.*?)</thead>\s*<tbody>(.*?)</tbody>\s*</table>",
    re.IGNORECASE | re.DOTALL,
)
HEADER_CELL_PATTERN = re.compile(r"<th\b[^>]*>(.*?)</th>", re.IGNORECASE | re.DOTALL)
ROW_PATTERN = re.compile(r"<tr\b[^>]*>(.*?)</tr>", re.IGNORECASE | re.DOTALL)
DATA_CELL_PATTERN = re.compile(r"<td\b[^>]*>(.*?)</td>", re.IGNORECASE | re.DOTALL)
HREF_PATTERN = re.compile(r'href="([^"]+)"', re.IGNORECASE)

METHOD_TONES = {
    "GET": "green",
    "POST": "accent",
    "PUT": "blue",
    "PATCH": "blue",
    "DELETE": "red",
}
TONE_CLASSES = {
    "green": "border border-brand-green/35 bg-brand-green/15 text-brand-green",
    "accent": (
        "border border-brand-border bg-brand-accent-glow-bright text-brand-accent-light"
    ),
    "blue": "border border-brand-blue/35 bg-brand-blue/12 text-brand-blue",
    "red": "border border-brand-red/35 bg-brand-red/12 text-brand-red",
    "neutral": "border border-brand-border-subtle/30 bg-white/5 text-brand-text-muted",
}
TRUE_FLAGS = frozenset({"✓", "YES", "TRUE"})
FALSE_FLAGS = frozenset({"X"})


def method_badge_tone(method: str) -> str:
    """Return the colour tone for an HTTP verb badge.

    Examples
    --------
    >>> method_badge_tone("get"), method_badge_tone("OPTIONS")
    ('green', 'neutral')
    """
    return METHOD_TONES.get(method.upper(), "neutral")


def is_api_table(headers: list[str]) -> bool:
    """Return whether the header row reads ``Method | Endpoint/Path | ...``."""
    if len(headers) < 2:
        return False
    first, second = headers[0].lower(), headers[1].lower()
    return "method" in first and re.search(r"endpoint|path", second) is not None


@dc.dataclass(frozen=True, slots=True)
class TableCell:
    """Cell content tagged with how the template should draw it.

    ``kind`` is ``"raw"`` (original HTML), ``"method"`` (verb badge),
    ``"endpoint"`` (code chip, linked when ``href`` is set) or ``"flag"``
    (check/cross chip driven by ``value``).
    """

    kind: str
    html: str = ""
    text: str = ""
    href: str | None = None
    tone: str = "neutral"
    value: bool = False

    @property
    def badge_class(self) -> str:
        return TONE_CLASSES[self.tone]


def classify_cell(raw_html: str, index: int, *, api_table: bool) -> TableCell:
    """Return the display form of the ``index``-th cell of a body row."""
    content = raw_html.strip()
    if not api_table:
        return TableCell(kind="raw", html=content)
    if index == 0:
        method = strip_tags(content).upper()
        return TableCell(kind="method", text=method, tone=method_badge_tone(method))
    if index == 1:
        endpoint = strip_tags(content)
        if not endpoint:
            return TableCell(kind="raw", html=content)
        href_match = HREF_PATTERN.search(content)
        href = decode_entities(href_match.group(1)) if href_match else None
        return TableCell(kind="endpoint", text=endpoint, href=href)
    if index == 2:
        flag = strip_tags(content).upper()
        if flag in FALSE_FLAGS:
            return TableCell(kind="flag", value=False)
        if flag in TRUE_FLAGS:
            return TableCell(kind="flag", value=True)
    return TableCell(kind="raw", html=content)


class TablePass:
    """Wrap tables in styled markup and badge API endpoint columns."""

    name = "tables"

    def apply(self, html_text: str, context: PostProcessContext) -> str:
        """Restyle every ``<table>`` with a ``<thead>`` and ``<tbody>``."""

        def _replace(table: re.Match[str]) -> str:
            thead, tbody = table.groups()
            raw_headers = [cell.strip() for cell in HEADER_CELL_PATTERN.findall(thead)]
            api_table = is_api_table([strip_tags(cell) for cell in raw_headers])
            rows = [
                [
                    classify_cell(cell, index, api_table=api_table)
                    for index, cell in enumerate(DATA_CELL_PATTERN.findall(row))
                ]
                for row in ROW_PATTERN.findall(tbody)
            ]
            return render_template(
                "table.jinja", headers=raw_headers, rows=rows, api_table=api_table
            )

        return TABLE_PATTERN.sub(_replace, html_text)


__all__ = [
    "TableCell",
    "TablePass",
    "classify_cell",
    "is_api_table",
    "method_badge_tone",
]
