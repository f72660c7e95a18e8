"""Shared types and helpers for HTML post-processing passes."""

from __future__ import annotations

import dataclasses as dc
import functools
import html
import re
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
_TAG_PATTERN = re.compile(r"<[^>]*>")


@dc.dataclass(frozen=True, slots=True)
class PostProcessContext:
    """Per-page data available to every pass."""

    source_url: str


class HtmlPass(typ.Protocol):
    """A named transform over a whole rendered HTML document."""

    name: str

    def apply(self, html_text: str, context: PostProcessContext) -> str:
        """Return ``html_text`` with this pass's replacements applied."""
        ...


def decode_entities(text: str) -> str:
    """Decode named and numeric HTML character references."""
    return html.unescape(text)


def strip_tags(text: str) -> str:
    """Return the trimmed text content of an HTML fragment."""
    return decode_entities(_TAG_PATTERN.sub("", text)).strip()


@functools.cache
def template_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Return the Jinja environment used to render styled blocks."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def render_template(name: str, **context: object) -> str:
    """Render ``name`` from the package templates and trim surrounding space."""
    return template_environment().get_template(name).render(**context).strip()


__all__ = [
    "TEMPLATES_DIR",
    "HtmlPass",
    "PostProcessContext",
    "decode_entities",
    "render_template",
    "strip_tags",
    "template_environment",
]
