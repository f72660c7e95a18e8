"""Render normalized Markdown into HTML plus a heading outline.

No syntax highlighting happens at this layer: fenced blocks come
out as plain ``<pre><code class="language-xxx">`` so the post-processor can
restyle them. A single :class:`MarkdownRenderer` is shared process-wide via
:func:`get_markdown_renderer`.
"""

from __future__ import annotations

import dataclasses as dc
import html
import re
import threading
import typing as typ

from markdown import Markdown

from ._once import Once
from .models import DocsPageHeading
from .registry import title_case

if typ.TYPE_CHECKING:
    import collections.abc as cabc

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
H1_PATTERN = re.compile(r"^\s*#\s+(.+)\s*$", re.MULTILINE)
_INLINE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
)


def heading_slug(value: str, separator: str = "-") -> str:
    """Return a GitHub-style anchor for heading text."""
    cleaned = re.sub(r"[^\w\- ]", "", value.strip().lower())
    return cleaned.replace(" ", separator)


def strip_inline_markdown(text: str) -> str:
    """Remove inline code, link, and emphasis markup from ``text``."""
    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def title_from_markdown(markdown: str, source_path: str) -> str:
    """Return the first level-one heading, or a title built from the filename.

    Examples
    --------
    >>> title_from_markdown("# The `pinchtab` **CLI**\\nBody", "cli.md")
    'The pinchtab CLI'
    >>> title_from_markdown("No heading", "guides/README.md")
    'Home'
    >>> title_from_markdown("", "guides/multi_tab-setup.md")
    'Multi Tab Setup'
    """
    match = H1_PATTERN.search(markdown)
    if match:
        heading = strip_inline_markdown(match.group(1))
        if heading:
            return heading
    filename = source_path.rsplit("/", 1)[-1] or source_path
    stem = re.sub(r"\.[^.]+$", "", filename)
    fallback = "Home" if stem.lower() == "readme" else stem
    return title_case(re.sub(r"[-_]+", " ", fallback).strip())


@dc.dataclass(frozen=True, slots=True)
class RenderedMarkdown:
    """HTML body and heading outline of one document."""

    html: str
    headings: list[DocsPageHeading]


def _flatten_toc(tokens: cabc.Iterable[dict[str, typ.Any]]) -> list[DocsPageHeading]:
    headings: list[DocsPageHeading] = []
    for token in tokens:
        headings.append(
            DocsPageHeading(
                depth=int(token["level"]),
                slug=str(token["id"]),
                text=html.unescape(str(token["name"])),
            )
        )
        headings.extend(_flatten_toc(token.get("children", [])))
    return headings


class MarkdownRenderer:
    """Reusable Markdown processor producing HTML and heading outlines."""

    def __init__(self) -> None:
        self._md = Markdown(
            extensions=["fenced_code", "tables", "sane_lists", "toc"],
            extension_configs={
                "toc": {"slugify": heading_slug, "permalink": False},
            },
            output_format="html",
        )
        self._lock = threading.Lock()

    def render(self, text: str) -> RenderedMarkdown:
        """Convert ``text`` into HTML and collect its headings."""
        normalized = self._normalize_fenced_blocks(text)
        with self._lock:
            self._md.reset()
            body = self._md.convert(normalized)
            tokens = list(getattr(self._md, "toc_tokens", []))
        return RenderedMarkdown(html=body, headings=_flatten_toc(tokens))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Dedent fences and drop ``lang,extra`` fence attributes."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


_RENDERER: Once[MarkdownRenderer] = Once(MarkdownRenderer)


def get_markdown_renderer() -> MarkdownRenderer:
    """Return the process-wide renderer, constructing it on first use."""
    return _RENDERER.get()


__all__ = [
    "MarkdownRenderer",
    "RenderedMarkdown",
    "get_markdown_renderer",
    "heading_slug",
    "strip_inline_markdown",
    "title_from_markdown",
]
