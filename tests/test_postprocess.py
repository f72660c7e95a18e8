"""Tests for the code-block, table, and image HTML passes."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from pinchtab_docs.postprocess import (
    CodeBlockKind,
    HtmlPostProcessor,
    PostProcessContext,
    classify_code_block,
)
from pinchtab_docs.postprocess.code_blocks import (
    CodeBlockPass,
    pretty_json,
    tokenize_json,
)
from pinchtab_docs.postprocess.images import ImagePass, resolve_asset_url
from pinchtab_docs.postprocess.tables import TablePass, is_api_table, method_badge_tone
from pinchtab_docs.renderer import MarkdownRenderer

SOURCE_URL = "https://raw.example/acme/widgets/main/docs/guides/setup.md"
CONTEXT = PostProcessContext(source_url=SOURCE_URL)
DIAGRAM = "\n".join(
    [
        "┌────────┐     ┌────────┐",
        "│ Client │ ──→ │ Server │",
        "└────────┘     └────────┘",
        "      ↓",
        "   Browser",
    ]
)


def _soup(html_text: str) -> BeautifulSoup:
    return BeautifulSoup(html_text, "html.parser")


def _render(markdown: str) -> str:
    return MarkdownRenderer().render(markdown).html


def test_shell_block_tags_comment_and_command_lines() -> None:
    """A bash fence renders as a terminal with distinct comment/command roles."""
    html_text = CodeBlockPass().apply(
        _render("```bash\n# comment\ncurl http://x\n```\n"), CONTEXT
    )
    soup = _soup(html_text)
    assert soup.select_one("[data-docs-terminal]") is not None, html_text
    lines = soup.select("[data-code-line]")
    roles = [(line.get_text(), line["data-is-comment"]) for line in lines]
    assert roles == [("# comment", "true"), ("curl http://x", "false")], roles
    assert lines[0]["class"] != lines[1]["class"], "roles must be styled differently"


def test_box_drawing_block_classifies_as_diagram() -> None:
    """Box-drawing art without shell commands is a diagram, whatever the fence."""
    assert classify_code_block(DIAGRAM, None) is CodeBlockKind.DIAGRAM
    assert classify_code_block(DIAGRAM, "bash") is CodeBlockKind.DIAGRAM


def test_diagram_with_shell_command_is_not_a_diagram() -> None:
    """A command-looking line vetoes diagram classification."""
    code = DIAGRAM + "\ncurl http://localhost"
    assert classify_code_block(code, "bash") is CodeBlockKind.SHELL


def test_short_block_is_never_a_diagram() -> None:
    """Fewer than four lines cannot be a diagram."""
    assert classify_code_block("┌──┐\n└──┘", None) is CodeBlockKind.PLAIN


def test_diagram_render_marks_connectors_and_spacers() -> None:
    """Connector glyphs, text glyphs, and blank lines get distinct markup."""
    html_text = CodeBlockPass().apply(
        _render(f"```\n{DIAGRAM}\n\nLegend\n```\n"), CONTEXT
    )
    soup = _soup(html_text)
    figure = soup.select_one("figure[data-docs-diagram]")
    assert figure is not None, html_text
    assert figure.select("[data-glyph='connector']"), "expected connector glyphs"
    text = "".join(node.get_text() for node in figure.select("[data-glyph='text']"))
    assert "Client" in text
    assert figure.select("[data-diagram-spacer]"), "blank line renders as spacer"


def test_json_block_is_pretty_printed_and_highlighted() -> None:
    """JSON fences are re-indented and tokens carry kind-specific styling."""
    html_text = CodeBlockPass().apply(
        _render('```json\n{"ok":true,"id":7,"name":"tab","err":null}\n```\n'),
        CONTEXT,
    )
    soup = _soup(html_text)
    code = soup.select_one("[data-docs-json] code")
    assert code is not None, html_text
    assert code.get_text() == (
        '{\n  "ok": true,\n  "id": 7,\n  "name": "tab",\n  "err": null\n}'
    )
    kinds = {
        span["data-json-token"]: span.get_text() for span in code.select("span")
    }
    assert kinds["boolean"] == "true"
    assert kinds["number"] == "7"
    assert kinds["string"] == '"tab"'
    assert kinds["null"] == "null"
    keys = [span.get_text() for span in code.select("[data-json-token='key']")]
    assert keys == ['"ok"', '"id"', '"name"', '"err"'], keys


def test_invalid_json_keeps_original_text() -> None:
    """Non-strict JSON is highlighted as-is instead of failing."""
    tokens = tokenize_json('{a: "b"} // note')
    assert "".join(token.text for token in tokens) == '{a: "b"} // note'
    assert [t.kind for t in tokens if t.kind != "plain"] == ["string"]


def test_pretty_json_matches_browser_number_output() -> None:
    """Whole-number floats print as integers; NaN is not JSON and stays raw."""
    assert pretty_json("[1.0, 2.50, -0.0]") == "[\n  1,\n  2.5,\n  0\n]"
    assert pretty_json(" [NaN] ") == "[NaN]"


def test_unknown_language_is_left_untouched() -> None:
    """Blocks matching no rule pass through byte-for-byte."""
    original = _render("```python\nprint('hi')\n```\n")
    assert CodeBlockPass().apply(original, CONTEXT) == original


def test_api_table_renders_badges_links_and_chips() -> None:
    """Method | Path | CLI tables get verb badges, endpoint chips, and checks."""
    html_text = TablePass().apply(
        _render(
            "| Method | Path | CLI |\n| --- | --- | --- |\n"
            "| GET | [/health](#health) | ✓ |\n"
            "| DELETE | /tabs | X |\n"
        ),
        CONTEXT,
    )
    soup = _soup(html_text)
    badges = soup.select("[data-method-badge]")
    assert [badge["data-method-badge"] for badge in badges] == ["green", "red"]
    assert "text-brand-green" in badges[0]["class"]
    link = soup.select_one("a[href='#health'] code[data-endpoint]")
    assert link is not None and link.get_text() == "/health", html_text
    plain = soup.select("code[data-endpoint]")[1]
    assert plain.find_parent("a") is None, "endpoint without a link stays unlinked"
    flags = [flag["data-flag"] for flag in soup.select("[data-flag]")]
    assert flags == ["yes", "no"], flags


def test_plain_table_is_restyled_without_badges() -> None:
    """Non-API tables keep their cell HTML but gain styling."""
    html_text = TablePass().apply(
        _render("| Name | Value |\n| --- | --- |\n| **port** | 9867 |\n"), CONTEXT
    )
    soup = _soup(html_text)
    assert soup.select_one("[data-method-badge]") is None
    cell = soup.select_one("tbody td")
    assert cell is not None and cell.select_one("strong").get_text() == "port"
    assert "px-4" in cell["class"]
    assert soup.select_one("tbody tr")["class"][0] == "border-t"


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        (["Method", "Endpoint"], True),
        (["HTTP method", "Path", "Notes"], True),
        (["Path", "Method"], False),
        (["Method"], False),
    ],
)
def test_is_api_table(headers: list[str], expected: bool) -> None:
    assert is_api_table(headers) is expected


@pytest.mark.parametrize(
    ("method", "tone"),
    [("GET", "green"), ("POST", "accent"), ("PUT", "blue"), ("PATCH", "blue"),
     ("DELETE", "red"), ("HEAD", "neutral")],
)  # fmt: skip
def test_method_badge_tone(method: str, tone: str) -> None:
    assert method_badge_tone(method) == tone


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("../img/arch.png", "https://raw.example/acme/widgets/main/docs/img/arch.png"),
        ("shot.png", "https://raw.example/acme/widgets/main/docs/guides/shot.png"),
        ("/static/logo.png", "/static/logo.png"),
        ("#anchor", "#anchor"),
        ("https://cdn.example/x.png", "https://cdn.example/x.png"),
        ("//cdn.example/x.png", "//cdn.example/x.png"),
        ("data:image/png;base64,AAA", "data:image/png;base64,AAA"),
    ],
)
def test_resolve_asset_url(src: str, expected: str) -> None:
    """Only document-relative sources resolve against the source URL."""
    assert resolve_asset_url(src, SOURCE_URL) == expected


def test_image_pass_rewrites_relative_sources_in_place() -> None:
    """The src attribute is rewritten; other attributes stay."""
    html_text = ImagePass().apply(_render("![Arch](../img/arch.png)\n"), CONTEXT)
    img = _soup(html_text).select_one("img")
    assert img is not None
    assert img["src"] == "https://raw.example/acme/widgets/main/docs/img/arch.png"
    assert img["alt"] == "Arch"


def test_processor_runs_named_passes_in_order() -> None:
    """Passes run as code blocks, tables, then images."""
    processor = HtmlPostProcessor()
    assert [step.name for step in processor.passes] == [
        "code-blocks",
        "tables",
        "images",
    ]
    html_text = processor.process(
        _render("```sh\nls\n```\n\n![x](x.png)\n"), SOURCE_URL
    )
    soup = _soup(html_text)
    assert soup.select_one("[data-docs-terminal]") is not None
    assert soup.select_one("img")["src"].endswith("/docs/guides/x.png")
