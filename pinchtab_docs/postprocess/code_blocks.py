"""Classify ``<pre><code>`` blocks and restyle them by kind.

Classification runs on the decoded code text, in priority order:

1. ASCII diagrams (enough box-drawing or arrow glyphs over four or more lines,
   and no line that starts like a shell command);
2. shell snippets (``bash``, ``sh``, ``zsh``, ``shell``, ``console``);
3. JSON (``json``, ``jsonc``, ``geojson``), pretty-printed when it parses;
4. anything else, which is left untouched.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import re

from .._jsonfmt import format_json
from .base import PostProcessContext, decode_entities, render_template

CODE_BLOCK_PATTERN = re.compile(
    r"<pre([^>]*)>\s*<code([^>]*)>(.*?)</code>\s*</pre>", re.IGNORECASE | re.DOTALL
)
LANGUAGE_CLASS_PATTERN = re.compile(r"\blanguage-([a-z0-9_-]+)", re.IGNORECASE)
DATA_LANGUAGE_PATTERN = re.compile(
    r"\bdata-language=[\"']?([a-z0-9_-]+)[\"']?", re.IGNORECASE
)
SHELL_LANGUAGES = frozenset({"bash", "sh", "zsh", "shell", "console"})
JSON_LANGUAGES = frozenset({"json", "jsonc", "geojson"})
SHELL_COMMANDS = (
    "curl", "npm", "pnpm", "bun", "node", "go", "git", "docker", "kubectl",
    "python", "pip", "cd", "ls", "cp", "mv", "rm", "cat", "echo", "export", "sudo",
)  # fmt: skip
COMMAND_LINE_PATTERN = re.compile(
    rf"^\s*(?:{'|'.join(SHELL_COMMANDS)})\b", re.IGNORECASE
)
BOX_CHARS = "┌┐└┘├┤┬┴┼│─═╔╗╚╝║"
ARROW_CHARS = "↓↑←→"
CONNECTOR_CHARS = frozenset(BOX_CHARS + ARROW_CHARS + "┆┄┈┉┊┋╭╮╯╰")
JSON_TOKEN_PATTERN = re.compile(
    r'"(?:\\.|[^"\\])*"|-?\d+(?:\.\d+)?(?:[eE][+\-]?\d+)?|\btrue\b|\bfalse\b|\bnull\b'
)
_KEY_FOLLOWS = re.compile(r"\s*:")

TERMINAL_LINE_CLASSES = {
    "comment": "text-brand-text-dim",
    "command": "text-brand-accent",
}
JSON_TOKEN_CLASSES = {
    "key": "text-brand-accent-light",
    "string": "text-brand-green",
    "boolean": "text-brand-blue",
    "null": "text-brand-red",
    "number": "text-brand-accent",
}


class CodeBlockKind(enum.Enum):
    """Rendering strategy chosen for a code block."""

    DIAGRAM = "diagram"
    SHELL = "shell"
    JSON = "json"
    PLAIN = "plain"


@dc.dataclass(frozen=True, slots=True)
class TerminalLine:
    """One line of a shell snippet and its role."""

    text: str
    role: str

    @property
    def is_comment(self) -> bool:
        return self.role == "comment"

    @property
    def css_class(self) -> str:
        return TERMINAL_LINE_CLASSES[self.role]


@dc.dataclass(frozen=True, slots=True)
class JsonToken:
    """Slice of JSON text tagged with its lexical kind."""

    text: str
    kind: str

    @property
    def css_class(self) -> str | None:
        return JSON_TOKEN_CLASSES.get(self.kind)


@dc.dataclass(frozen=True, slots=True)
class DiagramGlyph:
    """Single character of a diagram line."""

    char: str
    kind: str


def extract_code_language(pre_attrs: str, code_attrs: str) -> str | None:
    """Return the lowercase language tag from ``language-*`` or ``data-language``."""
    attrs = f"{code_attrs} {pre_attrs}"
    match = LANGUAGE_CLASS_PATTERN.search(attrs) or DATA_LANGUAGE_PATTERN.search(attrs)
    return match.group(1).lower() if match else None


def _normalize_newlines(code: str) -> str:
    return code.replace("\r\n", "\n")


def looks_like_ascii_diagram(code: str) -> bool:
    """Return whether ``code`` reads as a box-and-arrow diagram."""
    normalized = _normalize_newlines(code).strip()
    lines = normalized.split("\n")
    if len(lines) < 4:
        return False
    box_count = sum(1 for char in normalized if char in BOX_CHARS)
    arrow_count = sum(1 for char in normalized if char in ARROW_CHARS)
    if any(COMMAND_LINE_PATTERN.match(line) for line in lines):
        return False
    return box_count >= 6 or arrow_count >= 2


def classify_code_block(code: str, language: str | None) -> CodeBlockKind:
    """Return the rendering strategy for decoded ``code``.

    Examples
    --------
    >>> classify_code_block("# list\\nls -la", "bash")
    <CodeBlockKind.SHELL: 'shell'>
    >>> classify_code_block("print(1)", "python")
    <CodeBlockKind.PLAIN: 'plain'>
    """
    if looks_like_ascii_diagram(code):
        return CodeBlockKind.DIAGRAM
    if language in SHELL_LANGUAGES:
        return CodeBlockKind.SHELL
    if language in JSON_LANGUAGES:
        return CodeBlockKind.JSON
    return CodeBlockKind.PLAIN


def terminal_lines(code: str) -> list[TerminalLine]:
    """Split a shell snippet into comment and command lines."""
    normalized = _normalize_newlines(code).rstrip()
    return [
        TerminalLine(
            text=line, role="comment" if line.strip().startswith("#") else "command"
        )
        for line in normalized.split("\n")
    ]


def tokenize_json(text: str) -> list[JsonToken]:
    """Split JSON-ish text into highlighted tokens and plain gaps.

    A string immediately followed by a colon is a ``key``; other strings are
    values.

    Examples
    --------
    >>> [token.kind for token in tokenize_json('{"a": null}')]
    ['plain', 'key', 'plain', 'null', 'plain']
    """
    tokens: list[JsonToken] = []
    cursor = 0
    for match in JSON_TOKEN_PATTERN.finditer(text):
        if match.start() > cursor:
            tokens.append(JsonToken(text[cursor : match.start()], "plain"))
        value = match.group(0)
        if value.startswith('"'):
            kind = "key" if _KEY_FOLLOWS.match(text, match.end()) else "string"
        elif value in {"true", "false"}:
            kind = "boolean"
        elif value == "null":
            kind = "null"
        else:
            kind = "number"
        tokens.append(JsonToken(value, kind))
        cursor = match.end()
    if cursor < len(text):
        tokens.append(JsonToken(text[cursor:], "plain"))
    return tokens


def pretty_json(code: str) -> str:
    """Return indented JSON, or the trimmed input when it does not parse."""
    normalized = _normalize_newlines(code).strip()
    formatted = format_json(normalized)
    return normalized if formatted is None else formatted


def diagram_lines(code: str) -> list[list[DiagramGlyph]]:
    """Split a diagram into lines of classified glyphs; blank lines are empty."""
    normalized = _normalize_newlines(code).rstrip()
    lines: list[list[DiagramGlyph]] = []
    for line in normalized.split("\n"):
        if not line.strip():
            lines.append([])
            continue
        lines.append(
            [
                DiagramGlyph(
                    char=char,
                    kind="space"
                    if char == " "
                    else "connector"
                    if char in CONNECTOR_CHARS
                    else "text",
                )
                for char in line
            ]
        )
    return lines


def render_terminal(code: str, language: str | None = None) -> str:
    return render_template(
        "code_terminal.jinja",
        lines=terminal_lines(code),
        language=language or "bash",
    )


def render_json(code: str) -> str:
    return render_template("code_json.jinja", tokens=tokenize_json(pretty_json(code)))


def render_diagram(code: str) -> str:
    return render_template("code_diagram.jinja", lines=diagram_lines(code))


class CodeBlockPass:
    """Replace recognised code blocks with terminal, JSON, or diagram markup."""

    name = "code-blocks"

    def apply(self, html_text: str, context: PostProcessContext) -> str:
        """Restyle every ``<pre><code>`` block in ``html_text``."""

        def _replace(block: re.Match[str]) -> str:
            pre_attrs, code_attrs, inner = block.groups()
            language = extract_code_language(pre_attrs, code_attrs)
            code = decode_entities(inner)
            match classify_code_block(code, language):
                case CodeBlockKind.DIAGRAM:
                    return render_diagram(code)
                case CodeBlockKind.SHELL:
                    return render_terminal(code, language)
                case CodeBlockKind.JSON:
                    return render_json(code)
                case _:
                    return block.group(0)

        return CODE_BLOCK_PATTERN.sub(_replace, html_text)


__all__ = [
    "CODE_BLOCK_PATTERN",
    "CodeBlockKind",
    "CodeBlockPass",
    "DiagramGlyph",
    "JsonToken",
    "TerminalLine",
    "classify_code_block",
    "diagram_lines",
    "extract_code_language",
    "looks_like_ascii_diagram",
    "pretty_json",
    "terminal_lines",
    "tokenize_json",
]
