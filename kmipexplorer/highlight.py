"""Terminal highlighting for structured dumps.

Pygments lexers/formatters are built lazily and cached per style; terminal
control bytes in server-provided text are neutralized before display.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_JSON_LEXER: JsonLexer | None = None


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes (bell, cursor moves, ...) as ``\\xNN``."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_json(source: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Return ``source`` with ANSI colors for JSON tokens."""
    global _JSON_LEXER

    source = sanitize_terminal_text(source)
    if no_color:
        return source
    if _JSON_LEXER is None:
        _JSON_LEXER = JsonLexer()
    rendered = pygments_highlight(source, _JSON_LEXER, _formatter_for_style(_normalize_style(style)))
    return rendered.rstrip("\n") if not source.endswith("\n") else rendered


__all__ = ["DEFAULT_STYLE", "highlight_json", "sanitize_terminal_text"]
