"""Modal boxes: error, confirmation, forms and the key-material viewer."""

from __future__ import annotations

import textwrap

from ..ansi import display_width
from ..controller import CONFIRM_BUTTONS, ConfirmState
from ..forms.fields import Button, Checkbox, DropDown, InputField, TextArea
from ..forms.form import Form
from ..key_material import KeyMaterialViewer
from ..ui_theme import UITheme
from .boxes import box_lines


def _buttons_line(labels: list[tuple[str, bool, bool]], width: int, theme: UITheme) -> str:
    """Centered ``[ label ]`` buttons; each entry is ``(label, focused, enabled)``."""
    parts = []
    for label, focused, enabled in labels:
        text = f"[ {label} ]"
        if not enabled:
            parts.append(f"{theme.button_disabled}{text}{theme.reset}")
        elif focused:
            parts.append(f"{theme.button_focused}{text}{theme.reset}")
        else:
            parts.append(text)
    line = "  ".join(parts)
    pad = max(0, (width - display_width(line)) // 2)
    return " " * pad + line


def _wrap(text: str, width: int) -> list[str]:
    out: list[str] = []
    for paragraph in text.split("\n"):
        out.extend(textwrap.wrap(paragraph, max(1, width)) or [""])
    return out


def error_box(message: str, width: int, theme: UITheme) -> list[str]:
    box_w = min(width, max(30, min(70, len(message) + 8)))
    body = [""] + [f" {line}" for line in _wrap(message, box_w - 4)] + ["", _buttons_line([("OK", True, True)], box_w - 2, theme)]
    lines = box_lines("Error", body, box_w, len(body) + 2, theme, focused=True)
    return [f"{theme.error_box}{line}{theme.reset}" for line in lines]


def confirm_box(state: ConfirmState, width: int, theme: UITheme) -> list[str]:
    box_w = min(width, max(30, len(state.prompt.question) + 8))
    buttons = [(label, index == state.choice, True) for index, label in enumerate(CONFIRM_BUTTONS)]
    body = [""] + [f" {line}" for line in _wrap(state.prompt.question, box_w - 4)] + ["", _buttons_line(buttons, box_w - 2, theme)]
    return box_lines(state.prompt.title, body, box_w, len(body) + 2, theme, focused=True)


def _field_lines(item: InputField | Checkbox | DropDown, label_w: int, focused: bool, theme: UITheme) -> list[str]:
    marker = theme.button_focused if focused else ""
    label = f" {item.label.ljust(label_w)} "
    if isinstance(item, TextArea):
        content = item.lines()[-item.height:]
        if focused:
            content[-1] += "_"
        content += [""] * (item.height - len(content))
        indent = " " * len(label)
        return [f"{marker}{label}{theme.reset}{content[0]}"] + [indent + line for line in content[1:]]
    if isinstance(item, InputField):
        value = item.text + ("_" if focused else "")
    elif isinstance(item, Checkbox):
        value = "[x]" if item.checked else "[ ]"
    elif isinstance(item, DropDown):
        value = f"< {item.current} >" if item.current else f"{theme.dim}< select >{theme.reset}"
    else:
        value = ""
    return [f"{marker}{label}{theme.reset}{value}"]


def form_box(form: Form, width: int, theme: UITheme) -> list[str]:
    box_w = min(width, 72)
    focused = form.focused
    label_w = max((len(item.label) for item in form.fields), default=0)
    body: list[str] = [""]
    for item in form.fields:
        if isinstance(item, (InputField, Checkbox, DropDown)):
            body.extend(_field_lines(item, label_w, item is focused, theme))
    body.append("")
    buttons = [(button.label, button is focused, button.enabled) for button in form.buttons if isinstance(button, Button)]
    body.append(_buttons_line(buttons, box_w - 2, theme))
    return box_lines(form.title, body, box_w, len(body) + 2, theme, focused=True)


def material_box(viewer: KeyMaterialViewer, width: int, height: int, theme: UITheme) -> list[str]:
    box_w = max(20, width * 2 // 3)
    box_h = max(6, height * 5 // 6)
    lines = viewer.lines()[viewer.scroll:]
    if viewer.status:
        lines = [f"{theme.notice}{viewer.status}{theme.reset}", *lines]
    footer = "<c> Copy    <tab> Switch format"
    return box_lines("Material", lines, box_w, box_h, theme, focused=True, footer=footer)


__all__ = ["confirm_box", "error_box", "form_box", "material_box"]
