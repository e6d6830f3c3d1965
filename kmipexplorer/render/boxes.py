"""Rounded-border boxes shared by panes and modals."""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line
from ..ui_theme import UITheme


def box_lines(
    title: str,
    body: list[str],
    width: int,
    height: int,
    theme: UITheme,
    *,
    focused: bool = False,
    footer: str = "",
) -> list[str]:
    """Frame ``body`` in a ``width`` x ``height`` box with a title on the top edge."""
    width = max(4, width)
    height = max(2, height)
    inner_w = width - 2
    border = theme.border if focused else theme.dim
    reset = theme.reset

    label = f" {title} " if title else ""
    label_w = min(display_width(label), inner_w)
    top = f"{border}╭{reset}{theme.title}{fit_ansi_line(label, label_w)}{reset}{border}{'─' * (inner_w - label_w)}╮{reset}"

    out = [top]
    for row in range(height - 2):
        text = body[row] if row < len(body) else ""
        out.append(f"{border}│{reset}{fit_ansi_line(text, inner_w)}{reset}{border}│{reset}")

    foot = f" {footer} " if footer else ""
    foot_w = min(display_width(foot), max(0, inner_w - 2))
    bottom_fill = "─" * (inner_w - foot_w - min(2, inner_w - foot_w))
    lead = "─" * min(2, inner_w - foot_w)
    out.append(
        f"{border}╰{lead}{reset}{theme.banner_key}{fit_ansi_line(foot, foot_w)}{reset}{border}{bottom_fill}╯{reset}"
    )
    return out


def side_by_side(left: list[str], right: list[str]) -> list[str]:
    """Join two equally tall column blocks row by row."""
    rows = max(len(left), len(right))
    return [(left[i] if i < len(left) else "") + (right[i] if i < len(right) else "") for i in range(rows)]


__all__ = ["box_lines", "side_by_side"]
