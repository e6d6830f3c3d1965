"""Frame composition and painting.

``compose_frame`` builds the base screen lines plus an optional modal overlay
from controller state; ``frame_to_ansi``/``paint`` turn a frame into a single
terminal write.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..ansi import display_width, fit_ansi_line
from ..controller import ExplorerController, Focus, Mode, Page
from ..ui_theme import UITheme
from .banner import BANNER_HEIGHT, BannerInfo, banner_lines
from .main_view import content_lines, search_lines, tabs_line
from .modals import confirm_box, error_box, form_box, material_box


@dataclass(frozen=True)
class Overlay:
    x: int
    y: int
    lines: list[str]


@dataclass(frozen=True)
class Frame:
    lines: list[str]
    overlay: Overlay | None = None


def _centered(lines: list[str], width: int, height: int) -> Overlay:
    box_w = max((display_width(line) for line in lines), default=0)
    x = max(0, (width - box_w) // 2)
    y = max(0, (height - len(lines)) // 2)
    return Overlay(x=x, y=y, lines=lines[:height])


def _overlay_for(controller: ExplorerController, width: int, height: int, theme: UITheme) -> Overlay | None:
    page = controller.active_page
    if page is Page.ERROR:
        return _centered(error_box(controller.error_message, width, theme), width, height)
    if page is Page.CONFIRM and controller.confirm is not None:
        return _centered(confirm_box(controller.confirm, width, theme), width, height)
    if page is Page.KEY_MATERIAL:
        return _centered(material_box(controller.key_material, width, height, theme), width, height)
    form = {
        Page.CREATE: controller.create_form,
        Page.REGISTER: controller.register_form,
        Page.REVOKE: controller.revoke_form,
        Page.REKEY: controller.rekey_form,
    }.get(page)
    if form is not None:
        return _centered(form_box(form.form, width, theme), width, height)
    return None


def compose_frame(
    controller: ExplorerController,
    info: BannerInfo,
    width: int,
    height: int,
    theme: UITheme,
) -> Frame:
    """Build the full screen for the current controller state."""
    width = max(20, width)
    height = max(BANNER_HEIGHT + 6, height)
    lines = banner_lines(info, width, theme)
    lines.append(tabs_line(controller.type_filter, width, theme))
    directory = controller.directory
    search_focused = controller.focus is Focus.SEARCH
    if search_focused or directory.query:
        lines.extend(search_lines(directory.query, width, theme, search_focused))

    content_h = height - len(lines)
    controller.table_height = max(1, content_h - 3)
    lines.extend(
        content_lines(
            directory,
            width,
            content_h,
            theme,
            table_focused=controller.focus is Focus.TABLE and controller.active_page is Page.MAIN,
            attributes_focused=controller.focus is Focus.ATTRIBUTES,
            attributes_scroll=controller.attributes_scroll,
            loading=controller.mode is Mode.LOADING,
        )
    )
    lines = [fit_ansi_line(line, width) for line in lines[:height]]
    return Frame(lines=lines, overlay=_overlay_for(controller, width, height, theme))


def frame_to_ansi(frame: Frame) -> str:
    out: list[str] = ["\033[H"]
    for row, line in enumerate(frame.lines):
        out.append(f"\033[{row + 1};1H{line}\033[0m")
    if frame.overlay is not None:
        overlay = frame.overlay
        for offset, line in enumerate(overlay.lines):
            out.append(f"\033[{overlay.y + offset + 1};{overlay.x + 1}H{line}\033[0m")
    return "".join(out)


def paint(frame: Frame, stdout_fd: int) -> None:
    os.write(stdout_fd, frame_to_ansi(frame).encode("utf-8", errors="replace"))


__all__ = ["BannerInfo", "Frame", "Overlay", "compose_frame", "frame_to_ansi", "paint"]
