"""Top banner: connection info, key-binding cheat sheet and logo."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import display_width, fit_ansi_line
from ..ui_theme import UITheme

LOGO: tuple[str, ...] = (
    r" _  _ __  __ ___ ____  ",
    r"| |/ |  \/  |_ _|  _ \ ",
    r"| ' /| |\/| || || |_) |",
    r"| . \| |  | || ||  __/ ",
    r"|_|\_|_|  |_|___|_|    ",
)
LOGO_WIDTH = 23

HELP_COLUMNS: tuple[tuple[tuple[str, str], ...], ...] = (
    (("<ctrl+r>", "Refresh"), ("<shift+c>", "Create key"), ("<shift+r>", "Register"), ("<space>", "Get content")),
    (("<a>", "Activate"), ("<r>", "Revoke"), ("<ctrl+d>", "Destroy"), ("<ctrl+t>", "Rekey")),
    (("<tab>", "Next page"), ("<shift+tab>", "Previous page"), ("<enter>", "Browse attributes"), ("<q>", "Quit")),
)

BANNER_HEIGHT = len(LOGO)


@dataclass(frozen=True)
class BannerInfo:
    server: str
    client_version: str
    kmip_version: str
    latest_version: str | None = None


def _info_rows(info: BannerInfo, theme: UITheme) -> list[str]:
    label = theme.banner_label
    reset = theme.reset
    rows = [
        f"{label}Server Name: {reset}{info.server}",
        f"{label}Client Version: {reset}{info.client_version}",
        f"{label}KMIP Version: {reset}{info.kmip_version}",
    ]
    if info.latest_version:
        rows.append(f"{theme.notice}New version available: {info.latest_version}{reset}")
    return rows


def _help_rows(theme: UITheme) -> list[str]:
    key_w = [max(len(key) for key, _ in column) for column in HELP_COLUMNS]
    desc_w = [max(len(desc) for _, desc in column) for column in HELP_COLUMNS]
    rows: list[str] = []
    for row in range(len(HELP_COLUMNS[0])):
        cells = []
        for index, column in enumerate(HELP_COLUMNS):
            key, desc = column[row]
            cells.append(f"{theme.banner_key}{key.ljust(key_w[index])}{theme.reset} {desc.ljust(desc_w[index])}")
        rows.append("  ".join(cells))
    return rows


def banner_lines(info: BannerInfo, width: int, theme: UITheme) -> list[str]:
    """Return ``BANNER_HEIGHT`` lines, dropping the logo and help on narrow terminals."""
    info_rows = _info_rows(info, theme)
    help_rows = _help_rows(theme)
    info_w = max(display_width(row) for row in info_rows) + 2
    help_w = max(display_width(row) for row in help_rows) + 2
    show_help = info_w + help_w <= width
    show_logo = show_help and info_w + help_w + LOGO_WIDTH <= width
    middle_w = width - info_w - (LOGO_WIDTH if show_logo else 0)

    out: list[str] = []
    for row in range(BANNER_HEIGHT):
        line = fit_ansi_line(info_rows[row] if row < len(info_rows) else "", min(info_w, width))
        if show_help:
            line += fit_ansi_line(help_rows[row] if row < len(help_rows) else "", middle_w)
        if show_logo:
            line += f"{theme.logo}{LOGO[row]}{theme.reset}"
        out.append(line)
    return out


__all__ = ["BANNER_HEIGHT", "BannerInfo", "HELP_COLUMNS", "LOGO", "banner_lines"]
