"""Main page: type tabs, search bar, object table and attribute pane."""

from __future__ import annotations

from ..ansi import fit_ansi_line, fit_cell
from ..directory_model import CATEGORIES, COLUMN_HEADERS, Directory, DirectoryRow, TypeFilter
from ..kmip.types import AttributeSet, ValueKind
from ..ui_theme import UITheme
from .boxes import box_lines, side_by_side

MIN_COLUMN_WIDTH = 3
COLUMN_GAP = 1
LOADING_MARK = " …"


def tabs_line(type_filter: TypeFilter, width: int, theme: UITheme) -> str:
    parts = []
    for info in CATEGORIES:
        style = theme.tab_active if info.category is type_filter.category else theme.tab_inactive
        parts.append(f"{style} {info.label} {theme.reset}")
    return fit_ansi_line(" ".join(parts), width)


def search_lines(query: str, width: int, theme: UITheme, focused: bool) -> list[str]:
    cursor = "_" if focused else ""
    body = [f"> {query}{cursor}" if query or focused else f"> {theme.dim}Input{theme.reset}"]
    return box_lines("Search", body, width, 3, theme, focused=focused)


def column_widths(rows: tuple[DirectoryRow, ...], width: int) -> list[int]:
    """Natural column widths, shrinking the widest columns until they fit ``width``."""
    widths = [len(header) for header in COLUMN_HEADERS]
    for row in rows:
        for index, cell in enumerate(row.columns()):
            widths[index] = max(widths[index], len(cell))
    available = max(len(widths) * MIN_COLUMN_WIDTH, width - COLUMN_GAP * (len(widths) - 1))
    excess = sum(widths) - available
    while excess > 0:
        widest = max(range(len(widths)), key=lambda index: widths[index])
        if widths[widest] <= MIN_COLUMN_WIDTH:
            break
        second = max((w for i, w in enumerate(widths) if i != widest), default=MIN_COLUMN_WIDTH)
        step = max(1, min(excess, widths[widest] - max(second, MIN_COLUMN_WIDTH)))
        widths[widest] -= step
        excess -= step
    return widths


def _format_row(cells: tuple[str, ...], widths: list[int]) -> str:
    return (" " * COLUMN_GAP).join(fit_cell(cell, widths[index]) for index, cell in enumerate(cells))


def table_lines(
    directory: Directory,
    width: int,
    height: int,
    theme: UITheme,
    *,
    focused: bool,
    loading: bool = False,
) -> list[str]:
    """Render the object table box; adjusts ``directory.scroll`` to keep the selection visible."""
    inner_w = max(1, width - 2)
    visible_rows = max(1, height - 3)
    directory.ensure_visible(visible_rows)
    rows = directory.rows
    widths = column_widths(rows, inner_w)

    body = [f"{theme.header}{_format_row(COLUMN_HEADERS, widths)}{theme.reset}"]
    for offset in range(visible_rows):
        index = directory.scroll + offset
        if index >= len(rows):
            break
        row = rows[index]
        color = theme.state_color(row.style)
        line = _format_row(row.columns(), widths)
        if index + 1 == directory.selected:
            line = f"{theme.reverse}{color}{fit_ansi_line(line, inner_w)}{theme.reset}"
        elif color:
            line = f"{color}{line}{theme.reset}"
        body.append(line)
    title = directory.heading() + (LOADING_MARK if loading else "")
    return box_lines(title, body, width, height, theme, focused=focused)


def attribute_text_lines(obj: AttributeSet, theme: UITheme) -> list[str]:
    """One ``Name: value`` line per attribute, structured values as ``Field: value`` pairs."""
    out: list[str] = []
    for attribute in obj.attributes:
        name = attribute.name if attribute.index in (None, 0) else f"{attribute.name} [{attribute.index}]"
        value = attribute.value
        if value.kind in {ValueKind.NAME, ValueKind.STRUCTURE}:
            text = ", ".join(f"{theme.attribute_field}{field}: {theme.reset}{inner}" for field, inner in value.fields())
        else:
            text = value.display()
        out.append(f"{theme.attribute_name}{name}: {theme.reset}{text}")
    return out


def attributes_lines(
    obj: AttributeSet,
    width: int,
    height: int,
    scroll: int,
    theme: UITheme,
    *,
    focused: bool,
) -> list[str]:
    lines = attribute_text_lines(obj, theme)
    scroll = max(0, min(scroll, max(0, len(lines) - 1)))
    return box_lines("Attributes", lines[scroll:], width, height, theme, focused=focused)


def content_lines(
    directory: Directory,
    width: int,
    height: int,
    theme: UITheme,
    *,
    table_focused: bool,
    attributes_focused: bool,
    attributes_scroll: int,
    loading: bool,
) -> list[str]:
    """Table alone, or table plus attribute pane when a row is selected."""
    selection = directory.get_selection()
    if selection is None:
        return table_lines(directory, width, height, theme, focused=table_focused, loading=loading)
    table_share = 2
    attr_share = 6 if attributes_focused else 1
    table_w = max(20, width * table_share // (table_share + attr_share))
    attr_w = max(10, width - table_w)
    table_w = width - attr_w
    left = table_lines(directory, table_w, height, theme, focused=table_focused, loading=loading)
    right = attributes_lines(selection, attr_w, height, attributes_scroll, theme, focused=attributes_focused)
    return side_by_side(left, right)


__all__ = [
    "attribute_text_lines",
    "attributes_lines",
    "column_widths",
    "content_lines",
    "search_lines",
    "table_lines",
    "tabs_line",
]
