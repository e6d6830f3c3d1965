"""Directory model: object rows, selection and the type filter."""

from .directory import ContentListener, Directory, SelectionListener
from .rows import (
    COLUMN_HEADERS,
    DirectoryRow,
    format_age,
    project_row,
    row_matches,
    state_style,
)
from .type_filter import CATEGORIES, CategoryInfo, FilterCategory, TypeFilter

__all__ = [
    "CATEGORIES",
    "COLUMN_HEADERS",
    "CategoryInfo",
    "ContentListener",
    "Directory",
    "DirectoryRow",
    "FilterCategory",
    "SelectionListener",
    "TypeFilter",
    "format_age",
    "project_row",
    "row_matches",
    "state_style",
]
