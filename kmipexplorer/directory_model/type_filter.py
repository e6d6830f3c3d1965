"""Object-type filter shown as the tab strip above the table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..kmip.types import ObjectType


class FilterCategory(Enum):
    ALL = "all"
    SYMMETRIC_KEY = "symmetric-key"
    PRIVATE_KEY = "private-key"
    PUBLIC_KEY = "public-key"
    SECRET = "secret"
    CERTIFICATE = "certificate"
    OPAQUE = "opaque"
    TEMPLATE = "template"


@dataclass(frozen=True)
class CategoryInfo:
    category: FilterCategory
    label: str
    title: str
    object_type: ObjectType | None


CATEGORIES: tuple[CategoryInfo, ...] = (
    CategoryInfo(FilterCategory.ALL, "All", "All Objects", None),
    CategoryInfo(FilterCategory.SYMMETRIC_KEY, "Symmetric Keys", "Symmetric Keys", ObjectType.SYMMETRIC_KEY),
    CategoryInfo(FilterCategory.PRIVATE_KEY, "Private Keys", "Private Keys", ObjectType.PRIVATE_KEY),
    CategoryInfo(FilterCategory.PUBLIC_KEY, "Public Keys", "Public Keys", ObjectType.PUBLIC_KEY),
    CategoryInfo(FilterCategory.SECRET, "Secrets", "Secrets", ObjectType.SECRET_DATA),
    CategoryInfo(FilterCategory.CERTIFICATE, "Certificates", "Certificates", ObjectType.CERTIFICATE),
    CategoryInfo(FilterCategory.OPAQUE, "Opaque", "Opaque Objects", ObjectType.OPAQUE_OBJECT),
    CategoryInfo(FilterCategory.TEMPLATE, "Templates", "Templates", ObjectType.TEMPLATE),
)

FilterListener = Callable[[FilterCategory, str], None]


class TypeFilter:
    """Cycles through ``CATEGORIES``; exactly one category is active.

    Listeners receive ``(category, label)`` once per actual change.
    """

    def __init__(self, initial: FilterCategory = FilterCategory.ALL) -> None:
        self._position = self._position_of(initial)
        self._listeners: list[FilterListener] = []

    @staticmethod
    def _position_of(category: FilterCategory) -> int:
        for position, info in enumerate(CATEGORIES):
            if info.category is category:
                return position
        raise ValueError(f"unknown filter category: {category!r}")

    def on_change(self, listener: FilterListener) -> TypeFilter:
        self._listeners.append(listener)
        return self

    @property
    def current(self) -> CategoryInfo:
        return CATEGORIES[self._position]

    @property
    def category(self) -> FilterCategory:
        return self.current.category

    @property
    def label(self) -> str:
        return self.current.label

    @property
    def title(self) -> str:
        return self.current.title

    @property
    def object_type(self) -> ObjectType | None:
        """Server-side type constraint; ``None`` for "All" (no constraint sent)."""
        return self.current.object_type

    def _move_to(self, position: int) -> bool:
        position %= len(CATEGORIES)
        if position == self._position:
            return False
        self._position = position
        info = self.current
        for listener in list(self._listeners):
            listener(info.category, info.label)
        return True

    def select(self, category: FilterCategory) -> bool:
        return self._move_to(self._position_of(category))

    def next(self) -> bool:
        return self._move_to(self._position + 1)

    def prev(self) -> bool:
        return self._move_to(self._position - 1)


__all__ = ["CATEGORIES", "CategoryInfo", "FilterCategory", "FilterListener", "TypeFilter"]
