"""In-memory object directory with row projection and selection.

The directory is mutated only from the UI thread; background work hands its
results over through ``runtime.updates.UpdateQueue``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from ..kmip.types import AttributeSet
from .rows import DirectoryRow, project_row, row_matches

SelectionListener = Callable[[AttributeSet | None], None]
ContentListener = Callable[[], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Directory:
    """Ordered object set plus a 1-based selected row (0 means none).

    Rows are derived from the objects on every change and are never patched
    independently. An optional search query hides non-matching rows; the
    selection always indexes the visible rows.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock if clock is not None else _utc_now
        self._objects: list[AttributeSet] = []
        self._visible: list[tuple[AttributeSet, DirectoryRow]] = []
        self._selected = 0
        self._query = ""
        self.title = ""
        self.scroll = 0
        self._selection_listeners: list[SelectionListener] = []
        self._content_listeners: list[ContentListener] = []

    # Observers

    def on_selection_changed(self, listener: SelectionListener) -> Directory:
        self._selection_listeners.append(listener)
        return self

    def on_content_updated(self, listener: ContentListener) -> Directory:
        self._content_listeners.append(listener)
        return self

    def _notify_selection(self) -> None:
        selection = self.get_selection()
        for listener in list(self._selection_listeners):
            listener(selection)

    def _notify_content(self) -> None:
        for listener in list(self._content_listeners):
            listener()

    # Read access

    @property
    def objects(self) -> tuple[AttributeSet, ...]:
        return tuple(self._objects)

    @property
    def rows(self) -> tuple[DirectoryRow, ...]:
        return tuple(row for _obj, row in self._visible)

    @property
    def selected(self) -> int:
        return self._selected

    @property
    def query(self) -> str:
        return self._query

    def __len__(self) -> int:
        return len(self._visible)

    def __contains__(self, uid: object) -> bool:
        return any(obj.uid == uid for obj in self._objects)

    def heading(self) -> str:
        """Table title with the selection counter, e.g. ``All Objects [2/5]``."""
        return f"{self.title} [{self._selected}/{len(self._visible)}]"

    def get_selection(self) -> AttributeSet | None:
        if self._selected <= 0 or self._selected > len(self._visible):
            return None
        return self._visible[self._selected - 1][0]

    def find(self, uid: str) -> AttributeSet | None:
        for obj in self._objects:
            if obj.uid == uid:
                return obj
        return None

    # Mutation

    def _rebuild(self) -> None:
        now = self._clock()
        visible: list[tuple[AttributeSet, DirectoryRow]] = []
        for obj in self._objects:
            row = project_row(obj, now)
            if row_matches(row, self._query):
                visible.append((obj, row))
        self._visible = visible
        self._selected = max(0, min(self._selected, len(visible)))

    def _changed(self) -> None:
        self._notify_selection()
        self._notify_content()

    def set_objects(self, objects: Iterable[AttributeSet], reset_selection: bool = False) -> None:
        """Replace the whole object set.

        With ``reset_selection`` the first row is selected (none when empty)
        and the view scrolls to the top; otherwise the selected index is kept
        and clamped. Observers are always notified.
        """
        self._objects = list(objects)
        if reset_selection:
            self._selected = 1
            self.scroll = 0
        self._rebuild()
        self._changed()

    def clear(self) -> None:
        self.set_objects((), reset_selection=True)

    def remove_object(self, uid: str) -> bool:
        """Drop the object ``uid``; absent ids are a silent no-op."""
        for position, obj in enumerate(self._objects):
            if obj.uid == uid:
                del self._objects[position]
                break
        else:
            return False
        self._rebuild()
        self._changed()
        return True

    def update_object(self, attributes: AttributeSet) -> bool:
        """Replace the entry sharing ``attributes.uid``; absent ids are a no-op."""
        for position, obj in enumerate(self._objects):
            if obj.uid == attributes.uid:
                self._objects[position] = attributes
                break
        else:
            return False
        self._rebuild()
        self._changed()
        return True

    def set_selection(self, index: int) -> bool:
        """Select visible row ``index`` (clamped to ``[0, len]``)."""
        index = max(0, min(index, len(self._visible)))
        if index == self._selected:
            return False
        self._selected = index
        self._notify_selection()
        return True

    def move_selection(self, delta: int) -> bool:
        if not self._visible:
            return False
        if self._selected == 0:
            target = 1 if delta > 0 else len(self._visible)
        else:
            target = max(1, min(self._selected + delta, len(self._visible)))
        return self.set_selection(target)

    def clear_selection(self) -> bool:
        self.scroll = 0
        return self.set_selection(0)

    def set_query(self, query: str) -> None:
        """Apply a client-side row filter over the loaded objects."""
        if query == self._query:
            return
        self._query = query
        self._rebuild()
        self._changed()

    def refresh_ages(self) -> bool:
        """Re-project rows against the current clock; notify only on change."""
        before = self.rows
        self._rebuild()
        if self.rows == before:
            return False
        self._notify_content()
        return True

    def ensure_visible(self, height: int) -> None:
        """Adjust ``scroll`` so the selected row fits in ``height`` rows."""
        height = max(1, height)
        max_scroll = max(0, len(self._visible) - height)
        if self._selected > 0:
            row = self._selected - 1
            if row < self.scroll:
                self.scroll = row
            elif row >= self.scroll + height:
                self.scroll = row - height + 1
        self.scroll = max(0, min(self.scroll, max_scroll))


__all__ = ["ContentListener", "Directory", "SelectionListener"]
