"""Form container and the done/cancel contract shared by every modal form."""

from __future__ import annotations

from collections.abc import Callable

from ..actions.protocol import Effect
from .fields import ENTER_KEYS, Button, FormItem, InputField, TextArea

DoneCallback = Callable[[Effect], None]
CancelCallback = Callable[[], None]


class Form:
    """Ordered fields followed by buttons, with one focused item."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.fields: list[FormItem] = []
        self.buttons: list[Button] = []
        self.focus = 0

    @property
    def items(self) -> list[FormItem]:
        return [*self.fields, *self.buttons]

    def add(self, item: FormItem) -> Form:
        self.fields.append(item)
        return self

    def add_button(self, button: Button) -> Form:
        self.buttons.append(button)
        return self

    def get(self, label: str) -> FormItem | None:
        for item in self.fields:
            if item.label == label:
                return item
        return None

    def remove(self, *labels: str) -> None:
        self.fields = [item for item in self.fields if item.label not in labels]
        self.focus = min(self.focus, len(self.items) - 1)

    def button(self, label: str) -> Button | None:
        for button in self.buttons:
            if button.label == label:
                return button
        return None

    @property
    def focused(self) -> FormItem | None:
        items = self.items
        if not items:
            return None
        return items[self.focus % len(items)]

    def move_focus(self, step: int) -> None:
        items = self.items
        if not items:
            return
        position = self.focus
        for _ in range(len(items)):
            position = (position + step) % len(items)
            if items[position].focusable:
                self.focus = position
                return

    def handle_key(self, key: str) -> bool:
        if key in {"TAB", "DOWN"}:
            self.move_focus(1)
            return True
        if key in {"SHIFT_TAB", "UP"}:
            self.move_focus(-1)
            return True
        item = self.focused
        if item is None:
            return False
        if key in ENTER_KEYS and isinstance(item, InputField) and not isinstance(item, TextArea):
            self.move_focus(1)
            return True
        return item.handle_key(key)


class ModalForm:
    """Collects parameters and hands an effect to ``on_done``; never runs it.

    Both done and cancel clear the fields afterwards.
    """

    title = ""

    def __init__(self) -> None:
        self._on_done: DoneCallback | None = None
        self._on_cancel: CancelCallback | None = None
        self.form = Form(self.title)
        self.form.add_button(Button("OK", self.done, enabled=self.can_submit))
        self.form.add_button(Button("Cancel", self.cancel))

    def on_done(self, callback: DoneCallback) -> ModalForm:
        self._on_done = callback
        return self

    def on_cancel(self, callback: CancelCallback) -> ModalForm:
        self._on_cancel = callback
        return self

    def can_submit(self) -> bool:
        return True

    def build_effect(self) -> Effect:
        raise NotImplementedError

    def done(self) -> None:
        try:
            if self._on_done is None or not self.can_submit():
                return
            self._on_done(self.build_effect())
        finally:
            self.reset()

    def cancel(self) -> None:
        try:
            if self._on_cancel is not None:
                self._on_cancel()
        finally:
            self.reset()

    def reset(self) -> None:
        for item in list(self.form.fields):
            item.reset()
        self.form.focus = 0

    def handle_key(self, key: str) -> bool:
        if key == "ESC":
            self.cancel()
            return True
        return self.form.handle_key(key)


__all__ = ["CancelCallback", "DoneCallback", "Form", "ModalForm"]
