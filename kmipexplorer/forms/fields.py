"""Form items: text inputs, text areas, checkboxes, drop-downs and buttons.

Items consume normalized key tokens from ``kmipexplorer.input`` and report
whether they handled the key. They hold no rendering state beyond their value.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..input import ENTER_KEYS


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class FormItem:
    label: str = ""

    @property
    def focusable(self) -> bool:
        return True

    def handle_key(self, key: str) -> bool:
        return False

    def reset(self) -> None:
        pass


class InputField(FormItem):
    """Single-line input. ``accept`` vets each candidate text as it is typed."""

    def __init__(self, label: str, accept: Callable[[str], bool] | None = None) -> None:
        self.label = label
        self.accept = accept
        self.text = ""

    def set_text(self, text: str) -> None:
        self.text = text

    def _insert(self, chars: str) -> bool:
        candidate = self.text + chars
        if self.accept is not None and not self.accept(candidate):
            return True
        self.text = candidate
        return True

    def handle_key(self, key: str) -> bool:
        if key == "BACKSPACE":
            self.text = self.text[:-1]
            return True
        if key == "CTRL_U":
            self.text = ""
            return True
        if is_printable(key):
            return self._insert(key)
        return False

    def reset(self) -> None:
        self.text = ""


class TextArea(InputField):
    """Multi-line input; Enter inserts a newline so pasted PEM blocks survive."""

    def __init__(self, label: str, height: int = 5) -> None:
        super().__init__(label)
        self.height = height

    def handle_key(self, key: str) -> bool:
        if key in ENTER_KEYS:
            return self._insert("\n")
        return super().handle_key(key)

    def lines(self) -> list[str]:
        return self.text.split("\n")


class Checkbox(FormItem):
    def __init__(self, label: str, checked: bool = False) -> None:
        self.label = label
        self._initial = checked
        self.checked = checked

    def handle_key(self, key: str) -> bool:
        if key == " " or key in ENTER_KEYS:
            self.checked = not self.checked
            return True
        return False

    def reset(self) -> None:
        self.checked = self._initial


class DropDown(FormItem):
    """Option list cycled with Left/Right or Space; index -1 means no choice."""

    def __init__(
        self,
        label: str,
        options: Sequence[str],
        initial: int = 0,
        on_select: Callable[[str, int], None] | None = None,
    ) -> None:
        self.label = label
        self.options = tuple(options)
        self._initial = initial
        self.index = initial
        self.on_select = on_select

    @property
    def current(self) -> str:
        if 0 <= self.index < len(self.options):
            return self.options[self.index]
        return ""

    def select(self, index: int) -> None:
        if index == self.index:
            return
        self.index = index
        if self.on_select is not None:
            self.on_select(self.current, self.index)

    def handle_key(self, key: str) -> bool:
        if not self.options:
            return False
        if key in {"RIGHT", " ", "l"} or key in ENTER_KEYS:
            self.select((self.index + 1) % len(self.options))
            return True
        if key in {"LEFT", "h"}:
            self.select((self.index - 1) % len(self.options) if self.index >= 0 else len(self.options) - 1)
            return True
        return False

    def reset(self) -> None:
        self.select(self._initial)


class Button(FormItem):
    def __init__(self, label: str, action: Callable[[], None], enabled: Callable[[], bool] | None = None) -> None:
        self.label = label
        self.action = action
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled is None or self._enabled()

    @property
    def focusable(self) -> bool:
        return self.enabled

    def handle_key(self, key: str) -> bool:
        if key in ENTER_KEYS or key == " ":
            if self.enabled:
                self.action()
            return True
        return False


__all__ = [
    "Button",
    "Checkbox",
    "DropDown",
    "ENTER_KEYS",
    "FormItem",
    "InputField",
    "TextArea",
    "is_printable",
]
