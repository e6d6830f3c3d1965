"""Key-combo registry used by the table key bindings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """One or more key tokens mapped to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]
    needs_selection: bool = False


class KeyRegistry:
    """Exact-match dispatch table; bindings may require a selected row."""

    def __init__(self, has_selection: Callable[[], bool] | None = None) -> None:
        self._has_selection = has_selection
        self._bindings: dict[str, KeyBinding] = {}

    def register(self, *bindings: KeyBinding) -> KeyRegistry:
        for binding in bindings:
            for combo in binding.combos:
                self._bindings[combo] = binding
        return self

    def __contains__(self, key: object) -> bool:
        return key in self._bindings

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler bound to ``key``; ``None`` when unbound or unavailable."""
        binding = self._bindings.get(key)
        if binding is None:
            return None
        if binding.needs_selection and self._has_selection is not None and not self._has_selection():
            return None
        return binding.handler()


__all__ = ["KeyBinding", "KeyRegistry"]
