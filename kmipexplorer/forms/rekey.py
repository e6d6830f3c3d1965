"""Rekey form: optional activation offset in days."""

from __future__ import annotations

from ..actions.effects import rekey_effect
from ..actions.protocol import Effect
from ..kmip.types import ObjectType
from .fields import InputField
from .form import ModalForm


def accept_offset(text: str) -> bool:
    """Allow an empty value or a non-negative integer."""
    return text == "" or (text.isascii() and text.isdigit())


class RekeyForm(ModalForm):
    title = "Rekey"

    def __init__(self) -> None:
        super().__init__()
        self.offset = InputField("Offset days", accept=accept_offset)
        self.form.add(self.offset)
        self._object_type: ObjectType | None = None

    def prepare(self, object_type: ObjectType | None) -> RekeyForm:
        """Remember the target's type so the effect can skip the server lookup."""
        self._object_type = object_type
        return self

    def build_effect(self) -> Effect:
        text = self.offset.text
        offset_days = int(text) if text else None
        return rekey_effect(offset_days, self._object_type)

    def reset(self) -> None:
        super().reset()
        self._object_type = None


__all__ = ["RekeyForm", "accept_offset"]
