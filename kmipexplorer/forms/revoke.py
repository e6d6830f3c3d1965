"""Revoke form: reason code and free-text message."""

from __future__ import annotations

from ..actions.effects import revoke_effect
from ..actions.protocol import Effect
from ..kmip.types import RevocationReason
from .fields import DropDown, InputField
from .form import ModalForm

REASONS: tuple[tuple[str, RevocationReason], ...] = (
    ("Unspecified", RevocationReason.UNSPECIFIED),
    ("Key Compromise", RevocationReason.KEY_COMPROMISE),
    ("CA Compromise", RevocationReason.CA_COMPROMISE),
    ("Affiliation Change", RevocationReason.AFFILIATION_CHANGED),
    ("Superseded", RevocationReason.SUPERSEDED),
    ("Cessation Of Operation", RevocationReason.CESSATION_OF_OPERATION),
    ("Privilege Withdraw", RevocationReason.PRIVILEGE_WITHDRAWN),
)


class RevokeForm(ModalForm):
    title = "Revoke an object"

    def __init__(self) -> None:
        super().__init__()
        self.reason = DropDown("Reason", [label for label, _code in REASONS])
        self.message = InputField("Message")
        self.form.add(self.reason).add(self.message)

    def build_effect(self) -> Effect:
        _label, code = REASONS[max(0, self.reason.index)]
        return revoke_effect(code, self.message.text)


__all__ = ["REASONS", "RevokeForm"]
