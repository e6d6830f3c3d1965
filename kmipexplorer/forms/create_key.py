"""Create form: a named AES key, or an RSA / EC key pair."""

from __future__ import annotations

from ..actions.effects import (
    AES_KEY_SIZES,
    EC_CURVES,
    RSA_MODULUS_SIZES,
    create_ec_key_pair_effect,
    create_rsa_key_pair_effect,
    create_symmetric_key_effect,
)
from ..actions.protocol import Effect
from ..errors import InvariantError
from .fields import DropDown, InputField
from .form import ModalForm

KEY_TYPES = ("AES", "RSA", "EC")
_SIZE_FIELDS = ("Key Size", "Modulus Size", "Curve Type")


class CreateKeyForm(ModalForm):
    title = "Create object"

    def __init__(self) -> None:
        super().__init__()
        self.name = InputField("Name")
        self.key_type = DropDown("Key Type", KEY_TYPES, initial=-1, on_select=self._key_type_changed)
        self.form.add(self.name).add(self.key_type)

    def _key_type_changed(self, option: str, _index: int) -> None:
        self.form.remove(*_SIZE_FIELDS)
        if option == "AES":
            self.form.add(DropDown("Key Size", [str(size) for size in AES_KEY_SIZES]))
        elif option == "RSA":
            self.form.add(DropDown("Modulus Size", [str(size) for size in RSA_MODULUS_SIZES]))
        elif option == "EC":
            self.form.add(DropDown("Curve Type", list(EC_CURVES)))

    def can_submit(self) -> bool:
        return self.key_type.current in KEY_TYPES

    def _option(self, label: str) -> str:
        item = self.form.get(label)
        if not isinstance(item, DropDown):
            raise InvariantError(f"create form has no {label!r} field")
        return item.current

    def build_effect(self) -> Effect:
        name = self.name.text
        key_type = self.key_type.current
        if key_type == "AES":
            return create_symmetric_key_effect(int(self._option("Key Size")), name)
        if key_type == "RSA":
            return create_rsa_key_pair_effect(int(self._option("Modulus Size")), name)
        if key_type == "EC":
            return create_ec_key_pair_effect(self._option("Curve Type"), name)
        raise InvariantError(f"unexpected key type {key_type!r}")


__all__ = ["CreateKeyForm", "KEY_TYPES"]
