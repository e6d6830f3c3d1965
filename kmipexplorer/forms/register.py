"""Register form: import a secret, certificate, AES key or PEM key pair half."""

from __future__ import annotations

from ..actions.effects import (
    FORMAT_BASE64,
    FORMAT_HEX,
    register_certificate_effect,
    register_private_key_effect,
    register_public_key_effect,
    register_secret_effect,
    register_symmetric_key_effect,
)
from ..actions.protocol import Effect
from ..errors import InvariantError
from .fields import Checkbox, DropDown, InputField, TextArea
from .form import ModalForm

OBJECT_TYPES = ("Secret", "X509 Certificate", "AES Key", "Private Key", "Public Key")

_VALUE_FIELDS: dict[str, str] = {
    "Secret": "Secret Value",
    "X509 Certificate": "PEM",
    "AES Key": "Key",
    "Private Key": "PEM Key",
    "Public Key": "PEM Key",
}
_DYNAMIC_FIELDS = ("Secret Value", "Base64", "PEM", "PEM Key", "Key", "Format")


class RegisterForm(ModalForm):
    title = "Register object"

    def __init__(self) -> None:
        super().__init__()
        self.name = InputField("Name")
        self.object_type = DropDown("Object Type", OBJECT_TYPES, initial=-1, on_select=self._type_changed)
        self.form.add(self.name).add(self.object_type)

    def _type_changed(self, option: str, _index: int) -> None:
        self.form.remove(*_DYNAMIC_FIELDS)
        if option == "Secret":
            self.form.add(TextArea("Secret Value")).add(Checkbox("Base64"))
        elif option == "X509 Certificate":
            self.form.add(TextArea("PEM"))
        elif option == "AES Key":
            self.form.add(TextArea("Key")).add(DropDown("Format", (FORMAT_HEX, FORMAT_BASE64)))
        elif option in {"Private Key", "Public Key"}:
            self.form.add(TextArea("PEM Key"))

    def _value(self) -> str:
        label = _VALUE_FIELDS.get(self.object_type.current)
        item = self.form.get(label) if label else None
        if not isinstance(item, TextArea):
            return ""
        return item.text

    def can_submit(self) -> bool:
        return self.object_type.current in OBJECT_TYPES and bool(self._value().strip())

    def build_effect(self) -> Effect:
        name = self.name.text
        option = self.object_type.current
        value = self._value()
        if option == "Secret":
            checkbox = self.form.get("Base64")
            return register_secret_effect(value, isinstance(checkbox, Checkbox) and checkbox.checked, name)
        if option == "X509 Certificate":
            return register_certificate_effect(value, name)
        if option == "AES Key":
            fmt = self.form.get("Format")
            return register_symmetric_key_effect(value, fmt.current if isinstance(fmt, DropDown) else FORMAT_HEX, name)
        if option == "Private Key":
            return register_private_key_effect(value, name)
        if option == "Public Key":
            return register_public_key_effect(value, name)
        raise InvariantError(f"unexpected object type {option!r}")


__all__ = ["OBJECT_TYPES", "RegisterForm"]
