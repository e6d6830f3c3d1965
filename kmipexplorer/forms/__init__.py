"""Modal forms that collect parameters and produce action effects."""

from .create_key import CreateKeyForm
from .fields import Button, Checkbox, DropDown, FormItem, InputField, TextArea
from .form import Form, ModalForm
from .register import RegisterForm
from .rekey import RekeyForm
from .revoke import RevokeForm

__all__ = [
    "Button",
    "Checkbox",
    "CreateKeyForm",
    "DropDown",
    "Form",
    "FormItem",
    "InputField",
    "ModalForm",
    "RegisterForm",
    "RekeyForm",
    "RevokeForm",
    "TextArea",
]
