"""Action protocol and the effect builders used by the forms."""

from .protocol import (
    CONFIRMED_OPERATIONS,
    RECONCILE,
    ActionRequest,
    ConfirmPrompt,
    Effect,
    Operation,
    Reconcile,
    confirm_prompt,
)

__all__ = [
    "ActionRequest",
    "CONFIRMED_OPERATIONS",
    "ConfirmPrompt",
    "Effect",
    "Operation",
    "RECONCILE",
    "Reconcile",
    "confirm_prompt",
]
