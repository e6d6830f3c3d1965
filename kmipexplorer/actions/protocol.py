"""Lifecycle of a mutating command: solicit, hand off, confirm, execute, reconcile.

An ``ActionRequest`` carries the effect produced by a form. The controller
owns it after hand-off and either runs it once or discards it.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..errors import InvariantError
from ..kmip.client import KmipClient

Effect = Callable[[KmipClient, str | None], object]


class Operation(Enum):
    ACTIVATE = "activate"
    REVOKE = "revoke"
    DESTROY = "destroy"
    REKEY = "rekey"
    CREATE = "create"
    REGISTER = "register"


class Reconcile(Enum):
    """How a successful result is applied to the directory."""

    REMOVE = "remove"
    UPDATE = "update"
    REFRESH = "refresh"


RECONCILE: dict[Operation, Reconcile] = {
    Operation.ACTIVATE: Reconcile.UPDATE,
    Operation.REVOKE: Reconcile.UPDATE,
    Operation.REKEY: Reconcile.UPDATE,
    Operation.DESTROY: Reconcile.REMOVE,
    Operation.CREATE: Reconcile.REFRESH,
    Operation.REGISTER: Reconcile.REFRESH,
}

CONFIRMED_OPERATIONS = frozenset({Operation.REVOKE, Operation.DESTROY, Operation.REKEY})
UNTARGETED_OPERATIONS = frozenset({Operation.CREATE, Operation.REGISTER})

_PROMPTS: dict[Operation, tuple[str, str]] = {
    Operation.REVOKE: ("Confirm Revoke", "Revoke object {uid} ?"),
    Operation.DESTROY: ("Confirm Destroy", "Destroy object {uid} ?"),
    Operation.REKEY: ("Confirm Rekeying", "Rekey object {uid} ?"),
}


@dataclass(frozen=True)
class ConfirmPrompt:
    title: str
    question: str


def confirm_prompt(operation: Operation, uid: str | None) -> ConfirmPrompt | None:
    """Return the yes/no prompt for destructive operations, ``None`` otherwise."""
    if operation not in CONFIRMED_OPERATIONS:
        return None
    title, question = _PROMPTS[operation]
    return ConfirmPrompt(title=title, question=question.format(uid=uid))


@dataclass
class ActionRequest:
    """A mutating intent waiting to be confirmed and executed."""

    operation: Operation
    effect: Effect
    target: str | None = None
    prompt: ConfirmPrompt | None = None
    _settled: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    @classmethod
    def build(cls, operation: Operation, effect: Effect, target: str | None = None) -> ActionRequest:
        if operation in UNTARGETED_OPERATIONS:
            if target is not None:
                raise InvariantError(f"{operation.value} does not take a target object")
        elif not target:
            raise InvariantError(f"{operation.value} requires a target object")
        return cls(operation, effect, target, confirm_prompt(operation, target))

    @property
    def needs_confirmation(self) -> bool:
        return self.prompt is not None

    @property
    def reconcile(self) -> Reconcile:
        return RECONCILE[self.operation]

    @property
    def settled(self) -> bool:
        return self._settled

    def _settle(self) -> None:
        with self._lock:
            if self._settled:
                raise InvariantError(f"{self.operation.value} request was already executed or discarded")
            self._settled = True

    def execute(self, client: KmipClient) -> object:
        """Run the effect; a request runs at most once."""
        self._settle()
        return self.effect(client, self.target)

    def discard(self) -> None:
        self._settle()


__all__ = [
    "ActionRequest",
    "CONFIRMED_OPERATIONS",
    "ConfirmPrompt",
    "Effect",
    "Operation",
    "RECONCILE",
    "Reconcile",
    "UNTARGETED_OPERATIONS",
    "confirm_prompt",
]
