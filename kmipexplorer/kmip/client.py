"""Contract of the KMIP client the explorer talks to.

Implementations perform blocking request/response exchanges and must be safe
to call from several background threads at once. Failures are reported by
raising ``ClientError``.
"""

from __future__ import annotations

from typing import Protocol

from .types import (
    AttributeSet,
    KeyPairSpec,
    KeySpec,
    ManagedObject,
    ObjectType,
    RegisterSpec,
    RevocationReason,
)


class KmipClient(Protocol):
    @property
    def address(self) -> str: ...

    @property
    def protocol_version(self) -> str: ...

    def locate(self, object_type: ObjectType | None = None) -> list[str]:
        """Return identifiers of objects, constrained to ``object_type`` when given."""
        ...

    def get_attributes(self, uid: str, *names: str) -> AttributeSet:
        """Return the named attributes of ``uid`` (all attributes when none are named)."""
        ...

    def activate(self, uid: str) -> str: ...

    def revoke(self, uid: str, reason: RevocationReason, message: str = "") -> str: ...

    def destroy(self, uid: str) -> str: ...

    def rekey(self, uid: str, offset_days: int | None = None) -> str: ...

    def rekey_key_pair(self, uid: str, offset_days: int | None = None) -> str: ...

    def create(self, spec: KeySpec) -> str: ...

    def create_key_pair(self, spec: KeyPairSpec) -> tuple[str, str]:
        """Create a key pair and return ``(public_uid, private_uid)``."""
        ...

    def register(self, spec: RegisterSpec) -> str: ...

    def get(self, uid: str) -> ManagedObject: ...

    def close(self) -> None: ...


__all__ = ["KmipClient"]
