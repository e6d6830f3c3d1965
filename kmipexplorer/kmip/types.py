"""Domain datatypes exchanged with the KMIP client.

Attribute values are a closed tagged variant (``ValueKind`` + payload); the
only place that switches on attribute names for display is the row projection
in ``directory_model.rows``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum, IntFlag

ATTR_OBJECT_TYPE = "Object Type"
ATTR_NAME = "Name"
ATTR_CRYPTOGRAPHIC_ALGORITHM = "Cryptographic Algorithm"
ATTR_CRYPTOGRAPHIC_LENGTH = "Cryptographic Length"
ATTR_STATE = "State"
ATTR_INITIAL_DATE = "Initial Date"


class ObjectType(str, Enum):
    """Managed object categories, valued by their KMIP display label."""

    CERTIFICATE = "Certificate"
    SYMMETRIC_KEY = "SymmetricKey"
    PUBLIC_KEY = "PublicKey"
    PRIVATE_KEY = "PrivateKey"
    SPLIT_KEY = "SplitKey"
    TEMPLATE = "Template"
    SECRET_DATA = "SecretData"
    OPAQUE_OBJECT = "OpaqueObject"
    PGP_KEY = "PGPKey"

    @classmethod
    def from_label(cls, label: str) -> ObjectType | None:
        for member in cls:
            if member.value == label:
                return member
        return None


class State(str, Enum):
    PRE_ACTIVE = "PreActive"
    ACTIVE = "Active"
    DEACTIVATED = "Deactivated"
    COMPROMISED = "Compromised"
    DESTROYED = "Destroyed"
    DESTROYED_COMPROMISED = "DestroyedCompromised"


class RevocationReason(IntEnum):
    """Revocation reason codes, in the order the revoke form lists them."""

    UNSPECIFIED = 1
    KEY_COMPROMISE = 2
    CA_COMPROMISE = 3
    AFFILIATION_CHANGED = 4
    SUPERSEDED = 5
    CESSATION_OF_OPERATION = 6
    PRIVILEGE_WITHDRAWN = 7


class UsageMask(IntFlag):
    SIGN = 0x00000001
    VERIFY = 0x00000002
    ENCRYPT = 0x00000004
    DECRYPT = 0x00000008
    WRAP_KEY = 0x00000010
    UNWRAP_KEY = 0x00000020
    EXPORT = 0x00000040
    MAC_GENERATE = 0x00000080
    MAC_VERIFY = 0x00000100
    DERIVE_KEY = 0x00000200


SYMMETRIC_KEY_USAGE = UsageMask.ENCRYPT | UsageMask.DECRYPT | UsageMask.WRAP_KEY | UsageMask.UNWRAP_KEY


class ValueKind(Enum):
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    TIMESTAMP = "timestamp"
    NAME = "name"
    BYTES = "bytes"
    STRUCTURE = "structure"


@dataclass(frozen=True)
class NameValue:
    """Structured value of the ``Name`` attribute."""

    value: str
    name_type: str = "UninterpretedTextString"


@dataclass(frozen=True)
class AttributeValue:
    """One attribute payload tagged with its kind.

    Use the named constructors; ``value`` holds ``str`` for TEXT and ENUM
    (the enum label), ``int``, ``bool``, an aware ``datetime``, ``NameValue``,
    ``bytes``, or a ``tuple`` of ``(field, AttributeValue)`` pairs.
    """

    kind: ValueKind
    value: object

    @classmethod
    def text(cls, value: str) -> AttributeValue:
        return cls(ValueKind.TEXT, str(value))

    @classmethod
    def integer(cls, value: int) -> AttributeValue:
        return cls(ValueKind.INTEGER, int(value))

    @classmethod
    def boolean(cls, value: bool) -> AttributeValue:
        return cls(ValueKind.BOOLEAN, bool(value))

    @classmethod
    def enum(cls, label: str) -> AttributeValue:
        return cls(ValueKind.ENUM, str(label))

    @classmethod
    def timestamp(cls, value: datetime) -> AttributeValue:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return cls(ValueKind.TIMESTAMP, value)

    @classmethod
    def name(cls, value: str, name_type: str = "UninterpretedTextString") -> AttributeValue:
        return cls(ValueKind.NAME, NameValue(value, name_type))

    @classmethod
    def raw(cls, value: bytes) -> AttributeValue:
        return cls(ValueKind.BYTES, bytes(value))

    @classmethod
    def structure(cls, fields: tuple[tuple[str, AttributeValue], ...]) -> AttributeValue:
        return cls(ValueKind.STRUCTURE, tuple(fields))

    def fields(self) -> tuple[tuple[str, str], ...]:
        """Return ``(field, text)`` pairs for structured kinds, empty otherwise."""
        if self.kind is ValueKind.NAME:
            assert isinstance(self.value, NameValue)
            return (("NameValue", self.value.value), ("NameType", self.value.name_type))
        if self.kind is ValueKind.STRUCTURE:
            return tuple((name, inner.display()) for name, inner in self.value)  # type: ignore[union-attr]
        return ()

    def display(self) -> str:
        """Return a single-line human representation."""
        if self.kind is ValueKind.TIMESTAMP:
            assert isinstance(self.value, datetime)
            return self.value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        if self.kind is ValueKind.BYTES:
            assert isinstance(self.value, bytes)
            return self.value.hex()
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind in {ValueKind.NAME, ValueKind.STRUCTURE}:
            return ", ".join(f"{name}: {text}" for name, text in self.fields())
        return str(self.value)


@dataclass(frozen=True)
class Attribute:
    name: str
    value: AttributeValue
    index: int | None = None


@dataclass(frozen=True)
class AttributeSet:
    """Attributes of one managed object, in server response order."""

    uid: str
    attributes: tuple[Attribute, ...] = ()

    def primary(self, name: str) -> Attribute | None:
        """Return the effective unindexed (or index 0) holder of ``name``.

        A later unindexed/zero-indexed entry overrides an earlier one.
        """
        found: Attribute | None = None
        for attribute in self.attributes:
            if attribute.name != name:
                continue
            if attribute.index not in (None, 0):
                continue
            found = attribute
        return found

    def object_type(self) -> ObjectType | None:
        attribute = self.primary(ATTR_OBJECT_TYPE)
        if attribute is None or attribute.value.kind is not ValueKind.ENUM:
            return None
        return ObjectType.from_label(str(attribute.value.value))


@dataclass(frozen=True)
class ManagedObject:
    """Raw object returned by ``get``; payload plus descriptive fields."""

    object_type: ObjectType
    value: bytes
    key_format: str | None = None
    algorithm: str | None = None
    length: int | None = None
    data_type: str | None = None
    details: dict[str, object] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class KeySpec:
    algorithm: str
    length: int
    usage_mask: UsageMask
    name: str | None = None


@dataclass(frozen=True)
class KeyPairSpec:
    algorithm: str
    length: int
    private_usage_mask: UsageMask
    public_usage_mask: UsageMask
    curve: str | None = None
    private_name: str | None = None
    public_name: str | None = None


@dataclass(frozen=True)
class RegisterSpec:
    object_type: ObjectType
    value: bytes
    name: str | None = None
    algorithm: str | None = None
    length: int | None = None
    key_format: str | None = None
    usage_mask: UsageMask | None = None
    data_type: str | None = None


__all__ = [
    "ATTR_CRYPTOGRAPHIC_ALGORITHM",
    "ATTR_CRYPTOGRAPHIC_LENGTH",
    "ATTR_INITIAL_DATE",
    "ATTR_NAME",
    "ATTR_OBJECT_TYPE",
    "ATTR_STATE",
    "Attribute",
    "AttributeSet",
    "AttributeValue",
    "KeyPairSpec",
    "KeySpec",
    "ManagedObject",
    "NameValue",
    "ObjectType",
    "RegisterSpec",
    "RevocationReason",
    "SYMMETRIC_KEY_USAGE",
    "State",
    "UsageMask",
    "ValueKind",
]
