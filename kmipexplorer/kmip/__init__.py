"""KMIP domain types and the client contract.

The PyKMIP adapter lives in ``kmipexplorer.kmip.pykmip_client`` and is imported
only by the CLI, so the rest of the package works without a server library.
"""

from __future__ import annotations

from .client import KmipClient
from .types import (
    ATTR_CRYPTOGRAPHIC_ALGORITHM,
    ATTR_CRYPTOGRAPHIC_LENGTH,
    ATTR_INITIAL_DATE,
    ATTR_NAME,
    ATTR_OBJECT_TYPE,
    ATTR_STATE,
    SYMMETRIC_KEY_USAGE,
    Attribute,
    AttributeSet,
    AttributeValue,
    KeyPairSpec,
    KeySpec,
    ManagedObject,
    NameValue,
    ObjectType,
    RegisterSpec,
    RevocationReason,
    State,
    UsageMask,
    ValueKind,
)

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
    "KmipClient",
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
