"""``KmipClient`` implementation backed by PyKMIP's ``ProxyKmipClient``.

Translates between PyKMIP primitives/enums and the explorer's domain types,
and turns library and socket failures into ``ClientError``.
"""

from __future__ import annotations

import contextlib
import enum
import logging
import threading
import uuid
from datetime import datetime, timezone

from kmip.core import attributes as core_attributes
from kmip.core import enums
from kmip.core import exceptions as core_exceptions
from kmip.core import misc
from kmip.core import primitives
from kmip.core.factories.attributes import AttributeFactory
from kmip.pie import client as pie_client
from kmip.pie import exceptions as pie_exceptions
from kmip.pie import objects as pie_objects

from ..errors import ClientError
from .types import (
    Attribute,
    AttributeSet,
    AttributeValue,
    KeyPairSpec,
    KeySpec,
    ManagedObject,
    ObjectType,
    RegisterSpec,
    RevocationReason,
    UsageMask,
)

DEFAULT_PORT = 5696
SECONDS_PER_DAY = 24 * 60 * 60

logger = logging.getLogger(__name__)

_OBJECT_TYPES: dict[str, ObjectType] = {
    "CERTIFICATE": ObjectType.CERTIFICATE,
    "SYMMETRIC_KEY": ObjectType.SYMMETRIC_KEY,
    "PUBLIC_KEY": ObjectType.PUBLIC_KEY,
    "PRIVATE_KEY": ObjectType.PRIVATE_KEY,
    "SPLIT_KEY": ObjectType.SPLIT_KEY,
    "TEMPLATE": ObjectType.TEMPLATE,
    "SECRET_DATA": ObjectType.SECRET_DATA,
    "OPAQUE_DATA": ObjectType.OPAQUE_OBJECT,
    "PGP_KEY": ObjectType.PGP_KEY,
}
_PYKMIP_OBJECT_TYPES = {domain: name for name, domain in _OBJECT_TYPES.items()}

_LIBRARY_ERRORS = (
    pie_exceptions.ClientConnectionFailure,
    pie_exceptions.ClientConnectionNotOpen,
    pie_exceptions.KmipOperationFailure,
    core_exceptions.KmipError,
    OSError,
)


def split_address(addr: str) -> tuple[str, int]:
    """Split ``host[:port]`` into hostname and port (default 5696)."""
    host, sep, port = addr.rpartition(":")
    if not sep or not host:
        return addr, DEFAULT_PORT
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        return host, int(port)
    except ValueError as exc:
        raise ClientError(f"invalid port in address {addr!r}") from exc


def _camel_label(member: enum.Enum) -> str:
    return "".join(part.capitalize() for part in member.name.split("_"))


def _enum_label(member: enum.Enum) -> str:
    if isinstance(member, enums.ObjectType):
        return _OBJECT_TYPES.get(member.name, ObjectType.OPAQUE_OBJECT).value
    if isinstance(member, enums.CryptographicAlgorithm):
        return member.name
    return _camel_label(member)


def _convert_value(raw: object) -> AttributeValue:
    name_value = getattr(raw, "name_value", None)
    if name_value is not None:
        name_type = getattr(raw, "name_type", None)
        type_label = _camel_label(name_type.value) if name_type is not None else "UninterpretedTextString"
        return AttributeValue.name(str(name_value.value), type_label)
    if isinstance(raw, primitives.Enumeration):
        return AttributeValue.enum(_enum_label(raw.value))
    if isinstance(raw, primitives.DateTime):
        return AttributeValue.timestamp(datetime.fromtimestamp(raw.value, tz=timezone.utc))
    if isinstance(raw, primitives.Boolean):
        return AttributeValue.boolean(raw.value)
    if isinstance(raw, (primitives.Integer, primitives.LongInteger, primitives.BigInteger)):
        return AttributeValue.integer(raw.value)
    if isinstance(raw, primitives.ByteString):
        return AttributeValue.raw(raw.value)
    if isinstance(raw, primitives.TextString):
        return AttributeValue.text(raw.value)
    return AttributeValue.text(str(raw))


def _convert_attribute(raw: object) -> Attribute:
    index = getattr(raw, "attribute_index", None)
    return Attribute(
        name=str(raw.attribute_name.value),
        value=_convert_value(raw.attribute_value),
        index=index.value if index is not None else None,
    )


def _usage_masks(mask: UsageMask | None) -> list[enums.CryptographicUsageMask] | None:
    if not mask:
        return None
    return [enums.CryptographicUsageMask[flag.name] for flag in UsageMask if flag in mask]


def _offset_seconds(offset_days: int | None) -> int | None:
    return None if offset_days is None else offset_days * SECONDS_PER_DAY


class PyKmipClient:
    """Thread-safe adapter; PyKMIP connections are not, so calls are serialized."""

    def __init__(self, proxy: pie_client.ProxyKmipClient, address: str, correlation: bool = True) -> None:
        self._proxy = proxy
        self._address = address
        self._correlation = correlation
        self._lock = threading.Lock()
        self._attribute_factory = AttributeFactory()

    @property
    def address(self) -> str:
        return self._address

    @property
    def protocol_version(self) -> str:
        version = getattr(self._proxy, "kmip_version", None)
        if version is None:
            return ""
        return "v" + version.name.removeprefix("KMIP_").replace("_", ".")

    @contextlib.contextmanager
    def _request(self, operation: str, uid: str | None = None):
        correlation_id = uuid.uuid4().hex if self._correlation else "-"
        logger.debug("request %s uid=%s correlation=%s", operation, uid, correlation_id)
        with self._lock:
            try:
                yield
            except _LIBRARY_ERRORS as exc:
                logger.debug("request %s failed correlation=%s: %s", operation, correlation_id, exc)
                raise ClientError(f"{operation} failed: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            try:
                self._proxy.close()
            except _LIBRARY_ERRORS as exc:
                logger.warning("closing KMIP connection failed: %s", exc)
        logger.info("disconnected from %s", self._address)

    def locate(self, object_type: ObjectType | None = None) -> list[str]:
        attributes = None
        if object_type is not None:
            attributes = [
                self._attribute_factory.create_attribute(
                    enums.AttributeType.OBJECT_TYPE,
                    enums.ObjectType[_PYKMIP_OBJECT_TYPES[object_type]],
                )
            ]
        with self._request("Locate"):
            return [str(uid) for uid in self._proxy.locate(attributes=attributes)]

    def get_attributes(self, uid: str, *names: str) -> AttributeSet:
        with self._request("GetAttributes", uid):
            response_uid, raw_attributes = self._proxy.get_attributes(uid, list(names) or None)
        return AttributeSet(
            uid=str(response_uid or uid),
            attributes=tuple(_convert_attribute(raw) for raw in raw_attributes),
        )

    def activate(self, uid: str) -> str:
        with self._request("Activate", uid):
            self._proxy.activate(uid)
        return uid

    def revoke(self, uid: str, reason: RevocationReason, message: str = "") -> str:
        with self._request("Revoke", uid):
            self._proxy.revoke(
                enums.RevocationReasonCode(int(reason)),
                uid,
                revocation_message=message or None,
            )
        return uid

    def destroy(self, uid: str) -> str:
        with self._request("Destroy", uid):
            self._proxy.destroy(uid)
        return uid

    def rekey(self, uid: str, offset_days: int | None = None) -> str:
        with self._request("ReKey", uid):
            return str(self._proxy.rekey(uid=uid, offset=_offset_seconds(offset_days)))

    def rekey_key_pair(self, uid: str, offset_days: int | None = None) -> str:
        seconds = _offset_seconds(offset_days)
        with self._request("ReKeyKeyPair", uid):
            result = self._proxy.proxy.rekey_key_pair(
                private_key_uuid=core_attributes.PrivateKeyUniqueIdentifier(uid),
                offset=misc.Offset(seconds) if seconds is not None else None,
            )
        if result.result_status.value != enums.ResultStatus.SUCCESS:
            message = getattr(result.result_message, "value", "") or "operation failed"
            raise ClientError(f"ReKeyKeyPair failed: {message}")
        new_uid = result.private_key_uuid
        return str(getattr(new_uid, "value", new_uid))

    def create(self, spec: KeySpec) -> str:
        with self._request("Create"):
            return str(
                self._proxy.create(
                    enums.CryptographicAlgorithm[spec.algorithm],
                    spec.length,
                    name=spec.name,
                    cryptographic_usage_mask=_usage_masks(spec.usage_mask),
                )
            )

    def create_key_pair(self, spec: KeyPairSpec) -> tuple[str, str]:
        with self._request("CreateKeyPair"):
            public_uid, private_uid = self._proxy.create_key_pair(
                enums.CryptographicAlgorithm[spec.algorithm],
                spec.length,
                public_name=spec.public_name,
                public_usage_mask=_usage_masks(spec.public_usage_mask),
                private_name=spec.private_name,
                private_usage_mask=_usage_masks(spec.private_usage_mask),
            )
        return str(public_uid), str(private_uid)

    def register(self, spec: RegisterSpec) -> str:
        managed = self._build_managed_object(spec)
        with self._request("Register"):
            return str(self._proxy.register(managed))

    def get(self, uid: str) -> ManagedObject:
        with self._request("Get", uid):
            managed = self._proxy.get(uid)
        return self._convert_managed_object(uid, managed)

    @staticmethod
    def _build_managed_object(spec: RegisterSpec):
        extra: dict[str, object] = {}
        if spec.name:
            extra["name"] = spec.name
        masks = _usage_masks(spec.usage_mask)
        if spec.object_type is ObjectType.SYMMETRIC_KEY:
            return pie_objects.SymmetricKey(
                enums.CryptographicAlgorithm[spec.algorithm or "AES"],
                spec.length or len(spec.value) * 8,
                spec.value,
                masks=masks,
                **extra,
            )
        if spec.object_type is ObjectType.PRIVATE_KEY:
            return pie_objects.PrivateKey(
                enums.CryptographicAlgorithm[spec.algorithm or "RSA"],
                spec.length,
                spec.value,
                enums.KeyFormatType[spec.key_format or "PKCS_8"],
                masks=masks,
                **extra,
            )
        if spec.object_type is ObjectType.PUBLIC_KEY:
            return pie_objects.PublicKey(
                enums.CryptographicAlgorithm[spec.algorithm or "RSA"],
                spec.length,
                spec.value,
                enums.KeyFormatType[spec.key_format or "X_509"],
                masks=masks,
                **extra,
            )
        if spec.object_type is ObjectType.CERTIFICATE:
            return pie_objects.X509Certificate(spec.value, masks=masks, **extra)
        if spec.object_type is ObjectType.SECRET_DATA:
            return pie_objects.SecretData(
                spec.value,
                enums.SecretDataType[spec.data_type or "PASSWORD"],
                masks=masks,
                **extra,
            )
        raise ClientError(f"Cannot register an object of type {spec.object_type.value}")

    @staticmethod
    def _convert_managed_object(uid: str, managed: object) -> ManagedObject:
        object_type = _OBJECT_TYPES.get(managed.object_type.name, ObjectType.OPAQUE_OBJECT)
        key_format = getattr(managed, "key_format_type", None)
        algorithm = getattr(managed, "cryptographic_algorithm", None)
        data_type = getattr(managed, "data_type", None) or getattr(managed, "opaque_type", None)
        details: dict[str, object] = {
            "unique_identifier": uid,
            "object_type": object_type.value,
            "names": [str(name) for name in getattr(managed, "names", [])],
        }
        masks = getattr(managed, "cryptographic_usage_masks", None)
        if masks:
            details["cryptographic_usage_masks"] = [mask.name for mask in masks]
        return ManagedObject(
            object_type=object_type,
            value=bytes(managed.value),
            key_format=key_format.name if key_format is not None else None,
            algorithm=algorithm.name if algorithm is not None else None,
            length=getattr(managed, "cryptographic_length", None),
            data_type=data_type.name if data_type is not None else None,
            details=details,
        )


def connect(
    addr: str,
    cert: str,
    key: str,
    ca: str | None = None,
    *,
    correlation: bool = True,
) -> PyKmipClient:
    """Open a TLS connection to ``addr`` and return a ready client."""
    hostname, port = split_address(addr)
    proxy = pie_client.ProxyKmipClient(
        hostname=hostname,
        port=port,
        cert=cert,
        key=key,
        ca=ca or None,
    )
    try:
        proxy.open()
    except _LIBRARY_ERRORS as exc:
        raise ClientError(f"cannot connect to {addr}: {exc}") from exc
    logger.info("connected to %s", addr)
    return PyKmipClient(proxy, addr, correlation=correlation)


__all__ = ["DEFAULT_PORT", "PyKmipClient", "connect", "split_address"]
