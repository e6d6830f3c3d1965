"""Effect builders handed from the forms to the controller.

Each builder captures the user's parameters and returns a closure
``effect(client, uid)``. Input decoding (hex, base64, PEM) happens inside the
closure, on the background task, and fails with ``ActionError`` before any
request is sent.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa

from ..errors import ActionError, InvariantError
from ..kmip.client import KmipClient
from ..kmip.types import (
    ATTR_OBJECT_TYPE,
    SYMMETRIC_KEY_USAGE,
    KeyPairSpec,
    KeySpec,
    ObjectType,
    RegisterSpec,
    RevocationReason,
    UsageMask,
)
from .protocol import Effect

logger = logging.getLogger(__name__)

AES_KEY_SIZES = (128, 192, 256)
RSA_MODULUS_SIZES = (2048, 3072, 4096)
EC_CURVES: dict[str, int] = {"P-256": 256, "P-384": 384, "P-521": 521}

FORMAT_HEX = "Hex"
FORMAT_BASE64 = "Base 64"


def _require_uid(uid: str | None) -> str:
    if not uid:
        raise InvariantError("effect requires a target object")
    return uid


def activate_effect() -> Effect:
    def effect(client: KmipClient, uid: str | None) -> str:
        return client.activate(_require_uid(uid))

    return effect


def destroy_effect() -> Effect:
    def effect(client: KmipClient, uid: str | None) -> str:
        return client.destroy(_require_uid(uid))

    return effect


def revoke_effect(reason: RevocationReason, message: str = "") -> Effect:
    def effect(client: KmipClient, uid: str | None) -> str:
        return client.revoke(_require_uid(uid), reason, message)

    return effect


def rekey_object(client: KmipClient, uid: str, object_type: ObjectType, offset_days: int | None) -> str:
    """Dispatch a rekey by object type; public keys are refused locally."""
    if object_type is ObjectType.SYMMETRIC_KEY:
        return client.rekey(uid, offset_days)
    if object_type is ObjectType.PRIVATE_KEY:
        return client.rekey_key_pair(uid, offset_days)
    if object_type is ObjectType.PUBLIC_KEY:
        raise ActionError("Cannot rekey a public-key. Please rekey the private-key instead.")
    raise ActionError(f"Cannot rekey an object of type {object_type.value}")


def rekey_effect(offset_days: int | None = None, object_type: ObjectType | None = None) -> Effect:
    """Rekey the target; when ``object_type`` is unknown it is fetched first."""
    if offset_days is not None and offset_days < 0:
        raise InvariantError(f"negative rekey offset: {offset_days}")

    def effect(client: KmipClient, uid: str | None) -> str:
        target = _require_uid(uid)
        kind = object_type
        if kind is None:
            kind = client.get_attributes(target, ATTR_OBJECT_TYPE).object_type()
            if kind is None:
                raise ActionError("Undefined KMIP object type")
        return rekey_object(client, target, kind, offset_days)

    return effect


def create_symmetric_key_effect(length: int, name: str = "") -> Effect:
    if length not in AES_KEY_SIZES:
        raise InvariantError(f"unsupported AES key size: {length}")
    spec = KeySpec(algorithm="AES", length=length, usage_mask=SYMMETRIC_KEY_USAGE, name=name or None)

    def effect(client: KmipClient, uid: str | None) -> str:
        return client.create(spec)

    return effect


def _key_pair_spec(algorithm: str, length: int, name: str, curve: str | None = None) -> KeyPairSpec:
    return KeyPairSpec(
        algorithm=algorithm,
        length=length,
        private_usage_mask=UsageMask.SIGN,
        public_usage_mask=UsageMask.VERIFY,
        curve=curve,
        private_name=f"{name}-Private" if name else None,
        public_name=f"{name}-Public" if name else None,
    )


def create_rsa_key_pair_effect(modulus: int, name: str = "") -> Effect:
    if modulus not in RSA_MODULUS_SIZES:
        raise InvariantError(f"unsupported RSA modulus size: {modulus}")
    spec = _key_pair_spec("RSA", modulus, name)

    def effect(client: KmipClient, uid: str | None) -> tuple[str, str]:
        return client.create_key_pair(spec)

    return effect


def create_ec_key_pair_effect(curve: str, name: str = "") -> Effect:
    if curve not in EC_CURVES:
        raise InvariantError(f"unsupported EC curve: {curve}")
    spec = _key_pair_spec("ECDSA", EC_CURVES[curve], name, curve=curve.replace("-", "_"))

    def effect(client: KmipClient, uid: str | None) -> tuple[str, str]:
        return client.create_key_pair(spec)

    return effect


# Payload decoding


def _b64decode(text: str) -> bytes:
    return base64.b64decode("".join(text.split()), validate=True)


def decode_secret(text: str, is_base64: bool) -> bytes:
    if not is_base64:
        return text.encode("utf-8")
    try:
        return _b64decode(text)
    except (binascii.Error, ValueError) as exc:
        raise ActionError(f"Invalid secret value: {exc}") from exc


def decode_key_material(text: str, fmt: str) -> bytes:
    try:
        if fmt == FORMAT_HEX:
            return bytes.fromhex("".join(text.split()))
        if fmt == FORMAT_BASE64:
            return _b64decode(text)
    except (binascii.Error, ValueError) as exc:
        raise ActionError(f"Invalid key material: {exc}") from exc
    raise InvariantError(f"unknown key format: {fmt}")


def parse_certificate_pem(text: str) -> bytes:
    """Return the DER encoding of a PEM certificate."""
    try:
        certificate = x509.load_pem_x509_certificate(text.strip().encode("utf-8"))
    except ValueError as exc:
        raise ActionError(f"Invalid PEM certificate: {exc}") from exc
    return certificate.public_bytes(serialization.Encoding.DER)


def _key_algorithm(key: object) -> tuple[str, int]:
    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        return "RSA", key.key_size
    if isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        return "ECDSA", key.curve.key_size
    if isinstance(key, (dsa.DSAPrivateKey, dsa.DSAPublicKey)):
        return "DSA", key.key_size
    raise ActionError(f"Unsupported key type: {type(key).__name__}")


def parse_private_key_pem(text: str) -> tuple[str, int, bytes]:
    """Return ``(algorithm, length, pkcs8_der)`` for a PEM private key."""
    try:
        key = serialization.load_pem_private_key(text.strip().encode("utf-8"), password=None)
    except (ValueError, TypeError) as exc:
        raise ActionError(f"Invalid PEM private key: {exc}") from exc
    algorithm, length = _key_algorithm(key)
    der = key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    return algorithm, length, der


def parse_public_key_pem(text: str) -> tuple[str, int, bytes]:
    """Return ``(algorithm, length, spki_der)`` for a PEM public key."""
    try:
        key = serialization.load_pem_public_key(text.strip().encode("utf-8"))
    except ValueError as exc:
        raise ActionError(f"Invalid PEM public key: {exc}") from exc
    algorithm, length = _key_algorithm(key)
    der = key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return algorithm, length, der


def _register(build_spec: Callable[[], RegisterSpec]) -> Effect:
    def effect(client: KmipClient, uid: str | None) -> str:
        spec = build_spec()
        logger.debug("registering %s object", spec.object_type.value)
        return client.register(spec)

    return effect


def register_secret_effect(value: str, is_base64: bool, name: str = "") -> Effect:
    return _register(
        lambda: RegisterSpec(
            object_type=ObjectType.SECRET_DATA,
            value=decode_secret(value, is_base64),
            name=name or None,
            data_type="PASSWORD",
        )
    )


def register_certificate_effect(pem: str, name: str = "") -> Effect:
    return _register(
        lambda: RegisterSpec(
            object_type=ObjectType.CERTIFICATE,
            value=parse_certificate_pem(pem),
            name=name or None,
        )
    )


def register_symmetric_key_effect(material: str, fmt: str, name: str = "") -> Effect:
    def build_spec() -> RegisterSpec:
        key = decode_key_material(material, fmt)
        return RegisterSpec(
            object_type=ObjectType.SYMMETRIC_KEY,
            value=key,
            name=name or None,
            algorithm="AES",
            length=len(key) * 8,
            usage_mask=SYMMETRIC_KEY_USAGE,
        )

    return _register(build_spec)


def register_private_key_effect(pem: str, name: str = "") -> Effect:
    def build_spec() -> RegisterSpec:
        algorithm, length, der = parse_private_key_pem(pem)
        return RegisterSpec(
            object_type=ObjectType.PRIVATE_KEY,
            value=der,
            name=name or None,
            algorithm=algorithm,
            length=length,
            key_format="PKCS_8",
            usage_mask=UsageMask.SIGN,
        )

    return _register(build_spec)


def register_public_key_effect(pem: str, name: str = "") -> Effect:
    def build_spec() -> RegisterSpec:
        algorithm, length, der = parse_public_key_pem(pem)
        return RegisterSpec(
            object_type=ObjectType.PUBLIC_KEY,
            value=der,
            name=name or None,
            algorithm=algorithm,
            length=length,
            key_format="X_509",
            usage_mask=UsageMask.VERIFY,
        )

    return _register(build_spec)


__all__ = [
    "AES_KEY_SIZES",
    "EC_CURVES",
    "FORMAT_BASE64",
    "FORMAT_HEX",
    "RSA_MODULUS_SIZES",
    "activate_effect",
    "create_ec_key_pair_effect",
    "create_rsa_key_pair_effect",
    "create_symmetric_key_effect",
    "decode_key_material",
    "decode_secret",
    "destroy_effect",
    "parse_certificate_pem",
    "parse_private_key_pem",
    "parse_public_key_pem",
    "rekey_effect",
    "rekey_object",
    "register_certificate_effect",
    "register_private_key_effect",
    "register_public_key_effect",
    "register_secret_effect",
    "register_symmetric_key_effect",
]
