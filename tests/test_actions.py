"""Action protocol and effect builders.

Effects are exercised against a recording fake client; no server involved.
"""

from __future__ import annotations

import base64
import unittest

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from kmipexplorer.actions import CONFIRMED_OPERATIONS, ActionRequest, Operation, Reconcile, confirm_prompt
from kmipexplorer.actions import effects
from kmipexplorer.errors import ActionError, InvariantError
from kmipexplorer.kmip.types import (
    SYMMETRIC_KEY_USAGE,
    Attribute,
    AttributeSet,
    AttributeValue,
    ObjectType,
    RevocationReason,
    UsageMask,
)


class _RecordingClient:
    def __init__(self, object_type: str | None = None) -> None:
        self.calls: list[tuple] = []
        self._object_type = object_type

    def __getattr__(self, name: str):
        def record(*args, **kwargs):
            self.calls.append((name, *args))
            if name == "get_attributes":
                attributes = ()
                if self._object_type is not None:
                    attributes = (Attribute("Object Type", AttributeValue.enum(self._object_type)),)
                return AttributeSet(args[0], attributes)
            if name == "create_key_pair":
                return ("pub-1", "priv-1")
            return "new-uid"

        return record


class ActionRequestTests(unittest.TestCase):
    def test_destructive_operations_carry_prompts(self) -> None:
        for operation, title, question in (
            (Operation.REVOKE, "Confirm Revoke", "Revoke object k1 ?"),
            (Operation.DESTROY, "Confirm Destroy", "Destroy object k1 ?"),
            (Operation.REKEY, "Confirm Rekeying", "Rekey object k1 ?"),
        ):
            request = ActionRequest.build(operation, lambda client, uid: None, "k1")
            self.assertTrue(request.needs_confirmation)
            self.assertEqual(request.prompt.title, title)
            self.assertEqual(request.prompt.question, question)

    def test_other_operations_run_without_confirmation(self) -> None:
        self.assertIsNone(confirm_prompt(Operation.ACTIVATE, "k1"))
        self.assertFalse(ActionRequest.build(Operation.CREATE, lambda client, uid: None).needs_confirmation)

    def test_exactly_the_confirmed_operations_prompt(self) -> None:
        prompted = {operation for operation in Operation if confirm_prompt(operation, "k1") is not None}

        self.assertEqual(prompted, CONFIRMED_OPERATIONS)
        self.assertEqual(prompted, {Operation.REVOKE, Operation.DESTROY, Operation.REKEY})

    def test_reconcile_policy(self) -> None:
        noop = lambda client, uid: None  # noqa: E731
        self.assertIs(ActionRequest.build(Operation.DESTROY, noop, "k").reconcile, Reconcile.REMOVE)
        self.assertIs(ActionRequest.build(Operation.ACTIVATE, noop, "k").reconcile, Reconcile.UPDATE)
        self.assertIs(ActionRequest.build(Operation.REVOKE, noop, "k").reconcile, Reconcile.UPDATE)
        self.assertIs(ActionRequest.build(Operation.REKEY, noop, "k").reconcile, Reconcile.UPDATE)
        self.assertIs(ActionRequest.build(Operation.CREATE, noop).reconcile, Reconcile.REFRESH)
        self.assertIs(ActionRequest.build(Operation.REGISTER, noop).reconcile, Reconcile.REFRESH)

    def test_target_rules(self) -> None:
        noop = lambda client, uid: None  # noqa: E731
        with self.assertRaises(InvariantError):
            ActionRequest.build(Operation.DESTROY, noop)
        with self.assertRaises(InvariantError):
            ActionRequest.build(Operation.CREATE, noop, "k1")

    def test_execute_runs_effect_once(self) -> None:
        calls: list[str | None] = []
        request = ActionRequest.build(Operation.ACTIVATE, lambda client, uid: calls.append(uid), "k1")

        request.execute(object())

        self.assertEqual(calls, ["k1"])
        self.assertTrue(request.settled)
        with self.assertRaises(InvariantError):
            request.execute(object())
        with self.assertRaises(InvariantError):
            request.discard()
        self.assertEqual(calls, ["k1"])

    def test_discarded_request_cannot_run(self) -> None:
        calls: list[str | None] = []
        request = ActionRequest.build(Operation.DESTROY, lambda client, uid: calls.append(uid), "k1")

        request.discard()

        with self.assertRaises(InvariantError):
            request.execute(object())
        self.assertEqual(calls, [])


class SimpleEffectTests(unittest.TestCase):
    def test_activate_destroy_revoke(self) -> None:
        client = _RecordingClient()

        effects.activate_effect()(client, "k1")
        effects.destroy_effect()(client, "k2")
        effects.revoke_effect(RevocationReason.KEY_COMPROMISE, "leaked")(client, "k3")

        self.assertEqual(
            client.calls,
            [
                ("activate", "k1"),
                ("destroy", "k2"),
                ("revoke", "k3", RevocationReason.KEY_COMPROMISE, "leaked"),
            ],
        )


class RekeyEffectTests(unittest.TestCase):
    def test_symmetric_key_uses_rekey(self) -> None:
        client = _RecordingClient()

        effects.rekey_effect(3, ObjectType.SYMMETRIC_KEY)(client, "k1")

        self.assertEqual(client.calls, [("rekey", "k1", 3)])

    def test_private_key_uses_rekey_key_pair(self) -> None:
        client = _RecordingClient()

        effects.rekey_effect(None, ObjectType.PRIVATE_KEY)(client, "p1")

        self.assertEqual(client.calls, [("rekey_key_pair", "p1", None)])

    def test_public_key_fails_without_any_request(self) -> None:
        client = _RecordingClient()

        with self.assertRaises(ActionError) as ctx:
            effects.rekey_effect(None, ObjectType.PUBLIC_KEY)(client, "pub")

        self.assertEqual(str(ctx.exception), "Cannot rekey a public-key. Please rekey the private-key instead.")
        self.assertEqual(client.calls, [])

    def test_other_types_are_refused(self) -> None:
        with self.assertRaises(ActionError) as ctx:
            effects.rekey_effect(None, ObjectType.CERTIFICATE)(_RecordingClient(), "c1")

        self.assertEqual(str(ctx.exception), "Cannot rekey an object of type Certificate")

    def test_unknown_type_is_fetched_first(self) -> None:
        client = _RecordingClient(object_type="PrivateKey")

        effects.rekey_effect(1)(client, "p1")

        self.assertEqual(client.calls, [("get_attributes", "p1", "Object Type"), ("rekey_key_pair", "p1", 1)])

    def test_undetermined_type_is_an_action_error(self) -> None:
        client = _RecordingClient()

        with self.assertRaises(ActionError):
            effects.rekey_effect()(client, "x")

    def test_negative_offset_is_an_invariant_violation(self) -> None:
        with self.assertRaises(InvariantError):
            effects.rekey_effect(-1, ObjectType.SYMMETRIC_KEY)


class CreateEffectTests(unittest.TestCase):
    def test_aes_key(self) -> None:
        client = _RecordingClient()

        effects.create_symmetric_key_effect(256, "k1")(client, None)

        (name, spec), = client.calls
        self.assertEqual(name, "create")
        self.assertEqual((spec.algorithm, spec.length, spec.name), ("AES", 256, "k1"))
        self.assertEqual(spec.usage_mask, SYMMETRIC_KEY_USAGE)

    def test_rsa_pair_names_and_usages(self) -> None:
        client = _RecordingClient()

        effects.create_rsa_key_pair_effect(2048, "signer")(client, None)

        (_name, spec), = client.calls
        self.assertEqual((spec.algorithm, spec.length), ("RSA", 2048))
        self.assertEqual(spec.private_name, "signer-Private")
        self.assertEqual(spec.public_name, "signer-Public")
        self.assertEqual(spec.private_usage_mask, UsageMask.SIGN)
        self.assertEqual(spec.public_usage_mask, UsageMask.VERIFY)

    def test_ec_pair_without_name(self) -> None:
        client = _RecordingClient()

        effects.create_ec_key_pair_effect("P-384")(client, None)

        (_name, spec), = client.calls
        self.assertEqual((spec.algorithm, spec.length, spec.curve), ("ECDSA", 384, "P_384"))
        self.assertIsNone(spec.private_name)
        self.assertIsNone(spec.public_name)

    def test_unsupported_sizes_are_rejected(self) -> None:
        with self.assertRaises(InvariantError):
            effects.create_symmetric_key_effect(512)
        with self.assertRaises(InvariantError):
            effects.create_rsa_key_pair_effect(1024)
        with self.assertRaises(InvariantError):
            effects.create_ec_key_pair_effect("P-192")


class RegisterEffectTests(unittest.TestCase):
    def test_secret_plain_and_base64(self) -> None:
        client = _RecordingClient()

        effects.register_secret_effect("s3cret", False, "db")(client, None)
        effects.register_secret_effect(base64.b64encode(b"s3cret").decode(), True)(client, None)

        plain = client.calls[0][1]
        encoded = client.calls[1][1]
        self.assertEqual(plain.value, b"s3cret")
        self.assertEqual(plain.name, "db")
        self.assertEqual(plain.data_type, "PASSWORD")
        self.assertEqual(encoded.value, b"s3cret")

    def test_invalid_base64_fails_before_sending(self) -> None:
        client = _RecordingClient()

        with self.assertRaises(ActionError):
            effects.register_secret_effect("not base64!!", True)(client, None)
        self.assertEqual(client.calls, [])

    def test_aes_key_from_hex_and_base64(self) -> None:
        client = _RecordingClient()
        key = bytes(range(16))

        effects.register_symmetric_key_effect(key.hex(), effects.FORMAT_HEX)(client, None)
        effects.register_symmetric_key_effect(base64.b64encode(key).decode(), effects.FORMAT_BASE64)(client, None)

        for _name, spec in client.calls:
            self.assertEqual(spec.value, key)
            self.assertEqual((spec.algorithm, spec.length), ("AES", 128))
            self.assertEqual(spec.usage_mask, SYMMETRIC_KEY_USAGE)

    def test_bad_hex_is_an_action_error(self) -> None:
        with self.assertRaises(ActionError):
            effects.register_symmetric_key_effect("zz", effects.FORMAT_HEX)(_RecordingClient(), None)

    def test_private_and_public_pem(self) -> None:
        key = ec.generate_private_key(ec.SECP256R1())
        private_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.TraditionalOpenSSL,
            serialization.NoEncryption(),
        ).decode()
        public_pem = key.public_key().public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()
        client = _RecordingClient()

        effects.register_private_key_effect(private_pem, "ec")(client, None)
        effects.register_public_key_effect(public_pem, "ec")(client, None)

        private_spec = client.calls[0][1]
        public_spec = client.calls[1][1]
        self.assertIs(private_spec.object_type, ObjectType.PRIVATE_KEY)
        self.assertEqual((private_spec.algorithm, private_spec.length, private_spec.key_format), ("ECDSA", 256, "PKCS_8"))
        self.assertEqual(private_spec.usage_mask, UsageMask.SIGN)
        self.assertIs(public_spec.object_type, ObjectType.PUBLIC_KEY)
        self.assertEqual(public_spec.key_format, "X_509")
        self.assertEqual(public_spec.usage_mask, UsageMask.VERIFY)
        self.assertEqual(
            serialization.load_der_public_key(public_spec.value).public_numbers(),
            key.public_key().public_numbers(),
        )

    def test_garbage_pem_is_an_action_error(self) -> None:
        client = _RecordingClient()
        for build in (
            effects.register_certificate_effect,
            effects.register_private_key_effect,
            effects.register_public_key_effect,
        ):
            with self.assertRaises(ActionError):
                build("-----BEGIN NOTHING-----")(client, None)
        self.assertEqual(client.calls, [])


if __name__ == "__main__":
    unittest.main()
