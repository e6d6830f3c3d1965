from __future__ import annotations

import json
import subprocess
import unittest
from unittest import mock

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from kmipexplorer.key_material import (
    LOADING_TEXT,
    ClipboardResult,
    KeyMaterialViewer,
    copy_text_to_clipboard,
    decode_material,
    raw_dump,
)
from kmipexplorer.kmip.types import ManagedObject, ObjectType


class DecodeMaterialTests(unittest.TestCase):
    def test_secret_as_text_or_hex(self) -> None:
        self.assertEqual(decode_material(ManagedObject(ObjectType.SECRET_DATA, b"hunter2")), "hunter2")
        self.assertEqual(decode_material(ManagedObject(ObjectType.SECRET_DATA, b"\xff\x00")), "ff00")

    def test_symmetric_key_as_hex(self) -> None:
        self.assertEqual(decode_material(ManagedObject(ObjectType.SYMMETRIC_KEY, b"\x01\xab")), "01ab")

    def test_public_key_as_pem(self) -> None:
        key = ec.generate_private_key(ec.SECP256R1()).public_key()
        der = key.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)

        text = decode_material(ManagedObject(ObjectType.PUBLIC_KEY, der))

        self.assertTrue(text.startswith("-----BEGIN PUBLIC KEY-----"))

    def test_undecodable_certificate_reports_error_inline(self) -> None:
        text = decode_material(ManagedObject(ObjectType.CERTIFICATE, b"garbage"))

        self.assertTrue(text.startswith("Error: "))

    def test_other_types_fall_back_to_raw_dump(self) -> None:
        obj = ManagedObject(ObjectType.OPAQUE_OBJECT, b"\x01", details={"opaque_type": "NONE"})

        self.assertEqual(decode_material(obj), raw_dump(obj))
        dumped = json.loads(raw_dump(obj))
        self.assertEqual(dumped["object_type"], "OpaqueObject")
        self.assertEqual(dumped["value"], "01")
        self.assertEqual(dumped["opaque_type"], "NONE")
        self.assertNotIn("algorithm", dumped)


class KeyMaterialViewerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.copied: list[str] = []
        self.closed: list[bool] = []
        self.viewer = KeyMaterialViewer(copy_text=self._copy, no_color=True)
        self.viewer.on_done(lambda: self.closed.append(True))

    def _copy(self, text: str) -> ClipboardResult:
        self.copied.append(text)
        return ClipboardResult("xclip", ("wl-copy", "xclip"))

    def test_loading_placeholder(self) -> None:
        self.assertEqual(self.viewer.text(), LOADING_TEXT)

    def test_tab_toggles_raw_dump_and_copy_takes_visible_text(self) -> None:
        obj = ManagedObject(ObjectType.SECRET_DATA, b"hunter2", data_type="PASSWORD")
        self.viewer.set_content(obj)

        self.viewer.handle_key("c")
        self.viewer.handle_key("TAB")
        self.viewer.handle_key("c")

        self.assertEqual(self.copied[0], "hunter2")
        self.assertEqual(json.loads(self.copied[1])["data_type"], "PASSWORD")
        self.assertEqual(self.viewer.status, "Copied to clipboard (xclip)")

    def test_copy_failure_is_reported(self) -> None:
        viewer = KeyMaterialViewer(copy_text=lambda _text: ClipboardResult(tried=("wl-copy", "xclip")), no_color=True)
        viewer.set_content(ManagedObject(ObjectType.SYMMETRIC_KEY, b"\x00"))

        self.assertFalse(viewer.copy())
        self.assertEqual(viewer.status, "Copy to clipboard failed (tried wl-copy, xclip)")

    def test_escape_closes_and_forgets_content(self) -> None:
        self.viewer.set_content(ManagedObject(ObjectType.SYMMETRIC_KEY, b"\x00"))
        self.viewer.handle_key("TAB")

        self.viewer.handle_key("ESC")

        self.assertEqual(self.closed, [True])
        self.assertIsNone(self.viewer.obj)
        self.assertFalse(self.viewer.raw)

    def test_control_bytes_in_secret_are_escaped(self) -> None:
        self.viewer.set_content(ManagedObject(ObjectType.SECRET_DATA, b"a\x1b[2Jb"))

        self.assertEqual(self.viewer.text(), "a\\x1b[2Jb")


class CopyToClipboardTests(unittest.TestCase):
    def _patch(self, target: str, **kwargs) -> mock.Mock:
        patcher = mock.patch(target, **kwargs)
        self.addCleanup(patcher.stop)
        return patcher.start()

    def test_falls_through_to_the_next_installed_tool(self) -> None:
        installed = {"xclip": "/usr/bin/xclip", "xsel": "/usr/bin/xsel"}
        self._patch("kmipexplorer.key_material.shutil.which", side_effect=installed.get)
        run = self._patch(
            "kmipexplorer.key_material.subprocess.run",
            side_effect=[mock.Mock(returncode=1), mock.Mock(returncode=0)],
        )

        result = copy_text_to_clipboard("0102", platform="linux")

        self.assertEqual(result, ClipboardResult("xsel", ("xclip", "xsel")))
        self.assertEqual(result.status(), "Copied to clipboard (xsel)")
        self.assertEqual(run.call_args.args[0], ("xsel", "--clipboard", "--input"))
        self.assertEqual(run.call_args.kwargs["input"], "0102")

    def test_nothing_installed(self) -> None:
        self._patch("kmipexplorer.key_material.shutil.which", return_value=None)
        run = self._patch("kmipexplorer.key_material.subprocess.run")

        result = copy_text_to_clipboard("0102", platform="darwin")

        self.assertFalse(result)
        self.assertEqual(result.status(), "No clipboard tool found")
        run.assert_not_called()

    def test_hung_tool_counts_as_failure(self) -> None:
        self._patch("kmipexplorer.key_material.shutil.which", side_effect={"wl-copy": "/usr/bin/wl-copy"}.get)
        self._patch(
            "kmipexplorer.key_material.subprocess.run",
            side_effect=subprocess.TimeoutExpired("wl-copy", 5.0),
        )

        result = copy_text_to_clipboard("0102", platform="freebsd14")

        self.assertEqual(result, ClipboardResult(tried=("wl-copy",)))
        self.assertEqual(result.status(), "Copy to clipboard failed (tried wl-copy)")


if __name__ == "__main__":
    unittest.main()
