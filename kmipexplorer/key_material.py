"""Read-only viewer for the material returned by ``get``.

Shows a decoded, type-specific rendering and toggles to a raw JSON dump.
The visible text can be copied to the system clipboard.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .highlight import DEFAULT_STYLE, highlight_json, sanitize_terminal_text
from .kmip.types import ManagedObject, ObjectType

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading ..."


def _decode_utf8_or_hex(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.hex()


def _certificate_pem(data: bytes) -> str:
    certificate = x509.load_der_x509_certificate(data)
    return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")


def _private_key_pem(data: bytes) -> str:
    key = serialization.load_der_private_key(data, password=None)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


def _public_key_pem(data: bytes) -> str:
    key = serialization.load_der_public_key(data)
    return key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def raw_dump(obj: ManagedObject) -> str:
    """Structured JSON view of every field of ``obj``."""
    payload: dict[str, object] = {
        "object_type": obj.object_type.value,
        "key_format": obj.key_format,
        "algorithm": obj.algorithm,
        "length": obj.length,
        "data_type": obj.data_type,
    }
    payload.update(obj.details)
    payload["value"] = obj.value.hex()
    return json.dumps({key: value for key, value in payload.items() if value is not None}, indent=2, default=str)


def decode_material(obj: ManagedObject) -> str:
    """Type-specific rendering; decode failures come back as ``Error: ...``."""
    try:
        if obj.object_type is ObjectType.SECRET_DATA:
            return _decode_utf8_or_hex(obj.value)
        if obj.object_type is ObjectType.SYMMETRIC_KEY:
            return obj.value.hex()
        if obj.object_type is ObjectType.CERTIFICATE:
            return _certificate_pem(obj.value)
        if obj.object_type is ObjectType.PRIVATE_KEY:
            return _private_key_pem(obj.value)
        if obj.object_type is ObjectType.PUBLIC_KEY:
            return _public_key_pem(obj.value)
    except (ValueError, TypeError) as exc:
        return f"Error: {exc}"
    return raw_dump(obj)


# Tried in order; the first command that exits 0 wins. Platforms missing here
# are assumed to run Wayland or X11.
CLIPBOARD_TOOLS: dict[str, tuple[tuple[str, ...], ...]] = {
    "darwin": (("pbcopy",),),
    "win32": (("clip",),),
    "linux": (
        ("wl-copy",),
        ("xclip", "-selection", "clipboard"),
        ("xsel", "--clipboard", "--input"),
    ),
}
CLIPBOARD_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class ClipboardResult:
    """Which clipboard tool took the text, and which ones were attempted."""

    tool: str | None = None
    tried: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.tool is not None

    def status(self) -> str:
        if self.tool is not None:
            return f"Copied to clipboard ({self.tool})"
        if self.tried:
            return f"Copy to clipboard failed (tried {', '.join(self.tried)})"
        return "No clipboard tool found"


def copy_text_to_clipboard(text: str, platform: str = sys.platform) -> ClipboardResult:
    """Pipe ``text`` into the first installed clipboard tool that accepts it."""
    tried: list[str] = []
    for command in CLIPBOARD_TOOLS.get(platform, CLIPBOARD_TOOLS["linux"]):
        tool = command[0]
        if shutil.which(tool) is None:
            continue
        tried.append(tool)
        try:
            proc = subprocess.run(command, input=text, text=True, timeout=CLIPBOARD_TIMEOUT_SECONDS, check=False)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("clipboard tool %s failed: %s", tool, exc)
            continue
        if proc.returncode == 0:
            logger.debug("copied %d characters with %s", len(text), tool)
            return ClipboardResult(tool, tuple(tried))
        logger.debug("clipboard tool %s exited with %d", tool, proc.returncode)
    return ClipboardResult(tried=tuple(tried))


class KeyMaterialViewer:
    """Display-only page; Tab switches format, ``c`` copies, Esc/q closes."""

    def __init__(
        self,
        copy_text: Callable[[str], ClipboardResult] = copy_text_to_clipboard,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
    ) -> None:
        self._copy_text = copy_text
        self._style = style
        self._no_color = no_color
        self._on_done: Callable[[], None] | None = None
        self.obj: ManagedObject | None = None
        self.raw = False
        self.scroll = 0
        self.status = ""

    def on_done(self, callback: Callable[[], None]) -> KeyMaterialViewer:
        self._on_done = callback
        return self

    def set_content(self, obj: ManagedObject | None) -> None:
        self.obj = obj
        self.scroll = 0
        self.status = ""

    def text(self) -> str:
        """Plain text currently shown, as copied to the clipboard."""
        if self.obj is None:
            return LOADING_TEXT
        if self.raw:
            return raw_dump(self.obj)
        return sanitize_terminal_text(decode_material(self.obj))

    def lines(self) -> list[str]:
        text = self.text()
        if self.raw and self.obj is not None:
            text = highlight_json(text, self._style, self._no_color)
        return text.split("\n")

    def toggle_format(self) -> None:
        self.raw = not self.raw
        self.scroll = 0

    def copy(self) -> bool:
        result = self._copy_text(self.text())
        self.status = result.status()
        return bool(result)

    def done(self) -> None:
        try:
            if self._on_done is not None:
                self._on_done()
        finally:
            self.set_content(None)
            self.raw = False

    def handle_key(self, key: str) -> bool:
        if key == "TAB":
            self.toggle_format()
            return True
        if key == "c":
            self.copy()
            return True
        if key in {"ESC", "q", "ENTER_CR", "ENTER_LF"}:
            self.done()
            return True
        if key in {"DOWN", "j"}:
            self.scroll = min(self.scroll + 1, max(0, len(self.lines()) - 1))
            return True
        if key in {"UP", "k"}:
            self.scroll = max(0, self.scroll - 1)
            return True
        if key == "HOME":
            self.scroll = 0
            return True
        return False


__all__ = [
    "CLIPBOARD_TOOLS",
    "ClipboardResult",
    "KeyMaterialViewer",
    "copy_text_to_clipboard",
    "decode_material",
    "raw_dump",
]
