"""Input layer: terminal key decoding and key-binding dispatch."""

from .key_registry import KeyBinding, KeyRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

ENTER_KEYS = frozenset({"ENTER_CR", "ENTER_LF"})

__all__ = [
    "ENTER_KEYS",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyRegistry",
    "_PENDING_BYTES",
    "read_key",
]
