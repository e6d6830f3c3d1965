"""Runtime orchestration: update queue, terminal control, main loop and bootstrap.

Only ``updates`` is imported eagerly; the loop and app entry points import the
controller, which itself depends on ``updates``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .updates import BackgroundRunner, UpdateQueue

if TYPE_CHECKING:
    from .app import ExplorerOptions
    from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming


def run_explorer(*args, **kwargs):
    """Lazily import the explorer entrypoint to avoid package-import cycles."""
    from .app import run_explorer as _run_explorer

    return _run_explorer(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name in {"RuntimeLoopCallbacks", "RuntimeLoopTiming"}:
        from . import loop as _loop

        return getattr(_loop, name)
    if name == "ExplorerOptions":
        from . import app as _app

        return _app.ExplorerOptions
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BackgroundRunner",
    "ExplorerOptions",
    "RuntimeLoopCallbacks",
    "RuntimeLoopTiming",
    "UpdateQueue",
    "run_explorer",
    "run_main_loop",
]
