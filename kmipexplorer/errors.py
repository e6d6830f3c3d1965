"""Exception hierarchy shared by the controller, forms, and client adapter.

Everything deriving from ``ExplorerError`` is recoverable and ends up in the
error modal. Anything else reaching the controller boundary is a bug.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base class for operator-facing, recoverable failures."""


class ClientError(ExplorerError):
    """Server or network failure reported by the KMIP client."""


class ActionError(ExplorerError):
    """Domain-logic failure detected locally, before any request is sent."""


class InvariantError(RuntimeError):
    """An impossible state was reached; the UI is supposed to prevent it."""


__all__ = ["ExplorerError", "ClientError", "ActionError", "InvariantError"]
