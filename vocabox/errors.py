"""
Exception types raised at the store, remote and session boundaries.
"""


class VocaboxError(Exception):
    """Base class for all vocabox errors."""


class StoreError(VocaboxError):
    """A local durable-store read or write failed."""


class RemoteStoreError(VocaboxError):
    """An upload to (or fetch from) the remote store failed."""


class ListNotFoundError(VocaboxError):
    """No vocabulary list with the given id exists."""


class ProtectedListError(VocaboxError):
    """Built-in lists cannot be deleted or edited by the user."""


class SessionStateError(VocaboxError):
    """The requested operation is not valid in the session's current phase."""
