"""Error taxonomy for the storage layer.

NotFoundError means a lookup, update or delete matched zero rows.
StorageError subclasses wrap engine failures; their messages are for
server-side logs only and are never sent to clients.
"""


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""


class StorageError(Exception):
    """Base class for failures raised by the storage engine."""


class QueryError(StorageError):
    """A single statement failed (constraint, connectivity, syntax, row shape)."""


class TransactionError(StorageError):
    """A multi-step transaction aborted and was rolled back."""
