from __future__ import annotations


class NotFound(LookupError):
    """The row does not exist or is not owned by the caller. The two are indistinguishable."""


class PersistFailed(RuntimeError):
    pass


class QueryFailed(RuntimeError):
    pass


class StorageUnavailable(RuntimeError):
    """The object store could not read, write or remove a document."""
