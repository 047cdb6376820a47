"""
Errors - Exception hierarchy for the canvas store.

Integrity errors are raised before any state is touched, so a caller
that catches them is left with an unchanged, usable store.
"""

from __future__ import annotations


class CanvasError(Exception):
    """Base exception for all canvas store errors."""
    pass


class IntegrityError(CanvasError):
    """A mutation would break the graph's referential integrity."""
    pass


class DanglingEdgeError(IntegrityError):
    """An edge references a node that is not in the graph."""

    def __init__(self, edge_id: str, missing: list[str]):
        self.edge_id = edge_id
        self.missing = missing
        super().__init__(
            f"Edge {edge_id!r} references missing node(s): {', '.join(missing)}"
        )


class DuplicateNodeError(IntegrityError):
    """A node id is already present in the graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id!r} already exists")


class DuplicateEdgeError(IntegrityError):
    """An edge id is already present in the graph."""

    def __init__(self, edge_id: str):
        self.edge_id = edge_id
        super().__init__(f"Edge {edge_id!r} already exists")


class ExecutionStateError(CanvasError):
    """Execution slot written in an inconsistent way."""
    pass


class PersistenceError(CanvasError):
    """Storage could not be read or written."""
    pass


class RemoteError(CanvasError):
    """A remote resource API call failed."""

    status: int | None = None

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AuthenticationError(RemoteError):
    """Credentials missing or rejected by the backend."""
    pass


class NotFoundError(RemoteError):
    """The requested remote resource does not exist."""
    pass
