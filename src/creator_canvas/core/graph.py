"""
Graph Store - The live working graph of the active board.

This module owns the authoritative `nodes` / `edges` collections and the
selection that refers to them. The rules it enforces:
- every edge added through `add_edge` or `load_graph` references existing nodes
- deleting a node removes every edge touching it and prunes the selection,
  as one state transition
- bulk replacements reconcile the selection

`set_nodes` / `set_edges` deliberately skip cross-validation so a UI can
load nodes and edges in two steps. Between the two calls edges may dangle;
`dangling_edges()` reports them and `load_graph` is the atomic alternative.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from creator_canvas.core.errors import (
    DanglingEdgeError,
    DuplicateEdgeError,
    DuplicateNodeError,
    IntegrityError,
)
from creator_canvas.core.models import CanvasEdge, CanvasNode
from creator_canvas.core.selection import Selection


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphSnapshot:
    """Deep copy of the graph handed to the execution engine."""
    nodes: tuple[CanvasNode, ...]
    edges: tuple[CanvasEdge, ...]


def index_nodes(nodes: Iterable[CanvasNode]) -> dict[str, CanvasNode]:
    indexed: dict[str, CanvasNode] = {}
    for node in nodes:
        if node.id in indexed:
            raise DuplicateNodeError(node.id)
        indexed[node.id] = node
    return indexed


def check_edge_ids(edges: Iterable[CanvasEdge]) -> None:
    seen: set[str] = set()
    for edge in edges:
        if edge.id in seen:
            raise DuplicateEdgeError(edge.id)
        seen.add(edge.id)


def _missing_endpoints(edge: CanvasEdge, node_ids: Iterable[str]) -> list[str]:
    present = node_ids if isinstance(node_ids, (set, dict)) else set(node_ids)
    missing = []
    if edge.source not in present:
        missing.append(edge.source)
    if edge.target not in present and edge.target != edge.source:
        missing.append(edge.target)
    return missing


class GraphStore:
    """
    Live nodes, edges and selection of the canvas.

    All mutations are synchronous. Every public mutator either completes
    or raises before changing anything.
    """

    def __init__(self):
        self._nodes: dict[str, CanvasNode] = {}
        self._edges: list[CanvasEdge] = []
        self._selection = Selection()

    # --- Read access ---

    @property
    def nodes(self) -> list[CanvasNode]:
        """Get all nodes in insertion order (copy of the list)."""
        return list(self._nodes.values())

    @property
    def edges(self) -> list[CanvasEdge]:
        """Get all edges (copy of the list)."""
        return list(self._edges)

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def selected_nodes(self) -> list[str]:
        return self._selection.selected_nodes

    @property
    def selected_edges(self) -> list[str]:
        return self._selection.selected_edges

    def get_node(self, node_id: str) -> CanvasNode | None:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> CanvasEdge | None:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def edges_for_node(self, node_id: str) -> list[CanvasEdge]:
        """Get every edge where the node is the source or the target."""
        return [e for e in self._edges if e.touches(node_id)]

    def dangling_edges(self) -> list[CanvasEdge]:
        """Edges whose source or target is not currently a node."""
        return [e for e in self._edges if _missing_endpoints(e, self._nodes)]

    def snapshot(self) -> GraphSnapshot:
        """Deep copy of the graph for the execution engine."""
        return GraphSnapshot(
            nodes=tuple(copy.deepcopy(list(self._nodes.values()))),
            edges=tuple(copy.deepcopy(self._edges)),
        )

    # --- Bulk replacement ---

    def set_nodes(self, nodes: Iterable[CanvasNode]) -> None:
        """
        Replace all nodes.

        Edges are not checked against the new nodes here; the selection
        is reconciled.
        """
        self._nodes = index_nodes(nodes)
        self._reconcile_selection()

    def set_edges(self, edges: Iterable[CanvasEdge]) -> None:
        """Replace all edges without checking their endpoints."""
        new_edges = list(edges)
        check_edge_ids(new_edges)
        self._edges = new_edges
        self._reconcile_selection()

    def load_graph(
        self,
        nodes: Iterable[CanvasNode],
        edges: Iterable[CanvasEdge],
        strict: bool = True,
    ) -> None:
        """
        Replace nodes and edges together, validating before swapping.

        With `strict=False` dangling edges are accepted (ids are still
        checked), matching what a two-step `set_nodes` / `set_edges`
        load would produce.

        Raises:
            DuplicateNodeError / DuplicateEdgeError: Repeated ids
            DanglingEdgeError: An edge references a missing node
        """
        new_nodes = index_nodes(nodes)
        new_edges = list(edges)
        check_edge_ids(new_edges)
        if strict:
            for edge in new_edges:
                missing = _missing_endpoints(edge, new_nodes)
                if missing:
                    raise DanglingEdgeError(edge.id, missing)

        self._nodes = new_nodes
        self._edges = new_edges
        self._reconcile_selection()

    def clear(self) -> None:
        """Remove all nodes and edges, and clear the selection."""
        self._nodes = {}
        self._edges = []
        self._selection.clear()

    # --- Node operations ---

    def add_node(self, node: CanvasNode) -> None:
        """
        Append a node.

        Raises:
            DuplicateNodeError: A node with the same id exists.
        """
        if node.id in self._nodes:
            raise DuplicateNodeError(node.id)
        self._nodes[node.id] = node

    def update_node(
        self,
        node_id: str,
        changes: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> CanvasNode | None:
        """
        Shallow-merge changes into a node.

        Returns the updated node, or None if the node does not exist.
        """
        merged = dict(changes or {})
        merged.update(kwargs)

        node = self._nodes.get(node_id)
        if node is None:
            return None
        if merged.get("id", node_id) != node_id:
            raise IntegrityError(f"Cannot change the id of node {node_id!r}")

        updated = node.merged(merged)
        self._nodes[node_id] = updated
        return updated

    def delete_node(self, node_id: str) -> CanvasNode | None:
        """
        Remove a node, every edge touching it, and their selection entries.

        Returns the removed node, or None if not found.
        """
        if node_id not in self._nodes:
            return None

        nodes = {nid: n for nid, n in self._nodes.items() if nid != node_id}
        edges = [e for e in self._edges if not e.touches(node_id)]
        removed = self._nodes[node_id]
        dropped = len(self._edges) - len(edges)

        self._nodes = nodes
        self._edges = edges
        self._reconcile_selection()

        logger.debug("Deleted node %s with %d edge(s)", node_id, dropped)
        return removed

    # --- Edge operations ---

    def add_edge(self, edge: CanvasEdge) -> None:
        """
        Append an edge.

        Raises:
            DanglingEdgeError: Source or target is not an existing node.
            DuplicateEdgeError: An edge with the same id exists.
        """
        missing = _missing_endpoints(edge, self._nodes)
        if missing:
            raise DanglingEdgeError(edge.id, missing)
        if self.get_edge(edge.id) is not None:
            raise DuplicateEdgeError(edge.id)
        self._edges = [*self._edges, edge]

    def delete_edge(self, edge_id: str) -> CanvasEdge | None:
        """Remove an edge by ID. Returns it, or None if not found."""
        removed = self.get_edge(edge_id)
        if removed is None:
            return None
        self._edges = [e for e in self._edges if e.id != edge_id]
        self._reconcile_selection()
        return removed

    # --- Selection ---

    def set_selected_nodes(self, ids: Iterable[str]) -> None:
        self._selection.set_nodes(ids, self._nodes)

    def set_selected_edges(self, ids: Iterable[str]) -> None:
        self._selection.set_edges(ids, (e.id for e in self._edges))

    def clear_selection(self) -> None:
        self._selection.clear()

    def _reconcile_selection(self) -> None:
        self._selection.reconcile(self._nodes, (e.id for e in self._edges))

    # --- Utility ---

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self._nodes
