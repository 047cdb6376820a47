"""
Selection - Which nodes and edges are currently selected.

The selection never holds an id that is missing from the live graph.
The GraphStore calls `reconcile` after every deletion and bulk
replacement to keep it that way.
"""

from __future__ import annotations

from collections.abc import Iterable


def _unique(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class Selection:
    """Ordered sets of selected node and edge ids."""

    def __init__(self):
        self._nodes: list[str] = []
        self._edges: list[str] = []

    @property
    def selected_nodes(self) -> list[str]:
        return list(self._nodes)

    @property
    def selected_edges(self) -> list[str]:
        return list(self._edges)

    def set_nodes(self, ids: Iterable[str], existing: Iterable[str]) -> None:
        """Replace the node selection, dropping ids not in `existing`."""
        valid = set(existing)
        self._nodes = [i for i in _unique(ids) if i in valid]

    def set_edges(self, ids: Iterable[str], existing: Iterable[str]) -> None:
        """Replace the edge selection, dropping ids not in `existing`."""
        valid = set(existing)
        self._edges = [i for i in _unique(ids) if i in valid]

    def clear(self) -> None:
        self._nodes = []
        self._edges = []

    def reconcile(self, node_ids: Iterable[str], edge_ids: Iterable[str]) -> bool:
        """
        Prune ids that no longer exist.

        Returns True if anything was removed.
        """
        nodes = set(node_ids)
        edges = set(edge_ids)
        kept_nodes = [i for i in self._nodes if i in nodes]
        kept_edges = [i for i in self._edges if i in edges]
        changed = (
            len(kept_nodes) != len(self._nodes)
            or len(kept_edges) != len(self._edges)
        )
        self._nodes = kept_nodes
        self._edges = kept_edges
        return changed

    def is_empty(self) -> bool:
        return not self._nodes and not self._edges

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._nodes or item_id in self._edges
