"""
Board Registry - The collection of boards and the active one.

Loading a board hydrates the GraphStore with copies of the board's nodes
and edges. Editing the live graph never writes back on its own; callers
save explicitly with `update_board(..., nodes=..., edges=...)` or
`save_current_board()`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Any

from creator_canvas.core.errors import IntegrityError
from creator_canvas.core.graph import GraphStore, check_edge_ids, index_nodes
from creator_canvas.core.models import (
    BOARD_FIELDS,
    Board,
    BoardCategory,
    Viewport,
    now_iso,
)


logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = ("id", "created_at")


class BoardRegistry:
    """
    Manages board lifecycle: creation, activation, update, deletion.

    The registry owns the board collection; the live graph belongs to
    the GraphStore passed in.
    """

    def __init__(self, graph: GraphStore, boards: list[Board] | None = None):
        self._graph = graph
        self._boards: list[Board] = list(boards or [])
        self._current: Board | None = None

    @property
    def boards(self) -> list[Board]:
        """Get all boards (copy of the list)."""
        return list(self._boards)

    @property
    def current_board(self) -> Board | None:
        """Get the active board."""
        return self._current

    def get_board(self, board_id: str) -> Board | None:
        for board in self._boards:
            if board.id == board_id:
                return board
        return None

    def boards_in_category(self, category: BoardCategory) -> list[Board]:
        return [b for b in self._boards if b.category == category]

    def replace_all(self, boards: list[Board]) -> None:
        """Swap the whole collection, used on rehydration."""
        self._boards = list(boards)
        if self._current and self.get_board(self._current.id) is None:
            self._current = None

    def create_board(self, name: str, category: BoardCategory | str) -> Board:
        """
        Create an empty board and append it to the collection.

        The new board is not made current.
        """
        board = Board.create(name, BoardCategory(category))
        self._boards = [*self._boards, board]
        logger.info("Created board %s (%s)", board.id, board.category.value)
        return board

    def set_current_board(self, board: Board | None) -> None:
        """
        Activate a board and replace the live graph with its contents.

        Passing None empties the live graph. The selection is cleared in
        both cases. A board known to the registry is resolved by id, so
        a stale copy activates the stored record.
        """
        if board is None:
            self._current = None
            self._graph.clear()
            return
        board = self.get_board(board.id) or board
        self._graph.load_graph(
            copy.deepcopy(board.nodes),
            copy.deepcopy(board.edges),
            strict=False,
        )
        self._graph.clear_selection()
        self._current = board
        dangling = self._graph.dangling_edges()
        if dangling:
            logger.warning(
                "Board %s loaded with %d dangling edge(s)", board.id, len(dangling)
            )

    def update_board(
        self,
        board_id: str,
        changes: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Board | None:
        """
        Merge changes into a board and refresh `updated_at`.

        If the board is active, `current_board` is refreshed to the same
        state. Returns the updated board, or None if not found.

        Raises:
            DuplicateNodeError / DuplicateEdgeError: Written-back graph
                repeats an id; the board is left unchanged
        """
        merged = dict(changes or {})
        merged.update(kwargs)

        for name in _IMMUTABLE_FIELDS:
            if name in merged:
                raise IntegrityError(f"Board field {name!r} cannot be updated")
        unknown = set(merged) - BOARD_FIELDS
        if unknown:
            raise TypeError(f"Unknown board field(s): {', '.join(sorted(unknown))}")

        existing = self.get_board(board_id)
        if existing is None:
            return None

        if "category" in merged:
            merged["category"] = BoardCategory(merged["category"])
        if isinstance(merged.get("viewport"), dict):
            merged["viewport"] = Viewport.from_dict(merged["viewport"])
        if "nodes" in merged:
            merged["nodes"] = copy.deepcopy(list(merged["nodes"]))
            index_nodes(merged["nodes"])
        if "edges" in merged:
            merged["edges"] = copy.deepcopy(list(merged["edges"]))
            check_edge_ids(merged["edges"])
        merged["updated_at"] = now_iso()

        updated = replace(existing, **merged)
        self._boards = [updated if b.id == board_id else b for b in self._boards]
        if self._current is not None and self._current.id == board_id:
            self._current = updated
        return updated

    def save_current_board(self) -> Board | None:
        """Write the live graph back into the active board."""
        if self._current is None:
            return None
        return self.update_board(
            self._current.id,
            nodes=self._graph.nodes,
            edges=self._graph.edges,
        )

    def delete_board(self, board_id: str) -> Board | None:
        """
        Remove a board.

        If it was active, `current_board` becomes None and the live graph
        and selection are reset. Returns the removed board, or None.
        """
        removed = self.get_board(board_id)
        if removed is None:
            return None
        self._boards = [b for b in self._boards if b.id != board_id]
        if self._current is not None and self._current.id == board_id:
            self._current = None
            self._graph.clear()
        logger.info("Deleted board %s", board_id)
        return removed
