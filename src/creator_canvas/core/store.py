"""
Canvas Store - The service object the editor talks to.

`CanvasStore` composes the graph store, board registry, execution tracker
and asset library behind one operation set, and adds:
- UI panel flags and the active board category
- observers, notified once after every completed action
- write-through persistence of boards, assets and the active category

Construct one at application start and pass it to whoever needs it.
Transient state (live graph, selection, execution, panel flags) always
starts fresh; only the persisted subset is rehydrated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Callable

from creator_canvas.core.assets import AssetLibrary
from creator_canvas.core.boards import BoardRegistry
from creator_canvas.core.execution import ExecutionTracker
from creator_canvas.core.graph import GraphSnapshot, GraphStore
from creator_canvas.core.models import (
    Asset,
    Board,
    BoardCategory,
    CanvasEdge,
    CanvasNode,
    ExecutionStatus,
    NodeExecutionState,
    StoryAsset,
    StoryData,
    WorkflowExecution,
)
from creator_canvas.core.persistence import (
    DEFAULT_CATEGORY,
    PersistedState,
    PersistenceGateway,
)


logger = logging.getLogger(__name__)

Listener = Callable[["CanvasStore"], None]


class CanvasStore:
    """
    Boards, live graph, selection, execution state and assets.

    Args:
        gateway: Where the persisted subset is loaded from and written to.
            Without one the store is purely in-memory.
    """

    def __init__(self, gateway: PersistenceGateway | None = None):
        self._gateway = gateway
        self._listeners: list[Listener] = []

        self.graph = GraphStore()
        self.registry = BoardRegistry(self.graph)
        self.execution = ExecutionTracker()
        self.library = AssetLibrary()

        self.node_palette_open = True
        self.inspector_open = True
        self.asset_library_open = False
        self.story_library_open = False
        self.active_category: BoardCategory = DEFAULT_CATEGORY

        if gateway is not None:
            self._hydrate(gateway.load())

    # --- Observers ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, persist: bool = False) -> None:
        if persist:
            self.save()
        for listener in list(self._listeners):
            listener(self)

    # --- Persistence ---

    def persisted_state(self) -> PersistedState:
        """The subset of state written to storage."""
        return PersistedState(
            boards=self.registry.boards,
            assets=self.library.assets,
            active_category=self.active_category,
        )

    def save(self) -> bool:
        """Write the persisted subset. Returns False if there is no gateway or it failed."""
        if self._gateway is None:
            return False
        return self._gateway.save(self.persisted_state())

    def _hydrate(self, state: PersistedState) -> None:
        self.registry.replace_all(state.boards)
        self.library.replace_all(state.assets)
        self.active_category = state.active_category
        logger.info(
            "Loaded %d board(s) and %d asset(s)", len(state.boards), len(state.assets)
        )

    # --- Read access ---

    @property
    def boards(self) -> list[Board]:
        return self.registry.boards

    @property
    def current_board(self) -> Board | None:
        return self.registry.current_board

    @property
    def nodes(self) -> list[CanvasNode]:
        return self.graph.nodes

    @property
    def edges(self) -> list[CanvasEdge]:
        return self.graph.edges

    @property
    def selected_nodes(self) -> list[str]:
        return self.graph.selected_nodes

    @property
    def selected_edges(self) -> list[str]:
        return self.graph.selected_edges

    @property
    def current_execution(self) -> WorkflowExecution | None:
        return self.execution.current_execution

    @property
    def is_executing(self) -> bool:
        return self.execution.is_executing

    @property
    def assets(self) -> list[Asset]:
        return self.library.assets

    def snapshot(self) -> GraphSnapshot:
        """Copy of the live graph for the execution engine."""
        return self.graph.snapshot()

    # --- Board management ---

    def set_current_board(self, board: Board | None) -> None:
        self.registry.set_current_board(board)
        self._commit()

    def create_board(self, name: str, category: BoardCategory | str) -> Board:
        board = self.registry.create_board(name, category)
        self._commit(persist=True)
        return board

    def update_board(
        self,
        board_id: str,
        changes: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Board | None:
        board = self.registry.update_board(board_id, changes, **kwargs)
        if board is not None:
            self._commit(persist=True)
        return board

    def save_current_board(self) -> Board | None:
        """Write the live graph back into the active board."""
        board = self.registry.save_current_board()
        if board is not None:
            self._commit(persist=True)
        return board

    def delete_board(self, board_id: str) -> Board | None:
        board = self.registry.delete_board(board_id)
        if board is not None:
            self._commit(persist=True)
        return board

    # --- Node management ---

    def set_nodes(self, nodes: Iterable[CanvasNode]) -> None:
        self.graph.set_nodes(nodes)
        self._commit()

    def add_node(self, node: CanvasNode) -> None:
        self.graph.add_node(node)
        self._commit()

    def update_node(
        self,
        node_id: str,
        changes: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> CanvasNode | None:
        node = self.graph.update_node(node_id, changes, **kwargs)
        if node is not None:
            self._commit()
        return node

    def delete_node(self, node_id: str) -> CanvasNode | None:
        node = self.graph.delete_node(node_id)
        if node is not None:
            self._commit()
        return node

    # --- Edge management ---

    def set_edges(self, edges: Iterable[CanvasEdge]) -> None:
        self.graph.set_edges(edges)
        self._commit()

    def load_graph(
        self,
        nodes: Iterable[CanvasNode],
        edges: Iterable[CanvasEdge],
    ) -> None:
        self.graph.load_graph(nodes, edges)
        self._commit()

    def add_edge(self, edge: CanvasEdge) -> None:
        self.graph.add_edge(edge)
        self._commit()

    def delete_edge(self, edge_id: str) -> CanvasEdge | None:
        edge = self.graph.delete_edge(edge_id)
        if edge is not None:
            self._commit()
        return edge

    # --- Selection ---

    def set_selected_nodes(self, ids: Iterable[str]) -> None:
        self.graph.set_selected_nodes(ids)
        self._commit()

    def set_selected_edges(self, ids: Iterable[str]) -> None:
        self.graph.set_selected_edges(ids)
        self._commit()

    def clear_selection(self) -> None:
        self.graph.clear_selection()
        self._commit()

    # --- UI panels ---

    def toggle_node_palette(self) -> None:
        self.node_palette_open = not self.node_palette_open
        self._commit()

    def toggle_inspector(self) -> None:
        self.inspector_open = not self.inspector_open
        self._commit()

    def toggle_asset_library(self) -> None:
        self.asset_library_open = not self.asset_library_open
        self._commit()

    def toggle_story_library(self) -> None:
        self.story_library_open = not self.story_library_open
        self._commit()

    def set_active_category(self, category: BoardCategory | str) -> None:
        self.active_category = BoardCategory(category)
        self._commit(persist=True)

    # --- Execution ---

    def set_current_execution(self, execution: WorkflowExecution | None) -> None:
        self.execution.set_current_execution(execution)
        self._commit()

    def set_is_executing(self, is_executing: bool) -> None:
        self.execution.set_is_executing(is_executing)
        self._commit()

    def start_execution(self, execution: WorkflowExecution) -> None:
        self.execution.start(execution)
        self._commit()

    def update_node_execution(self, state: NodeExecutionState) -> None:
        """Record one node's progress in the running execution."""
        self.execution.update_node_state(state)
        self._commit()

    def finish_execution(
        self,
        status: ExecutionStatus,
        error: str | None = None,
    ) -> None:
        """End the running execution with a terminal status."""
        self.execution.finish(status, error)
        self._commit()

    # --- Assets ---

    def add_asset(self, asset: Asset) -> None:
        self.library.add_asset(asset)
        self._commit(persist=True)

    def remove_asset(self, asset_id: str) -> Asset | None:
        asset = self.library.remove_asset(asset_id)
        if asset is not None:
            self._commit(persist=True)
        return asset

    def save_story(
        self,
        story_data: StoryData | dict[str, Any],
        tags: Iterable[str] | None = None,
    ) -> StoryAsset:
        asset = self.library.save_story(story_data, tags)
        self._commit(persist=True)
        return asset

    def get_story_assets(self) -> list[StoryAsset]:
        return self.library.get_story_assets()
