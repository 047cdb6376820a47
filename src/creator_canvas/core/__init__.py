"""
Core module - Entity model, graph store, boards, assets and persistence.

This module provides the building blocks of the canvas:
- Models: Boards, nodes, edges, assets and executions
- Graph: The live graph and its selection
- Boards: Board collection and the active board
- Execution: Status slot written by the execution engine
- Assets: Asset library and saved stories
- Persistence: Storage of boards, assets and the active category
- Store: The service object composing all of the above
"""

from creator_canvas.core.assets import AssetLibrary
from creator_canvas.core.boards import BoardRegistry
from creator_canvas.core.catalog import (
    AgentBinding,
    NodeCatalog,
    NodeCategory,
    NodeDefinition,
    ParameterDefinition,
    ParameterType,
    ports_compatible,
)
from creator_canvas.core.errors import (
    AuthenticationError,
    CanvasError,
    DanglingEdgeError,
    DuplicateEdgeError,
    DuplicateNodeError,
    ExecutionStateError,
    IntegrityError,
    NotFoundError,
    PersistenceError,
    RemoteError,
)
from creator_canvas.core.execution import ExecutionTracker
from creator_canvas.core.graph import GraphSnapshot, GraphStore
from creator_canvas.core.models import (
    Asset,
    AssetType,
    Board,
    BoardCategory,
    CanvasEdge,
    CanvasNode,
    ExecutionStatus,
    NodeData,
    NodeExecutionState,
    NodeStatus,
    Port,
    PortType,
    Position,
    StoryAsset,
    StoryData,
    Viewport,
    WorkflowExecution,
)
from creator_canvas.core.persistence import (
    STORAGE_KEY,
    STORAGE_VERSION,
    PersistedState,
    PersistenceGateway,
)
from creator_canvas.core.selection import Selection
from creator_canvas.core.store import CanvasStore


__all__ = [
    # models.py
    "Asset",
    "AssetType",
    "Board",
    "BoardCategory",
    "CanvasEdge",
    "CanvasNode",
    "ExecutionStatus",
    "NodeData",
    "NodeExecutionState",
    "NodeStatus",
    "Port",
    "PortType",
    "Position",
    "StoryAsset",
    "StoryData",
    "Viewport",
    "WorkflowExecution",
    # errors.py
    "AuthenticationError",
    "CanvasError",
    "DanglingEdgeError",
    "DuplicateEdgeError",
    "DuplicateNodeError",
    "ExecutionStateError",
    "IntegrityError",
    "NotFoundError",
    "PersistenceError",
    "RemoteError",
    # catalog.py
    "AgentBinding",
    "NodeCatalog",
    "NodeCategory",
    "NodeDefinition",
    "ParameterDefinition",
    "ParameterType",
    "ports_compatible",
    # graph.py / selection.py
    "GraphSnapshot",
    "GraphStore",
    "Selection",
    # boards.py, execution.py, assets.py
    "BoardRegistry",
    "ExecutionTracker",
    "AssetLibrary",
    # persistence.py
    "STORAGE_KEY",
    "STORAGE_VERSION",
    "PersistedState",
    "PersistenceGateway",
    # store.py
    "CanvasStore",
]
