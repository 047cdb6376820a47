"""
Entity Model - Typed shapes of boards, nodes, edges, assets and executions.

This module defines the data carried by the canvas store:
- Board: A named, categorized graph snapshot with a viewport
- CanvasNode / CanvasEdge: Vertices and directed connections of a graph
- Asset / StoryAsset: Produced artifacts, independent of any board
- WorkflowExecution: Descriptor of one run of the active graph

The classes hold data only; integrity rules live in the stores.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4


def new_id() -> str:
    """Generate a new unique identifier."""
    return str(uuid4())


def now_iso() -> str:
    """Current local time as an ISO-8601 string."""
    return datetime.now().isoformat()


class BoardCategory(Enum):
    """Domains a board can belong to."""
    FASHION = "fashion"
    STORY = "story"
    INTERIOR = "interior"
    STOCK = "stock"


class PortType(Enum):
    """Kinds of data a port carries. Only used for compatibility display."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"
    STYLE = "style"
    CHARACTER = "character"
    MESH3D = "mesh3d"
    ANY = "any"

    def is_compatible_with(self, other: PortType) -> bool:
        """Check if an output of this type can feed an input of another type."""
        if self == PortType.ANY or other == PortType.ANY:
            return True
        return self == other


class NodeStatus(Enum):
    """Display status of a node on the canvas."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class AssetType(Enum):
    """Kinds of artifacts kept in the asset library."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    MESH3D = "mesh3d"
    STYLE = "style"
    CHARACTER = "character"
    STORY = "story"


class ExecutionStatus(Enum):
    """Status of a workflow execution."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            ExecutionStatus.COMPLETED,
            ExecutionStatus.FAILED,
            ExecutionStatus.CANCELLED,
        )


# --- Board and graph entities ---


@dataclass
class Viewport:
    """Pan/zoom state of a board. Opaque to the store."""
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "zoom": self.zoom}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Viewport:
        return cls(
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            zoom=data.get("zoom", 1.0),
        )


@dataclass
class Position:
    """Position of a node on the canvas."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Port:
    """A typed connection point on a node."""
    id: str
    name: str
    type: PortType = PortType.ANY
    required: bool = False
    multiple: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "required": self.required,
            "multiple": self.multiple,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Port:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            type=PortType(data.get("type", "any")),
            required=data.get("required", False),
            multiple=data.get("multiple", False),
        )


@dataclass
class NodeData:
    """
    Kind-specific payload of a canvas node.

    Attributes:
        node_type: Catalog key of the node kind
        category: Catalog category (free-form string)
        label: Display label
        parameters: User-configured parameter values
        inputs / outputs: Declared ports
        status: Display status
        progress: Optional progress in percent
        result: Last result produced for this node (free-form)
        error: Last error message
    """
    node_type: str = ""
    category: str = ""
    label: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    inputs: list[Port] = field(default_factory=list)
    outputs: list[Port] = field(default_factory=list)
    status: NodeStatus = NodeStatus.IDLE
    progress: float | None = None
    result: dict[str, Any] | None = None
    error: str | None = None

    def get_input(self, port_id: str) -> Port | None:
        for port in self.inputs:
            if port.id == port_id:
                return port
        return None

    def get_output(self, port_id: str) -> Port | None:
        for port in self.outputs:
            if port.id == port_id:
                return port
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_type": self.node_type,
            "category": self.category,
            "label": self.label,
            "parameters": copy.deepcopy(self.parameters),
            "inputs": [p.to_dict() for p in self.inputs],
            "outputs": [p.to_dict() for p in self.outputs],
            "status": self.status.value,
            "progress": self.progress,
            "result": copy.deepcopy(self.result),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeData:
        return cls(
            node_type=data.get("node_type", ""),
            category=data.get("category", ""),
            label=data.get("label", ""),
            parameters=dict(data.get("parameters") or {}),
            inputs=[Port.from_dict(p) for p in data.get("inputs", [])],
            outputs=[Port.from_dict(p) for p in data.get("outputs", [])],
            status=NodeStatus(data.get("status", "idle")),
            progress=data.get("progress"),
            result=data.get("result"),
            error=data.get("error"),
        )


@dataclass
class CanvasNode:
    """
    A single node in the working graph.

    The `type` tag names the node kind. It is resolved against the
    node catalog by rendering/execution layers, never by the store.
    """
    id: str
    type: str
    position: Position = field(default_factory=Position)
    data: NodeData = field(default_factory=NodeData)

    @classmethod
    def create(
        cls,
        type: str,
        position: Position | None = None,
        data: NodeData | None = None,
    ) -> CanvasNode:
        """Factory method to create a node with a fresh id."""
        return cls(
            id=new_id(),
            type=type,
            position=position or Position(),
            data=data or NodeData(node_type=type),
        )

    def merged(self, changes: dict[str, Any]) -> CanvasNode:
        """
        Return a copy with `changes` shallow-merged into top-level fields.

        `position` and `data` may be given as plain dicts.
        """
        changes = dict(changes)
        if isinstance(changes.get("position"), dict):
            pos = changes["position"]
            changes["position"] = Position(pos.get("x", 0.0), pos.get("y", 0.0))
        if isinstance(changes.get("data"), dict):
            changes["data"] = NodeData.from_dict(changes["data"])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.position.x, "y": self.position.y},
            "data": self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CanvasNode:
        pos = data.get("position") or {}
        return cls(
            id=data["id"],
            type=data["type"],
            position=Position(pos.get("x", 0.0), pos.get("y", 0.0)),
            data=NodeData.from_dict(data.get("data") or {}),
        )


@dataclass
class CanvasEdge:
    """A directed connection from `source` to `target`, optionally port to port."""
    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    animated: bool = False

    @classmethod
    def create(
        cls,
        source: str,
        target: str,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> CanvasEdge:
        """Factory method to create an edge with a fresh id."""
        return cls(
            id=new_id(),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "source_handle": self.source_handle,
            "target_handle": self.target_handle,
            "animated": self.animated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CanvasEdge:
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            source_handle=data.get("source_handle"),
            target_handle=data.get("target_handle"),
            animated=data.get("animated", False),
        )


@dataclass
class Board:
    """
    A named, categorized container for one graph.

    `nodes` and `edges` are a snapshot. While the board is active the
    live graph in the GraphStore is the working copy.
    """
    id: str
    name: str
    category: BoardCategory
    nodes: list[CanvasNode] = field(default_factory=list)
    edges: list[CanvasEdge] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
    description: str | None = None
    thumbnail: str | None = None

    @classmethod
    def create(cls, name: str, category: BoardCategory) -> Board:
        """Create an empty board; both timestamps are the creation time."""
        stamp = now_iso()
        return cls(
            id=new_id(),
            name=name,
            category=category,
            created_at=stamp,
            updated_at=stamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "viewport": self.viewport.to_dict(),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        return cls(
            id=data["id"],
            name=data["name"],
            category=BoardCategory(data["category"]),
            description=data.get("description"),
            thumbnail=data.get("thumbnail"),
            nodes=[CanvasNode.from_dict(n) for n in data.get("nodes", [])],
            edges=[CanvasEdge.from_dict(e) for e in data.get("edges", [])],
            viewport=Viewport.from_dict(data.get("viewport") or {}),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


BOARD_FIELDS = frozenset(f.name for f in fields(Board))


# --- Assets ---


@dataclass
class StoryData:
    """Structured story document saved to the asset library."""
    title: str = ""
    genre: str = ""
    tone: str = ""
    characters: list[dict[str, Any]] = field(default_factory=list)
    outline: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "genre": self.genre,
            "tone": self.tone,
            "characters": copy.deepcopy(self.characters),
            "outline": copy.deepcopy(self.outline),
            "extra": copy.deepcopy(self.extra),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoryData:
        known = {"title", "genre", "tone", "characters", "outline", "extra"}
        extra = dict(data.get("extra") or {})
        extra.update({k: v for k, v in data.items() if k not in known})
        return cls(
            title=data.get("title") or "",
            genre=data.get("genre") or "",
            tone=data.get("tone") or "",
            characters=list(data.get("characters") or []),
            outline=data.get("outline"),
            extra=extra,
        )


@dataclass
class Asset:
    """A produced or saved artifact."""
    id: str
    type: AssetType
    name: str
    url: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    thumbnail_url: str | None = None
    board_id: str | None = None
    node_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "url": self.url,
            "thumbnail_url": self.thumbnail_url,
            "metadata": copy.deepcopy(self.metadata),
            "tags": list(self.tags),
            "board_id": self.board_id,
            "node_id": self.node_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        """Deserialize, returning a StoryAsset for records carrying story data."""
        if data.get("type") == AssetType.STORY.value and "story_data" in data:
            return StoryAsset.from_dict(data)
        return cls(**_asset_kwargs(data))


@dataclass
class StoryAsset(Asset):
    """An asset holding a story document instead of a media URL."""
    story_data: StoryData = field(default_factory=StoryData)

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["story_data"] = self.story_data.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoryAsset:
        return cls(
            **_asset_kwargs(data),
            story_data=StoryData.from_dict(data.get("story_data") or {}),
        )


def _asset_kwargs(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": data["id"],
        "type": AssetType(data["type"]),
        "name": data.get("name", ""),
        "url": data.get("url", ""),
        "thumbnail_url": data.get("thumbnail_url"),
        "metadata": dict(data.get("metadata") or {}),
        "tags": list(data.get("tags") or []),
        "board_id": data.get("board_id"),
        "node_id": data.get("node_id"),
        "created_at": data.get("created_at", ""),
    }


# --- Execution ---


@dataclass
class NodeExecutionState:
    """Progress of a single node within an execution."""
    node_id: str
    status: str = "pending"  # pending, running, completed, error, skipped
    progress: float | None = None
    started_at: str | None = None
    completed_at: str | None = None
    result: dict[str, Any] | None = None
    error: str | None = None


@dataclass
class WorkflowExecution:
    """
    One run of the active graph.

    Produced and updated by the external execution engine; the store
    only keeps a reference to it.
    """
    id: str
    board_id: str | None = None
    status: ExecutionStatus = ExecutionStatus.PENDING
    started_at: str | None = None
    completed_at: str | None = None
    node_states: dict[str, NodeExecutionState] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def create(cls, board_id: str | None = None) -> WorkflowExecution:
        return cls(id=new_id(), board_id=board_id)
