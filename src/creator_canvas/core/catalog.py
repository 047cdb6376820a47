"""
Node Catalog - Read-only table of available node kinds.

This module defines how node kinds are described:
- ParameterDefinition: A configurable parameter and its widget type
- AgentBinding: The backend endpoint a node kind runs on
- NodeDefinition: Complete definition of a node kind
- NodeCatalog: Immutable lookup table keyed by node type

The canvas store never consults or mutates the catalog. Rendering and
execution layers use it, keyed by `CanvasNode.type`.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from creator_canvas.core.models import (
    CanvasNode,
    NodeData,
    Port,
    PortType,
    Position,
    new_id,
)


class NodeCategory(Enum):
    """Categories for organizing nodes in the palette."""
    INPUT = "input"
    IMAGE_GEN = "imageGen"
    VIDEO_GEN = "videoGen"
    THREE_D = "threeD"
    CHARACTER = "character"
    STYLE = "style"
    LOGIC = "logic"
    AUDIO = "audio"
    OUTPUT = "output"
    COMPOSITE = "composite"


class ParameterType(Enum):
    """Types of node parameters (determines UI widget)."""
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    SLIDER = "slider"
    BOOLEAN = "boolean"
    COLOR = "color"
    FILE = "file"


@dataclass(frozen=True)
class ParameterDefinition:
    """
    Definition of a configurable parameter on a node kind.

    Attributes:
        id: Parameter identifier
        name: Display label
        type: Widget type
        default: Default value
        options: (label, value) pairs for select parameters
        min / max / step: Numeric bounds
    """
    id: str
    name: str
    type: ParameterType
    default: Any = None
    options: tuple[tuple[str, Any], ...] = ()
    min: float | None = None
    max: float | None = None
    step: float | None = None


@dataclass(frozen=True)
class AgentBinding:
    """Backend endpoint a node kind executes on, with its static config."""
    endpoint: str
    config: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class NodeDefinition:
    """
    Complete definition of a node kind.

    Nodes in a graph reference a definition by `type`.
    """
    type: str
    category: NodeCategory
    label: str
    description: str = ""
    inputs: tuple[Port, ...] = ()
    outputs: tuple[Port, ...] = ()
    parameters: tuple[ParameterDefinition, ...] = ()
    agent: AgentBinding | None = None

    def get_default_parameters(self) -> dict[str, Any]:
        """Get default values for all parameters."""
        return {p.id: copy.deepcopy(p.default) for p in self.parameters}

    def get_parameter(self, param_id: str) -> ParameterDefinition | None:
        for param in self.parameters:
            if param.id == param_id:
                return param
        return None


def _port(port_id: str, name: str, type: PortType, **kwargs: Any) -> Port:
    return Port(id=port_id, name=name, type=type, **kwargs)


def _fal(model: str) -> AgentBinding:
    return AgentBinding(endpoint=model, config=MappingProxyType({"provider": "fal"}))


BUILTIN_DEFINITIONS: tuple[NodeDefinition, ...] = (
    # --- Input ---
    NodeDefinition(
        type="textInput",
        category=NodeCategory.INPUT,
        label="Text Input",
        description="Enter text prompts or descriptions",
        outputs=(_port("text", "Text", PortType.TEXT),),
        parameters=(ParameterDefinition("text", "Text", ParameterType.TEXT, ""),),
    ),
    NodeDefinition(
        type="imageUpload",
        category=NodeCategory.INPUT,
        label="Image Upload",
        description="Upload an image file",
        outputs=(_port("image", "Image", PortType.IMAGE),),
        parameters=(ParameterDefinition("file", "File", ParameterType.FILE),),
    ),
    NodeDefinition(
        type="characterReference",
        category=NodeCategory.INPUT,
        label="Character Reference",
        description="Upload character reference images (up to 7)",
        outputs=(_port("character", "Character", PortType.CHARACTER),),
        parameters=(
            ParameterDefinition("files", "Files", ParameterType.FILE),
            ParameterDefinition("characterName", "Character Name", ParameterType.TEXT, ""),
        ),
    ),
    # --- Image generation ---
    NodeDefinition(
        type="flux2Pro",
        category=NodeCategory.IMAGE_GEN,
        label="FLUX.2 Pro",
        description="High-fidelity image generation",
        inputs=(
            _port("prompt", "Prompt", PortType.TEXT, required=True),
            _port("reference", "Reference", PortType.IMAGE),
        ),
        outputs=(_port("image", "Image", PortType.IMAGE),),
        parameters=(
            ParameterDefinition("width", "Width", ParameterType.NUMBER, 1024, min=256, max=2048),
            ParameterDefinition("height", "Height", ParameterType.NUMBER, 1024, min=256, max=2048),
            ParameterDefinition("guidance", "Guidance Scale", ParameterType.SLIDER, 3.5, min=1, max=20, step=0.1),
            ParameterDefinition("numImages", "Num Images", ParameterType.NUMBER, 1, min=1, max=4),
        ),
        agent=_fal("fal-ai/flux-pro/v1.1"),
    ),
    NodeDefinition(
        type="fluxKontext",
        category=NodeCategory.IMAGE_GEN,
        label="FLUX Kontext",
        description="Context-aware image editing",
        inputs=(
            _port("image", "Source Image", PortType.IMAGE, required=True),
            _port("prompt", "Edit Prompt", PortType.TEXT, required=True),
        ),
        outputs=(_port("image", "Image", PortType.IMAGE),),
        parameters=(
            ParameterDefinition("strength", "Edit Strength", ParameterType.SLIDER, 0.8, min=0, max=1, step=0.05),
        ),
        agent=_fal("fal-ai/flux-kontext/pro"),
    ),
    # --- Video generation ---
    NodeDefinition(
        type="kling26I2V",
        category=NodeCategory.VIDEO_GEN,
        label="Kling 2.6 Image-to-Video",
        description="Animate a still image",
        inputs=(
            _port("image", "Source Image", PortType.IMAGE, required=True),
            _port("prompt", "Motion Prompt", PortType.TEXT),
        ),
        outputs=(_port("video", "Video", PortType.VIDEO),),
        parameters=(
            ParameterDefinition(
                "duration", "Duration (s)", ParameterType.SELECT, 5,
                options=(("5 seconds", 5), ("10 seconds", 10)),
            ),
            ParameterDefinition("motionIntensity", "Motion Intensity", ParameterType.SLIDER, 0.5, min=0, max=1, step=0.1),
        ),
        agent=_fal("fal-ai/kling-video/v2.6/pro/image-to-video"),
    ),
    # --- Composite ---
    NodeDefinition(
        type="virtualTryOn",
        category=NodeCategory.COMPOSITE,
        label="Virtual Try-On",
        description="AI-powered garment try-on with multiple providers",
        inputs=(
            _port("model", "Model Photo", PortType.IMAGE, required=True),
            _port("garment", "Garment", PortType.IMAGE, required=True),
        ),
        outputs=(_port("image", "Result", PortType.IMAGE),),
        parameters=(
            ParameterDefinition(
                "provider", "Provider", ParameterType.SELECT, "fashn",
                options=(
                    ("FASHN (Recommended)", "fashn"),
                    ("IDM-VTON (Complex Garments)", "idm-vton"),
                    ("CAT-VTON (Fast)", "cat-vton"),
                    ("Leffa (Balanced)", "leffa"),
                ),
            ),
        ),
        agent=AgentBinding(
            endpoint="/api/fashion/virtual-try-on",
            config=MappingProxyType({"provider": "multi-provider"}),
        ),
    ),
    # --- Output ---
    NodeDefinition(
        type="preview",
        category=NodeCategory.OUTPUT,
        label="Preview",
        description="Preview generated content",
        inputs=(_port("content", "Content", PortType.ANY, required=True),),
    ),
    NodeDefinition(
        type="export",
        category=NodeCategory.OUTPUT,
        label="Export",
        description="Export to file",
        inputs=(_port("content", "Content", PortType.ANY, required=True),),
        parameters=(
            ParameterDefinition(
                "format", "Format", ParameterType.SELECT, "png",
                options=(("PNG", "png"), ("JPEG", "jpeg"), ("MP4", "mp4"), ("WebM", "webm"), ("GLB", "glb")),
            ),
        ),
    ),
)


class NodeCatalog:
    """
    Immutable registry of node definitions.

    Built once from a sequence of definitions; later definitions with
    the same type replace earlier ones.
    """

    def __init__(self, definitions: Iterable[NodeDefinition] = BUILTIN_DEFINITIONS):
        self._types: Mapping[str, NodeDefinition] = MappingProxyType(
            {d.type: d for d in definitions}
        )

    @property
    def types(self) -> Mapping[str, NodeDefinition]:
        """Read-only mapping of node type to definition."""
        return self._types

    def get(self, node_type: str) -> NodeDefinition | None:
        return self._types.get(node_type)

    def get_all(self) -> list[NodeDefinition]:
        return list(self._types.values())

    def list_by_category(self, category: NodeCategory) -> list[NodeDefinition]:
        return [d for d in self._types.values() if d.category == category]

    def search(self, query: str) -> list[NodeDefinition]:
        """Search definitions by label or description."""
        query = query.lower()
        return [
            d for d in self._types.values()
            if query in d.label.lower() or query in d.description.lower()
        ]

    def create_node(
        self,
        node_type: str,
        node_id: str | None = None,
        position: Position | None = None,
    ) -> CanvasNode:
        """
        Instantiate a canvas node with the definition's ports and defaults.

        Raises:
            KeyError: Unknown node type
        """
        definition = self._types[node_type]
        return CanvasNode(
            id=node_id or new_id(),
            type=definition.type,
            position=position or Position(),
            data=NodeData(
                node_type=definition.type,
                category=definition.category.value,
                label=definition.label,
                parameters=definition.get_default_parameters(),
                inputs=[copy.copy(p) for p in definition.inputs],
                outputs=[copy.copy(p) for p in definition.outputs],
            ),
        )

    def __iter__(self) -> Iterator[NodeDefinition]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._types


def ports_compatible(source: Port, target: Port) -> bool:
    """Whether an output port may visually connect to an input port."""
    return source.type.is_compatible_with(target.type)
