from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """
    Ensure `src/` is on sys.path so tests can import `creator_canvas`
    without requiring an editable install.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"
    sys.path.insert(0, str(src_root))


@pytest.fixture
def make_node():
    """Factory for canvas nodes with readable ids."""
    from creator_canvas.core.models import CanvasNode, NodeData

    def _make(node_id: str, node_type: str = "textInput"):
        return CanvasNode(id=node_id, type=node_type, data=NodeData(node_type=node_type))

    return _make


@pytest.fixture
def make_edge():
    """Factory for canvas edges with readable ids."""
    from creator_canvas.core.models import CanvasEdge

    def _make(source: str, target: str, edge_id: str | None = None):
        return CanvasEdge(id=edge_id or f"{source}->{target}", source=source, target=target)

    return _make
