"""
Tests for the board registry.
"""

import copy

import pytest

from creator_canvas.core.boards import BoardRegistry
from creator_canvas.core.errors import DuplicateEdgeError, DuplicateNodeError, IntegrityError
from creator_canvas.core.graph import GraphStore
from creator_canvas.core.models import Board, BoardCategory, Viewport


@pytest.fixture
def registry():
    return BoardRegistry(GraphStore())


class TestCreateBoard:
    """Tests for board creation."""

    def test_create_board(self, registry):
        board = registry.create_board("Spring Lookbook", BoardCategory.FASHION)

        assert board.name == "Spring Lookbook"
        assert board.category == BoardCategory.FASHION
        assert board.nodes == []
        assert board.edges == []
        assert board.viewport == Viewport(0, 0, 1)
        assert board.created_at == board.updated_at
        assert registry.boards == [board]

    def test_create_does_not_activate(self, registry):
        registry.create_board("Draft", BoardCategory.STORY)
        assert registry.current_board is None

    def test_category_from_string(self, registry):
        board = registry.create_board("Room", "interior")
        assert board.category == BoardCategory.INTERIOR

    def test_invalid_category(self, registry):
        with pytest.raises(ValueError):
            registry.create_board("Bad", "cooking")
        assert registry.boards == []

    def test_ids_are_unique(self, registry):
        ids = {registry.create_board(f"b{i}", BoardCategory.STOCK).id for i in range(25)}
        assert len(ids) == 25

    def test_boards_in_category(self, registry):
        registry.create_board("a", BoardCategory.FASHION)
        registry.create_board("b", BoardCategory.STORY)

        found = registry.boards_in_category(BoardCategory.STORY)

        assert [b.name for b in found] == ["b"]


class TestActivation:
    """Tests for loading a board into the live graph."""

    def test_round_trip(self, registry, make_node, make_edge):
        board = registry.create_board("X", BoardCategory.FASHION)
        registry.update_board(
            board.id,
            nodes=[make_node("n1"), make_node("n2")],
            edges=[make_edge("n1", "n2", "e1")],
        )

        registry.set_current_board(registry.get_board(board.id))

        graph = registry._graph
        assert [n.id for n in graph.nodes] == ["n1", "n2"]
        assert [e.id for e in graph.edges] == ["e1"]
        assert registry.current_board.id == board.id

    def test_live_graph_is_a_copy(self, registry, make_node):
        board = registry.create_board("X", BoardCategory.FASHION)
        board = registry.update_board(board.id, nodes=[make_node("n1")])
        registry.set_current_board(board)

        registry._graph.delete_node("n1")

        assert [n.id for n in registry.get_board(board.id).nodes] == ["n1"]

    def test_activation_clears_selection(self, registry, make_node):
        graph = registry._graph
        graph.add_node(make_node("old"))
        graph.set_selected_nodes(["old"])
        board = registry.create_board("X", BoardCategory.FASHION)
        board = registry.update_board(board.id, nodes=[make_node("old")])

        registry.set_current_board(board)

        assert graph.selected_nodes == []

    def test_stale_copy_resolves_to_stored_board(self, registry, make_node):
        board = registry.create_board("X", BoardCategory.FASHION)
        stale = copy.deepcopy(board)
        registry.update_board(board.id, name="Renamed", nodes=[make_node("n1")])

        registry.set_current_board(stale)

        assert registry.current_board is registry.get_board(board.id)
        assert registry.current_board.name == "Renamed"
        assert [n.id for n in registry._graph.nodes] == ["n1"]

    def test_deactivate_empties_graph(self, registry, make_node):
        board = registry.create_board("X", BoardCategory.FASHION)
        board = registry.update_board(board.id, nodes=[make_node("n1")])
        registry.set_current_board(board)

        registry.set_current_board(None)

        assert registry.current_board is None
        assert len(registry._graph) == 0

    def test_board_with_dangling_edges_loads(self, registry, make_edge):
        board = Board.from_dict({
            "id": "b1",
            "name": "Broken",
            "category": "stock",
            "edges": [make_edge("x", "y").to_dict()],
        })
        registry.replace_all([board])

        registry.set_current_board(board)

        assert len(registry._graph.dangling_edges()) == 1


class TestUpdateBoard:
    """Tests for update_board and save_current_board."""

    def test_update_merges_and_touches_timestamp(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        board.updated_at = "2000-01-01T00:00:00"
        registry.replace_all([board])

        updated = registry.update_board(board.id, name="Y", description="notes")

        assert updated.name == "Y"
        assert updated.description == "notes"
        assert updated.created_at == board.created_at
        assert updated.updated_at > "2000-01-01T00:00:00"

    def test_update_refreshes_current_board(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        registry.set_current_board(board)

        registry.update_board(board.id, {"name": "Renamed"})

        assert registry.current_board.name == "Renamed"
        assert registry.get_board(board.id) is registry.current_board

    def test_update_missing_board(self, registry):
        assert registry.update_board("missing", name="Y") is None

    def test_update_rejects_id_change(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        with pytest.raises(IntegrityError):
            registry.update_board(board.id, id="other")

    def test_update_rejects_unknown_field(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        with pytest.raises(TypeError):
            registry.update_board(board.id, colour="red")

    def test_update_coerces_category(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        updated = registry.update_board(board.id, category="story")
        assert updated.category == BoardCategory.STORY

    def test_update_coerces_viewport_dict(self, registry):
        board = registry.create_board("X", BoardCategory.FASHION)
        updated = registry.update_board(board.id, viewport={"x": 3, "zoom": 0.5})
        assert updated.viewport == Viewport(3, 0.0, 0.5)

    def test_update_rejects_duplicate_node_ids(self, registry, make_node):
        board = registry.create_board("X", BoardCategory.FASHION)
        board = registry.update_board(board.id, nodes=[make_node("a")])

        with pytest.raises(DuplicateNodeError):
            registry.update_board(board.id, nodes=[make_node("a"), make_node("a")])

        stored = registry.get_board(board.id)
        assert [n.id for n in stored.nodes] == ["a"]
        registry.set_current_board(stored)
        assert [n.id for n in registry._graph.nodes] == ["a"]

    def test_update_rejects_duplicate_edge_ids(self, registry, make_node, make_edge):
        board = registry.create_board("X", BoardCategory.FASHION)

        with pytest.raises(DuplicateEdgeError):
            registry.update_board(
                board.id,
                nodes=[make_node("a"), make_node("b")],
                edges=[make_edge("a", "b", "e"), make_edge("b", "a", "e")],
            )

        assert registry.get_board(board.id).nodes == []
        assert registry.get_board(board.id).updated_at == board.updated_at

    def test_live_edits_do_not_write_back(self, registry, make_node):
        board = registry.create_board("X", BoardCategory.FASHION)
        registry.set_current_board(board)

        registry._graph.add_node(make_node("n1"))

        assert registry.get_board(board.id).nodes == []

    def test_save_current_board(self, registry, make_node, make_edge):
        board = registry.create_board("X", BoardCategory.FASHION)
        registry.set_current_board(board)
        registry._graph.add_node(make_node("a"))
        registry._graph.add_node(make_node("b"))
        registry._graph.add_edge(make_edge("a", "b"))

        saved = registry.save_current_board()

        assert [n.id for n in saved.nodes] == ["a", "b"]
        assert [e.id for e in saved.edges] == ["a->b"]
        assert registry.current_board is saved

    def test_save_without_current_board(self, registry):
        assert registry.save_current_board() is None


class TestDeleteBoard:
    """Tests for delete_board."""

    def test_delete_board(self, registry):
        a = registry.create_board("A", BoardCategory.FASHION)
        b = registry.create_board("B", BoardCategory.FASHION)

        removed = registry.delete_board(a.id)

        assert removed.id == a.id
        assert registry.boards == [b]

    def test_delete_current_board_resets_graph(self, registry, make_node):
        board = registry.create_board("A", BoardCategory.FASHION)
        board = registry.update_board(board.id, nodes=[make_node("n1")])
        registry.set_current_board(board)
        registry._graph.set_selected_nodes(["n1"])

        registry.delete_board(board.id)

        assert registry.current_board is None
        assert len(registry._graph) == 0
        assert registry._graph.selected_nodes == []

    def test_delete_other_board_keeps_current(self, registry):
        a = registry.create_board("A", BoardCategory.FASHION)
        b = registry.create_board("B", BoardCategory.FASHION)
        registry.set_current_board(a)

        registry.delete_board(b.id)

        assert registry.current_board is a

    def test_delete_missing_board(self, registry):
        assert registry.delete_board("missing") is None

    def test_board_dict_roundtrip(self, registry, make_node, make_edge):
        board = registry.create_board("A", BoardCategory.STORY)
        board = registry.update_board(
            board.id,
            nodes=[make_node("a"), make_node("b")],
            edges=[make_edge("a", "b")],
            viewport=Viewport(12.5, -3, 0.75),
        )

        assert Board.from_dict(board.to_dict()) == board
