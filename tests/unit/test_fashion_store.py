"""
Tests for the fashion resource store.
"""

from unittest.mock import AsyncMock

import pytest

from creator_canvas.core.errors import RemoteError
from creator_canvas.remote.fashion import LOOKBOOKS_PATH, FashionStore


@pytest.fixture
def client():
    client = AsyncMock()
    client.get.return_value = {}
    client.post.return_value = {}
    client.patch.return_value = {}
    client.delete.return_value = {}
    return client


@pytest.fixture
def store(client):
    return FashionStore(client)


class TestLookbooks:
    """Tests for lookbook actions."""

    @pytest.mark.asyncio
    async def test_fetch_lookbooks(self, store, client):
        client.get.return_value = {
            "lookbooks": [{"id": "lb1"}, {"id": "lb2"}],
            "page": 1,
            "pageSize": 2,
            "totalCount": 5,
        }

        await store.fetch_lookbooks()

        assert [lb["id"] for lb in store.lookbooks] == ["lb1", "lb2"]
        assert store.lookbooks_total_count == 5
        assert store.lookbooks_page == 1
        assert store.lookbooks_has_more is True
        assert store.lookbooks_loading is False

    @pytest.mark.asyncio
    async def test_last_page_has_no_more(self, store, client):
        client.get.return_value = {
            "lookbooks": [{"id": "lb5"}],
            "page": 3,
            "pageSize": 2,
            "totalCount": 5,
        }

        await store.fetch_lookbooks({"page": 3})

        assert store.lookbooks_has_more is False

    @pytest.mark.asyncio
    async def test_fetch_merges_filters(self, store, client):
        store.set_lookbook_filters(season="spring", tag="denim")

        await store.fetch_lookbooks({"page": 2, "tag": "linen"})

        client.get.assert_awaited_once_with(
            LOOKBOOKS_PATH, params={"season": "spring", "tag": "linen", "page": 2}
        )

    @pytest.mark.asyncio
    async def test_loading_flag_observed(self, store, client):
        client.get.return_value = {"lookbooks": []}
        seen = []
        store.subscribe(lambda s: seen.append(s.lookbooks_loading))

        await store.fetch_lookbooks()

        assert seen == [True, False]

    @pytest.mark.asyncio
    async def test_fetch_lookbook(self, store, client):
        client.get.return_value = {"lookbook": {"id": "lb1", "name": "Spring"}}

        await store.fetch_lookbook("lb1")

        client.get.assert_awaited_once_with(f"{LOOKBOOKS_PATH}/lb1")
        assert store.current_lookbook["name"] == "Spring"
        assert store.current_lookbook_loading is False

    @pytest.mark.asyncio
    async def test_create_prepends(self, store, client):
        store.lookbooks = [{"id": "old"}]
        client.post.return_value = {"lookbook": {"id": "new"}}

        created = await store.create_lookbook({"name": "New"})

        assert created == {"id": "new"}
        assert [lb["id"] for lb in store.lookbooks] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_create_failure_leaves_state(self, store, client):
        store.lookbooks = [{"id": "old"}]
        client.post.side_effect = RemoteError("Backend error 500: boom", 500)

        with pytest.raises(RemoteError):
            await store.create_lookbook({"name": "New"})

        assert store.lookbooks == [{"id": "old"}]
        assert store.lookbooks_loading is False

    @pytest.mark.asyncio
    async def test_update_replaces_copies(self, store, client):
        store.lookbooks = [{"id": "lb1", "name": "Old"}, {"id": "lb2"}]
        store.current_lookbook = {"id": "lb1", "name": "Old"}
        client.patch.return_value = {"lookbook": {"id": "lb1", "name": "New"}}

        await store.update_lookbook("lb1", {"name": "New"})

        client.patch.assert_awaited_once_with(f"{LOOKBOOKS_PATH}/lb1", {"name": "New"})
        assert store.lookbooks[0]["name"] == "New"
        assert store.current_lookbook["name"] == "New"

    @pytest.mark.asyncio
    async def test_delete_clears_references(self, store, client):
        store.lookbooks = [{"id": "lb1"}, {"id": "lb2"}]
        store.current_lookbook = {"id": "lb1"}
        store.selected_lookbook_id = "lb1"

        await store.delete_lookbook("lb1")

        assert [lb["id"] for lb in store.lookbooks] == ["lb2"]
        assert store.current_lookbook is None
        assert store.selected_lookbook_id is None


class TestChildren:
    """Tests for garments, colorways and outfits."""

    @pytest.mark.asyncio
    async def test_fetch_garments(self, store, client):
        client.get.return_value = {"garments": [{"id": "g1"}]}

        await store.fetch_garments("lb1")

        client.get.assert_awaited_once_with(f"{LOOKBOOKS_PATH}/lb1/garments")
        assert store.garments == [{"id": "g1"}]
        assert store.garments_loading is False

    @pytest.mark.asyncio
    async def test_create_colorway(self, store, client):
        store.colorways = [{"id": "c0"}]
        client.post.return_value = {"colorway": {"id": "c1"}}

        created = await store.create_colorway("lb1", {"name": "Navy"})

        assert created == {"id": "c1"}
        assert [c["id"] for c in store.colorways] == ["c1", "c0"]

    @pytest.mark.asyncio
    async def test_delete_outfit(self, store, client):
        store.outfits = [{"id": "o1"}, {"id": "o2"}]

        await store.delete_outfit("lb1", "o1")

        client.delete.assert_awaited_once_with(f"{LOOKBOOKS_PATH}/lb1/outfits/o1")
        assert store.outfits == [{"id": "o2"}]

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_collection(self, store, client):
        store.outfits = [{"id": "o1"}]
        client.get.side_effect = RemoteError("offline")

        with pytest.raises(RemoteError):
            await store.fetch_outfits("lb1")

        assert store.outfits == [{"id": "o1"}]
        assert store.outfits_loading is False


class TestUiState:
    """Tests for filters, selection and reset."""

    def test_filters(self, store):
        store.set_lookbook_filters(season="fall")
        store.set_lookbook_filters(style="minimal")
        assert store.lookbook_filters == {"season": "fall", "style": "minimal"}

        store.clear_filters()
        assert store.lookbook_filters == {}

    def test_reset(self, store):
        store.lookbooks = [{"id": "lb1"}]
        store.set_selected_lookbook_id("lb1")

        store.reset()

        assert store.lookbooks == []
        assert store.selected_lookbook_id is None
        assert store.lookbooks_has_more is True
