"""
Fashion Store - Lookbooks, garments, colorways and outfits from the backend.

Every remote action follows the same pattern:
1. set the matching `*_loading` flag
2. await the API call
3. on success update the local collection; on failure leave it untouched
4. clear the flag, then return or re-raise

Overlapping calls are neither deduplicated nor cancelled: if two fetches
race, the later response wins. Callers that need ordering must await one
call before starting the next. Cancelling an in-flight call clears its
loading flag and leaves the collection as it was.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Callable

from creator_canvas.remote.client import ApiClient


logger = logging.getLogger(__name__)

Record = dict[str, Any]
Listener = Callable[["FashionStore"], None]

LOOKBOOKS_PATH = "/api/fashion/lookbooks"
DEFAULT_PAGE_SIZE = 20


class FashionStore:
    """Local view of the remote fashion catalog."""

    def __init__(self, client: ApiClient):
        self.client = client
        self._listeners: list[Listener] = []
        self._init_state()

    def _init_state(self) -> None:
        self.lookbooks: list[Record] = []
        self.lookbooks_loading = False
        self.lookbooks_total_count = 0
        self.lookbooks_page = 1
        self.lookbooks_has_more = True

        self.current_lookbook: Record | None = None
        self.current_lookbook_loading = False

        self.garments: list[Record] = []
        self.garments_loading = False
        self.colorways: list[Record] = []
        self.colorways_loading = False
        self.outfits: list[Record] = []
        self.outfits_loading = False

        self.lookbook_filters: dict[str, Any] = {}
        self.selected_lookbook_id: str | None = None

    # --- Observers ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    @asynccontextmanager
    async def _loading(self, flag: str, action: str) -> AsyncIterator[None]:
        setattr(self, flag, True)
        self._notify()
        try:
            yield
        except Exception as e:
            logger.error("Failed to %s: %s", action, e)
            raise
        finally:
            setattr(self, flag, False)
            self._notify()

    # --- Lookbooks ---

    async def fetch_lookbooks(self, params: dict[str, Any] | None = None) -> None:
        """Fetch a page of lookbooks using the current filters plus `params`."""
        merged = {**self.lookbook_filters, **(params or {})}
        async with self._loading("lookbooks_loading", "fetch lookbooks"):
            data = await self.client.get(LOOKBOOKS_PATH, params=merged)
            page = data.get("page") or 1
            page_size = data.get("pageSize") or DEFAULT_PAGE_SIZE
            total = data.get("totalCount") or 0
            self.lookbooks = list(data.get("lookbooks") or [])
            self.lookbooks_total_count = total
            self.lookbooks_page = page
            self.lookbooks_has_more = page * page_size < total

    async def fetch_lookbook(self, lookbook_id: str) -> None:
        async with self._loading("current_lookbook_loading", "fetch lookbook"):
            data = await self.client.get(f"{LOOKBOOKS_PATH}/{lookbook_id}")
            self.current_lookbook = data.get("lookbook")

    async def create_lookbook(self, request: Record) -> Record:
        """Create a lookbook; it is prepended to `lookbooks`."""
        async with self._loading("lookbooks_loading", "create lookbook"):
            data = await self.client.post(LOOKBOOKS_PATH, request)
            lookbook = data["lookbook"]
            self.lookbooks = [lookbook, *self.lookbooks]
        return lookbook

    async def update_lookbook(self, lookbook_id: str, request: Record) -> Record:
        """Partially update a lookbook and replace the local copies."""
        async with self._loading("lookbooks_loading", "update lookbook"):
            data = await self.client.patch(f"{LOOKBOOKS_PATH}/{lookbook_id}", request)
            lookbook = data["lookbook"]
            self.lookbooks = [
                lookbook if lb.get("id") == lookbook_id else lb
                for lb in self.lookbooks
            ]
            if self.current_lookbook and self.current_lookbook.get("id") == lookbook_id:
                self.current_lookbook = lookbook
        return lookbook

    async def delete_lookbook(self, lookbook_id: str) -> None:
        async with self._loading("lookbooks_loading", "delete lookbook"):
            await self.client.delete(f"{LOOKBOOKS_PATH}/{lookbook_id}")
            self.lookbooks = [lb for lb in self.lookbooks if lb.get("id") != lookbook_id]
            if self.current_lookbook and self.current_lookbook.get("id") == lookbook_id:
                self.current_lookbook = None
            if self.selected_lookbook_id == lookbook_id:
                self.selected_lookbook_id = None

    # --- Lookbook children: garments, colorways, outfits ---

    async def _fetch_children(self, lookbook_id: str, kind: str) -> None:
        async with self._loading(f"{kind}_loading", f"fetch {kind}"):
            data = await self.client.get(f"{LOOKBOOKS_PATH}/{lookbook_id}/{kind}")
            setattr(self, kind, list(data.get(kind) or []))

    async def _create_child(
        self, lookbook_id: str, kind: str, key: str, request: Record
    ) -> Record:
        async with self._loading(f"{kind}_loading", f"create {key}"):
            data = await self.client.post(f"{LOOKBOOKS_PATH}/{lookbook_id}/{kind}", request)
            record = data[key]
            setattr(self, kind, [record, *getattr(self, kind)])
        return record

    async def _delete_child(self, lookbook_id: str, kind: str, child_id: str) -> None:
        async with self._loading(f"{kind}_loading", f"delete {kind}"):
            await self.client.delete(f"{LOOKBOOKS_PATH}/{lookbook_id}/{kind}/{child_id}")
            setattr(
                self,
                kind,
                [r for r in getattr(self, kind) if r.get("id") != child_id],
            )

    async def fetch_garments(self, lookbook_id: str) -> None:
        await self._fetch_children(lookbook_id, "garments")

    async def create_garment(self, lookbook_id: str, request: Record) -> Record:
        return await self._create_child(lookbook_id, "garments", "garment", request)

    async def delete_garment(self, lookbook_id: str, garment_id: str) -> None:
        await self._delete_child(lookbook_id, "garments", garment_id)

    async def fetch_colorways(self, lookbook_id: str) -> None:
        await self._fetch_children(lookbook_id, "colorways")

    async def create_colorway(self, lookbook_id: str, request: Record) -> Record:
        return await self._create_child(lookbook_id, "colorways", "colorway", request)

    async def delete_colorway(self, lookbook_id: str, colorway_id: str) -> None:
        await self._delete_child(lookbook_id, "colorways", colorway_id)

    async def fetch_outfits(self, lookbook_id: str) -> None:
        await self._fetch_children(lookbook_id, "outfits")

    async def create_outfit(self, lookbook_id: str, request: Record) -> Record:
        return await self._create_child(lookbook_id, "outfits", "outfit", request)

    async def delete_outfit(self, lookbook_id: str, outfit_id: str) -> None:
        await self._delete_child(lookbook_id, "outfits", outfit_id)

    # --- UI state ---

    def set_selected_lookbook_id(self, lookbook_id: str | None) -> None:
        self.selected_lookbook_id = lookbook_id
        self._notify()

    def set_lookbook_filters(self, **filters: Any) -> None:
        """Merge filters used by `fetch_lookbooks` (season, style, tag, ...)."""
        self.lookbook_filters = {**self.lookbook_filters, **filters}
        self._notify()

    def clear_filters(self) -> None:
        self.lookbook_filters = {}
        self._notify()

    def reset(self) -> None:
        """Return to the initial empty state."""
        self._init_state()
        self._notify()
