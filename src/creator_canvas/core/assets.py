"""
Asset Library - Produced and saved artifacts.

Assets are keyed by id and independent of boards: deleting a board never
removes an asset.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from creator_canvas.core.models import (
    Asset,
    AssetType,
    StoryAsset,
    StoryData,
    new_id,
    now_iso,
)


UNTITLED_STORY = "Untitled Story"


def story_tags(tags: Iterable[str], story: StoryData) -> list[str]:
    """Caller tags followed by genre and tone, without falsy or repeated entries."""
    result: list[str] = []
    for tag in [*tags, story.genre, story.tone]:
        if tag and tag not in result:
            result.append(tag)
    return result


class AssetLibrary:
    """Flat collection of assets."""

    def __init__(self, assets: list[Asset] | None = None):
        self._assets: list[Asset] = list(assets or [])

    @property
    def assets(self) -> list[Asset]:
        return list(self._assets)

    def get_asset(self, asset_id: str) -> Asset | None:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def replace_all(self, assets: list[Asset]) -> None:
        self._assets = list(assets)

    def add_asset(self, asset: Asset) -> None:
        """Add an asset, replacing any existing asset with the same id."""
        if self.get_asset(asset.id) is not None:
            self._assets = [asset if a.id == asset.id else a for a in self._assets]
        else:
            self._assets = [*self._assets, asset]

    def remove_asset(self, asset_id: str) -> Asset | None:
        """Remove an asset. Returns it, or None if not found."""
        removed = self.get_asset(asset_id)
        if removed is not None:
            self._assets = [a for a in self._assets if a.id != asset_id]
        return removed

    def save_story(
        self,
        story_data: StoryData | dict[str, Any],
        tags: Iterable[str] | None = None,
    ) -> StoryAsset:
        """
        Save a story document as a StoryAsset.

        The name comes from the story title, metadata summarizes the
        story, and tags are the given tags plus genre and tone.
        """
        if isinstance(story_data, dict):
            story_data = StoryData.from_dict(story_data)

        asset = StoryAsset(
            id=new_id(),
            type=AssetType.STORY,
            name=story_data.title or UNTITLED_STORY,
            url="",
            metadata={
                "genre": story_data.genre,
                "tone": story_data.tone,
                "character_count": len(story_data.characters),
                "has_outline": bool(story_data.outline),
            },
            tags=story_tags(tags or [], story_data),
            created_at=now_iso(),
            story_data=story_data,
        )
        self._assets = [*self._assets, asset]
        return asset

    def get_story_assets(self) -> list[StoryAsset]:
        return [a for a in self._assets if isinstance(a, StoryAsset)]

    def find_by_tag(self, tag: str) -> list[Asset]:
        """Get assets carrying a tag (case-insensitive)."""
        tag = tag.lower()
        return [a for a in self._assets if tag in (t.lower() for t in a.tags)]

    def __len__(self) -> int:
        return len(self._assets)
