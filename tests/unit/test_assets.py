"""
Tests for the asset library and saved stories.
"""

from creator_canvas.core.assets import UNTITLED_STORY, AssetLibrary
from creator_canvas.core.models import Asset, AssetType, StoryAsset, StoryData


def make_asset(asset_id, tags=None):
    return Asset(
        id=asset_id,
        type=AssetType.IMAGE,
        name=f"Asset {asset_id}",
        url=f"https://cdn.example.com/{asset_id}.png",
        tags=list(tags or []),
    )


class TestAssetLibrary:
    """Tests for adding and removing assets."""

    def test_add_asset(self):
        library = AssetLibrary()
        library.add_asset(make_asset("a1"))
        assert len(library) == 1
        assert library.get_asset("a1").name == "Asset a1"

    def test_add_same_id_replaces(self):
        library = AssetLibrary()
        library.add_asset(make_asset("a1"))
        library.add_asset(make_asset("a2"))
        replacement = make_asset("a1")
        replacement.name = "Replaced"

        library.add_asset(replacement)

        assert [a.id for a in library.assets] == ["a1", "a2"]
        assert library.get_asset("a1").name == "Replaced"

    def test_remove_asset(self):
        library = AssetLibrary([make_asset("a1"), make_asset("a2")])

        removed = library.remove_asset("a1")

        assert removed.id == "a1"
        assert [a.id for a in library.assets] == ["a2"]

    def test_remove_missing_asset(self):
        library = AssetLibrary([make_asset("a1")])
        assert library.remove_asset("nope") is None
        assert len(library) == 1

    def test_find_by_tag(self):
        library = AssetLibrary([
            make_asset("a1", ["Summer", "beach"]),
            make_asset("a2", ["winter"]),
        ])

        assert [a.id for a in library.find_by_tag("summer")] == ["a1"]


class TestSaveStory:
    """Tests for saving a story document."""

    def test_save_story(self):
        library = AssetLibrary()
        story = StoryData(title="T", genre="", tone="Dark")

        asset = library.save_story(story, ["x"])

        assert isinstance(asset, StoryAsset)
        assert asset.type == AssetType.STORY
        assert asset.name == "T"
        assert asset.url == ""
        assert asset.tags == ["x", "Dark"]
        assert asset.story_data is story
        assert library.assets == [asset]

    def test_save_story_from_dict(self):
        library = AssetLibrary()

        asset = library.save_story(
            {"title": "T", "genre": "", "tone": "Dark", "setting": "Mars"},
            ["x"],
        )

        assert asset.tags == ["x", "Dark"]
        assert asset.story_data.extra == {"setting": "Mars"}

    def test_untitled_story(self):
        asset = AssetLibrary().save_story(StoryData())
        assert asset.name == UNTITLED_STORY
        assert asset.tags == []

    def test_metadata_summary(self):
        story = StoryData(
            title="Saga",
            genre="Fantasy",
            tone="Epic",
            characters=[{"name": "A"}, {"name": "B"}],
            outline=["act one"],
        )

        asset = AssetLibrary().save_story(story)

        assert asset.metadata == {
            "genre": "Fantasy",
            "tone": "Epic",
            "character_count": 2,
            "has_outline": True,
        }
        assert asset.tags == ["Fantasy", "Epic"]

    def test_duplicate_tags_removed(self):
        story = StoryData(title="T", genre="Noir", tone="Noir")
        asset = AssetLibrary().save_story(story, ["Noir", "city"])
        assert asset.tags == ["Noir", "city"]

    def test_get_story_assets(self):
        library = AssetLibrary([make_asset("img")])
        story = library.save_story(StoryData(title="T"))

        assert library.get_story_assets() == [story]

    def test_story_asset_dict_roundtrip(self):
        asset = AssetLibrary().save_story(StoryData(title="T", genre="Sci-Fi"))

        restored = Asset.from_dict(asset.to_dict())

        assert isinstance(restored, StoryAsset)
        assert restored == asset
