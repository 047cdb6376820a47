"""
Persistence Gateway - Save and load the persisted subset of the store.

Only boards, assets and the active category are persisted. They are
written as JSON under a fixed storage key:

    <storage_dir>/creator-canvas-storage.json
    {"version": 1, "state": {"boards": [...], "assets": [...], "active_category": "fashion"}}

Everything else (live graph, selection, execution, panel flags) is
transient. Loading never raises: a missing, unreadable or malformed file
yields the empty default state.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from creator_canvas.core.errors import PersistenceError
from creator_canvas.core.models import Asset, Board, BoardCategory


logger = logging.getLogger(__name__)

STORAGE_KEY = "creator-canvas-storage"
STORAGE_VERSION = 1
DEFAULT_CATEGORY = BoardCategory.FASHION

# Upgrade functions keyed by the version they upgrade *from*.
Migration = Callable[[dict[str, Any]], dict[str, Any]]
MIGRATIONS: dict[int, Migration] = {}


@dataclass
class PersistedState:
    """The subset of the canvas store that survives restarts."""
    boards: list[Board] = field(default_factory=list)
    assets: list[Asset] = field(default_factory=list)
    active_category: BoardCategory = DEFAULT_CATEGORY

    def to_dict(self) -> dict[str, Any]:
        return {
            "boards": [b.to_dict() for b in self.boards],
            "assets": [a.to_dict() for a in self.assets],
            "active_category": self.active_category.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PersistedState:
        return cls(
            boards=[Board.from_dict(b) for b in data.get("boards", [])],
            assets=[Asset.from_dict(a) for a in data.get("assets", [])],
            active_category=BoardCategory(
                data.get("active_category", DEFAULT_CATEGORY.value)
            ),
        )


def serialize(state: PersistedState) -> str:
    """Serialize the persisted subset to the stored JSON text."""
    envelope = {"version": STORAGE_VERSION, "state": state.to_dict()}
    return json.dumps(envelope, indent=2, sort_keys=True)


def migrate(
    envelope: dict[str, Any],
    migrations: dict[int, Migration] | None = None,
) -> dict[str, Any]:
    """
    Bring a stored envelope up to STORAGE_VERSION.

    Raises:
        ValueError: Unknown version or no migration path
    """
    migrations = MIGRATIONS if migrations is None else migrations
    version = envelope.get("version")
    if not isinstance(version, int):
        raise ValueError(f"Invalid storage version: {version!r}")
    if version > STORAGE_VERSION:
        raise ValueError(f"Storage version {version} is newer than {STORAGE_VERSION}")

    while version < STORAGE_VERSION:
        step = migrations.get(version)
        if step is None:
            raise ValueError(f"No migration from storage version {version}")
        envelope = step(envelope)
        version += 1
        envelope["version"] = version
    return envelope


def deserialize(
    text: str,
    migrations: dict[int, Migration] | None = None,
) -> PersistedState:
    """
    Parse stored JSON text into a PersistedState.

    Raises:
        ValueError: If the text is not a valid stored payload
    """
    try:
        envelope = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse stored state: {e}") from e

    if not isinstance(envelope, dict) or not isinstance(envelope.get("state"), dict):
        raise ValueError("Invalid stored state format")

    envelope = migrate(envelope, migrations)
    try:
        return PersistedState.from_dict(envelope["state"])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ValueError(f"Invalid stored state content: {e}") from e


class PersistenceGateway:
    """
    Reads and writes the persisted subset to a single JSON slot.

    Args:
        storage_dir: Directory holding the storage file
        key: Storage key, used as the file name
        migrations: Version upgrade hooks (defaults to MIGRATIONS)
    """

    def __init__(
        self,
        storage_dir: Path,
        key: str = STORAGE_KEY,
        migrations: dict[int, Migration] | None = None,
    ):
        self.storage_dir = Path(storage_dir)
        self.key = key
        self.migrations = migrations

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{self.key}.json"

    def load(self) -> PersistedState:
        """
        Load the persisted subset.

        Returns the default empty state when nothing usable is stored.
        """
        path = self.path
        if not path.exists():
            return PersistedState()

        try:
            text = path.read_text(encoding="utf-8")
            return deserialize(text, self.migrations)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring stored canvas state at %s: %s", path, e)
            return PersistedState()

    def save(self, state: PersistedState, strict: bool = False) -> bool:
        """
        Write the persisted subset.

        Returns True on success. Unwritable storage and state that cannot
        be encoded as JSON are logged and leave the previous file in place;
        with `strict=True` they raise PersistenceError instead.
        """
        path = self.path
        tmp_path = path.with_suffix(".json.tmp")
        try:
            text = serialize(state)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save canvas state to %s: %s", path, e)
            if tmp_path.exists():
                tmp_path.unlink()
            if strict:
                raise PersistenceError(f"Failed to save canvas state: {e}") from e
            return False
        return True

    def clear(self) -> bool:
        """Delete the stored payload. Returns True if a file was removed."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False
