"""
Group repository: persistence of window groups.

All groups are stored together as one JSON blob under a single key of a
small SQLite key-value table. Every mutation is a full load -> pure
transform -> save cycle; nothing is mutated in place between the load
and the save.
"""

import dataclasses
import json
import logging
import sqlite3
import uuid
from contextlib import closing
from datetime import datetime
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from .config import Config
from .exceptions import (
    GroupNameConflictError,
    GroupNotFoundError,
    InvalidGroupError,
    StorageError,
    WindowAlreadyGroupedError,
)
from .matcher import claimed_keys, match_key
from .models import Group, WindowReference, groups_from_blob, groups_to_blob, utc_now

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "window-groups"
UPDATABLE_FIELDS = {"name", "windows"}


def normalize_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidGroupError("Group name is required")
    return name


def find_name_conflict(groups: list[Group], name: str, ignore_id: str | None = None) -> Group | None:
    lowered = name.lower()
    for group in groups:
        if group.id != ignore_id and group.name.lower() == lowered:
            return group
    return None


def add_group(groups: list[Group], group: Group) -> list[Group]:
    """Return a new collection with ``group`` appended, enforcing creation rules"""
    if not group.windows:
        raise InvalidGroupError("A group needs at least one window")
    if find_name_conflict(groups, group.name):
        raise GroupNameConflictError(group.name)

    claimed = claimed_keys(groups)
    for window in group.windows:
        owner = claimed.get(match_key(window))
        if owner is not None:
            raise WindowAlreadyGroupedError(
                window.application_name, window.window_title, owner.name
            )

    return [*groups, group]


def apply_update(
    groups: list[Group], group_id: str, changes: dict[str, Any], now: datetime
) -> list[Group]:
    """Return a new collection with the changes merged into one group"""
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidGroupError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    index = next((i for i, g in enumerate(groups) if g.id == group_id), None)
    if index is None:
        raise GroupNotFoundError(group_id)

    changes = dict(changes)
    if "name" in changes:
        changes["name"] = normalize_name(changes["name"])
        if find_name_conflict(groups, changes["name"], ignore_id=group_id):
            raise GroupNameConflictError(changes["name"])
    if "windows" in changes:
        changes["windows"] = list(changes["windows"])
        if not changes["windows"]:
            raise InvalidGroupError("A group needs at least one window")

    updated = dataclasses.replace(groups[index], **changes, updated_at=now)
    return [*groups[:index], updated, *groups[index + 1:]]


def remove_group(groups: list[Group], group_id: str) -> list[Group]:
    return [g for g in groups if g.id != group_id]


class GroupRepository(QObject):
    """CRUD over named window groups"""

    group_created = pyqtSignal(str)  # group id
    group_updated = pyqtSignal(str)  # group id
    group_deleted = pyqtSignal(str)  # group id

    def __init__(self, config: Config):
        super().__init__()
        self.config = config
        self.db_path = config.database_path
        self.storage_key = config.get("storage.key", DEFAULT_STORAGE_KEY)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize the SQLite key-value table"""
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            logger.error("Error initializing database %s: %s", self.db_path, e)

    def load_all(self) -> list[Group]:
        """Load every group; unreadable storage yields an empty list"""
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM kv WHERE key = ?", (self.storage_key,))
                row = cursor.fetchone()

            if not row or not row[0]:
                return []
            return groups_from_blob(json.loads(row[0]))

        except (
            sqlite3.Error,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
            InvalidGroupError,
        ) as e:
            logger.error("Error loading groups: %s", e)
            return []

    def save_all(self, groups: list[Group]) -> None:
        """Replace the stored collection. Raises StorageError."""
        try:
            payload = json.dumps(groups_to_blob(groups))
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    (self.storage_key, payload),
                )
                conn.commit()
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("Error saving groups: %s", e)
            raise StorageError(f"Could not save groups: {e}") from e

    def get(self, group_id: str) -> Group | None:
        return next((g for g in self.load_all() if g.id == group_id), None)

    def create(self, name: str, windows: list[WindowReference]) -> Group:
        """Create a group, assigning its id and timestamps"""
        now = utc_now()
        group = Group(
            id=uuid.uuid4().hex,
            name=normalize_name(name),
            windows=list(windows),
            created_at=now,
            updated_at=now,
        )
        self.save_all(add_group(self.load_all(), group))
        logger.info("Created group '%s' with %d window(s)", group.name, len(group.windows))
        self.group_created.emit(group.id)
        return group

    def update(self, group_id: str, **changes: Any) -> Group:
        groups = apply_update(self.load_all(), group_id, changes, utc_now())
        self.save_all(groups)
        self.group_updated.emit(group_id)
        return next(g for g in groups if g.id == group_id)

    def delete(self, group_id: str) -> None:
        """Delete a group; deleting an unknown id is a no-op"""
        groups = self.load_all()
        remaining = remove_group(groups, group_id)
        if len(remaining) == len(groups):
            return
        self.save_all(remaining)
        logger.info("Deleted group %s", group_id)
        self.group_deleted.emit(group_id)

    def names(self) -> list[str]:
        return [g.name for g in self.load_all()]
