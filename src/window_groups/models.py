"""
Data model for window groups
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .exceptions import InvalidGroupError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value)
    # Older blobs were written with a trailing "Z"
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class WindowReference:
    """A persisted description of a window the user wants to remember"""

    application_name: str
    window_title: str
    composite_id: str
    bundle_id: str | None = None

    def __post_init__(self):
        if not self.application_name:
            raise InvalidGroupError("Window reference needs an application name")
        if not self.window_title:
            raise InvalidGroupError(
                f"Window reference for '{self.application_name}' needs a title"
            )

    @classmethod
    def from_live(cls, window: "LiveWindow") -> "WindowReference":
        return cls(
            application_name=window.application_name,
            window_title=window.window_title,
            composite_id=window.composite_id,
            bundle_id=window.bundle_id,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "applicationName": self.application_name,
            "windowTitle": self.window_title,
            "compositeId": self.composite_id,
        }
        if self.bundle_id:
            data["bundleId"] = self.bundle_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindowReference":
        if not isinstance(data, dict):
            raise InvalidGroupError(f"Malformed window reference: {data!r}")
        application_name = data.get("applicationName", "")
        window_title = data.get("windowTitle", "")
        return cls(
            application_name=application_name,
            window_title=window_title,
            composite_id=data.get("compositeId") or f"{application_name}::{window_title}",
            bundle_id=data.get("bundleId") or None,
        )


@dataclass
class LiveWindow:
    """A window observed right now through the window server. Never persisted."""

    application_name: str
    window_title: str
    composite_id: str = ""
    bundle_id: str | None = None
    pid: int | None = None


@dataclass
class Group:
    """A named, ordered collection of window references"""

    id: str
    name: str
    windows: list[WindowReference]
    created_at: datetime
    updated_at: datetime

    def application_names(self) -> list[str]:
        """Distinct application names in first-seen order"""
        names: list[str] = []
        for window in self.windows:
            if window.application_name not in names:
                names.append(window.application_name)
        return names

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "windows": [w.to_dict() for w in self.windows],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        if not isinstance(data, dict):
            raise InvalidGroupError(f"Malformed group: {data!r}")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            windows=[WindowReference.from_dict(w) for w in data.get("windows") or []],
            created_at=_parse_timestamp(data["createdAt"]),
            updated_at=_parse_timestamp(data["updatedAt"]),
        )


@dataclass
class SwitchResult:
    """Outcome of a single switch: how many windows were shown and which were missing"""

    shown: int = 0
    not_found: list[WindowReference] = field(default_factory=list)

    @property
    def outcome(self) -> str:
        if self.shown == 0:
            return "failure"
        if self.not_found:
            return "partial"
        return "success"


def groups_to_blob(groups: list[Group]) -> dict[str, Any]:
    return {"groups": [g.to_dict() for g in groups]}


def groups_from_blob(blob: dict[str, Any]) -> list[Group]:
    if not isinstance(blob, dict):
        raise InvalidGroupError(f"Stored groups must be an object, got {type(blob).__name__}")
    return [Group.from_dict(g) for g in blob.get("groups") or []]
