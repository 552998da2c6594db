"""
Value types shared by discovery, listing, and detection.

Group/version strings follow the Kubernetes convention: "apps/v1" for a
named group, "v1" for the core group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


def parse_group_version(group_version: str) -> tuple[str, str]:
    """
    Split a group/version string into (group, version).

    "v1" is the core group and yields ("", "v1"); an empty string yields
    ("", ""). Raises ValueError for strings with more than one "/".
    """
    if not group_version:
        return "", ""
    parts = group_version.split("/")
    if len(parts) == 1:
        return "", parts[0]
    if len(parts) == 2:
        return parts[0], parts[1]
    raise ValueError(f"unexpected GroupVersion string: {group_version}")


@dataclass(frozen=True)
class GroupResourceKind:
    """One resource type as named by discovery."""

    group_version: str
    resource_name: str
    resource_kind: str


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    @property
    def group_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def api_path(self) -> str:
        """REST path listing this resource across all namespaces."""
        if not self.group:
            return f"/api/{self.version}/{self.resource}"
        return f"/apis/{self.group}/{self.version}/{self.resource}"


@dataclass
class APIResource:
    name: str
    kind: str
    namespaced: bool = False
    verbs: list[str] = field(default_factory=list)

    @classmethod
    def from_discovery(cls, data: dict) -> "APIResource":
        return cls(
            name=data.get("name", ""),
            kind=data.get("kind", ""),
            namespaced=bool(data.get("namespaced", False)),
            verbs=list(data.get("verbs") or []),
        )


@dataclass
class APIResourceList:
    """Resources served under one group/version."""

    group_version: str
    resources: list[APIResource] = field(default_factory=list)

    @property
    def group(self) -> str:
        return parse_group_version(self.group_version)[0]


@dataclass(frozen=True)
class Item:
    """Identity of one live object reported under a deleted API."""

    name: str
    namespace: str = ""
    uid: Optional[str] = None

    @classmethod
    def from_object(cls, obj: dict) -> "Item":
        meta = obj.get("metadata")
        if not isinstance(meta, dict):
            meta = {}
        uid = meta.get("uid")
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace") or "",
            uid=str(uid) if uid is not None else None,
        )


@dataclass
class DeletedAPI:
    """A resource type that still holds live objects but is no longer known."""

    group: str
    version: str
    name: str
    kind: str
    deleted: bool = True
    items: list[Item] = field(default_factory=list)

    @property
    def group_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


def list_objects(objects: list[dict]) -> list[Item]:
    """Reduce live object documents to their reportable identity."""
    return [Item.from_object(obj) for obj in objects]
