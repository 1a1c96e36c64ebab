"""
Data models for the versioned file store.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .errors import AlreadySnapshotted


class VersionNode(BaseModel):
    """
    A single version of a file's content.

    A node is open until it is snapshotted; after that its content and
    message are permanent and further edits must branch to a new child.
    """
    id: int = Field(ge=0)
    content: str = ""
    message: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    snapshot_at: Optional[datetime] = None
    parent_id: Optional[int] = None      # None only for the root
    children: list[int] = []             # child ids in creation order

    @property
    def is_snapshot(self) -> bool:
        return self.snapshot_at is not None

    def append(self, text: str) -> None:
        self._ensure_open()
        self.content += text

    def replace(self, text: str) -> None:
        self._ensure_open()
        self.content = text

    def freeze(self, message: str, at: datetime) -> None:
        self._ensure_open()
        self.snapshot_at = at
        self.message = message

    def _ensure_open(self) -> None:
        if self.is_snapshot:
            raise AlreadySnapshotted(f"Version {self.id} is already a snapshot")


class HistoryEntry(BaseModel):
    """One snapshotted node on the root → active path."""
    version_id: int
    created_at: datetime
    snapshot_at: datetime
    message: str


class RecentFile(BaseModel):
    name: str
    last_modified: datetime


class TreeSize(BaseModel):
    name: str
    version_count: int


class LinearizedNode(BaseModel):
    """A version node enriched with tree-display metadata."""
    node: VersionNode
    depth: int
    connectors: list[str]               # visual connector tokens per level
    ancestors: list[int]                # ordered list of ancestor IDs (root → parent)
    is_last_child: bool                 # whether this is the final child of its parent
    is_active: bool = False


class PageResponse(BaseModel):
    """Paginated tree layout response."""
    name: str
    page: int
    page_size: int
    total_nodes: int
    total_pages: int
    active_id: int
    nodes: list[LinearizedNode]


# ── Request / response bodies ───────────────────────────────────────

class FileCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def must_not_contain_whitespace(cls, v: str) -> str:
        if any(ch.isspace() for ch in v):
            raise ValueError("File name must not contain whitespace")
        return v


class TextBody(BaseModel):
    text: str = ""


class SnapshotBody(BaseModel):
    message: str = ""


class RollbackBody(BaseModel):
    version_id: Optional[int] = None


class FileContent(BaseModel):
    name: str
    content: str
    version_id: int
    total_versions: int
