"""
Per-file version tree.

Key ideas:
- Nodes live in one list indexed by id; parent/children are stored as ids,
  so the tree owns every node and links are plain integers.
- The active node is the only one edits apply to. Editing an open node
  mutates it in place; editing a snapshotted node branches a new child.
- The root is created empty and snapshotted immediately, so every file
  starts with one history entry.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Iterator, Optional

from .errors import InvalidVersionId, NoParentVersion
from .models import HistoryEntry, VersionNode

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class History:
    """
    Snapshotted nodes on the root → active path, oldest first.

    The path is captured when the history is taken; iterating builds
    entries lazily and may be repeated.
    """

    def __init__(self, nodes: list[VersionNode], path: list[int]) -> None:
        self._nodes = nodes
        self._path = [i for i in path if nodes[i].is_snapshot]

    def __iter__(self) -> Iterator[HistoryEntry]:
        for node_id in self._path:
            node = self._nodes[node_id]
            yield HistoryEntry(
                version_id=node.id,
                created_at=node.created_at,
                snapshot_at=node.snapshot_at,
                message=node.message,
            )

    def __len__(self) -> int:
        return len(self._path)


class VersionTree:
    """
    Append-only history of one file's content states.

    Usage:
        tree = VersionTree()
        tree.insert("hello")
        tree.snapshot("first draft")
        tree.update("goodbye")      # version 1 is frozen, so this branches version 2
        entries = list(tree.history())
    """

    def __init__(self, clock: Clock = datetime.now) -> None:
        self._clock = clock
        now = clock()
        self._nodes: list[VersionNode] = [VersionNode(id=0, created_at=now)]
        self._active = 0
        self._last_modified = now
        self.snapshot("")

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def active_id(self) -> int:
        return self._active

    @property
    def active(self) -> VersionNode:
        return self._nodes[self._active]

    @property
    def root(self) -> VersionNode:
        return self._nodes[0]

    def total_versions(self) -> int:
        return len(self._nodes)

    def last_modified(self) -> datetime:
        return self._last_modified

    def node(self, version_id: int) -> VersionNode:
        self._check_id(version_id)
        return self._nodes[version_id]

    def nodes(self) -> list[VersionNode]:
        """All nodes in id order (a shallow copy of the list)."""
        return list(self._nodes)

    def read(self) -> str:
        return self.active.content

    # ── Mutations ────────────────────────────────────────────────────

    def insert(self, text: str) -> None:
        """Append ``text`` to the active content, branching if it is frozen."""
        self._touch()
        if self.active.is_snapshot:
            self._branch(self.active.content + text)
        else:
            self.active.append(text)

    def update(self, text: str) -> None:
        """Replace the active content with ``text``, branching if it is frozen."""
        self._touch()
        if self.active.is_snapshot:
            self._branch(text)
        else:
            self.active.replace(text)

    def snapshot(self, message: str = "") -> None:
        """Freeze the active node. Raises AlreadySnapshotted if it is frozen."""
        now = self._clock()
        self.active.freeze(message, now)
        self._last_modified = now
        logger.debug("Snapshot of version %d: %r", self._active, message)

    def rollback(self, version_id: Optional[int] = None) -> None:
        """
        Move the active pointer to ``version_id``, or to the active node's
        parent when no id is given. Counts as a modification.
        """
        if version_id is None:
            parent_id = self.active.parent_id
            if parent_id is None:
                raise NoParentVersion("No parent version to rollback to")
            target = parent_id
        else:
            self._check_id(version_id)
            target = version_id
        logger.debug("Rollback %d -> %d", self._active, target)
        self._active = target
        self._touch()

    # ── Traversal ────────────────────────────────────────────────────

    def path_to_active(self) -> list[int]:
        """Node ids from the root down to the active node."""
        path: list[int] = []
        current: Optional[int] = self._active
        while current is not None:
            path.append(current)
            current = self._nodes[current].parent_id
        path.reverse()
        return path

    def history(self) -> History:
        return History(self._nodes, self.path_to_active())

    # ── Internals ────────────────────────────────────────────────────

    def _branch(self, content: str) -> None:
        parent = self.active
        child = VersionNode(
            id=len(self._nodes),
            content=content,
            created_at=self._clock(),
            parent_id=parent.id,
        )
        self._nodes.append(child)
        parent.children.append(child.id)
        self._active = child.id
        logger.debug("Branched version %d from %d", child.id, parent.id)

    def _touch(self) -> None:
        self._last_modified = self._clock()

    def _check_id(self, version_id: int) -> None:
        if not 0 <= version_id < len(self._nodes):
            raise InvalidVersionId(
                f"Invalid version id {version_id}: expected 0..{len(self._nodes) - 1}"
            )
