"""
Name → VersionTree directory plus the two rank indexes.

Every operation runs under one re-entrant lock, so a tree mutation and the
rank updates it causes are observed together. Validation happens before
any mutation: a failed call leaves trees and indexes untouched.
"""
from __future__ import annotations
import logging
import threading
from datetime import datetime
from typing import Optional

from .errors import EmptyFileName, FileAlreadyExists, FileNotFound
from .models import RecentFile, TreeSize
from .rank import RankIndex
from .tree import Clock, History, VersionTree

logger = logging.getLogger(__name__)


class FileRegistry:

    def __init__(self, clock: Clock = datetime.now) -> None:
        self._clock = clock
        self._files: dict[str, VersionTree] = {}
        self._lock = threading.RLock()
        self.recent: RankIndex[datetime] = RankIndex("recent")
        self.biggest: RankIndex[int] = RankIndex("biggest")

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: str) -> bool:
        return name in self._files

    def locked(self) -> threading.RLock:
        """The registry lock, for callers that read a tree across several calls."""
        return self._lock

    # ── Directory ────────────────────────────────────────────────────

    def create(self, name: str) -> VersionTree:
        with self._lock:
            if not name:
                raise EmptyFileName("File name cannot be empty")
            if name in self._files:
                raise FileAlreadyExists(f"File already exists: {name}")
            tree = VersionTree(clock=self._clock)
            self._files[name] = tree
            self._sync_recent(name, tree)
            self._sync_biggest(name, tree)
            logger.info("Created file %s", name)
            return tree

    def lookup(self, name: str) -> VersionTree:
        with self._lock:
            if not name:
                raise EmptyFileName("File name cannot be empty")
            tree = self._files.get(name)
            if tree is None:
                raise FileNotFound(f"File not found: {name}")
            return tree

    # ── File operations ──────────────────────────────────────────────

    def read(self, name: str) -> str:
        with self._lock:
            return self.lookup(name).read()

    def insert(self, name: str, text: str) -> VersionTree:
        with self._lock:
            tree = self.lookup(name)
            tree.insert(text)
            self._sync_recent(name, tree)
            self._sync_biggest(name, tree)
            return tree

    def update(self, name: str, text: str) -> VersionTree:
        with self._lock:
            tree = self.lookup(name)
            tree.update(text)
            self._sync_recent(name, tree)
            self._sync_biggest(name, tree)
            return tree

    def snapshot(self, name: str, message: str = "") -> VersionTree:
        with self._lock:
            tree = self.lookup(name)
            tree.snapshot(message)
            self._sync_recent(name, tree)
            return tree

    def rollback(self, name: str, version_id: Optional[int] = None) -> VersionTree:
        with self._lock:
            tree = self.lookup(name)
            tree.rollback(version_id)
            self._sync_recent(name, tree)
            return tree

    def history(self, name: str) -> History:
        with self._lock:
            return self.lookup(name).history()

    # ── Rankings ─────────────────────────────────────────────────────

    def top_by_recency(self, k: Optional[int] = None) -> list[RecentFile]:
        with self._lock:
            return [
                RecentFile(name=name, last_modified=ts)
                for name, ts in self.recent.top_k(k)
            ]

    def top_by_version_count(self, k: Optional[int] = None) -> list[TreeSize]:
        with self._lock:
            return [
                TreeSize(name=name, version_count=count)
                for name, count in self.biggest.top_k(k)
            ]

    def _sync_recent(self, name: str, tree: VersionTree) -> None:
        self.recent.upsert(name, tree.last_modified())

    def _sync_biggest(self, name: str, tree: VersionTree) -> None:
        self.biggest.upsert(name, tree.total_versions())
