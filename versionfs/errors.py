"""
Exception taxonomy.

Every error is recoverable at single-command granularity. ``kind`` is a
stable machine-readable code; ``http_status`` is what the HTTP layer
answers with.
"""
from __future__ import annotations


class VersionFSError(Exception):
    kind = "error"
    http_status = 400


# ── Validation ──────────────────────────────────────────────────────

class EmptyFileName(VersionFSError):
    kind = "empty_name"


class InvalidArgument(VersionFSError):
    kind = "invalid_argument"


class KExceedsSize(VersionFSError):
    kind = "k_exceeds_size"


# ── State ───────────────────────────────────────────────────────────

class FileAlreadyExists(VersionFSError):
    kind = "already_exists"
    http_status = 409


class FileNotFound(VersionFSError):
    kind = "not_found"
    http_status = 404


class AlreadySnapshotted(VersionFSError):
    kind = "already_snapshotted"
    http_status = 409


class NoParentVersion(VersionFSError):
    kind = "no_parent"
    http_status = 409


class InvalidVersionId(VersionFSError):
    kind = "invalid_id"
    http_status = 422


# ── Usage (command shell only) ──────────────────────────────────────

class UnknownCommand(VersionFSError):
    kind = "unknown_command"


class UsageError(VersionFSError):
    kind = "usage"
