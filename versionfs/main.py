"""
FastAPI backend for the versioned file store.

Endpoints:
  POST /files                      → create a file
  GET  /files/{name}               → active content
  POST /files/{name}/insert        → append to active content
  POST /files/{name}/update        → replace active content
  POST /files/{name}/snapshot      → freeze the active version
  POST /files/{name}/rollback      → move the active version
  GET  /files/{name}/history       → snapshots on the active branch
  GET  /files/{name}/tree          → paginated linearized version tree
  GET  /files/{name}/tree/ascii    → (dev) ASCII rendering of the tree
  GET  /recent                     → files by last modification
  GET  /biggest                    → files by version count
"""
from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .errors import VersionFSError
from .layout import TreeLayout
from .models import (
    FileContent,
    FileCreate,
    HistoryEntry,
    PageResponse,
    RecentFile,
    RollbackBody,
    SnapshotBody,
    TextBody,
    TreeSize,
)
from .registry import FileRegistry
from .tree import VersionTree

logger = logging.getLogger(__name__)


def _content(name: str, tree: VersionTree) -> FileContent:
    return FileContent(
        name=name,
        content=tree.read(),
        version_id=tree.active_id,
        total_versions=tree.total_versions(),
    )


def create_app(
    registry: Optional[FileRegistry] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the app around ``registry`` (a fresh one by default)."""
    settings = settings or load_settings()

    app = FastAPI(
        title="Versioned File Store",
        description="In-memory files with branchable version history and recency/size rankings.",
        version="1.0.0",
    )
    app.state.registry = registry if registry is not None else FileRegistry()
    app.state.settings = settings

    def get_registry(request: Request) -> FileRegistry:
        return request.app.state.registry

    @app.exception_handler(VersionFSError)
    async def versionfs_error_handler(_request: Request, exc: VersionFSError) -> JSONResponse:
        """Render store errors as {error, detail} with the error's status."""
        logger.debug("Request failed (%s): %s", exc.kind, exc)
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": exc.kind, "detail": str(exc)},
        )

    # ── Files ────────────────────────────────────────────────────────

    @app.post("/files", status_code=status.HTTP_201_CREATED, summary="Create a file")
    def create_file(body: FileCreate, request: Request):
        get_registry(request).create(body.name)
        return {"name": body.name}

    @app.get("/files/{name}", response_model=FileContent, summary="Read active content")
    def read_file(name: str, request: Request):
        registry = get_registry(request)
        with registry.locked():
            return _content(name, registry.lookup(name))

    @app.post("/files/{name}/insert", response_model=FileContent, summary="Append content")
    def insert(name: str, body: TextBody, request: Request):
        registry = get_registry(request)
        with registry.locked():
            return _content(name, registry.insert(name, body.text))

    @app.post("/files/{name}/update", response_model=FileContent, summary="Replace content")
    def update(name: str, body: TextBody, request: Request):
        registry = get_registry(request)
        with registry.locked():
            return _content(name, registry.update(name, body.text))

    @app.post("/files/{name}/snapshot", summary="Snapshot the active version")
    def snapshot(name: str, body: SnapshotBody, request: Request):
        registry = get_registry(request)
        with registry.locked():
            tree = registry.snapshot(name, body.message)
            return {"name": name, "version_id": tree.active_id}

    @app.post("/files/{name}/rollback", response_model=FileContent, summary="Roll back")
    def rollback(name: str, body: RollbackBody, request: Request):
        """
        Move the active version to ``version_id``, or to the parent of the
        active version when it is omitted.
        """
        registry = get_registry(request)
        with registry.locked():
            return _content(name, registry.rollback(name, body.version_id))

    @app.get("/files/{name}/history", response_model=list[HistoryEntry], summary="Snapshot history")
    def history(name: str, request: Request):
        return list(get_registry(request).history(name))

    # ── Tree view ────────────────────────────────────────────────────

    @app.get("/files/{name}/tree", response_model=PageResponse, summary="Get paginated version tree")
    def get_tree(
        name: str,
        request: Request,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
    ):
        """
        Returns a paginated slice of the linearized DFS version tree.
        Each node includes its connector tokens and ancestor IDs for
        client-side ancestry highlighting.
        """
        registry = get_registry(request)
        page_size = request.app.state.settings.page_size
        with registry.locked():
            tree = registry.lookup(name)
            layout = TreeLayout(tree)
            linearized = layout.linearize()
            active_id = tree.active_id
        page_nodes, total_pages = layout.get_page(linearized, page, page_size)
        return PageResponse(
            name=name,
            page=min(page, total_pages),
            page_size=page_size,
            total_nodes=len(linearized),
            total_pages=total_pages,
            active_id=active_id,
            nodes=page_nodes,
        )

    @app.get("/files/{name}/tree/ascii", summary="(Dev) Print ASCII tree to response")
    def debug_tree(name: str, request: Request):
        registry = get_registry(request)
        with registry.locked():
            return {"tree": TreeLayout(registry.lookup(name)).render_ascii()}

    # ── Rankings ─────────────────────────────────────────────────────

    @app.get("/recent", response_model=list[RecentFile], summary="Most recently modified files")
    def recent(
        request: Request,
        k: Optional[int] = Query(default=None, description="Number of files (default: all)"),
    ):
        return get_registry(request).top_by_recency(k)

    @app.get("/biggest", response_model=list[TreeSize], summary="Files with the most versions")
    def biggest(
        request: Request,
        k: Optional[int] = Query(default=None, description="Number of files (default: all)"),
    ):
        return get_registry(request).top_by_version_count(k)

    return app


app = create_app()
