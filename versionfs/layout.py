"""
DFS linearization of one file's version tree for display.

Key ideas:
- Node 0 is the only root and every node lists its children in creation
  order, so a pre-order walk from 0 visits the whole tree.
- The walk carries a "branch_open" stack of booleans. Entry i says
  "level i still has more siblings coming", which keeps vertical │ lines
  correct even when the list is cut into pages.
- Ancestry is recorded per node so a client can highlight the path to any
  version without walking the tree again.
"""
from __future__ import annotations
from .models import LinearizedNode
from .tree import VersionTree

# ── Connector tokens ────────────────────────────────────────────────
VERTICAL   = "│"   # level has more siblings below
TEE        = "├──" # standard child connector
CORNER     = "└──" # final child connector
SPACE      = "   " # level is closed; just padding
NODE_DOT   = "•"   # node indicator appended after connector

PREVIEW_WIDTH = 24


class TreeLayout:
    """
    Usage:
        layout = TreeLayout(tree)
        nodes  = layout.linearize()
        page, total_pages = layout.get_page(nodes, page=2, page_size=10)
    """

    def __init__(self, tree: VersionTree) -> None:
        self._nodes = tree.nodes()
        self._active = tree.active_id

    # ── Public API ───────────────────────────────────────────────────

    def linearize(self) -> list[LinearizedNode]:
        """Return every version in DFS pre-order with display metadata."""
        result: list[LinearizedNode] = []
        # Iterative walk; chains of edits can be far deeper than the
        # recursion limit.
        stack: list[tuple[int, list[int], list[bool], bool]] = [(0, [], [], True)]
        while stack:
            node_id, ancestors, branch_open, is_last = stack.pop()
            node = self._nodes[node_id]
            depth = len(ancestors)
            result.append(
                LinearizedNode(
                    node=node,
                    depth=depth,
                    connectors=self._build_connectors(branch_open, depth, is_last),
                    ancestors=ancestors,
                    is_last_child=is_last,
                    is_active=node_id == self._active,
                )
            )
            children = node.children
            for idx in range(len(children) - 1, -1, -1):
                child_is_last = idx == len(children) - 1
                stack.append((
                    children[idx],
                    ancestors + [node_id],
                    branch_open + [not child_is_last],
                    child_is_last,
                ))
        return result

    @staticmethod
    def get_page(
        linearized: list[LinearizedNode],
        page: int,
        page_size: int = 10,
    ) -> tuple[list[LinearizedNode], int]:
        """
        Slice the linearized list for pagination.
        Returns (page_nodes, total_pages).
        """
        total = len(linearized)
        total_pages = max(1, -(-total // page_size))  # ceiling division
        page = max(1, min(page, total_pages))
        start = (page - 1) * page_size
        return linearized[start : start + page_size], total_pages

    def render_ascii(self) -> str:
        return "\n".join(format_line(item) for item in self.linearize())

    # ── Connector generation ─────────────────────────────────────────

    @staticmethod
    def _build_connectors(
        branch_open: list[bool],
        depth: int,
        is_last_child: bool,
    ) -> list[str]:
        """
        Build the list of connector tokens for a node.

        Example for depth=2, branch_open=[True, False]:
            ["│", "└──", "•"]
        """
        if depth == 0:
            return [NODE_DOT]

        tokens: list[str] = []

        # All ancestor levels: vertical line if that level's branch is still open
        for open_flag in branch_open[:-1]:
            tokens.append(VERTICAL if open_flag else SPACE)

        # Immediate parent connector
        tokens.append(CORNER if is_last_child else TEE)

        tokens.append(NODE_DOT)
        return tokens


def preview(content: str, width: int = PREVIEW_WIDTH) -> str:
    """Single-line, width-limited rendering of a node's content."""
    flat = " ".join(content.split())
    if not flat:
        return "(empty)"
    if len(flat) > width:
        return flat[: width - 1] + "…"
    return flat


def format_line(item: LinearizedNode) -> str:
    """One display line: connectors, content preview, id, and * on the active node."""
    marker = " *" if item.is_active else ""
    return f"{''.join(item.connectors)} {preview(item.node.content)}  [{item.node.id}]{marker}"
