"""
Tests for the DFS linearization of version trees.
Run with: pytest tests/test_layout.py -v
"""
from versionfs.layout import TreeLayout, VERTICAL, TEE, CORNER, SPACE, NODE_DOT, preview
from versionfs.tree import VersionTree


# ── Fixtures ─────────────────────────────────────────────────────────

def branch(tree, parent_id, text):
    """Create a new child of ``parent_id`` and snapshot it; return its id."""
    tree.rollback(parent_id)
    tree.update(text)
    tree.snapshot(text)
    return tree.active_id


def ids(nodes):
    return [n.node.id for n in nodes]


# ── Test: Fresh file is a single root ────────────────────────────────

def test_single_root():
    nodes = TreeLayout(VersionTree()).linearize()
    assert len(nodes) == 1
    assert nodes[0].node.id == 0
    assert nodes[0].depth == 0
    assert nodes[0].connectors == [NODE_DOT]
    assert nodes[0].ancestors == []
    assert nodes[0].is_active


# ── Test: Root with two children ─────────────────────────────────────

def test_root_with_two_children():
    tree = VersionTree()
    c1 = branch(tree, 0, "c1")
    c2 = branch(tree, 0, "c2")
    nodes = TreeLayout(tree).linearize()
    assert ids(nodes) == [0, c1, c2]

    # c1 is NOT the last child — should use TEE
    assert TEE in nodes[1].connectors
    # c2 IS the last child — should use CORNER
    assert CORNER in nodes[2].connectors


# ── Test: DFS order preserved through deep nesting ───────────────────

def test_dfs_order():
    #   0
    #   ├── A
    #   │   └── A1
    #   └── B
    tree = VersionTree()
    a = branch(tree, 0, "A")
    a1 = branch(tree, a, "A1")
    b = branch(tree, 0, "B")
    assert ids(TreeLayout(tree).linearize()) == [0, a, a1, b]


# ── Test: Vertical lines persist across levels ────────────────────────

def test_vertical_line_persists():
    tree = VersionTree()
    a = branch(tree, 0, "A")
    a1 = branch(tree, a, "A1")
    branch(tree, 0, "B")
    nodes = TreeLayout(tree).linearize()
    node = next(n for n in nodes if n.node.id == a1)
    # At depth 2: [VERTICAL (root open), CORNER (last child), NODE_DOT]
    assert node.connectors == [VERTICAL, CORNER, NODE_DOT]


# ── Test: Ancestry is correct ─────────────────────────────────────────

def test_ancestry():
    tree = VersionTree()
    a = branch(tree, 0, "A")
    a1 = branch(tree, a, "A1")
    a1a = branch(tree, a1, "A1a")
    node = next(n for n in TreeLayout(tree).linearize() if n.node.id == a1a)
    assert node.ancestors == [0, a, a1]


# ── Test: Space token when parent branch is closed ────────────────────

def test_space_when_branch_closed():
    tree = VersionTree()
    a = branch(tree, 0, "A")
    a1 = branch(tree, a, "A1")
    node = next(n for n in TreeLayout(tree).linearize() if n.node.id == a1)
    assert node.connectors[0] == SPACE


# ── Test: Active marker follows rollback ──────────────────────────────

def test_active_marker():
    tree = VersionTree()
    a = branch(tree, 0, "A")
    branch(tree, 0, "B")
    tree.rollback(a)
    active = [n.node.id for n in TreeLayout(tree).linearize() if n.is_active]
    assert active == [a]


# ── Test: Pagination slicing ──────────────────────────────────────────

def test_pagination():
    tree = VersionTree()
    for i in range(24):
        branch(tree, 0, f"v{i}")
    layout = TreeLayout(tree)
    linearized = layout.linearize()
    assert len(linearized) == 25

    page1, total = layout.get_page(linearized, page=1, page_size=10)
    assert len(page1) == 10
    assert total == 3

    page3, _ = layout.get_page(linearized, page=3, page_size=10)
    assert len(page3) == 5  # 25 - 20 = 5 remaining

    clamped, _ = layout.get_page(linearized, page=99, page_size=10)
    assert clamped == page3


# ── Test: Deep chains do not hit the recursion limit ──────────────────

def test_deep_chain():
    tree = VersionTree()
    for i in range(1200):
        tree.insert("x")
        tree.snapshot()
    nodes = TreeLayout(tree).linearize()
    assert len(nodes) == 1201
    assert nodes[-1].depth == 1200


# ── Test: ASCII rendering ─────────────────────────────────────────────

def test_render_ascii():
    tree = VersionTree()
    tree.insert("hello world")
    lines = TreeLayout(tree).render_ascii().splitlines()
    assert lines[0] == f"{NODE_DOT} (empty)  [0]"
    assert lines[1] == f"{CORNER}{NODE_DOT} hello world  [1] *"


def test_preview_truncates_and_flattens():
    assert preview("a\nb") == "a b"
    assert preview("x" * 40).endswith("…")
    assert len(preview("x" * 40)) == 24
