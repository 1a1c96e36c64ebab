"""
Tests for the line-oriented command shell.
Run with: pytest tests/test_shell.py -v
"""
import io

import pytest

from versionfs.errors import InvalidArgument, UnknownCommand, UsageError
from versionfs.layout import TreeLayout
from versionfs.registry import FileRegistry
from versionfs.shell import CommandShell, ExitShell


@pytest.fixture
def shell(clock):
    return CommandShell(FileRegistry(clock=clock))


def run(shell, text):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = shell.run(io.StringIO(text), stdout, stderr)
    return code, stdout.getvalue(), stderr.getvalue()


# ── Test: Parsing ─────────────────────────────────────────────────────

def test_content_keeps_internal_whitespace(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f hello   big  world")
    assert shell.registry.read("f") == "hello   big  world"


def test_verb_is_case_insensitive(shell):
    assert shell.execute("create f") == "[CREATE] File created: f"


def test_blank_line_is_ignored(shell):
    assert shell.execute("   ") == ""


def test_unknown_command(shell):
    with pytest.raises(UnknownCommand):
        shell.execute("FROB f")


def test_missing_file_name(shell):
    with pytest.raises(UsageError):
        shell.execute("READ")


# ── Test: Commands ────────────────────────────────────────────────────

def test_read_output(shell):
    shell.execute("CREATE f")
    shell.execute("UPDATE f abc")
    assert shell.execute("READ f") == "[READ] Content of file 'f':\nabc"


def test_snapshot_output_includes_message(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f x")
    assert shell.execute("SNAPSHOT f first cut") == (
        "[SNAPSHOT] Snapshot created for file 'f'.\nMessage: first cut"
    )


def test_rollback_arguments(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f x")
    with pytest.raises(UsageError):
        shell.execute("ROLLBACK f 0 1")
    with pytest.raises(InvalidArgument):
        shell.execute("ROLLBACK f -1")
    out = shell.execute("ROLLBACK f 0")
    assert out.startswith("[ROLLBACK] File 'f' rolled back to version 0.")
    assert shell.registry.read("f") == ""


def test_history_output(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f x")
    shell.execute("SNAPSHOT f v1")
    lines = shell.execute("HISTORY f").splitlines()
    assert lines[0] == "[HISTORY] Snapshots for file 'f':"
    assert lines[1] == "Version 0"
    assert lines[3] == "Version 1"
    assert lines[4].endswith("| Message: v1")


def test_rankings_output(shell):
    shell.execute("CREATE a")
    shell.execute("CREATE b")
    shell.execute("INSERT a x")
    recent = shell.execute("RECENT_FILES 1").splitlines()
    assert recent[0] == "[RECENT_FILES] Showing 1 file(s):"
    assert recent[1].startswith("a -> ")
    biggest = shell.execute("BIGGEST_TREES").splitlines()
    assert biggest == [
        "[BIGGEST_TREES] Showing 2 file(s) by version count:",
        "2 -> a",
        "1 -> b",
    ]
    with pytest.raises(InvalidArgument):
        shell.execute("RECENT_FILES two")


def test_tree_output(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f x")
    lines = shell.execute("TREE f").splitlines()
    assert lines[0] == "[TREE] Versions of file 'f' (page 1/1):"
    assert lines[2].endswith("[1] *")


def test_exit(shell):
    with pytest.raises(ExitShell):
        shell.execute("EXIT")


# ── Test: Read loop ───────────────────────────────────────────────────

def test_run_reports_errors_and_continues(shell):
    code, out, err = run(shell, "CREATE a\nCREATE a\nREAD a\n")
    assert code == 0
    assert err == "Error: File already exists: a\n"
    assert "[READ] Content of file 'a':" in out


def test_run_stops_at_exit(shell):
    code, out, _ = run(shell, "CREATE a\nEXIT\nCREATE b\n")
    assert code == 0
    assert "Exiting..." in out
    assert "b" not in shell.registry


def test_run_snapshot_twice_error(shell):
    _, _, err = run(shell, "CREATE a\nSNAPSHOT a\n")
    assert err == "Error: Version 0 is already a snapshot\n"


def test_tree_lines_match_ascii_rendering(shell):
    shell.execute("CREATE f")
    shell.execute("INSERT f x")
    shell.execute("SNAPSHOT f")
    shell.execute("ROLLBACK f 0")
    shell.execute("UPDATE f y")
    lines = shell.execute("TREE f").splitlines()[1:]
    ascii_lines = TreeLayout(shell.registry.lookup("f")).render_ascii().splitlines()
    assert lines == ascii_lines
