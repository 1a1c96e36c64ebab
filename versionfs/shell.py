"""
Line-oriented command shell over a FileRegistry.

Commands (one per line, verb case-insensitive):
  CREATE <filename>
  READ <filename>
  INSERT <filename> <content...>
  UPDATE <filename> <content...>
  SNAPSHOT <filename> [message...]
  ROLLBACK <filename> [version_id]
  HISTORY <filename>
  RECENT_FILES [k]
  BIGGEST_TREES [k]
  TREE <filename> [page]
  HELP
  EXIT

Content and messages are everything after the single separator that
follows the file name, internal whitespace included.
"""
from __future__ import annotations
import logging
import re
import sys
from typing import Callable, Optional, TextIO

from .errors import InvalidArgument, UnknownCommand, UsageError, VersionFSError
from .layout import TreeLayout, format_line
from .registry import FileRegistry

logger = logging.getLogger(__name__)

_COMMAND_RE = re.compile(r"^\s*(?P<verb>\S+)(?:\s+(?P<name>\S+)(?:\s(?P<rest>.*))?)?", re.DOTALL)

HELP_TEXT = """Available commands:
  CREATE <filename>
  READ <filename>
  INSERT <filename> <content...>
  UPDATE <filename> <content...>
  SNAPSHOT <filename> [message...]
  ROLLBACK <filename> [version_id]
  HISTORY <filename>
  RECENT_FILES [k]
  BIGGEST_TREES [k]
  TREE <filename> [page]
  HELP
  EXIT"""


class ExitShell(Exception):
    """Raised by EXIT to stop the read loop."""


def parse_count(raw: str, what: str) -> int:
    """Parse a non-negative decimal integer argument."""
    if not raw or not raw.isdigit() or not raw.isascii():
        raise InvalidArgument(f"{what} requires a non-negative integer argument")
    return int(raw)


class CommandShell:

    def __init__(self, registry: FileRegistry, page_size: int = 10) -> None:
        self.registry = registry
        self.page_size = page_size
        self._handlers: dict[str, Callable[[Optional[str], str], str]] = {
            "CREATE": self._create,
            "READ": self._read,
            "INSERT": self._insert,
            "UPDATE": self._update,
            "SNAPSHOT": self._snapshot,
            "ROLLBACK": self._rollback,
            "HISTORY": self._history,
            "RECENT_FILES": self._recent_files,
            "BIGGEST_TREES": self._biggest_trees,
            "TREE": self._tree,
            "HELP": self._help,
            "EXIT": self._exit,
        }

    # ── Public API ───────────────────────────────────────────────────

    def execute(self, line: str) -> str:
        """
        Run one command line and return its output (without the trailing
        blank line). Blank input returns "". Raises VersionFSError on
        failure and ExitShell on EXIT.
        """
        match = _COMMAND_RE.match(line)
        if match is None:
            return ""
        verb = match.group("verb").upper()
        handler = self._handlers.get(verb)
        if handler is None:
            raise UnknownCommand(f"Unknown command: {match.group('verb')}")
        return handler(match.group("name"), match.group("rest") or "")

    def run(
        self,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        stderr: TextIO = sys.stderr,
    ) -> int:
        """Read commands until EOF or EXIT. Failed commands are reported and skipped."""
        for raw in stdin:
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                output = self.execute(line)
            except ExitShell:
                print("Exiting...", file=stdout)
                break
            except VersionFSError as exc:
                logger.warning("Command failed (%s): %s", exc.kind, exc)
                print(f"Error: {exc}", file=stderr)
                print(file=stdout)
                continue
            print(output, file=stdout)
            print(file=stdout)
        return 0

    # ── Handlers ─────────────────────────────────────────────────────

    @staticmethod
    def _require_name(name: Optional[str], verb: str) -> str:
        if name is None:
            raise UsageError(f"{verb} command requires a file name")
        return name

    def _create(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "CREATE")
        self.registry.create(name)
        return f"[CREATE] File created: {name}"

    def _read(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "READ")
        content = self.registry.read(name)
        return f"[READ] Content of file '{name}':\n{content}"

    def _insert(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "INSERT")
        tree = self.registry.insert(name, rest)
        return (
            f"[INSERT] Content inserted into file '{name}':\n{rest}\n"
            f"Current content:\n{tree.read()}"
        )

    def _update(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "UPDATE")
        tree = self.registry.update(name, rest)
        return (
            f"[UPDATE] Content updated in file '{name}':\n{rest}\n"
            f"Current content:\n{tree.read()}"
        )

    def _snapshot(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "SNAPSHOT")
        self.registry.snapshot(name, rest)
        out = f"[SNAPSHOT] Snapshot created for file '{name}'."
        if rest:
            out += f"\nMessage: {rest}"
        return out

    def _rollback(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "ROLLBACK")
        args = rest.split()
        if len(args) > 1:
            raise UsageError("ROLLBACK command takes at most one argument")
        if not args:
            tree = self.registry.rollback(name)
            head = f"[ROLLBACK] File '{name}' rolled back to previous version."
        else:
            version_id = parse_count(args[0], "ROLLBACK version id")
            tree = self.registry.rollback(name, version_id)
            head = f"[ROLLBACK] File '{name}' rolled back to version {version_id}."
        return f"{head}\nCurrent content:\n{tree.read()}"

    def _history(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "HISTORY")
        history = self.registry.history(name)
        lines = [f"[HISTORY] Snapshots for file '{name}':"]
        for entry in history:
            lines.append(f"Version {entry.version_id}")
            lines.append(
                f" | Created: {entry.created_at.ctime()}"
                f" | Snapshot: {entry.snapshot_at.ctime()}"
                f" | Message: {entry.message}"
            )
        if len(history) == 0:
            lines.append("(no snapshots yet)")
        return "\n".join(lines)

    def _recent_files(self, k: Optional[str], rest: str) -> str:
        count = None if k is None else parse_count(k, "RECENT_FILES")
        entries = self.registry.top_by_recency(count)
        lines = [f"[RECENT_FILES] Showing {len(entries)} file(s):"]
        lines += [f"{e.name} -> {e.last_modified.ctime()}" for e in entries]
        return "\n".join(lines)

    def _biggest_trees(self, k: Optional[str], rest: str) -> str:
        count = None if k is None else parse_count(k, "BIGGEST_TREES")
        entries = self.registry.top_by_version_count(count)
        lines = [f"[BIGGEST_TREES] Showing {len(entries)} file(s) by version count:"]
        lines += [f"{e.version_count} -> {e.name}" for e in entries]
        return "\n".join(lines)

    def _tree(self, name: Optional[str], rest: str) -> str:
        name = self._require_name(name, "TREE")
        args = rest.split()
        page = parse_count(args[0], "TREE page") if args else 1
        layout = TreeLayout(self.registry.lookup(name))
        nodes, total_pages = layout.get_page(layout.linearize(), page, self.page_size)
        page = max(1, min(page, total_pages))
        lines = [f"[TREE] Versions of file '{name}' (page {page}/{total_pages}):"]
        lines += [format_line(item) for item in nodes]
        return "\n".join(lines)

    def _help(self, name: Optional[str], rest: str) -> str:
        return HELP_TEXT

    def _exit(self, name: Optional[str], rest: str) -> str:
        raise ExitShell()
