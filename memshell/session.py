#!/usr/bin/env python3
"""
Session state for memshell.

A ShellSession is the single owner of everything that changes between
commands apart from the tree itself: the current directory and the input
history. The filesystem is only reached through the VirtualFileSystem API.
"""

import logging
from typing import Iterator, List, Optional

from .errors import MissingArgument, NotADirectory, NotFound
from .vfs import ROOT_PATH, SEPARATOR, DirNode, VirtualFileSystem, join_path, split_path

logger = logging.getLogger(__name__)


class CommandHistory:
    """
    Submitted command lines, most recent first, with a browsing cursor.

    A cursor of -1 means the user is not browsing history.
    """

    def __init__(self, max_size: int = 1000):
        """Initialize with maximum history size."""
        self.max_size = max_size
        self.entries: List[str] = []
        self.cursor = -1

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> str:
        return self.entries[index]

    def add(self, line: str) -> None:
        """Push a line onto the front of history and stop browsing."""
        self.entries.insert(0, line)
        if len(self.entries) > self.max_size:
            del self.entries[self.max_size:]
        self.cursor = -1

    def older(self) -> Optional[str]:
        """Step towards older entries. Returns the recalled line, or None on empty history."""
        if not self.entries:
            return None
        self.cursor = min(self.cursor + 1, len(self.entries) - 1)
        return self.entries[self.cursor]

    def newer(self) -> Optional[str]:
        """Step towards newer entries; '' once the cursor leaves history, None if not browsing."""
        if not self.entries or self.cursor <= -1:
            return None
        self.cursor = max(self.cursor - 1, -1)
        return self.entries[self.cursor] if self.cursor > -1 else ''


class ShellSession:
    """
    Current directory and history for one shell.

    current_path and the current directory node always move together: every
    successful cd sets both, every failed one sets neither.
    """

    def __init__(self, fs: VirtualFileSystem, initial_dir: str = ROOT_PATH,
                 history_size: int = 1000):
        self.fs = fs
        self.history = CommandHistory(history_size)
        self._path = ROOT_PATH
        self._cwd: DirNode = fs.root
        if initial_dir != ROOT_PATH:
            self.change_directory(initial_dir)

    @property
    def current_path(self) -> str:
        return self._path

    @property
    def cwd(self) -> DirNode:
        """The directory node the session is positioned at."""
        return self._cwd

    def _enter(self, segments: List[str]) -> None:
        """Move to the directory named by root-relative segments, or raise."""
        path = join_path(segments)
        node = self.fs.resolve(path)
        if node is None:
            raise NotFound(f"Directory not found: {path}")
        if not node.is_dir():
            raise NotADirectory(f"Not a directory: {path}")

        self._path = path
        self._cwd = node
        logger.debug("cwd is now %s", path)

    # Navigation

    def change_directory(self, target: Optional[str]) -> None:
        """
        Change the current directory.

        '..' pops the last segment off the current path as text and stays put
        at the root. Paths starting with the separator are absolute, anything
        else is appended to the current path. On failure nothing changes.
        """
        if not target:
            raise MissingArgument("Missing directory path.")

        if target == '..':
            self._enter(split_path(self._path)[:-1])
            return

        if target.startswith(SEPARATOR):
            segments = split_path(target)
        else:
            segments = split_path(self._path + SEPARATOR + target)

        try:
            self._enter(segments)
        except NotFound:
            raise NotFound(f"Directory not found: {target}") from None
        except NotADirectory:
            raise NotADirectory(f"Not a directory: {target}") from None

    def refresh(self) -> None:
        """
        Re-derive the current directory from current_path.

        If the path no longer names a directory, fall back to the deepest
        ancestor that still does.
        """
        segments = split_path(self._path)
        while True:
            node = self.fs.resolve(join_path(segments))
            if node is not None and node.is_dir():
                break
            segments.pop()

        path = join_path(segments)
        if path != self._path:
            logger.warning("working directory %s vanished, moved to %s", self._path, path)
        self._path = path
        self._cwd = node

    def display_path(self, home: Optional[str] = None) -> str:
        """Current path for the prompt, with home shown as ~ when given."""
        if home and (self._path == home or self._path.startswith(home.rstrip(SEPARATOR) + SEPARATOR)):
            return '~' + self._path[len(home.rstrip(SEPARATOR)):]
        return self._path

    # History

    def record(self, line: str) -> None:
        """Add a submitted line to history."""
        self.history.add(line)

    def recall_older(self) -> Optional[str]:
        """Handle the 'recall older' key. Returns the new input line, or None if nothing happened."""
        return self.history.older()

    def recall_newer(self) -> Optional[str]:
        """Handle the 'recall newer' key. Returns the new input line, or None if nothing happened."""
        return self.history.newer()
