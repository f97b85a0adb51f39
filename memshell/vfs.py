#!/usr/bin/env python3
"""
memshell.vfs - An in-memory hierarchical filesystem.

Core philosophy:
- A single root directory owns the whole tree
- Each directory exclusively owns its children, there are no parent links
- Paths are resolved by walking from the root (or a start directory) down
- Every mutation either happens completely or raises and changes nothing
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .errors import AlreadyExists, NotADirectory, NotAFile, NotEmpty, NotFound

logger = logging.getLogger(__name__)

SEPARATOR = '/'
ROOT_PATH = '/'


class NodeKind(Enum):
    """The two kinds of filesystem node."""
    DIRECTORY = 'directory'
    FILE = 'file'


@dataclass
class FileNode:
    """Regular file node."""
    content: str = ''

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE

    def is_file(self) -> bool:
        """Check if this is a regular file."""
        return True

    def is_dir(self) -> bool:
        """Check if this is a directory."""
        return False

    def to_dict(self) -> dict:
        """Convert node to a plain dictionary."""
        return {'type': self.kind.value, 'content': self.content}


@dataclass
class DirNode:
    """Directory node owning its named children."""
    children: Dict[str, 'Node'] = field(default_factory=dict)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DIRECTORY

    def is_file(self) -> bool:
        """Check if this is a regular file."""
        return False

    def is_dir(self) -> bool:
        """Check if this is a directory."""
        return True

    def to_dict(self) -> dict:
        """Convert the subtree to nested plain dictionaries."""
        return {
            'type': self.kind.value,
            'children': {name: child.to_dict() for name, child in self.children.items()},
        }


Node = Union[FileNode, DirNode]


@dataclass(frozen=True)
class Entry:
    """One line of a directory listing."""
    name: str
    kind: NodeKind


def split_path(path: str) -> List[str]:
    """Split a path into its non-empty segments ('//a//b/' -> ['a', 'b'])."""
    return [segment for segment in path.split(SEPARATOR) if segment]


def join_path(segments: List[str]) -> str:
    """Build a canonical absolute path from segments."""
    return ROOT_PATH + SEPARATOR.join(segments)


def resolve(path: str, start: DirNode, root: DirNode) -> Optional[Node]:
    """
    Resolve a path to a node.

    Absolute paths (leading separator) are walked from root, anything else
    from start. '..' has no special meaning here. Returns None when any
    segment is missing or traverses a file.
    """
    current: Node = root if path.startswith(SEPARATOR) else start

    for segment in split_path(path):
        if not current.is_dir() or segment not in current.children:
            return None
        current = current.children[segment]

    return current


class VirtualFileSystem:
    """
    Memory-resident filesystem.

    All structural operations are scoped to a directory node supplied by the
    caller (normally the shell's current directory) and a child name inside
    it. Failures raise ShellError subclasses before anything is modified.
    """

    SAMPLE_DOCUMENT = 'This is a sample document.'

    def __init__(self):
        self.root = DirNode()

    @classmethod
    def seeded(cls) -> 'VirtualFileSystem':
        """Create a filesystem with the standard startup layout."""
        fs = cls()
        home = fs.create_directory(fs.root, 'home')
        fs.create_directory(home, 'user')
        fs.create_directory(fs.root, 'bin')
        fs.create_directory(fs.root, 'etc')
        fs.write_file(fs.root, 'documents.txt', cls.SAMPLE_DOCUMENT)
        return fs

    def resolve(self, path: str, start: Optional[DirNode] = None) -> Optional[Node]:
        """Resolve path relative to start (default: root)."""
        return resolve(path, start or self.root, self.root)

    # Core filesystem operations

    def list(self, directory: Node) -> List[Entry]:
        """List directory contents in insertion order. Empty list means empty directory."""
        if not directory.is_dir():
            raise NotADirectory("Not a directory.")
        return [Entry(name, child.kind) for name, child in directory.children.items()]

    def create_directory(self, directory: DirNode, name: str) -> DirNode:
        """Create an empty subdirectory."""
        if name in directory.children:
            raise AlreadyExists(f"Directory already exists: {name}")

        node = DirNode()
        directory.children[name] = node
        logger.debug("created directory %r", name)
        return node

    def create_file(self, directory: DirNode, name: str) -> FileNode:
        """Create an empty file."""
        if name in directory.children:
            raise AlreadyExists(f"File or directory already exists: {name}")

        node = FileNode()
        directory.children[name] = node
        logger.debug("created file %r", name)
        return node

    def remove_directory(self, directory: DirNode, name: str) -> None:
        """Remove an empty subdirectory. Not recursive."""
        node = directory.children.get(name)
        if node is None or not node.is_dir():
            raise NotFound(f"Directory not found: {name}")
        if node.children:
            raise NotEmpty(f"Directory not empty: {name}")

        del directory.children[name]
        logger.debug("removed directory %r", name)

    def remove_file(self, directory: DirNode, name: str) -> None:
        """Remove a file."""
        self._get_file(directory, name)
        del directory.children[name]
        logger.debug("removed file %r", name)

    def read_file(self, directory: DirNode, name: str) -> str:
        """Read entire file contents."""
        return self._get_file(directory, name).content

    def write_file(self, directory: DirNode, name: str, content: str) -> FileNode:
        """Replace a file's content, creating the file if needed."""
        node = directory.children.get(name)
        if node is None:
            node = self.create_file(directory, name)
        elif not node.is_file():
            raise NotAFile(f"Is a directory: {name}")

        node.content = content
        logger.debug("wrote %d characters to %r", len(content), name)
        return node

    def _get_file(self, directory: DirNode, name: str) -> FileNode:
        node = directory.children.get(name)
        if node is None or not node.is_file():
            raise NotFound(f"File not found: {name}")
        return node

    def to_dict(self) -> dict:
        """Snapshot the whole tree as nested dictionaries."""
        return self.root.to_dict()
