"""Directory enumeration and recursive search"""

import logging
import os
import stat
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Set, Tuple, TypeVar

from .constants import DEFAULT_MAX_DEPTH
from .errors import from_os_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = [
    "DirectoryEntry",
    "DirectoryIterator",
    "DirectoryWalker",
    "list_children",
    "search_tree",
    "visit",
    "walk",
]


@dataclass(frozen=True)
class DirectoryEntry:
    """One item returned by directory enumeration

    Attributes:
        name: Entry name within its parent
        full_path: Absolute path of the entry
        is_directory: Whether the entry (after following symlinks) is a directory
    """

    name: str
    full_path: str
    is_directory: bool


class DirectoryIterator(Iterator[T]):
    """Single-use iterator that owns an open directory handle

    The handle is released when iteration finishes, when ``close()`` is
    called (started or not), or when the iterator is garbage collected.
    """

    def __init__(self, handle: Any, items: Iterator[T]):
        self._handle = handle
        self._items = items
        self._closed = False

    def __iter__(self) -> "DirectoryIterator[T]":
        return self

    def __next__(self) -> T:
        if self._closed:
            raise StopIteration
        try:
            return next(self._items)
        except BaseException:
            # Exhausted or failed; either way the handle is done
            self.close()
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            close_items = getattr(self._items, "close", None)
            if close_items is not None:
                close_items()
        finally:
            self._handle.close()

    def __enter__(self) -> "DirectoryIterator[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()


class DirectoryWalker:
    """Enumerates directories and walks directory trees depth-first

    Symbolic links are followed when classifying entries. A walk never enters
    the same directory (device, inode) twice and stops descending below
    ``max_depth`` levels, so symlink cycles terminate.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth

    def list_children(self, path: str) -> Iterator[DirectoryEntry]:
        """List the direct children of a directory

        The directory is opened before this returns, so an unreadable path
        fails here rather than on first iteration. Entries come in
        filesystem order; the iterator can be consumed once.

        Args:
            path: Path to an existing directory

        Returns:
            Iterator of DirectoryEntry

        Raises:
            DirectoryUnreadable: path is missing, not a directory or not accessible

        Example:
            >>> for entry in walker.list_children('/tmp'):
            >>>     print(entry.name, entry.is_directory)
        """
        root = os.path.abspath(path)
        handle = self._open(root)
        return DirectoryIterator(handle, self._entries(handle, root))

    def walk(self, root_path: str) -> Iterator[DirectoryEntry]:
        """Yield every entry below root_path in depth-first pre-order

        Each directory is yielded before its contents. Subdirectories that
        cannot be read are skipped; ``max_depth`` counts levels below the
        root's own children.

        Raises:
            DirectoryUnreadable: root_path itself cannot be opened
        """
        root = os.path.abspath(root_path)
        handle = self._open(root)
        try:
            st = os.stat(root)
        except OSError as e:
            handle.close()
            raise from_os_error(e, "scandir", root) from e
        visited = {(st.st_dev, st.st_ino)}
        return DirectoryIterator(handle, self._walk(handle, root, 0, visited))

    def visit(self, root_path: str, action: Callable[[DirectoryEntry], None]) -> int:
        """Call action for every entry below root_path, in pre-order

        Returns:
            Number of entries visited
        """
        count = 0
        for entry in self.walk(root_path):
            action(entry)
            count += 1
        return count

    def search_tree(self, root_path: str, target_name: str) -> Iterator[str]:
        """Find files named exactly target_name anywhere below root_path

        Matching is case-sensitive with no globbing. Directories are never
        reported as matches.

        Returns:
            Iterator of absolute paths, in traversal order

        Example:
            >>> list(walker.search_tree('/tmp/t', 'a.txt'))
            ['/tmp/t/a.txt', '/tmp/t/sub/a.txt']
        """
        entries = self.walk(root_path)
        matches = (
            entry.full_path
            for entry in entries
            if not entry.is_directory and entry.name == target_name
        )
        return DirectoryIterator(entries, matches)

    def _open(self, path: str) -> Iterator[os.DirEntry]:
        try:
            return os.scandir(path)
        except OSError as e:
            raise from_os_error(e, "scandir", path) from e

    def _scan(
        self,
        handle: Iterator[os.DirEntry],
        root: str,
        log_level: int,
    ) -> Iterator[Tuple[DirectoryEntry, os.stat_result]]:
        """Classify each entry of an open scandir handle, closing it when done"""
        with handle:
            for dirent in handle:
                full_path = os.path.join(root, dirent.name)
                try:
                    st = os.stat(full_path)
                except OSError as e:
                    # Vanished since enumeration, or a dangling symlink
                    logger.log(log_level, "Error reading file info: %s (%s)", full_path, e.strerror)
                    continue
                entry = DirectoryEntry(
                    name=dirent.name,
                    full_path=full_path,
                    is_directory=stat.S_ISDIR(st.st_mode),
                )
                yield entry, st

    def _entries(self, handle: Iterator[os.DirEntry], root: str) -> Iterator[DirectoryEntry]:
        for entry, _ in self._scan(handle, root, logging.WARNING):
            yield entry

    def _walk(
        self,
        handle: Iterator[os.DirEntry],
        root: str,
        depth: int,
        visited: Set[Tuple[int, int]],
    ) -> Iterator[DirectoryEntry]:
        for entry, st in self._scan(handle, root, logging.DEBUG):
            yield entry
            if not entry.is_directory:
                continue
            if depth >= self.max_depth:
                logger.debug("Not descending into %s: depth limit %d", entry.full_path, self.max_depth)
                continue
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.debug("Not descending into %s: already visited", entry.full_path)
                continue
            try:
                child = os.scandir(entry.full_path)
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", entry.full_path, e.strerror)
                continue
            visited.add(key)
            yield from self._walk(child, entry.full_path, depth + 1, visited)


_default_walker = DirectoryWalker()


def list_children(path: str) -> Iterator[DirectoryEntry]:
    """List the direct children of path with the default walker"""
    return _default_walker.list_children(path)


def walk(root_path: str) -> Iterator[DirectoryEntry]:
    """Walk root_path depth-first with the default walker"""
    return _default_walker.walk(root_path)


def visit(root_path: str, action: Callable[[DirectoryEntry], None]) -> int:
    """Call action for every entry below root_path with the default walker"""
    return _default_walker.visit(root_path, action)


def search_tree(root_path: str, target_name: str) -> Iterator[str]:
    """Find files named target_name below root_path with the default walker"""
    return _default_walker.search_tree(root_path, target_name)
