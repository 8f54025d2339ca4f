"""fsexplorer

An interactive file explorer for POSIX directory trees: listing, searching,
creating, copying, renaming and deleting files, and editing permission bits.
"""

from .config import ExplorerOptions
from .errors import (
    AlreadyExists,
    CrossDeviceOrInvalidTarget,
    DirectoryUnreadable,
    ErrnoException,
    FsErrorCode,
    FsSyscall,
    InvalidPermissionFormat,
    NotADirectory,
    PathNotFound,
    PermissionDenied,
    create_fs_error,
    from_os_error,
)
from .explorer import Explorer, Stats
from .permissions import ParseResult, PermissionSet
from .walker import (
    DirectoryEntry,
    DirectoryIterator,
    DirectoryWalker,
    list_children,
    search_tree,
    visit,
    walk,
)

__version__ = "0.1.0"

__all__ = [
    "Explorer",
    "ExplorerOptions",
    "Stats",
    "DirectoryEntry",
    "DirectoryIterator",
    "DirectoryWalker",
    "list_children",
    "search_tree",
    "visit",
    "walk",
    "ParseResult",
    "PermissionSet",
    "ErrnoException",
    "PathNotFound",
    "PermissionDenied",
    "NotADirectory",
    "AlreadyExists",
    "CrossDeviceOrInvalidTarget",
    "InvalidPermissionFormat",
    "DirectoryUnreadable",
    "FsErrorCode",
    "FsSyscall",
    "create_fs_error",
    "from_os_error",
]
