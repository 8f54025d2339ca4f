"""Guard functions for filesystem operations validation"""

import os

from .constants import S_IFDIR, S_IFMT
from .errors import FsSyscall, create_fs_error, from_os_error


def _is_dir_mode(mode: int) -> bool:
    """Check if mode represents a directory"""
    return (mode & S_IFMT) == S_IFDIR


def stat_or_throw(path: str, syscall: FsSyscall) -> os.stat_result:
    """Stat a path (following symlinks) or throw the matching errno error"""
    try:
        return os.stat(path)
    except OSError as e:
        raise from_os_error(e, syscall, path) from e


def lstat_or_throw(path: str, syscall: FsSyscall) -> os.stat_result:
    """Stat a path without following a final symlink, or throw the errno error"""
    try:
        return os.lstat(path)
    except OSError as e:
        raise from_os_error(e, syscall, path) from e


def assert_no_null_byte(path: str, syscall: FsSyscall) -> None:
    """Assert path has no embedded NUL, which no POSIX call accepts"""
    if "\0" in path:
        raise create_fs_error(
            code="EINVAL",
            syscall=syscall,
            path=path.replace("\0", "\\0"),
            message="embedded null byte",
        )


def assert_is_directory(path: str, syscall: FsSyscall) -> os.stat_result:
    """Assert that path exists and is a directory"""
    st = stat_or_throw(path, syscall)
    if not _is_dir_mode(st.st_mode):
        raise create_fs_error(
            code="ENOTDIR",
            syscall=syscall,
            path=path,
            message="not a directory",
        )
    return st


def assert_searchable_directory(path: str, syscall: FsSyscall) -> os.stat_result:
    """Assert that path is a directory the caller may enter"""
    st = assert_is_directory(path, syscall)
    if not os.access(path, os.X_OK):
        raise create_fs_error(
            code="EACCES",
            syscall=syscall,
            path=path,
            message="permission denied",
        )
    return st


def assert_not_directory(path: str, syscall: FsSyscall) -> os.stat_result:
    """Assert that path exists and is not a directory"""
    st = stat_or_throw(path, syscall)
    if _is_dir_mode(st.st_mode):
        raise create_fs_error(
            code="EISDIR",
            syscall=syscall,
            path=path,
            message="illegal operation on a directory",
        )
    return st


def assert_unlink_target(path: str) -> None:
    """Assert path is a valid unlink target (exists, not a directory)

    Symlinks are not followed: a link to a directory may be unlinked.
    """
    st = lstat_or_throw(path, "unlink")
    if _is_dir_mode(st.st_mode):
        raise create_fs_error(
            code="EISDIR",
            syscall="unlink",
            path=path,
            message="illegal operation on a directory",
        )


def assert_distinct_paths(src: str, dest: str, syscall: FsSyscall) -> None:
    """Assert src and dest do not name the same file"""
    same = src == dest
    if not same and os.path.exists(dest):
        try:
            same = os.path.samefile(src, dest)
        except OSError:
            same = False
    if same:
        raise create_fs_error(
            code="EINVAL",
            syscall=syscall,
            path=dest,
            message="source and destination are the same file",
        )
