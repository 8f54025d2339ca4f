"""File operations relative to an explicit current directory"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .constants import DEFAULT_CHUNK_SIZE, S_IFDIR, S_IFLNK, S_IFMT, S_IFREG
from .errors import FsSyscall, create_fs_error, from_os_error, invalid_permission_format
from .guards import (
    assert_distinct_paths,
    assert_is_directory,
    assert_no_null_byte,
    assert_not_directory,
    assert_searchable_directory,
    assert_unlink_target,
    lstat_or_throw,
    stat_or_throw,
)
from .permissions import PermissionSet
from .walker import DirectoryEntry, DirectoryWalker

logger = logging.getLogger(__name__)

__all__ = ["Explorer", "Stats"]


@dataclass
class Stats:
    """File/directory statistics

    Attributes:
        ino: Inode number
        mode: File mode and permissions
        nlink: Number of hard links
        uid: User ID
        gid: Group ID
        size: File size in bytes
        atime: Access time (Unix timestamp)
        mtime: Modification time (Unix timestamp)
        ctime: Change time (Unix timestamp)
    """

    ino: int
    mode: int
    nlink: int
    uid: int
    gid: int
    size: int
    atime: int
    mtime: int
    ctime: int

    @staticmethod
    def from_stat_result(st: os.stat_result) -> "Stats":
        return Stats(
            ino=st.st_ino,
            mode=st.st_mode,
            nlink=st.st_nlink,
            uid=st.st_uid,
            gid=st.st_gid,
            size=st.st_size,
            atime=int(st.st_atime),
            mtime=int(st.st_mtime),
            ctime=int(st.st_ctime),
        )

    def is_file(self) -> bool:
        """Check if this is a regular file"""
        return (self.mode & S_IFMT) == S_IFREG

    def is_directory(self) -> bool:
        """Check if this is a directory"""
        return (self.mode & S_IFMT) == S_IFDIR

    def is_symbolic_link(self) -> bool:
        """Check if this is a symbolic link"""
        return (self.mode & S_IFMT) == S_IFLNK

    @property
    def permissions(self) -> PermissionSet:
        return PermissionSet.from_mode(self.mode)


class Explorer:
    """File explorer over the real filesystem

    Keeps its own current directory instead of changing the process working
    directory; every relative path is resolved against ``cwd``.
    """

    def __init__(
        self,
        cwd: Optional[str] = None,
        walker: Optional[DirectoryWalker] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        start = cwd if cwd is not None else os.getcwd()
        assert_no_null_byte(start, "chdir")
        start = os.path.abspath(os.path.expanduser(start))
        assert_searchable_directory(start, "chdir")
        self._cwd = start
        self._walker = walker if walker is not None else DirectoryWalker()
        self._chunk_size = chunk_size

    @property
    def cwd(self) -> str:
        """Current directory (absolute)"""
        return self._cwd

    def resolve(self, path: str, syscall: FsSyscall = "open") -> str:
        """Resolve path against the current directory

        Raises:
            CrossDeviceOrInvalidTarget: path contains a NUL byte (EINVAL,
                reported against syscall)

        Example:
            >>> explorer.resolve('../notes.txt')
            '/home/user/notes.txt'
        """
        assert_no_null_byte(path, syscall)
        return os.path.normpath(os.path.join(self._cwd, os.path.expanduser(path)))

    def list_files(self, path: Optional[str] = None) -> Iterator[DirectoryEntry]:
        """List the direct children of path (default: current directory)

        Example:
            >>> for entry in explorer.list_files():
            >>>     print(entry.name)
        """
        return self._walker.list_children(self.resolve(path, "scandir") if path else self._cwd)

    def change_directory(self, path: str) -> str:
        """Change the current directory

        The current directory is left unchanged when path is not an
        accessible directory.

        Returns:
            The new current directory
        """
        target = self.resolve(path, "chdir")
        assert_searchable_directory(target, "chdir")
        self._cwd = target
        logger.debug("Changed directory to %s", target)
        return target

    def create_file(self, path: str) -> str:
        """Create a new empty file

        Raises:
            AlreadyExists: path already exists

        Returns:
            The absolute path of the created file
        """
        target = self.resolve(path, "open")
        try:
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
        except OSError as e:
            raise from_os_error(e, "open", target) from e
        os.close(fd)
        logger.debug("Created file %s", target)
        return target

    def delete_file(self, path: str) -> None:
        """Delete a file (unlink)

        Example:
            >>> explorer.delete_file('temp.txt')
        """
        target = self.resolve(path, "unlink")
        assert_unlink_target(target)
        try:
            os.remove(target)
        except OSError as e:
            raise from_os_error(e, "unlink", target) from e
        logger.debug("Deleted file %s", target)

    def rename(self, old_path: str, new_path: str) -> None:
        """Rename (move) a file or directory

        Errors from the OS, such as EXDEV across devices, are surfaced as-is.

        Example:
            >>> explorer.rename('old.txt', 'archive/new.txt')
        """
        old = self.resolve(old_path, "rename")
        new = self.resolve(new_path, "rename")
        lstat_or_throw(old, "rename")

        # No-op once the source is known to exist
        if old == new:
            return

        try:
            os.rename(old, new)
        except OSError as e:
            raise from_os_error(e, "rename", old) from e
        logger.debug("Renamed %s -> %s", old, new)

    def copy_file(self, src: str, dest: str) -> None:
        """Copy a file byte for byte. Overwrites destination if it exists.

        Permission bits are copied along with the content.

        Example:
            >>> explorer.copy_file('data.bin', 'backup/data.bin')
        """
        src_path = self.resolve(src, "copyfile")
        dest_path = self.resolve(dest, "copyfile")

        src_st = assert_not_directory(src_path, "copyfile")
        assert_distinct_paths(src_path, dest_path, "copyfile")
        if os.path.isdir(dest_path):
            raise create_fs_error(
                code="EISDIR",
                syscall="copyfile",
                path=dest_path,
                message="illegal operation on a directory",
            )

        try:
            src_file = open(src_path, "rb")
        except OSError as e:
            raise from_os_error(e, "copyfile", src_path) from e
        with src_file:
            try:
                dest_file = open(dest_path, "wb")
            except OSError as e:
                raise from_os_error(e, "copyfile", dest_path) from e
            with dest_file:
                try:
                    shutil.copyfileobj(src_file, dest_file, self._chunk_size)
                except OSError as e:
                    raise from_os_error(e, "copyfile", dest_path) from e

        try:
            os.chmod(dest_path, PermissionSet.from_mode(src_st.st_mode).mask)
        except OSError as e:
            raise from_os_error(e, "chmod", dest_path) from e
        logger.debug("Copied %s -> %s", src_path, dest_path)

    def search(self, name: str, root: Optional[str] = None) -> Iterator[str]:
        """Recursively find files named exactly name (default root: current directory)

        Example:
            >>> for path in explorer.search('config.json'):
            >>>     print(path)
        """
        return self._walker.search_tree(self.resolve(root, "scandir") if root else self._cwd, name)

    def stat(self, path: str) -> Stats:
        """Get file/directory statistics

        Example:
            >>> stats = explorer.stat('config.json')
            >>> print(f"Size: {stats.size} bytes")
            >>> print(f"Is file: {stats.is_file()}")
        """
        return Stats.from_stat_result(stat_or_throw(self.resolve(path, "stat"), "stat"))

    def lstat(self, path: str) -> Stats:
        """Get statistics for path itself, without following a final symlink

        Example:
            >>> explorer.lstat('latest').is_symbolic_link()
            True
        """
        return Stats.from_stat_result(lstat_or_throw(self.resolve(path, "stat"), "stat"))

    def get_permissions(self, path: str) -> PermissionSet:
        """Read the nine permission bits of path

        Example:
            >>> explorer.get_permissions('script.sh').to_string()
            'rwxr-xr-x'
        """
        return self.stat(path).permissions

    def set_permissions(self, path: str, permissions: Union[PermissionSet, int, str]) -> PermissionSet:
        """Apply new permission bits to path

        Args:
            path: Path to the file or directory
            permissions: PermissionSet, integer mask, or octal text such as '755'

        Returns:
            The permissions read back after the change

        Raises:
            InvalidPermissionFormat: permissions is malformed; the file is not touched
        """
        target = self.resolve(path, "chmod")
        if isinstance(permissions, str):
            result = PermissionSet.parse(permissions)
            if not result.ok:
                raise invalid_permission_format(permissions, str(result.error), target)
            assert result.value is not None
            new = result.value
        elif isinstance(permissions, PermissionSet):
            new = permissions
        else:
            new = PermissionSet(permissions)

        try:
            os.chmod(target, new.mask)
        except OSError as e:
            raise from_os_error(e, "chmod", target) from e
        logger.debug("Changed permissions of %s to %s", target, new.to_octal())
        return self.get_permissions(target)

    def mkdir(self, path: str) -> str:
        """Create a directory (non-recursive)

        Example:
            >>> explorer.mkdir('new_dir')
        """
        target = self.resolve(path, "mkdir")
        try:
            os.mkdir(target)
        except OSError as e:
            raise from_os_error(e, "mkdir", target) from e
        logger.debug("Created directory %s", target)
        return target

    def rmdir(self, path: str) -> None:
        """Remove an empty directory

        Example:
            >>> explorer.rmdir('empty_dir')
        """
        target = self.resolve(path, "rmdir")
        assert_is_directory(target, "rmdir")
        try:
            os.rmdir(target)
        except OSError as e:
            raise from_os_error(e, "rmdir", target) from e
        logger.debug("Removed directory %s", target)

    def write_file(
        self,
        path: str,
        content: Union[str, bytes],
        encoding: str = "utf-8",
    ) -> None:
        """Write content to a file, replacing what was there

        Args:
            path: Path to the file
            content: Content to write (string or bytes)
            encoding: Text encoding (default: 'utf-8')

        Example:
            >>> explorer.write_file('config.json', '{"key": "value"}')
        """
        target = self.resolve(path, "open")
        buffer = content.encode(encoding) if isinstance(content, str) else content
        try:
            with open(target, "wb") as f:
                f.write(buffer)
        except OSError as e:
            raise from_os_error(e, "open", target) from e

    def read_file(self, path: str, encoding: Optional[str] = "utf-8") -> Union[bytes, str]:
        """Read content from a file

        Args:
            path: Path to the file
            encoding: Text encoding (default: 'utf-8'). Set to None to return bytes.

        Returns:
            File content as string (if encoding specified) or bytes

        Example:
            >>> content = explorer.read_file('config.json')
            >>> data = explorer.read_file('image.png', encoding=None)
        """
        target = self.resolve(path, "open")
        assert_not_directory(target, "open")
        try:
            with open(target, "rb") as f:
                data = f.read()
        except OSError as e:
            raise from_os_error(e, "open", target) from e

        if encoding:
            return data.decode(encoding)
        return data

    def access(self, path: str) -> None:
        """Test that a file or directory exists (F_OK semantics)

        Example:
            >>> explorer.access('config.json')
        """
        target = self.resolve(path, "access")
        if not os.access(target, os.F_OK):
            raise create_fs_error(
                code="ENOENT",
                syscall="access",
                path=target,
                message="no such file or directory",
            )
