"""Error types for filesystem operations"""

import errno
import functools
import os
from typing import Dict, Literal, Optional, Type

# POSIX-style error codes for filesystem operations
FsErrorCode = Literal[
    "ENOENT",    # No such file or directory
    "EEXIST",    # File already exists
    "EISDIR",    # Is a directory (when file expected)
    "ENOTDIR",   # Not a directory (when directory expected)
    "ENOTEMPTY", # Directory not empty
    "EACCES",    # Permission denied
    "EPERM",     # Operation not permitted
    "EXDEV",     # Cross-device link
    "EINVAL",    # Invalid argument
]

# Filesystem call names for error reporting
# scandir and copyfile are not actual syscalls but used for convenience
FsSyscall = Literal[
    "open",
    "stat",
    "chdir",
    "mkdir",
    "rmdir",
    "unlink",
    "rename",
    "scandir",
    "copyfile",
    "chmod",
    "access",
]


class ErrnoException(Exception):
    """Exception with errno-style attributes"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        syscall: Optional[FsSyscall] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.syscall = syscall
        self.path = path


class PathNotFound(ErrnoException, FileNotFoundError):
    """The path does not exist"""


class PermissionDenied(ErrnoException, PermissionError):
    """The path exists but the caller may not access it"""


class NotADirectory(ErrnoException, NotADirectoryError):
    """A directory was expected"""


class AlreadyExists(ErrnoException, FileExistsError):
    """The target path already exists"""


class CrossDeviceOrInvalidTarget(ErrnoException):
    """The target cannot be used for this operation (other device, directory, same file)"""


class InvalidPermissionFormat(ErrnoException, ValueError):
    """A permission value is not a 9-bit octal mask"""


class DirectoryUnreadable(ErrnoException):
    """A directory could not be opened for enumeration

    Never raised on its own: it is mixed into the concrete error class
    (``PathNotFound``, ``NotADirectory``, ...) so callers may catch either.
    """


_ERRORS_BY_CODE: Dict[str, Type[ErrnoException]] = {
    "ENOENT": PathNotFound,
    "EACCES": PermissionDenied,
    "EPERM": PermissionDenied,
    "ENOTDIR": NotADirectory,
    "EEXIST": AlreadyExists,
    "EXDEV": CrossDeviceOrInvalidTarget,
    "EINVAL": CrossDeviceOrInvalidTarget,
    "EISDIR": CrossDeviceOrInvalidTarget,
    "ENOTEMPTY": CrossDeviceOrInvalidTarget,
}


@functools.lru_cache(maxsize=None)
def _unreadable_variant(cls: Type[ErrnoException]) -> Type[ErrnoException]:
    """Build (once) the subclass of ``cls`` that is also a DirectoryUnreadable"""
    return type(cls.__name__, (cls, DirectoryUnreadable), {"__module__": __name__})


def create_fs_error(
    code: str,
    syscall: FsSyscall,
    path: Optional[str] = None,
    message: Optional[str] = None,
) -> ErrnoException:
    """Create a filesystem error with consistent formatting

    Args:
        code: POSIX error code (e.g., 'ENOENT')
        syscall: System call name (e.g., 'open')
        path: Optional path involved in the error
        message: Optional custom message (defaults to code)

    Returns:
        The ErrnoException subclass matching ``code``; errors raised while
        enumerating a directory (syscall 'scandir') are also DirectoryUnreadable
    """
    base = message if message else code
    suffix = f" '{path}'" if path is not None else ""
    error_message = f"{code}: {base}, {syscall}{suffix}"

    cls = _ERRORS_BY_CODE.get(code, ErrnoException)
    if syscall == "scandir":
        cls = _unreadable_variant(cls)
    return cls(error_message, code=code, syscall=syscall, path=path)


def from_os_error(
    err: OSError,
    syscall: FsSyscall,
    path: Optional[str] = None,
) -> ErrnoException:
    """Translate an OSError into the errno exception taxonomy

    The OS diagnostic text (strerror) is kept as the message.

    Example:
        >>> try:
        ...     os.remove(path)
        ... except OSError as e:
        ...     raise from_os_error(e, "unlink", path) from e
    """
    code = errno.errorcode.get(err.errno, "EIO") if err.errno is not None else "EIO"
    message = (err.strerror or os.strerror(err.errno or errno.EIO)).lower()
    if path is None and err.filename is not None:
        path = os.fsdecode(err.filename)
    return create_fs_error(code=code, syscall=syscall, path=path, message=message)


def invalid_permission_format(
    value: object,
    reason: str,
    path: Optional[str] = None,
) -> InvalidPermissionFormat:
    """Create the error raised for an unusable permission value"""
    suffix = f" '{path}'" if path is not None else ""
    return InvalidPermissionFormat(
        f"EINVAL: invalid permissions format {value!r} ({reason}), chmod{suffix}",
        code="EINVAL",
        syscall="chmod",
        path=path,
    )
