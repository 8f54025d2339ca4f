"""POSIX permission bits"""

import re
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .constants import PERMISSION_BITS, PERMISSION_MASK
from .errors import invalid_permission_format

T = TypeVar("T")

_OCTAL_RE = re.compile(r"^(?:0o?)?([0-7]{1,3})$", re.IGNORECASE)
_SYMBOLIC_RE = re.compile(r"^(?:[r-][w-][x-]){3}$")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of parsing user input: either a value or the reason it was rejected

    Attributes:
        value: Parsed value (None on failure)
        error: Human-readable reason (None on success)
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @staticmethod
    def success(value: T) -> "ParseResult[T]":
        return ParseResult(value=value)

    @staticmethod
    def failure(reason: str) -> "ParseResult[T]":
        return ParseResult(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PermissionSet:
    """The nine read/write/execute bits for owner, group and other

    Attributes:
        mask: Permission bits, always within 0o000..0o777
    """

    mask: int

    def __post_init__(self) -> None:
        if isinstance(self.mask, bool) or not isinstance(self.mask, int):
            raise invalid_permission_format(self.mask, "not an integer")
        if not 0 <= self.mask <= PERMISSION_MASK:
            raise invalid_permission_format(oct(self.mask), "outside 0o000..0o777")

    @staticmethod
    def from_mode(mode: int) -> "PermissionSet":
        """Extract the permission bits from a full st_mode value"""
        return PermissionSet(mode & PERMISSION_MASK)

    @staticmethod
    def parse(text: str) -> "ParseResult[PermissionSet]":
        """Parse an octal permission string such as '755' or '0o644'

        Example:
            >>> PermissionSet.parse("755").value.to_string()
            'rwxr-xr-x'
            >>> PermissionSet.parse("abc").ok
            False
        """
        match = _OCTAL_RE.match(text.strip())
        if not match:
            return ParseResult.failure("expected up to three octal digits, e.g. 755")
        return ParseResult.success(PermissionSet(int(match.group(1), 8)))

    @staticmethod
    def from_string(text: str) -> "PermissionSet":
        """Parse the symbolic form, e.g. 'rwxr-x---'"""
        if not _SYMBOLIC_RE.match(text):
            raise invalid_permission_format(text, "expected a string like rwxr-xr-x")
        mask = 0
        for (bit, _), char in zip(PERMISSION_BITS, text):
            if char != "-":
                mask |= bit
        return PermissionSet(mask)

    def _triple(self, shift: int) -> Tuple[bool, bool, bool]:
        bits = (self.mask >> shift) & 0o7
        return (bool(bits & 0o4), bool(bits & 0o2), bool(bits & 0o1))

    @property
    def owner(self) -> Tuple[bool, bool, bool]:
        """(read, write, execute) for the owner"""
        return self._triple(6)

    @property
    def group(self) -> Tuple[bool, bool, bool]:
        """(read, write, execute) for the group"""
        return self._triple(3)

    @property
    def other(self) -> Tuple[bool, bool, bool]:
        """(read, write, execute) for everyone else"""
        return self._triple(0)

    def to_string(self) -> str:
        """Render as 'rwxrwxrwx' with '-' for cleared bits"""
        return "".join(char if self.mask & bit else "-" for bit, char in PERMISSION_BITS)

    def to_octal(self) -> str:
        """Render as three octal digits, e.g. '755'"""
        return format(self.mask, "03o")

    def __str__(self) -> str:
        return self.to_string()
