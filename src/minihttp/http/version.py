"""
=============================================================================
HTTP VERSION
=============================================================================

    HTTP/1.1
    ──┬─ ┬┬┬
      │  │││
      │  ││└── minor
      │  │└─── "."
      │  └──── major
      └─────── literal prefix

A Version is just the (major, minor) pair. Nothing checks that the pair is a
version anybody actually speaks: "HTTP/7.42" parses fine. The only rule is
that both numbers fit an unsigned 32-bit integer, so a hostile client cannot
hand us a 10,000 digit number and have it silently truncated somewhere
downstream.

=============================================================================
"""

import re
from dataclasses import dataclass

from .errors import InvalidVersionError


# Largest value either component may take (unsigned 32-bit).
MAX_COMPONENT = 2 ** 32 - 1

_VERSION_PATTERN = re.compile(r"HTTP/(\d+)\.(\d+)", re.ASCII)


@dataclass(frozen=True)
class Version:
    """An HTTP protocol version, e.g. Version(1, 1) for HTTP/1.1."""

    major: int = 1
    minor: int = 1

    def __post_init__(self):
        for name in ("major", "minor"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidVersionError(repr(value), f"{name} must be an integer")
            if not 0 <= value <= MAX_COMPONENT:
                raise InvalidVersionError(
                    str(value), f"{name} must be between 0 and {MAX_COMPONENT}"
                )

    def __str__(self) -> str:
        return f"HTTP/{self.major}.{self.minor}"

    @classmethod
    def from_digits(cls, major: str, minor: str) -> "Version":
        """
        Build a Version from the two digit groups captured by the grammar.

        Raises:
            InvalidVersionError: If a group is not decimal or overflows.
        """
        text = f"HTTP/{major}.{minor}"
        if not (major.isascii() and major.isdigit() and minor.isascii() and minor.isdigit()):
            raise InvalidVersionError(text, "components must be decimal digits")

        major_value, minor_value = int(major), int(minor)
        if major_value > MAX_COMPONENT or minor_value > MAX_COMPONENT:
            raise InvalidVersionError(text, "component does not fit an unsigned int")

        return cls(major_value, minor_value)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse the canonical text form, the inverse of str().

        Example:
            Version.parse("HTTP/1.0")  → Version(major=1, minor=0)
        """
        match = _VERSION_PATTERN.fullmatch(text)
        if not match:
            raise InvalidVersionError(text)
        return cls.from_digits(*match.groups())


HTTP_1_0 = Version(1, 0)
HTTP_1_1 = Version(1, 1)
