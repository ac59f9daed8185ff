"""Versions and the mapping from the storage server's version to a Kubernetes version."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_KUBE_BINARY_VERSION = "1.32"
DEFAULT_WARDLE_VERSION = "1.2"

_MAX_INT32 = 2**31 - 1

_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


def _compare_pre_release(left: str, right: str) -> int:
    if left == right:
        return 0
    if not left:
        return 1
    if not right:
        return -1
    left_parts, right_parts = left.split("."), right.split(".")
    for a, b in zip(left_parts, right_parts):
        if a == b:
            continue
        if a.isdigit() and b.isdigit():
            return -1 if int(a) < int(b) else 1
        if a.isdigit():
            return -1
        if b.isdigit():
            return 1
        return -1 if a < b else 1
    return (len(left_parts) > len(right_parts)) - (len(left_parts) < len(right_parts))


@dataclass(frozen=True)
class Version:
    """A major.minor[.patch] version with optional pre-release and build parts."""

    major: int
    minor: int
    patch: int | None = None
    pre_release: str = ""
    build_metadata: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version such as "1.2", "v1.32.0" or "1.3.0-beta.1"."""
        match = _VERSION_RE.match(text)
        if match is None:
            raise ValueError(f"could not parse {text!r} as version")
        patch = match.group("patch")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(patch) if patch is not None else None,
            pre_release=match.group("pre") or "",
            build_metadata=match.group("build") or "",
        )

    @classmethod
    def major_minor(cls, major: int, minor: int) -> Version:
        return cls(major, minor)

    def offset_minor(self, offset: int) -> Version:
        """Return major.minor with the minor shifted by offset, never below zero."""
        return Version.major_minor(self.major, max(self.minor + offset, 0))

    def _compare(self, other: Version) -> int:
        mine = (self.major, self.minor, self.patch or 0)
        theirs = (other.major, other.minor, other.patch or 0)
        if mine != theirs:
            return -1 if mine < theirs else 1
        return _compare_pre_release(self.pre_release, other.pre_release)

    def greater_than(self, other: Version) -> bool:
        return self._compare(other) > 0

    def equal_to(self, other: Version | None) -> bool:
        if other is None:
            return False
        return self._compare(other) == 0

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}"
        if self.patch is not None:
            text += f".{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        if self.build_metadata:
            text += f"+{self.build_metadata}"
        return text


def default_kube_binary_version() -> Version:
    """The Kubernetes version the storage server is built against."""
    return Version.parse(DEFAULT_KUBE_BINARY_VERSION)


def wardle_version_to_kube_version(ver: Version) -> Version | None:
    """Map a storage server version to the Kubernetes version it emulates.

    "1.2" maps to the Kubernetes binary version; later versions are capped
    there, earlier ones step back one minor each. Major versions other than
    1 have no mapping.
    """
    if ver.major != 1:
        return None
    kube_version = default_kube_binary_version()
    if ver.minor > _MAX_INT32:
        raise OverflowError("minor version is too large")
    mapped = kube_version.offset_minor(ver.minor - 2)
    if mapped.greater_than(kube_version):
        return kube_version
    return mapped