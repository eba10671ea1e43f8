"""
Version utility module for semantic version operations.

SemanticVersion is an immutable value: every increment returns a new instance.
Build metadata never takes part in ordering or equality.
"""

import re
from enum import Enum
from functools import total_ordering
from typing import Optional

from .exceptions import VersionFormatError


SEMVER_PATTERN = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)(?:-([a-zA-Z0-9.-]+))?(?:\+([a-zA-Z0-9.+-]+))?$"
)

# Loose form used to find a version embedded in a branch name or merge message
EMBEDDED_VERSION_PATTERN = re.compile(
    r"(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
)

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


class IncrementField(str, Enum):
    """Version component to bump."""

    major = "major"
    minor = "minor"
    patch = "patch"


@total_ordering
class SemanticVersion:
    """
    A semantic version: major.minor.patch[-prerelease][+build].

    Ordering compares major, minor and patch numerically. On a tie, a version
    without a pre-release label is greater than one with a label, and two
    labels compare as plain strings.
    """

    __slots__ = ("_major", "_minor", "_patch", "_pre_release", "_build")

    def __init__(
        self,
        major: int = 0,
        minor: int = 0,
        patch: int = 0,
        pre_release: Optional[str] = None,
        build: Optional[str] = None,
    ):
        for name, value in (("major", major), ("minor", minor), ("patch", patch)):
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer: {value!r}")
        self._major = major
        self._minor = minor
        self._patch = patch
        self._pre_release = pre_release or None
        self._build = build or None

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """
        Parse a version string.

        Args:
            text: Version string, optionally prefixed with 'v'

        Returns:
            SemanticVersion

        Raises:
            VersionFormatError: If the numeric core or a suffix does not match
        """
        match = SEMVER_PATTERN.match(str(text).strip())
        if not match:
            raise VersionFormatError(str(text))

        major, minor, patch, pre_release, build = match.groups()
        return cls(int(major), int(minor), int(patch), pre_release, build)

    @classmethod
    def find_in(cls, text: str) -> Optional["SemanticVersion"]:
        """Return the first major.minor.patch[-prerelease] found anywhere in text."""
        match = EMBEDDED_VERSION_PATTERN.search(text)
        if not match:
            return None
        major, minor, patch, pre_release = match.groups()
        return cls(int(major), int(minor), int(patch), pre_release)

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def patch(self) -> int:
        return self._patch

    @property
    def pre_release(self) -> Optional[str]:
        return self._pre_release

    @property
    def build(self) -> Optional[str]:
        return self._build

    @property
    def is_pre_release(self) -> bool:
        return self._pre_release is not None

    def __str__(self) -> str:
        version = self.major_minor_patch()
        if self._pre_release:
            version += f"-{self._pre_release}"
        if self._build:
            version += f"+{self._build}"
        return version

    def __repr__(self) -> str:
        return f"SemanticVersion('{self}')"

    def compare(self, other: "SemanticVersion") -> int:
        """Return -1, 0 or 1 as this version is lower, equal or greater."""
        left = (self._major, self._minor, self._patch)
        right = (other._major, other._minor, other._patch)
        if left != right:
            return -1 if left < right else 1

        if self._pre_release == other._pre_release:
            return 0
        if self._pre_release is None:
            return 1
        if other._pre_release is None:
            return -1
        return -1 if self._pre_release < other._pre_release else 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return False
        return self.compare(other) == 0

    def __lt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((self._major, self._minor, self._patch, self._pre_release))

    def copy(self) -> "SemanticVersion":
        return SemanticVersion(
            self._major, self._minor, self._patch, self._pre_release, self._build
        )

    def with_pre_release(self, pre_release: Optional[str]) -> "SemanticVersion":
        return SemanticVersion(
            self._major, self._minor, self._patch, pre_release, self._build
        )

    def with_build(self, build: Optional[str]) -> "SemanticVersion":
        return SemanticVersion(
            self._major, self._minor, self._patch, self._pre_release, build
        )

    def increment_major(self) -> "SemanticVersion":
        """Return a new version with incremented major, minor and patch zeroed."""
        return SemanticVersion(self._major + 1, 0, 0)

    def increment_minor(self) -> "SemanticVersion":
        """Return a new version with incremented minor, patch zeroed."""
        return SemanticVersion(self._major, self._minor + 1, 0)

    def increment_patch(self) -> "SemanticVersion":
        """Return a new version with incremented patch."""
        return SemanticVersion(self._major, self._minor, self._patch + 1)

    def increment(self, field: IncrementField) -> "SemanticVersion":
        if field == IncrementField.major:
            return self.increment_major()
        elif field == IncrementField.minor:
            return self.increment_minor()
        elif field == IncrementField.patch:
            return self.increment_patch()
        raise ValueError(f"Unknown version component: {field}")

    def major_minor_patch(self) -> str:
        return f"{self._major}.{self._minor}.{self._patch}"

    def assembly_sem_ver(self) -> str:
        return f"{self._major}.{self._minor}.{self._patch}.0"


def sanitize_branch_name(branch: str) -> str:
    """Replace every non-alphanumeric character with '-'."""
    return _NON_ALPHANUMERIC.sub("-", branch)


def parse_version(version_string: str) -> SemanticVersion:
    """
    Parse a version string into a SemanticVersion.

    Raises:
        VersionFormatError: If version string is invalid
    """
    return SemanticVersion.parse(version_string)


def try_parse(version_string: str) -> Optional[SemanticVersion]:
    """Parse a version string, returning None instead of raising."""
    try:
        return SemanticVersion.parse(version_string)
    except VersionFormatError:
        return None


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if version1 < version2
         0 if version1 == version2
         1 if version1 > version2

    Raises:
        VersionFormatError: If either version string is invalid
    """
    return parse_version(version1).compare(parse_version(version2))
