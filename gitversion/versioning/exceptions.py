"""
Exception classes for the versioning module.
"""

from typing import Optional


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class NotARepositoryError(VersioningError):
    """Raised when no git metadata can be found for the working directory."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        if path:
            super().__init__(f"Not a git repository: {path}")
        else:
            super().__init__("Not a git repository")


class VersionFormatError(VersioningError, ValueError):
    """Raised when a version string has an invalid format."""

    def __init__(
        self,
        version_string: str,
        expected_format: str = "major.minor.patch[-prerelease][+build]",
    ):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class InvalidConfiguredVersionError(VersioningError):
    """Raised when the configured or overridden next version cannot be parsed."""

    def __init__(self, version_string: str):
        self.version_string = version_string
        super().__init__(
            f"Invalid next-version '{version_string}': "
            "expected major.minor.patch[-prerelease][+build]"
        )


class RepositoryError(VersioningError):
    """Raised when a query against the repository fails."""

    def __init__(self, query: str, message: str = ""):
        self.query = query
        if message:
            super().__init__(f"Repository query '{query}' failed: {message}")
        else:
            super().__init__(f"Repository query '{query}' failed")


class StrategyFailureError(VersioningError):
    """Raised when a base version strategy cannot complete."""

    def __init__(self, strategy: str, cause: Exception):
        self.strategy = strategy
        self.cause = cause
        super().__init__(f"Strategy {strategy} failed: {cause}")
