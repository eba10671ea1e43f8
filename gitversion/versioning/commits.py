"""
Commit message analysis.

Scans commit messages for increment directives (`+semver: ...`), breaking
change markers and conventional commit headers. The strongest directive
wins: major over minor over patch, regardless of message order.
"""

import logging
import re
from typing import Iterable, Optional

from .version import IncrementField

logger = logging.getLogger(__name__)

DEFAULT_MAJOR_DIRECTIVE = r"\+semver:\s*(breaking|major)"
DEFAULT_MINOR_DIRECTIVE = r"\+semver:\s*(feature|minor)"

BREAKING_CHANGE_PATTERN = re.compile(r"BREAKING\s*CHANGE", re.IGNORECASE)
CONVENTIONAL_BREAKING_PATTERN = re.compile(
    r"^feat(\([^)]*\))?!:", re.IGNORECASE | re.MULTILINE
)
CONVENTIONAL_FEATURE_PATTERN = re.compile(
    r"^feat(\([^)]*\))?:", re.IGNORECASE | re.MULTILINE
)


class CommitMessageAnalyzer:
    """Derive a single increment from a sequence of commit messages."""

    def __init__(
        self,
        major_directive: Optional[str] = None,
        minor_directive: Optional[str] = None,
    ):
        self.major_directive = re.compile(
            major_directive or DEFAULT_MAJOR_DIRECTIVE, re.IGNORECASE
        )
        self.minor_directive = re.compile(
            minor_directive or DEFAULT_MINOR_DIRECTIVE, re.IGNORECASE
        )

    @classmethod
    def from_configuration(cls, configuration) -> "CommitMessageAnalyzer":
        return cls(
            major_directive=configuration.major_version_bump_message,
            minor_directive=configuration.minor_version_bump_message,
        )

    def is_major(self, message: str) -> bool:
        return bool(
            self.major_directive.search(message)
            or BREAKING_CHANGE_PATTERN.search(message)
            or CONVENTIONAL_BREAKING_PATTERN.search(message)
        )

    def is_minor(self, message: str) -> bool:
        return bool(
            self.minor_directive.search(message)
            or CONVENTIONAL_FEATURE_PATTERN.search(message)
        )

    def analyze(self, messages: Iterable[str]) -> IncrementField:
        """
        Return the increment requested by messages.

        Args:
            messages: Commit messages, in any order

        Returns:
            IncrementField.major, .minor or .patch (the default)
        """
        increment = IncrementField.patch
        for message in messages:
            if self.is_major(message):
                logger.debug(f"Major increment requested by commit: {message.strip()}")
                return IncrementField.major
            if self.is_minor(message):
                increment = IncrementField.minor
        return increment


def detect_increment(messages: Iterable[str]) -> IncrementField:
    """Analyze messages with the default directives."""
    return CommitMessageAnalyzer().analyze(messages)
