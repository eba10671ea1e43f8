"""
Increment application.

Decides whether and how the selected base version is bumped. The increment
comes from exactly one source per run: a forced increment from the caller,
otherwise the commit messages (when commit-message incrementing is enabled)
or the branch policy (when it is disabled).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gitversion.model.configuration import CommitMessageIncrementMode, IncrementStrategy

from .commits import CommitMessageAnalyzer
from .strategies import (
    BaseVersionCandidate,
    Strategy,
    VersionContext,
    is_merge_message,
    strip_tag_prefix,
)
from .version import IncrementField, SemanticVersion, try_parse

logger = logging.getLogger(__name__)

_POLICY_INCREMENTS = {
    IncrementStrategy.major: IncrementField.major,
    IncrementStrategy.minor: IncrementField.minor,
    IncrementStrategy.patch: IncrementField.patch,
}


@dataclass(frozen=True)
class IncrementResult:
    version: SemanticVersion
    applied: Optional[IncrementField]
    reason: str


class IncrementApplier:
    """Bump a base version according to overrides, policy and commit messages."""

    def __init__(self, analyzer: Optional[CommitMessageAnalyzer] = None):
        self.analyzer = analyzer

    def apply(
        self,
        candidate: BaseVersionCandidate,
        context: VersionContext,
        forced: Optional[IncrementField] = None,
        detected: Optional[IncrementField] = None,
    ) -> IncrementResult:
        """
        Return the incremented base version.

        Args:
            candidate: Selected base version
            context: Inputs for this resolution
            forced: Increment requested by the caller; applied unconditionally
            detected: Increment already derived from commit messages; computed
                from the repository when needed and not given

        Returns:
            IncrementResult with the new version and the increment applied
        """
        if forced is not None:
            return IncrementResult(
                candidate.version.increment(forced), forced, "forced increment"
            )

        reason = self.prevented_by(candidate, context)
        if reason is not None:
            logger.debug(f"Increment skipped: {reason}")
            return IncrementResult(candidate.version.copy(), None, reason)

        if (
            context.configuration.commit_message_incrementing
            == CommitMessageIncrementMode.enabled
        ):
            increment = detected or self.detected_increment(context)
            source = "commit messages"
        else:
            increment = self.policy_increment(context)
            source = f"branch policy '{context.classification.policy_name}'"

        if increment is None:
            return IncrementResult(
                candidate.version.copy(), None, f"{source} requests no increment"
            )
        return IncrementResult(candidate.version.increment(increment), increment, source)

    def prevented_by(
        self, candidate: BaseVersionCandidate, context: VersionContext
    ) -> Optional[str]:
        """Return why incrementing is suppressed, or None if it is not."""
        if not candidate.should_increment:
            return f"base version from {candidate.source_description} is used as is"

        prevent = context.policy.prevent_increment
        if (
            prevent.of_merged_branch
            and candidate.strategy == Strategy.merge_message
        ):
            return "base version comes from a merged branch"
        if prevent.when_current_commit_tagged and self._head_is_tagged(context):
            return "current commit is tagged"
        if prevent.when_branch_merged and self._head_is_merge(context):
            return "current commit merges a branch"
        return None

    def policy_increment(self, context: VersionContext) -> Optional[IncrementField]:
        """The branch policy's increment, resolving Inherit to the global one."""
        increment = context.policy.increment
        if increment == IncrementStrategy.inherit:
            increment = context.configuration.increment
        if increment == IncrementStrategy.inherit:
            increment = IncrementStrategy.patch
        return _POLICY_INCREMENTS.get(increment)

    def detected_increment(self, context: VersionContext) -> IncrementField:
        """The increment requested by commit messages since the latest tag."""
        analyzer = self.analyzer or CommitMessageAnalyzer.from_configuration(
            context.configuration
        )
        repository = context.repository
        messages = repository.commits_since(repository.latest_tag())
        return analyzer.analyze(messages)

    @staticmethod
    def _head_is_tagged(context: VersionContext) -> bool:
        repository = context.repository
        tag_prefix = context.configuration.tag_prefix
        for tag in repository.tags_reachable_from_head():
            if try_parse(strip_tag_prefix(tag, tag_prefix)) is None:
                continue
            if repository.commit_sha_for_tag(tag) == context.current_commit:
                return True
        return False

    @staticmethod
    def _head_is_merge(context: VersionContext) -> bool:
        history = context.repository.commit_history(1)
        return bool(history) and is_merge_message(history[0].message)
