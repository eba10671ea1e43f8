"""
Base version strategies.

Each strategy inspects the repository through a VersionContext and yields
zero or more BaseVersionCandidates. Evidence that does not parse as a version
is skipped; repository failures propagate to the StrategyManager.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from gitversion.constants import MERGE_MESSAGE_HISTORY_LIMIT
from gitversion.core.interfaces import Repository
from gitversion.model.configuration import BranchConfiguration, GitVersionConfiguration

from .classifier import BranchClassification
from .exceptions import InvalidConfiguredVersionError, VersionFormatError
from .version import SemanticVersion, try_parse

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    """Available base version strategies."""

    fallback = "Fallback"
    configured_next_version = "ConfiguredNextVersion"
    merge_message = "MergeMessage"
    tagged_commit = "TaggedCommit"
    track_release_branches = "TrackReleaseBranches"
    version_in_branch_name = "VersionInBranchName"
    mainline = "Mainline"


# Strategies run in this order; candidates keep this order in the pool
PRIORITY_ORDER: Tuple[Strategy, ...] = (
    Strategy.configured_next_version,
    Strategy.version_in_branch_name,
    Strategy.tagged_commit,
    Strategy.track_release_branches,
    Strategy.merge_message,
    Strategy.mainline,
    Strategy.fallback,
)

RELEASE_BRANCH_PATTERN = re.compile(r"^releases?[/-]")

MERGE_MESSAGE_PATTERNS = (
    re.compile(r"^Merge (?:remote-tracking )?branch '(?P<branch>[^']+)'", re.IGNORECASE),
    re.compile(r'^Merge (?:remote-tracking )?branch "(?P<branch>[^"]+)"', re.IGNORECASE),
    re.compile(r"^Merge pull request #\d+ (?:from|in) (?P<branch>\S+)", re.IGNORECASE),
    re.compile(r"^Merge '(?P<branch>[^']+)' into ", re.IGNORECASE),
    re.compile(r"^Merge (?:branch )?(?P<branch>\S+) into ", re.IGNORECASE),
)


def parse_strategies(names: Iterable[str]) -> List[Strategy]:
    """Parse strategy names (case-insensitive) in priority order."""
    by_name = {strategy.value.lower(): strategy for strategy in Strategy}
    selected = set()
    for name in names:
        strategy = by_name.get(str(name).strip().lower())
        if strategy is None:
            logger.warning(f"Ignoring unknown version strategy '{name}'")
            continue
        selected.add(strategy)
    return [strategy for strategy in PRIORITY_ORDER if strategy in selected]


def merged_branch_name(message: str) -> Optional[str]:
    """Return the branch named by a merge commit message, if it is one."""
    for pattern in MERGE_MESSAGE_PATTERNS:
        match = pattern.search(message.strip())
        if match:
            return match.group("branch")
    return None


def is_merge_message(message: str) -> bool:
    return merged_branch_name(message) is not None


@dataclass(frozen=True)
class BaseVersionCandidate:
    """A base version together with the evidence it came from."""

    version: SemanticVersion
    source_description: str
    should_increment: bool
    source_commit: str = ""
    strategy: Optional[Strategy] = None

    def __str__(self) -> str:
        return (
            f"{self.source_description}: {self.version} "
            f"(should increment: {self.should_increment})"
        )


@dataclass(frozen=True)
class VersionContext:
    """Read-only inputs shared by every strategy in one resolution."""

    repository: Repository
    configuration: GitVersionConfiguration
    current_branch: str
    current_commit: str
    classification: BranchClassification
    strategies: Tuple[Strategy, ...] = PRIORITY_ORDER
    next_version: Optional[str] = None

    @property
    def policy(self) -> BranchConfiguration:
        return self.classification.policy


def strip_tag_prefix(tag: str, tag_prefix: str) -> str:
    """Remove the configured prefix pattern from the start of a tag."""
    if not tag_prefix:
        return tag
    match = re.match(tag_prefix, tag)
    if match:
        return tag[match.end() :]
    return tag


class BaseVersionStrategy:
    """Base class for strategies."""

    strategy: Strategy

    @property
    def name(self) -> str:
        return self.strategy.value

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        raise NotImplementedError

    def candidate(
        self,
        version: SemanticVersion,
        source_description: str,
        should_increment: bool,
        source_commit: str = "",
    ) -> BaseVersionCandidate:
        return BaseVersionCandidate(
            version=version,
            source_description=source_description,
            should_increment=should_increment,
            source_commit=source_commit,
            strategy=self.strategy,
        )


class FallbackStrategy(BaseVersionStrategy):
    """Always 0.0.0."""

    strategy = Strategy.fallback

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        return [self.candidate(SemanticVersion(0, 0, 0), "Fallback strategy", True)]


class ConfiguredNextVersionStrategy(BaseVersionStrategy):
    """The explicit override, or the configuration's next-version."""

    strategy = Strategy.configured_next_version

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        next_version = context.next_version or context.configuration.next_version
        if not next_version:
            return []

        try:
            version = SemanticVersion.parse(next_version)
        except VersionFormatError as e:
            raise InvalidConfiguredVersionError(next_version) from e

        return [
            self.candidate(
                version, f"Configured next version: {next_version}", False
            )
        ]


class TaggedCommitStrategy(BaseVersionStrategy):
    """One candidate per version tag reachable from HEAD."""

    strategy = Strategy.tagged_commit

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        repository = context.repository
        configuration = context.configuration

        candidates = []
        for tag in repository.tags_reachable_from_head():
            version = try_parse(strip_tag_prefix(tag, configuration.tag_prefix))
            if version is None:
                logger.debug(f"Skipping tag '{tag}': not a semantic version")
                continue

            sha = repository.commit_sha_for_tag(tag)
            if configuration.ignore.is_ignored(sha):
                logger.debug(f"Skipping tag '{tag}': commit {sha} is ignored")
                continue

            candidates.append(self.candidate(version, f"Tag '{tag}'", True, sha))
        return candidates


class VersionInBranchNameStrategy(BaseVersionStrategy):
    """A version embedded in the branch name, e.g. release/1.2.0."""

    strategy = Strategy.version_in_branch_name

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        version = SemanticVersion.find_in(context.current_branch)
        if version is None:
            return []
        return [
            self.candidate(
                version,
                f"Version in branch name '{context.current_branch}'",
                False,
                context.current_commit,
            )
        ]


class TrackReleaseBranchesStrategy(BaseVersionStrategy):
    """Versions of release branches, anchored at their merge base."""

    strategy = Strategy.track_release_branches

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        if not context.policy.tracks_release_branches:
            return []

        repository = context.repository
        candidates = []
        for branch in repository.all_remote_branches():
            if not RELEASE_BRANCH_PATTERN.match(branch):
                continue

            version = SemanticVersion.find_in(branch)
            if version is None:
                continue

            merge_base = repository.merge_base(branch, context.current_branch)
            if not merge_base:
                logger.debug(f"Release branch '{branch}' shares no history, skipping")
                continue

            candidates.append(
                self.candidate(version, f"Release branch '{branch}'", True, merge_base)
            )
        return candidates


class MergeMessageStrategy(BaseVersionStrategy):
    """Versions named by recently merged branches."""

    strategy = Strategy.merge_message

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        if not context.policy.track_merge_message:
            return []

        should_increment = not context.policy.prevent_increment.of_merged_branch
        ignore = context.configuration.ignore

        candidates = []
        for commit in context.repository.commit_history(MERGE_MESSAGE_HISTORY_LIMIT):
            if ignore.is_ignored(commit.sha):
                continue

            branch = merged_branch_name(commit.message)
            if branch is None:
                continue

            version = SemanticVersion.find_in(branch)
            if version is None:
                continue

            candidates.append(
                self.candidate(
                    version,
                    f"Merge message '{commit.message.strip()}'",
                    should_increment,
                    commit.sha,
                )
            )
        return candidates


class MainlineStrategy(BaseVersionStrategy):
    """Latest reachable tag for main branches, 0.0.0 without one."""

    strategy = Strategy.mainline

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        if not context.policy.is_main_branch:
            return []

        repository = context.repository
        latest_tag = repository.latest_tag()
        if not latest_tag:
            return [
                self.candidate(
                    SemanticVersion(0, 0, 0), "Mainline strategy (no tags)", True
                )
            ]

        version = try_parse(
            strip_tag_prefix(latest_tag, context.configuration.tag_prefix)
        )
        if version is None:
            return [
                self.candidate(
                    SemanticVersion(0, 0, 0), "Mainline strategy (invalid tag)", True
                )
            ]

        sha = repository.commit_sha_for_tag(latest_tag)
        return [
            self.candidate(
                version, f"Mainline strategy from tag '{latest_tag}'", True, sha
            )
        ]


STRATEGY_CLASSES = {
    Strategy.fallback: FallbackStrategy,
    Strategy.configured_next_version: ConfiguredNextVersionStrategy,
    Strategy.merge_message: MergeMessageStrategy,
    Strategy.tagged_commit: TaggedCommitStrategy,
    Strategy.track_release_branches: TrackReleaseBranchesStrategy,
    Strategy.version_in_branch_name: VersionInBranchNameStrategy,
    Strategy.mainline: MainlineStrategy,
}
