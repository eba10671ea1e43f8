"""
Version calculation entry point.

Ties the pipeline together: classify the branch, collect base versions,
select one, increment it and attach branch-specific pre-release and build
metadata.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from gitversion.constants import WorkflowType
from gitversion.core.interfaces import Repository
from gitversion.model.configuration import GitVersionConfiguration

from .branch_versioning import apply_branch_versioning
from .classifier import BranchClassification, BranchClassifier
from .exceptions import NotARepositoryError
from .increment import IncrementApplier
from .manager import StrategyManager
from .strategies import (
    BaseVersionCandidate,
    Strategy,
    VersionContext,
    parse_strategies,
)
from .version import IncrementField, SemanticVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionResolution:
    """A calculated version together with how it was derived."""

    version: SemanticVersion
    branch: str
    classification: BranchClassification
    base: BaseVersionCandidate
    candidates: List[BaseVersionCandidate] = field(default_factory=list)
    increment: Optional[IncrementField] = None
    increment_reason: str = ""
    commit_count: int = 0
    sha: str = ""
    short_sha: str = ""
    commit_date: str = ""


class VersionCalculator:
    """
    Calculates the semantic version of the current repository position.

    Example:
        >>> calculator = VersionCalculator(GitRepository("."), GitVersionConfiguration())
        >>> str(calculator.resolve_version(branch="develop"))
        '0.1.0-alpha.3+3+abc1234'
    """

    def __init__(
        self,
        repository: Repository,
        configuration: Optional[GitVersionConfiguration] = None,
        manager: Optional[StrategyManager] = None,
        applier: Optional[IncrementApplier] = None,
    ):
        self.repository = repository
        self.configuration = configuration or GitVersionConfiguration()
        self.classifier = BranchClassifier(self.configuration.branches)
        self.manager = manager or StrategyManager()
        self.applier = applier or IncrementApplier()

    def enabled_strategies(self, next_version: Optional[str] = None) -> Tuple[Strategy, ...]:
        """Strategies to run, in priority order."""
        names = list(self.configuration.strategies)
        if next_version:
            names.append(Strategy.configured_next_version.value)
        return tuple(parse_strategies(names))

    def calculate(
        self,
        branch: Optional[str] = None,
        workflow: Union[WorkflowType, str] = WorkflowType.gitflow,
        forced_increment: Union[IncrementField, str, None] = None,
        next_version: Optional[str] = None,
    ) -> VersionResolution:
        """
        Calculate the version for a branch.

        Args:
            branch: Branch to version; the current branch when omitted
            workflow: Branching workflow used to refine the branch type
            forced_increment: Increment applied regardless of policy
            next_version: Explicit base version; wins over all other evidence

        Returns:
            VersionResolution

        Raises:
            NotARepositoryError: If there is no repository at all
            InvalidConfiguredVersionError: If next_version does not parse
            StrategyFailureError: If a strategy fails
            RepositoryError: If a repository query outside the strategies fails
        """
        repository = self.repository
        if not repository.is_repository():
            raise NotARepositoryError(getattr(repository, "path", None))

        workflow = WorkflowType(workflow)
        if forced_increment is not None:
            forced_increment = IncrementField(forced_increment)

        branch = branch or repository.current_branch()
        classification = self.classifier.classify(branch).for_workflow(workflow)
        logger.debug(
            f"Branch '{branch}' uses policy '{classification.policy_name}' "
            f"as {classification.branch_type.value} ({workflow.value})"
        )

        context = VersionContext(
            repository=repository,
            configuration=self.configuration,
            current_branch=branch,
            current_commit=repository.head_sha(),
            classification=classification,
            strategies=self.enabled_strategies(next_version),
            next_version=next_version,
        )

        candidates = self.manager.get_base_versions(context)
        base = self.manager.find_best_base_version(candidates)
        logger.debug(f"Selected base version {base}")

        incremented = self.applier.apply(base, context, forced=forced_increment)
        logger.debug(
            f"Increment: {incremented.applied.value if incremented.applied else 'none'} "
            f"({incremented.reason})"
        )

        commit_count = repository.commit_count_since(repository.latest_tag())
        short_sha = repository.head_short_sha()
        version = apply_branch_versioning(
            incremented.version, branch, classification, commit_count, short_sha
        )
        logger.debug(f"Calculated version {version}")

        return VersionResolution(
            version=version,
            branch=branch,
            classification=classification,
            base=base,
            candidates=list(candidates),
            increment=incremented.applied,
            increment_reason=incremented.reason,
            commit_count=commit_count,
            sha=context.current_commit,
            short_sha=short_sha,
            commit_date=repository.commit_date(),
        )

    def resolve_version(
        self,
        branch: Optional[str] = None,
        workflow: Union[WorkflowType, str] = WorkflowType.gitflow,
        forced_increment: Union[IncrementField, str, None] = None,
        next_version: Optional[str] = None,
    ) -> SemanticVersion:
        """Calculate and return only the version."""
        return self.calculate(branch, workflow, forced_increment, next_version).version


def resolve_version(
    repository: Repository,
    configuration: Optional[GitVersionConfiguration] = None,
    branch: Optional[str] = None,
    workflow: Union[WorkflowType, str] = WorkflowType.gitflow,
    forced_increment: Union[IncrementField, str, None] = None,
    next_version: Optional[str] = None,
) -> SemanticVersion:
    """Calculate the version of repository with a one-off calculator."""
    calculator = VersionCalculator(repository, configuration)
    return calculator.resolve_version(branch, workflow, forced_increment, next_version)
