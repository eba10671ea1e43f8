"""
Branch classification.

A branch name resolves to exactly one policy: exact key, then the first
matching regex in declaration order, then a "<policy>/" prefix, then the
default policy. Classification never fails.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from gitversion.constants import BranchType, WorkflowType
from gitversion.model.configuration import BranchConfiguration, default_policy

logger = logging.getLogger(__name__)

DEFAULT_POLICY_NAME = "default"

_CANONICAL_TYPES = {
    branch_type.value: branch_type
    for branch_type in BranchType
    if branch_type not in (BranchType.unknown, BranchType.custom)
}

_TEMPLATE_FIELD = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class BranchClassification:
    """Result of matching a branch name against the configured policies."""

    branch_name: str
    policy_name: str
    policy: BranchConfiguration
    branch_type: BranchType
    match_groups: Dict[str, str] = field(default_factory=dict)

    @property
    def is_default(self) -> bool:
        return self.policy_name == DEFAULT_POLICY_NAME

    def render_label(self) -> str:
        """Expand the policy label template with BranchName and regex groups."""
        label = self.policy.label or ""
        values = dict(self.match_groups)
        values.setdefault("BranchName", self.branch_name.split("/")[-1])
        return _TEMPLATE_FIELD.sub(lambda m: values.get(m.group(1)) or "", label)

    def for_workflow(self, workflow: WorkflowType) -> "BranchClassification":
        """Refine the branch type for the given workflow."""
        if workflow == WorkflowType.trunk:
            branch_type = BranchType.main
        elif workflow == WorkflowType.githubflow:
            branch_type = (
                BranchType.main if self.policy.is_main_branch else BranchType.feature
            )
        else:
            return self
        return BranchClassification(
            branch_name=self.branch_name,
            policy_name=self.policy_name,
            policy=self.policy,
            branch_type=branch_type,
            match_groups=dict(self.match_groups),
        )


def branch_type_for_policy(policy_name: str) -> BranchType:
    """Branch type named by a policy key; custom for non-canonical names."""
    if policy_name == DEFAULT_POLICY_NAME:
        return BranchType.unknown
    return _CANONICAL_TYPES.get(policy_name, BranchType.custom)


class BranchClassifier:
    """
    Matches branch names against an ordered mapping of branch policies.

    Policies are tried in the mapping's insertion order, which for loaded
    configurations is declaration order. Overlapping regexes are still a
    configuration error: a warning names every matching policy and the first
    one wins.
    """

    def __init__(self, policies: Mapping[str, BranchConfiguration]):
        self.policies = dict(policies)
        self._patterns = {
            name: re.compile(policy.regex)
            for name, policy in self.policies.items()
            if policy.regex
        }

    def classify(self, branch_name: str) -> BranchClassification:
        """
        Resolve branch_name to a policy.

        Args:
            branch_name: Branch name, e.g. 'feature/user-auth'

        Returns:
            BranchClassification (the default policy if nothing matches)
        """
        policy = self.policies.get(branch_name)
        if policy is not None:
            groups = self._groups(branch_name, branch_name)
            return self._classification(branch_name, branch_name, policy, groups)

        matched = self._match_regex(branch_name)
        if matched is not None:
            return matched

        for name, policy in self.policies.items():
            if branch_name.startswith(f"{name}/"):
                logger.debug(f"Branch '{branch_name}' matched policy '{name}' by prefix")
                return self._classification(branch_name, name, policy, {})

        logger.debug(f"No policy matched branch '{branch_name}', using default policy")
        return BranchClassification(
            branch_name=branch_name,
            policy_name=DEFAULT_POLICY_NAME,
            policy=default_policy(),
            branch_type=BranchType.unknown,
        )

    def _match_regex(self, branch_name: str) -> Optional[BranchClassification]:
        matches = []
        for name, pattern in self._patterns.items():
            match = pattern.search(branch_name)
            if match is not None:
                matches.append((name, match))
        if not matches:
            return None

        if len(matches) > 1:
            logger.warning(
                f"Branch '{branch_name}' matches several policies "
                f"({', '.join(name for name, _ in matches)}); using '{matches[0][0]}'"
            )

        name, match = matches[0]
        groups = {key: value for key, value in match.groupdict().items() if value}
        logger.debug(f"Branch '{branch_name}' matched policy '{name}' by regex")
        return self._classification(branch_name, name, self.policies[name], groups)

    def _groups(self, name: str, branch_name: str) -> Dict[str, str]:
        pattern = self._patterns.get(name)
        if pattern is None:
            return {}
        match = pattern.search(branch_name)
        if match is None:
            return {}
        return {key: value for key, value in match.groupdict().items() if value}

    @staticmethod
    def _classification(
        branch_name: str,
        policy_name: str,
        policy: BranchConfiguration,
        groups: Dict[str, str],
    ) -> BranchClassification:
        return BranchClassification(
            branch_name=branch_name,
            policy_name=policy_name,
            policy=policy,
            branch_type=branch_type_for_policy(policy_name),
            match_groups=groups,
        )
