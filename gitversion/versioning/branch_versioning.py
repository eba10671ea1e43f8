"""
Branch-specific pre-release and build metadata.

The incremented version gets a pre-release label derived from the branch type
and the number of commits since the version source, and build metadata of the
form "<count>+<sha>".
"""

import re
from typing import Callable, Dict

from gitversion.constants import BranchType

from .classifier import BranchClassification
from .version import SemanticVersion, sanitize_branch_name

DEFAULT_RELEASE_LABEL = "beta"

_RELEASE_PREFIX = re.compile(r"^releases?[/-]")
_VERSION_CORE = re.compile(r"\d+\.\d+\.\d+")


def extract_feature_name(branch: str) -> str:
    """Last path segment of a branch, sanitized: feature/user-auth -> user-auth."""
    return sanitize_branch_name(branch.split("/")[-1])


def extract_release_label(branch: str) -> str:
    """
    Pre-release label of a release branch.

    The text after the last '-' that follows the version of the last path
    segment, so release/0.0.2-alpha gives 'alpha' while release-1.2.0 and
    release/1.2.0 give 'beta'.
    """
    segment = _RELEASE_PREFIX.sub("", branch, count=1).split("/")[-1]
    core = _VERSION_CORE.search(segment)
    suffix = segment[core.end() :] if core else segment
    if "-" not in suffix:
        return DEFAULT_RELEASE_LABEL
    label = sanitize_branch_name(suffix.rsplit("-", 1)[-1])
    return label or DEFAULT_RELEASE_LABEL


def _custom_label(branch: str, classification: BranchClassification) -> str:
    label = sanitize_branch_name(classification.render_label())
    return label or sanitize_branch_name(branch)


_LABELS: Dict[BranchType, Callable[[str, BranchClassification], str]] = {
    BranchType.develop: lambda branch, classification: "alpha",
    BranchType.feature: lambda branch, classification: extract_feature_name(branch),
    BranchType.release: lambda branch, classification: extract_release_label(branch),
    BranchType.hotfix: lambda branch, classification: "hotfix",
    BranchType.support: lambda branch, classification: sanitize_branch_name(branch),
    BranchType.unknown: lambda branch, classification: sanitize_branch_name(branch),
    BranchType.custom: _custom_label,
}


def pre_release_label(branch: str, classification: BranchClassification) -> str:
    """Label used before the commit count; empty for main branches."""
    label_for = _LABELS.get(classification.branch_type)
    if label_for is None:
        return ""
    return label_for(branch, classification)


def apply_branch_versioning(
    version: SemanticVersion,
    branch: str,
    classification: BranchClassification,
    commit_count: int,
    sha: str,
) -> SemanticVersion:
    """
    Attach the branch's pre-release label and the build metadata.

    Args:
        version: Incremented version (its own pre-release is replaced)
        branch: Current branch name
        classification: Workflow-refined classification of the branch
        commit_count: Commits since the version source
        sha: Short sha of the current commit

    Returns:
        A new SemanticVersion; main branches never carry a pre-release, other
        branches only when commit_count > 0
    """
    result = version.copy()
    label = pre_release_label(branch, classification)
    if label and commit_count > 0:
        result = result.with_pre_release(f"{label}.{commit_count}")
    elif classification.branch_type == BranchType.main:
        result = result.with_pre_release(None)
    return result.with_build(f"{commit_count}+{sha}")
