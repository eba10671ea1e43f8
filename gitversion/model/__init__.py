"""Pydantic models for the versioning configuration."""

from gitversion.model.configuration import (
    # Enums
    IncrementStrategy,
    DeploymentMode,
    CommitMessageIncrementMode,
    # Models
    PreventIncrementConfiguration,
    BranchConfiguration,
    IgnoreConfiguration,
    GitVersionConfiguration,
    # Defaults
    DEFAULT_BRANCH_POLICIES,
    DEFAULT_STRATEGIES,
    PULL_REQUEST_POLICY_NAME,
    default_branches,
    default_policy,
)
from gitversion.model.validation import ValidationError, ConfigurationParseError

__all__ = [
    "IncrementStrategy",
    "DeploymentMode",
    "CommitMessageIncrementMode",
    "PreventIncrementConfiguration",
    "BranchConfiguration",
    "IgnoreConfiguration",
    "GitVersionConfiguration",
    "DEFAULT_BRANCH_POLICIES",
    "DEFAULT_STRATEGIES",
    "PULL_REQUEST_POLICY_NAME",
    "default_branches",
    "default_policy",
    "ValidationError",
    "ConfigurationParseError",
]
