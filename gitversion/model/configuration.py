"""Pydantic models for the versioning configuration (GitVersion.yml)."""

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from pydantic import field_validator

from gitversion.constants import BranchType, DEFAULT_TAG_PREFIX
from ._parsing import build_line_map, convert_pydantic_error_to_parse_error
from ._parsing import normalize_keys
from .validation import ConfigurationParseError, ValidationError


# Enums
class IncrementStrategy(str, Enum):
    """How a branch bumps its base version."""

    none = "None"
    patch = "Patch"
    minor = "Minor"
    major = "Major"
    inherit = "Inherit"


class DeploymentMode(str, Enum):
    """Deployment mode for a branch."""

    manual_deployment = "ManualDeployment"
    continuous_delivery = "ContinuousDelivery"
    continuous_deployment = "ContinuousDeployment"


class CommitMessageIncrementMode(str, Enum):
    """Which source decides the increment: commit messages or the branch policy."""

    enabled = "Enabled"
    disabled = "Disabled"


def _match_enum_value(enum_cls, v: Any) -> Any:
    """Accept enum values case-insensitively ('patch' -> 'Patch')."""
    if isinstance(v, str):
        for member in enum_cls:
            if member.value.lower() == v.strip().lower():
                return member
    return v


class PreventIncrementConfiguration(BaseModel):
    """Situations in which the branch increment is suppressed."""

    of_merged_branch: bool = Field(
        False, description="Do not increment versions taken from merged branches"
    )
    when_current_commit_tagged: bool = Field(
        False, description="Do not increment when HEAD carries a version tag"
    )
    when_branch_merged: bool = Field(
        False, description="Do not increment when HEAD is a merge commit"
    )


class BranchConfiguration(BaseModel):
    """Versioning policy for one family of branches."""

    mode: DeploymentMode = Field(
        DeploymentMode.manual_deployment, description="Deployment mode"
    )
    label: Optional[str] = Field(
        None, description="Pre-release label template, e.g. '{BranchName}'"
    )
    increment: IncrementStrategy = Field(
        IncrementStrategy.inherit, description="Increment applied to the base version"
    )
    prevent_increment: PreventIncrementConfiguration = Field(
        default_factory=PreventIncrementConfiguration
    )
    track_merge_target: bool = False
    track_merge_message: bool = True
    regex: Optional[str] = Field(None, description="Pattern matched against branch names")
    source_branches: List[str] = Field(default_factory=list)
    is_source_branch_for: List[str] = Field(default_factory=list)
    tracks_release_branches: bool = False
    is_release_branch: bool = False
    is_main_branch: bool = False
    pre_release_weight: int = 0

    @field_validator("increment", mode="before")
    @classmethod
    def validate_increment(cls, v: Any) -> Any:
        return _match_enum_value(IncrementStrategy, v)

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v: Any) -> Any:
        return _match_enum_value(DeploymentMode, v)

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid branch regex '{v}': {e}")
        return v

    def merged_with(self, override: "BranchConfiguration") -> "BranchConfiguration":
        """Return a copy where the fields explicitly set on override win."""
        update = {
            name: getattr(override, name)
            for name in override.model_fields_set
            if name != "prevent_increment"
        }
        if "prevent_increment" in override.model_fields_set:
            prevent = override.prevent_increment
            update["prevent_increment"] = self.prevent_increment.model_copy(
                update={
                    name: getattr(prevent, name) for name in prevent.model_fields_set
                }
            )
        return self.model_copy(update=update, deep=True)


# One canonical table of policies per branch type. The default configuration
# and the classifier's fallback both read from it.
DEFAULT_BRANCH_POLICIES: Dict[BranchType, BranchConfiguration] = {
    BranchType.main: BranchConfiguration(
        mode=DeploymentMode.manual_deployment,
        label="",
        increment=IncrementStrategy.patch,
        track_merge_message=True,
        regex="^(master|main)$",
        is_main_branch=True,
        pre_release_weight=55000,
    ),
    BranchType.develop: BranchConfiguration(
        mode=DeploymentMode.continuous_delivery,
        label="alpha",
        increment=IncrementStrategy.minor,
        track_merge_target=True,
        track_merge_message=True,
        regex="^dev(elop)?(ment)?$",
        source_branches=["main"],
        tracks_release_branches=True,
        pre_release_weight=0,
    ),
    BranchType.release: BranchConfiguration(
        mode=DeploymentMode.manual_deployment,
        label="beta",
        increment=IncrementStrategy.none,
        prevent_increment=PreventIncrementConfiguration(of_merged_branch=True),
        track_merge_message=True,
        regex=r"^releases?[\/-](?P<BranchName>.+)",
        source_branches=["main", "support"],
        is_release_branch=True,
        pre_release_weight=30000,
    ),
    BranchType.feature: BranchConfiguration(
        mode=DeploymentMode.manual_deployment,
        label="{BranchName}",
        increment=IncrementStrategy.inherit,
        track_merge_message=True,
        regex=r"^features?[\/-](?P<BranchName>.+)",
        source_branches=["develop", "main", "release", "support", "hotfix"],
        pre_release_weight=30000,
    ),
    BranchType.hotfix: BranchConfiguration(
        mode=DeploymentMode.manual_deployment,
        label="beta",
        increment=IncrementStrategy.inherit,
        regex=r"^hotfix(es)?[\/-](?P<BranchName>.+)",
        source_branches=["main", "support"],
        is_release_branch=True,
        pre_release_weight=30000,
    ),
    BranchType.support: BranchConfiguration(
        label="",
        increment=IncrementStrategy.patch,
        regex=r"^support[\/-](?P<BranchName>.+)",
        source_branches=["main"],
        pre_release_weight=55000,
    ),
    BranchType.unknown: BranchConfiguration(
        mode=DeploymentMode.manual_deployment,
        label="{BranchName}",
        increment=IncrementStrategy.patch,
        pre_release_weight=30000,
    ),
}

PULL_REQUEST_POLICY_NAME = "pull-request"

PULL_REQUEST_POLICY = BranchConfiguration(
    mode=DeploymentMode.continuous_delivery,
    label="PullRequest{Number}",
    increment=IncrementStrategy.inherit,
    prevent_increment=PreventIncrementConfiguration(of_merged_branch=True),
    track_merge_message=True,
    regex=r"^(pull-requests|pull|pr)[\/-](?P<Number>\d*)",
    source_branches=["develop", "main", "release", "feature", "support", "hotfix"],
    pre_release_weight=30000,
)

DEFAULT_STRATEGIES = [
    "Fallback",
    "ConfiguredNextVersion",
    "MergeMessage",
    "TaggedCommit",
    "TrackReleaseBranches",
    "VersionInBranchName",
]


def default_branches() -> Dict[str, BranchConfiguration]:
    """Default branch policies, in classification order."""
    branches: Dict[str, BranchConfiguration] = {}
    for branch_type in (
        BranchType.main,
        BranchType.develop,
        BranchType.release,
        BranchType.feature,
    ):
        branches[branch_type.value] = DEFAULT_BRANCH_POLICIES[branch_type].model_copy(
            deep=True
        )
    branches[PULL_REQUEST_POLICY_NAME] = PULL_REQUEST_POLICY.model_copy(deep=True)
    for branch_type in (BranchType.hotfix, BranchType.support):
        branches[branch_type.value] = DEFAULT_BRANCH_POLICIES[branch_type].model_copy(
            deep=True
        )
    return branches


def default_policy() -> BranchConfiguration:
    """Policy used for branches no configured policy matches."""
    return DEFAULT_BRANCH_POLICIES[BranchType.unknown].model_copy(deep=True)


class IgnoreConfiguration(BaseModel):
    """Evidence to leave out of the calculation."""

    sha: List[str] = Field(default_factory=list, description="Commit SHAs to ignore")

    def is_ignored(self, sha: str) -> bool:
        if not sha:
            return False
        prefixes = [ignored.strip() for ignored in self.sha if ignored.strip()]
        return any(sha.startswith(ignored) or ignored.startswith(sha) for ignored in prefixes)


class GitVersionConfiguration(BaseModel):
    """Top-level versioning configuration."""

    next_version: Optional[str] = Field(
        None, description="Version to start from when no better evidence exists"
    )
    mode: DeploymentMode = Field(DeploymentMode.continuous_delivery)
    increment: IncrementStrategy = Field(
        IncrementStrategy.inherit, description="Increment used by 'Inherit' branches"
    )
    tag_prefix: str = Field(DEFAULT_TAG_PREFIX, description="Regex stripped from tags")
    major_version_bump_message: str = r"\+semver:\s*(breaking|major)"
    minor_version_bump_message: str = r"\+semver:\s*(feature|minor)"
    commit_message_incrementing: CommitMessageIncrementMode = Field(
        CommitMessageIncrementMode.disabled
    )
    strategies: List[str] = Field(default_factory=lambda: list(DEFAULT_STRATEGIES))
    branches: Dict[str, BranchConfiguration] = Field(default_factory=default_branches)
    ignore: IgnoreConfiguration = Field(default_factory=IgnoreConfiguration)

    @field_validator("next_version", mode="before")
    @classmethod
    def validate_next_version(cls, v: Any) -> Optional[str]:
        """Keep next-version as text; YAML may hand over numbers."""
        if v is None:
            return None
        if isinstance(v, (int, float)):
            v = str(v)
        v = str(v).strip()
        return v or None

    @field_validator("increment", mode="before")
    @classmethod
    def validate_increment(cls, v: Any) -> Any:
        return _match_enum_value(IncrementStrategy, v)

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v: Any) -> Any:
        return _match_enum_value(DeploymentMode, v)

    @field_validator("commit_message_incrementing", mode="before")
    @classmethod
    def validate_commit_message_incrementing(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return (
                CommitMessageIncrementMode.enabled
                if v
                else CommitMessageIncrementMode.disabled
            )
        return _match_enum_value(CommitMessageIncrementMode, v)

    @field_validator("tag_prefix", "major_version_bump_message", "minor_version_bump_message")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regular expression '{v}': {e}")
        return v

    def policy_for(self, branch_name: str) -> BranchConfiguration:
        """Return the branch policy that applies to branch_name."""
        # Import here to avoid circular dependency
        from gitversion.versioning.classifier import BranchClassifier

        return BranchClassifier(self.branches).classify(branch_name).policy

    def validate_model_structure(self) -> None:
        """Check references between branch policies."""
        errors: List[str] = []
        names = set(self.branches)

        for name, branch in self.branches.items():
            for source in branch.source_branches:
                if source not in names:
                    errors.append(
                        f"Branch '{name}' lists unknown source branch '{source}'"
                    )
            for target in branch.is_source_branch_for:
                if target not in names:
                    errors.append(
                        f"Branch '{name}' is source for unknown branch '{target}'"
                    )

        if errors:
            raise ValidationError(errors)

    @classmethod
    def from_dict(
        cls,
        data: Optional[Dict[str, Any]],
        config_file: Optional[Path] = None,
        line_map: Optional[Dict[str, int]] = None,
    ) -> "GitVersionConfiguration":
        """Create a configuration from raw (file) data.

        Branch entries are merged field-wise over the default policies, and
        branches that are new are appended after the defaults.

        Raises:
            ConfigurationParseError: If the data does not fit the model
        """
        data = normalize_keys(data or {})

        user_branches = data.pop("branches", None) or {}
        if not isinstance(user_branches, dict):
            raise ConfigurationParseError(
                message="'branches' must be a mapping of branch name to policy",
                config_file=config_file,
                line_number=(line_map or {}).get("branches"),
                key="branches",
            )

        try:
            configuration = cls(**data)
        except PydanticValidationError as e:
            raise convert_pydantic_error_to_parse_error(
                e, line_map or {}, config_file
            ) from e

        branches = default_branches()
        for name, entry in user_branches.items():
            entry = dict(entry or {})
            # 'tag' is the older spelling of 'label'
            if "tag" in entry and "label" not in entry:
                entry["label"] = entry.pop("tag")
            else:
                entry.pop("tag", None)
            try:
                override = BranchConfiguration(**entry)
            except PydanticValidationError as e:
                raise convert_pydantic_error_to_parse_error(
                    e, line_map or {}, config_file, loc_prefix=("branches", str(name))
                ) from e
            if name in branches:
                branches[name] = branches[name].merged_with(override)
            else:
                branches[name] = override

        configuration.branches = branches
        return configuration

    @classmethod
    def from_yaml(cls, path_or_content: Union[str, Path]) -> "GitVersionConfiguration":
        """Load configuration from a YAML file or string content."""
        config_file: Optional[Path] = None
        if isinstance(path_or_content, Path) or "\n" not in str(path_or_content):
            config_file = Path(path_or_content)
            content = config_file.read_text()
        else:
            content = str(path_or_content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            raise ConfigurationParseError(
                message=f"Invalid YAML: {e}",
                config_file=config_file,
                line_number=mark.line + 1 if mark is not None else None,
                original_error=e,
            ) from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationParseError(
                message="Configuration must be a mapping", config_file=config_file
            )

        return cls.from_dict(data, config_file=config_file, line_map=build_line_map(content))

    @classmethod
    def from_json(cls, path_or_content: Union[str, Path]) -> "GitVersionConfiguration":
        """Load configuration from a JSON file or string content."""
        config_file: Optional[Path] = None
        if isinstance(path_or_content, Path) or not str(path_or_content).lstrip().startswith("{"):
            config_file = Path(path_or_content)
            content = config_file.read_text()
        else:
            content = str(path_or_content)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationParseError(
                message=f"Invalid JSON: {e.msg}",
                config_file=config_file,
                line_number=e.lineno,
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationParseError(
                message="Configuration must be a mapping", config_file=config_file
            )

        return cls.from_dict(data, config_file=config_file)

    def to_yaml(self) -> str:
        """Serialize the effective configuration to YAML."""
        data = self.model_dump(mode="json")
        return yaml.safe_dump(data, sort_keys=False)
