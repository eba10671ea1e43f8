from enum import Enum


class WorkflowType(str, Enum):
    """Branching workflow used to interpret branch names."""

    gitflow = "gitflow"
    githubflow = "githubflow"
    trunk = "trunk"


class BranchType(str, Enum):
    """Classification of a branch, driving pre-release synthesis."""

    main = "main"
    develop = "develop"
    feature = "feature"
    release = "release"
    hotfix = "hotfix"
    support = "support"
    unknown = "unknown"
    # A named policy from the configuration that is none of the above
    custom = "custom"


# Repository-relative configuration files, in lookup order
CONFIG_FILE_NAMES = ("GitVersion.yml", "GitVersion.yaml", ".gitversion.yml")

# Number of recent commits scanned for merge messages
MERGE_MESSAGE_HISTORY_LIMIT = 50

DEFAULT_TAG_PREFIX = "[vV]"
