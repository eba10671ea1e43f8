"""
Versioning Module for gitversion.

This module holds the version resolution engine: given a repository handle and
a configuration, it decides the semantic version of the current position in
the history. Everything here is independent of git itself; the engine talks
to the repository only through gitversion.core.interfaces.Repository.

ARCHITECTURAL LAYERS:
====================

1. **Core Version Logic** (version.py):
   - SemanticVersion: immutable major.minor.patch[-prerelease][+build] value
   - Parsing, comparison and increment helpers

2. **Branch Classification** (classifier.py):
   - BranchClassifier: maps a branch name to exactly one branch policy
   - BranchClassification: the matched policy, its regex groups and the
     workflow-refined branch type

3. **Evidence** (strategies.py, commits.py):
   - One strategy class per source of base versions (tags, branch names,
     merge messages, release branches, configured next-version, fallback)
   - CommitMessageAnalyzer: bump directives and conventional commit headers

4. **Selection and Increment** (manager.py, increment.py):
   - StrategyManager: runs the enabled strategies in priority order, fails
     fast and selects a single base version
   - IncrementApplier: forced, policy or commit-message increments, with the
     prevent-increment rules

5. **Synthesis** (branch_versioning.py, calculator.py):
   - Branch-specific pre-release labels and build metadata
   - VersionCalculator: the end-to-end pipeline

6. **Exception Hierarchy** (exceptions.py):
   - All engine errors derive from VersioningError

DESIGN PRINCIPLES:
=================

- **Determinism**: the same repository state and configuration always yield
  the same version
- **Fail fast**: any strategy failure aborts the run; no partial version is
  emitted
- **Read-only**: the engine never writes to the repository
"""

from .branch_versioning import apply_branch_versioning
from .calculator import VersionCalculator, VersionResolution, resolve_version
from .classifier import BranchClassification, BranchClassifier
from .commits import CommitMessageAnalyzer, detect_increment
from .exceptions import (
    InvalidConfiguredVersionError,
    NotARepositoryError,
    RepositoryError,
    StrategyFailureError,
    VersionFormatError,
    VersioningError,
)
from .increment import IncrementApplier, IncrementResult
from .manager import StrategyManager
from .strategies import (
    PRIORITY_ORDER,
    BaseVersionCandidate,
    Strategy,
    VersionContext,
)
from .version import (
    IncrementField,
    SemanticVersion,
    compare_versions,
    parse_version,
    sanitize_branch_name,
    try_parse,
)

__all__ = [
    # Entry points
    "VersionCalculator",
    "VersionResolution",
    "resolve_version",
    # Core version utilities
    "SemanticVersion",
    "IncrementField",
    "parse_version",
    "try_parse",
    "compare_versions",
    "sanitize_branch_name",
    # Pipeline stages
    "BranchClassifier",
    "BranchClassification",
    "CommitMessageAnalyzer",
    "detect_increment",
    "Strategy",
    "PRIORITY_ORDER",
    "BaseVersionCandidate",
    "VersionContext",
    "StrategyManager",
    "IncrementApplier",
    "IncrementResult",
    "apply_branch_versioning",
    # Exception hierarchy
    "VersioningError",
    "NotARepositoryError",
    "VersionFormatError",
    "InvalidConfiguredVersionError",
    "RepositoryError",
    "StrategyFailureError",
]
