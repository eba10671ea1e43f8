"""Protocol interfaces for repository access.

The versioning engine only talks to a repository through this protocol, so
it can run against git or against an in-memory history in tests.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class CommitInfo:
    """A commit as seen by the versioning engine."""

    sha: str
    message: str
    date: str


class Repository(Protocol):
    """Read-only queries the versioning engine needs."""

    def is_repository(self) -> bool:
        """Whether version control metadata exists."""
        ...

    def current_branch(self) -> str:
        """Current branch name, or 'HEAD' when detached."""
        ...

    def head_sha(self) -> str: ...

    def head_short_sha(self) -> str: ...

    def commit_date(self) -> str:
        """Commit date of HEAD."""
        ...

    def latest_tag(self) -> Optional[str]:
        """Most recent tag reachable from HEAD, if any."""
        ...

    def tags_reachable_from_head(self) -> List[str]: ...

    def commit_sha_for_tag(self, tag: str) -> str: ...

    def all_remote_branches(self) -> List[str]:
        """Remote branch names without the remote prefix."""
        ...

    def merge_base(self, branch_a: str, branch_b: str) -> str: ...

    def commit_history(self, limit: int) -> List[CommitInfo]:
        """Most recent commits reachable from HEAD, newest first."""
        ...

    def commits_since(self, tag: Optional[str]) -> List[str]:
        """Messages of commits after tag (all commits when tag is None)."""
        ...

    def commit_count_since(self, tag: Optional[str]) -> int: ...
