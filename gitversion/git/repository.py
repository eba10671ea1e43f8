"""
Git-backed repository for the versioning engine.

Every query is answered from the local repository with GitPython and is
memoized per instance, so one version calculation runs each distinct git
command at most once.
"""

import functools
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitversion.core.interfaces import CommitInfo
from gitversion.versioning.exceptions import NotARepositoryError, RepositoryError

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


def _memoized(method):
    @functools.wraps(method)
    def wrapper(self, *args):
        key = (method.__name__,) + args
        if key not in self._cache:
            self._cache[key] = method(self, *args)
        value = self._cache[key]
        # Callers get their own copy of list results
        if isinstance(value, list):
            return list(value)
        return value

    return wrapper


class GitRepository:
    """
    Read-only view of a git working copy.

    Args:
        path: Any directory inside the working copy (defaults to the current
            directory)
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else Path.cwd()
        self._repo: Optional[Repo] = None
        self._cache: Dict[Tuple[Any, ...], Any] = {}

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(self.path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotARepositoryError(str(self.path)) from e
        return self._repo

    def _git(self, command: str, *args: str) -> str:
        try:
            return getattr(self.repo.git, command)(*args).strip()
        except GitCommandError as e:
            query = " ".join(["git", command.replace("_", "-"), *args])
            raise RepositoryError(query, str(e.stderr).strip()) from e

    @property
    def root(self) -> Path:
        """Top-level directory of the working copy."""
        return Path(self.repo.working_tree_dir or self.repo.git_dir)

    def is_repository(self) -> bool:
        try:
            self.repo
        except NotARepositoryError:
            return False
        return True

    @_memoized
    def current_branch(self) -> str:
        """Name of the checked out branch, 'HEAD' when detached."""
        if self.repo.head.is_detached:
            return DETACHED_HEAD
        return self.repo.active_branch.name

    @_memoized
    def head_sha(self) -> str:
        return self._git("rev_parse", "HEAD")

    @_memoized
    def head_short_sha(self) -> str:
        return self._git("rev_parse", "--short", "HEAD")

    @_memoized
    def commit_date(self) -> str:
        return self._git("log", "-1", "--format=%ci", "HEAD")

    @_memoized
    def latest_tag(self) -> Optional[str]:
        """Most recent tag reachable from HEAD; None when there is none."""
        try:
            return self.repo.git.describe("--tags", "--abbrev=0").strip() or None
        except GitCommandError:
            logger.debug("No tag reachable from HEAD")
            return None

    @_memoized
    def tags_reachable_from_head(self) -> List[str]:
        output = self._git("tag", "--merged", "HEAD")
        return [line.strip() for line in output.splitlines() if line.strip()]

    @_memoized
    def commit_sha_for_tag(self, tag: str) -> str:
        return self._git("rev_list", "-n", "1", tag)

    @_memoized
    def all_remote_branches(self) -> List[str]:
        branches = []
        for remote in self.repo.remotes:
            for ref in remote.refs:
                if ref.remote_head == "HEAD":
                    continue
                branches.append(ref.remote_head)
        return branches

    @_memoized
    def merge_base(self, branch_a: str, branch_b: str) -> str:
        """
        Best common ancestor of two branches.

        Branch names are looked up locally first, then on each remote.

        Returns:
            The merge base sha, or '' when the branches share no history
        """
        ref_a = self._resolve_ref(branch_a)
        ref_b = self._resolve_ref(branch_b)
        try:
            return self.repo.git.merge_base(ref_a, ref_b).strip()
        except GitCommandError as e:
            # merge-base exits with 1 and no output for unrelated histories
            if e.status == 1 and not str(e.stderr).strip():
                return ""
            query = f"git merge-base {ref_a} {ref_b}"
            raise RepositoryError(query, str(e.stderr).strip()) from e

    def _resolve_ref(self, name: str) -> str:
        candidates = [name] + [f"{remote.name}/{name}" for remote in self.repo.remotes]
        for candidate in candidates:
            try:
                self.repo.git.rev_parse("--verify", "--quiet", f"{candidate}^{{commit}}")
            except GitCommandError:
                continue
            return candidate
        return name

    @_memoized
    def commit_history(self, limit: int) -> List[CommitInfo]:
        """Most recent commits reachable from HEAD, newest first."""
        try:
            commits = list(self.repo.iter_commits("HEAD", max_count=limit))
        except (GitCommandError, ValueError) as e:
            raise RepositoryError(f"git log -{limit}", str(e)) from e
        return [
            CommitInfo(
                sha=commit.hexsha,
                message=commit.message,
                date=commit.committed_datetime.isoformat(),
            )
            for commit in commits
        ]

    @_memoized
    def commits_since(self, tag: Optional[str]) -> List[str]:
        """Full messages of the commits after tag, newest first."""
        rev = f"{tag}..HEAD" if tag else "HEAD"
        try:
            return [commit.message for commit in self.repo.iter_commits(rev)]
        except (GitCommandError, ValueError) as e:
            raise RepositoryError(f"git log {rev}", str(e)) from e

    @_memoized
    def commit_count_since(self, tag: Optional[str]) -> int:
        rev = f"{tag}..HEAD" if tag else "HEAD"
        return int(self._git("rev_list", "--count", rev))
