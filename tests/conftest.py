import io
import logging
from typing import Dict, List, Optional

import pytest

from gitversion.core.interfaces import CommitInfo


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitversion")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


class FakeRepository:
    """In-memory repository answering the queries the versioning engine makes.

    Tags are given as an ordered mapping of tag name to commit sha; the last
    one is the latest tag. History is newest first.
    """

    def __init__(
        self,
        branch: str = "main",
        sha: str = "abc1234000000000000000000000000000000000",
        short_sha: str = "abc1234",
        tags: Optional[Dict[str, str]] = None,
        remote_branches: Optional[List[str]] = None,
        merge_bases: Optional[Dict[str, str]] = None,
        history: Optional[List[CommitInfo]] = None,
        commit_count: int = 0,
        messages_since_tag: Optional[List[str]] = None,
        commit_date: str = "2024-05-01 10:00:00 +0000",
        is_repository: bool = True,
    ):
        self.branch = branch
        self.sha = sha
        self.short_sha = short_sha
        self.tags = dict(tags or {})
        self.remote_branches = list(remote_branches or [])
        self.merge_bases = dict(merge_bases or {})
        self.history = list(history or [])
        self.commit_count = commit_count
        self.messages_since_tag = list(messages_since_tag or [])
        self.date = commit_date
        self._is_repository = is_repository

    def is_repository(self) -> bool:
        return self._is_repository

    def current_branch(self) -> str:
        return self.branch

    def head_sha(self) -> str:
        return self.sha

    def head_short_sha(self) -> str:
        return self.short_sha

    def commit_date(self) -> str:
        return self.date

    def latest_tag(self) -> Optional[str]:
        if not self.tags:
            return None
        return list(self.tags)[-1]

    def tags_reachable_from_head(self) -> List[str]:
        return list(self.tags)

    def commit_sha_for_tag(self, tag: str) -> str:
        return self.tags[tag]

    def all_remote_branches(self) -> List[str]:
        return list(self.remote_branches)

    def merge_base(self, branch_a: str, branch_b: str) -> str:
        return self.merge_bases.get(branch_a, "")

    def commit_history(self, limit: int) -> List[CommitInfo]:
        return self.history[:limit]

    def commits_since(self, tag: Optional[str]) -> List[str]:
        return list(self.messages_since_tag)

    def commit_count_since(self, tag: Optional[str]) -> int:
        return self.commit_count


@pytest.fixture
def make_repository():
    """Factory for in-memory repositories."""
    return FakeRepository
