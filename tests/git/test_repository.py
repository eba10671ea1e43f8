"""
Tests for GitRepository against real, temporary git repositories.
"""

from pathlib import Path

import pytest
from git import Repo

from gitversion.git import GitRepository
from gitversion.versioning import VersionCalculator
from gitversion.versioning.exceptions import NotARepositoryError, RepositoryError


def commit(repo: Repo, message: str, filename: str = "file.txt"):
    path = Path(repo.working_tree_dir) / filename
    with open(path, "a") as f:
        f.write(message + "\n")
    repo.index.add([str(path)])
    return repo.index.commit(message)


@pytest.fixture
def git_repo(tmp_path):
    """A repository on 'main' with three commits, the first tagged v1.0.0."""
    repo = Repo.init(tmp_path / "repo")
    first = commit(repo, "Initial commit")
    repo.git.branch("-M", "main")
    repo.create_tag("v1.0.0", ref=first)
    commit(repo, "feat: add export")
    commit(repo, "fix: handle empty input")
    return repo


@pytest.mark.short
class TestGitRepository:
    def test_is_repository(self, git_repo, tmp_path):
        assert GitRepository(git_repo.working_tree_dir).is_repository()

        plain = tmp_path / "plain"
        plain.mkdir()
        assert not GitRepository(plain).is_repository()

    def test_subdirectory_finds_repository(self, git_repo):
        sub = Path(git_repo.working_tree_dir) / "sub"
        sub.mkdir()
        repository = GitRepository(sub)
        assert repository.is_repository()
        assert repository.root == Path(git_repo.working_tree_dir)

    def test_queries_outside_repository_fail(self, tmp_path):
        with pytest.raises(NotARepositoryError):
            GitRepository(tmp_path / "missing").head_sha()

    def test_current_branch(self, git_repo):
        assert GitRepository(git_repo.working_tree_dir).current_branch() == "main"

    def test_detached_head(self, git_repo):
        git_repo.git.checkout(git_repo.head.commit.hexsha)
        assert GitRepository(git_repo.working_tree_dir).current_branch() == "HEAD"

    def test_shas(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        assert repository.head_sha() == git_repo.head.commit.hexsha
        assert git_repo.head.commit.hexsha.startswith(repository.head_short_sha())
        assert repository.commit_date()

    def test_tags(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        assert repository.latest_tag() == "v1.0.0"
        assert repository.tags_reachable_from_head() == ["v1.0.0"]
        first = list(git_repo.iter_commits())[-1]
        assert repository.commit_sha_for_tag("v1.0.0") == first.hexsha

    def test_tags_on_other_branches_not_reachable(self, git_repo):
        git_repo.git.checkout("-b", "develop")
        commit(git_repo, "develop work")
        git_repo.create_tag("v2.0.0")
        git_repo.git.checkout("main")

        assert GitRepository(git_repo.working_tree_dir).tags_reachable_from_head() == [
            "v1.0.0"
        ]

    def test_no_tags(self, tmp_path):
        repo = Repo.init(tmp_path / "untagged")
        commit(repo, "Initial commit")
        repository = GitRepository(repo.working_tree_dir)
        assert repository.latest_tag() is None
        assert repository.tags_reachable_from_head() == []
        assert repository.commit_count_since(None) == 1

    def test_unknown_tag_raises_repository_error(self, git_repo):
        with pytest.raises(RepositoryError, match="rev-list"):
            GitRepository(git_repo.working_tree_dir).commit_sha_for_tag("v9.9.9")

    def test_commit_counts_and_messages(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        assert repository.commit_count_since(None) == 3
        assert repository.commit_count_since("v1.0.0") == 2
        messages = [m.strip() for m in repository.commits_since("v1.0.0")]
        assert messages == ["fix: handle empty input", "feat: add export"]

    def test_commit_history(self, git_repo):
        history = GitRepository(git_repo.working_tree_dir).commit_history(2)
        assert [c.message.strip() for c in history] == [
            "fix: handle empty input",
            "feat: add export",
        ]
        assert history[0].sha == git_repo.head.commit.hexsha

    def test_queries_are_memoized(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        assert repository.latest_tag() == "v1.0.0"
        git_repo.create_tag("v1.1.0")
        # Answered from the per-instance cache
        assert repository.latest_tag() == "v1.0.0"
        assert GitRepository(git_repo.working_tree_dir).latest_tag() == "v1.1.0"

    def test_list_results_are_copies(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        repository.tags_reachable_from_head().append("bogus")
        assert repository.tags_reachable_from_head() == ["v1.0.0"]


@pytest.mark.short
class TestRemoteBranches:
    @pytest.fixture
    def clone(self, git_repo, tmp_path):
        git_repo.git.checkout("-b", "release/1.3.0")
        commit(git_repo, "prepare 1.3.0")
        git_repo.git.checkout("main")
        return Repo.clone_from(git_repo.working_tree_dir, tmp_path / "clone")

    def test_all_remote_branches(self, clone):
        branches = GitRepository(clone.working_tree_dir).all_remote_branches()
        assert sorted(branches) == ["main", "release/1.3.0"]

    def test_merge_base_with_remote_only_branch(self, clone, git_repo):
        repository = GitRepository(clone.working_tree_dir)
        assert repository.merge_base("release/1.3.0", "main") == git_repo.head.commit.hexsha


@pytest.mark.short
class TestCalculationOnGitRepository:
    def test_main_after_tag(self, git_repo):
        repository = GitRepository(git_repo.working_tree_dir)
        version = VersionCalculator(repository).resolve_version()
        assert str(version) == f"1.0.1+2+{repository.head_short_sha()}"

    def test_feature_branch(self, git_repo):
        git_repo.git.checkout("-b", "feature/user-auth")
        commit(git_repo, "work on auth")
        version = VersionCalculator(GitRepository(git_repo.working_tree_dir)).resolve_version()
        assert version.major_minor_patch() == "1.0.1"
        assert version.pre_release == "user-auth.3"
