"""Tests for the base version strategies."""

import pytest

from gitversion.core.interfaces import CommitInfo
from gitversion.model.configuration import (
    BranchConfiguration,
    GitVersionConfiguration,
    IgnoreConfiguration,
)
from gitversion.versioning.classifier import BranchClassifier
from gitversion.versioning.exceptions import InvalidConfiguredVersionError
from gitversion.versioning.strategies import (
    PRIORITY_ORDER,
    ConfiguredNextVersionStrategy,
    FallbackStrategy,
    MainlineStrategy,
    MergeMessageStrategy,
    Strategy,
    TaggedCommitStrategy,
    TrackReleaseBranchesStrategy,
    VersionContext,
    VersionInBranchNameStrategy,
    is_merge_message,
    merged_branch_name,
    parse_strategies,
    strip_tag_prefix,
)
from gitversion.versioning.version import SemanticVersion


def make_context(repository, configuration=None, branch=None, next_version=None):
    configuration = configuration or GitVersionConfiguration()
    branch = branch or repository.current_branch()
    classification = BranchClassifier(configuration.branches).classify(branch)
    return VersionContext(
        repository=repository,
        configuration=configuration,
        current_branch=branch,
        current_commit=repository.head_sha(),
        classification=classification,
        next_version=next_version,
    )


def commit(sha, message):
    return CommitInfo(sha=sha, message=message, date="2024-05-01T10:00:00+00:00")


@pytest.mark.short
class TestStrategyHelpers:
    """Test strategy name parsing and message helpers."""

    def test_priority_order(self):
        assert PRIORITY_ORDER[0] == Strategy.configured_next_version
        assert PRIORITY_ORDER[-1] == Strategy.fallback
        assert set(PRIORITY_ORDER) == set(Strategy)

    def test_parse_strategies_is_case_insensitive_and_ordered(self):
        parsed = parse_strategies(["fallback", "TAGGEDCOMMIT", "ConfiguredNextVersion"])
        assert parsed == [
            Strategy.configured_next_version,
            Strategy.tagged_commit,
            Strategy.fallback,
        ]

    def test_parse_strategies_ignores_unknown(self, capture_logs):
        assert parse_strategies(["Bogus", "Fallback"]) == [Strategy.fallback]
        assert "Bogus" in capture_logs.getvalue()

    @pytest.mark.parametrize(
        "message,branch",
        [
            ("Merge branch 'release/1.2.0' into main", "release/1.2.0"),
            ("Merge pull request #12 from org/release/2.0.0", "org/release/2.0.0"),
            ("Merge 'hotfix/1.0.1' into develop", "hotfix/1.0.1"),
            ("Merge release-3.0.0 into main", "release-3.0.0"),
        ],
    )
    def test_merged_branch_name(self, message, branch):
        assert merged_branch_name(message) == branch
        assert is_merge_message(message)

    def test_not_a_merge_message(self):
        assert merged_branch_name("Fix merge conflicts in parser") is None
        assert not is_merge_message("Add feature")

    def test_strip_tag_prefix(self):
        assert strip_tag_prefix("v1.2.3", "[vV]") == "1.2.3"
        assert strip_tag_prefix("V1.2.3", "[vV]") == "1.2.3"
        assert strip_tag_prefix("1.2.3", "[vV]") == "1.2.3"
        assert strip_tag_prefix("release-1.2.3", "release-") == "1.2.3"
        assert strip_tag_prefix("v1.2.3", "") == "v1.2.3"


@pytest.mark.short
class TestFallbackAndConfigured:
    def test_fallback(self, make_repository):
        candidates = FallbackStrategy().get_base_versions(make_context(make_repository()))
        assert len(candidates) == 1
        assert candidates[0].version == SemanticVersion(0, 0, 0)
        assert candidates[0].should_increment is True
        assert candidates[0].strategy == Strategy.fallback

    def test_configured_override(self, make_repository):
        context = make_context(make_repository(), next_version="2.0.0")
        candidates = ConfiguredNextVersionStrategy().get_base_versions(context)
        assert candidates[0].version == SemanticVersion(2, 0, 0)
        assert candidates[0].should_increment is False

    def test_configuration_next_version(self, make_repository):
        configuration = GitVersionConfiguration(next_version="1.5.0")
        context = make_context(make_repository(), configuration)
        candidates = ConfiguredNextVersionStrategy().get_base_versions(context)
        assert candidates[0].version == SemanticVersion(1, 5, 0)

    def test_override_beats_configuration(self, make_repository):
        configuration = GitVersionConfiguration(next_version="1.5.0")
        context = make_context(make_repository(), configuration, next_version="3.0.0")
        candidates = ConfiguredNextVersionStrategy().get_base_versions(context)
        assert candidates[0].version == SemanticVersion(3, 0, 0)

    def test_no_next_version(self, make_repository):
        context = make_context(make_repository())
        assert ConfiguredNextVersionStrategy().get_base_versions(context) == []

    def test_invalid_next_version_is_fatal(self, make_repository):
        context = make_context(make_repository(), next_version="banana")
        with pytest.raises(InvalidConfiguredVersionError, match="banana"):
            ConfiguredNextVersionStrategy().get_base_versions(context)


@pytest.mark.short
class TestTaggedCommitStrategy:
    def test_one_candidate_per_version_tag(self, make_repository):
        repository = make_repository(
            tags={"v1.0.0": "sha1", "latest": "sha2", "v1.1.0": "sha3"}
        )
        candidates = TaggedCommitStrategy().get_base_versions(make_context(repository))
        assert [str(c.version) for c in candidates] == ["1.0.0", "1.1.0"]
        assert [c.source_commit for c in candidates] == ["sha1", "sha3"]
        assert all(c.should_increment for c in candidates)

    def test_ignored_sha_skipped(self, make_repository):
        repository = make_repository(tags={"v1.0.0": "deadbeef1234", "v1.1.0": "cafe"})
        configuration = GitVersionConfiguration(
            ignore=IgnoreConfiguration(sha=["deadbeef"])
        )
        candidates = TaggedCommitStrategy().get_base_versions(
            make_context(repository, configuration)
        )
        assert [str(c.version) for c in candidates] == ["1.1.0"]

    def test_repository_errors_propagate(self, make_repository):
        repository = make_repository(tags={"v1.0.0": "sha1"})
        repository.tags_reachable_from_head = lambda: ["v2.0.0"]
        with pytest.raises(KeyError):
            TaggedCommitStrategy().get_base_versions(make_context(repository))


@pytest.mark.short
class TestVersionInBranchNameStrategy:
    def test_version_in_release_branch(self, make_repository):
        repository = make_repository(branch="release/1.2.0")
        candidates = VersionInBranchNameStrategy().get_base_versions(
            make_context(repository)
        )
        assert candidates[0].version == SemanticVersion(1, 2, 0)
        assert candidates[0].should_increment is False
        assert candidates[0].source_commit == repository.sha

    def test_no_version_in_branch(self, make_repository):
        repository = make_repository(branch="feature/login")
        assert VersionInBranchNameStrategy().get_base_versions(make_context(repository)) == []


@pytest.mark.short
class TestTrackReleaseBranchesStrategy:
    def test_tracks_release_branches_on_develop(self, make_repository):
        repository = make_repository(
            branch="develop",
            remote_branches=["main", "release/1.3.0", "release/next", "feature/1.9.0"],
            merge_bases={"release/1.3.0": "base13"},
        )
        candidates = TrackReleaseBranchesStrategy().get_base_versions(
            make_context(repository)
        )
        assert len(candidates) == 1
        assert candidates[0].version == SemanticVersion(1, 3, 0)
        assert candidates[0].source_commit == "base13"
        assert candidates[0].should_increment is True

    def test_release_without_shared_history_skipped(self, make_repository):
        repository = make_repository(branch="develop", remote_branches=["release/1.3.0"])
        assert TrackReleaseBranchesStrategy().get_base_versions(make_context(repository)) == []

    def test_inactive_when_policy_does_not_track(self, make_repository):
        repository = make_repository(
            branch="main",
            remote_branches=["release/1.3.0"],
            merge_bases={"release/1.3.0": "base13"},
        )
        assert TrackReleaseBranchesStrategy().get_base_versions(make_context(repository)) == []


@pytest.mark.short
class TestMergeMessageStrategy:
    def test_merge_of_release_branch(self, make_repository):
        repository = make_repository(
            history=[
                commit("c3", "Fix typo"),
                commit("c2", "Merge branch 'release/2.1.0' into main"),
                commit("c1", "Merge branch 'feature/login'"),
            ]
        )
        candidates = MergeMessageStrategy().get_base_versions(make_context(repository))
        assert len(candidates) == 1
        assert candidates[0].version == SemanticVersion(2, 1, 0)
        assert candidates[0].source_commit == "c2"
        assert candidates[0].should_increment is True

    def test_of_merged_branch_disables_increment(self, make_repository):
        repository = make_repository(
            branch="release/3.0.0",
            history=[commit("c1", "Merge branch 'hotfix/2.9.1'")],
        )
        candidates = MergeMessageStrategy().get_base_versions(make_context(repository))
        assert candidates[0].should_increment is False

    def test_disabled_by_policy(self, make_repository):
        configuration = GitVersionConfiguration.from_dict(
            {"branches": {"main": {"track-merge-message": False}}}
        )
        repository = make_repository(
            history=[commit("c1", "Merge branch 'release/2.1.0'")]
        )
        context = make_context(repository, configuration)
        assert MergeMessageStrategy().get_base_versions(context) == []

    def test_ignored_commits_skipped(self, make_repository):
        configuration = GitVersionConfiguration(ignore=IgnoreConfiguration(sha=["c1"]))
        repository = make_repository(
            history=[commit("c1", "Merge branch 'release/2.1.0'")]
        )
        context = make_context(repository, configuration)
        assert MergeMessageStrategy().get_base_versions(context) == []


@pytest.mark.short
class TestMainlineStrategy:
    def test_latest_tag(self, make_repository):
        repository = make_repository(tags={"v1.0.0": "sha1", "v1.4.0": "sha4"})
        candidates = MainlineStrategy().get_base_versions(make_context(repository))
        assert candidates[0].version == SemanticVersion(1, 4, 0)
        assert candidates[0].source_commit == "sha4"

    def test_no_tags_gives_zero(self, make_repository):
        candidates = MainlineStrategy().get_base_versions(make_context(make_repository()))
        assert candidates[0].version == SemanticVersion(0, 0, 0)

    def test_invalid_tag_gives_zero(self, make_repository):
        repository = make_repository(tags={"nightly": "sha1"})
        candidates = MainlineStrategy().get_base_versions(make_context(repository))
        assert candidates[0].version == SemanticVersion(0, 0, 0)

    def test_only_on_main_branches(self, make_repository):
        repository = make_repository(branch="develop", tags={"v1.0.0": "sha1"})
        assert MainlineStrategy().get_base_versions(make_context(repository)) == []

    def test_custom_main_policy(self, make_repository):
        configuration = GitVersionConfiguration(
            branches={"trunk": BranchConfiguration(regex="^trunk$", is_main_branch=True)}
        )
        repository = make_repository(branch="trunk", tags={"v0.3.0": "sha1"})
        candidates = MainlineStrategy().get_base_versions(
            make_context(repository, configuration)
        )
        assert candidates[0].version == SemanticVersion(0, 3, 0)
