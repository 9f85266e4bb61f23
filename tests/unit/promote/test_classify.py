"""Tests for reference classification."""

from gitlab_fork.gateway.git.auth import NoAuth
from gitlab_fork.gateway.git.fake import FakeGit
from gitlab_fork.gateway.git.types import RemoteRef, RemoteRefsError
from gitlab_fork.promote.classify import classify_from_refs, classify_reference
from gitlab_fork.promote.types import Reference

URL = "https://gitlab.example.com/dev/model.git"
SHA = "1111111111111111111111111111111111111111"


class TestClassifyFromRefs:
    """Tests for classification against a listed set of refs."""

    def test_tag_wins_over_branch_with_same_name(self) -> None:
        """A name that is both tag and branch is classified as tag."""
        refs = [
            RemoteRef(name="refs/heads/release", sha=SHA, peeled=False),
            RemoteRef(name="refs/tags/release", sha=SHA, peeled=False),
        ]

        assert classify_from_refs(refs, "release") == Reference(name="release", kind="tag")

    def test_branch_only(self) -> None:
        """A name that is only a branch is classified as branch."""
        refs = [RemoteRef(name="refs/heads/feature", sha=SHA, peeled=False)]

        assert classify_from_refs(refs, "feature").kind == "branch"

    def test_absent_name_is_unresolved(self) -> None:
        """A name matching nothing is unresolved."""
        refs = [RemoteRef(name="refs/heads/main", sha=SHA, peeled=False)]

        result = classify_from_refs(refs, "v9")

        assert result.kind == "unresolved"
        assert not result.is_resolved

    def test_peeled_entry_counts_as_tag(self) -> None:
        """The peeled line of an annotated tag still identifies the tag."""
        refs = [RemoteRef(name="refs/tags/v1.0", sha=SHA, peeled=True)]

        assert classify_from_refs(refs, "v1.0").kind == "tag"

    def test_prefix_of_longer_name_does_not_match(self) -> None:
        """Only exact names match, not prefixes of other refs."""
        refs = [RemoteRef(name="refs/tags/v1.0.1", sha=SHA, peeled=False)]

        assert classify_from_refs(refs, "v1.0").kind == "unresolved"


class TestClassifyReference:
    """Tests for classification by querying a remote."""

    def test_queries_remote(self) -> None:
        """The remote is listed and the name classified."""
        git = FakeGit(remotes={URL: {"refs/tags/v1.0": SHA}})

        result = classify_reference(git, URL, "v1.0", auth=NoAuth())

        assert result == Reference(name="v1.0", kind="tag")
        assert git.listed_urls == [URL]

    def test_unreachable_remote_returns_error(self) -> None:
        """A listing failure is returned, not raised."""
        git = FakeGit(unreachable_urls={URL: "Could not resolve host: gitlab.example.com"})

        result = classify_reference(git, URL, "v1.0", auth=NoAuth())

        assert isinstance(result, RemoteRefsError)
        assert "Could not resolve host" in result.message


class TestReference:
    """Tests for Reference ref name helpers."""

    def test_tag_ref_names(self) -> None:
        reference = Reference(name="v1.0", kind="tag")

        assert reference.full_name == "refs/tags/v1.0"
        assert reference.local_ref == "refs/tags/v1.0"
        assert reference.full_name_for("v1.0-prod") == "refs/tags/v1.0-prod"

    def test_branch_ref_names(self) -> None:
        reference = Reference(name="release", kind="branch")

        assert reference.full_name == "refs/heads/release"
        assert reference.local_ref == "refs/remotes/origin/release"
