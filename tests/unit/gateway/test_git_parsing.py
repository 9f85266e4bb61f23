"""Tests for git output parsing and subprocess environment helpers."""

import pytest

from gitlab_fork.gateway.git.real import (
    PushRefStatus,
    parse_ls_remote_output,
    parse_push_ref_status,
)
from gitlab_fork.gateway.git.types import RemoteRef
from gitlab_fork.subprocess_utils import copied_env_for_git_subprocess

SHA_1 = "1" * 40
SHA_2 = "2" * 40
SHA_3 = "3" * 40


class TestParseLsRemoteOutput:
    def test_branches_and_tags(self) -> None:
        output = f"{SHA_1}\tHEAD\n{SHA_1}\trefs/heads/main\n{SHA_2}\trefs/tags/v1.0\n"

        refs = parse_ls_remote_output(output)

        assert refs == [
            RemoteRef(name="HEAD", sha=SHA_1, peeled=False),
            RemoteRef(name="refs/heads/main", sha=SHA_1, peeled=False),
            RemoteRef(name="refs/tags/v1.0", sha=SHA_2, peeled=False),
        ]

    def test_peeled_line_keeps_base_name(self) -> None:
        """The ^{} line of an annotated tag is reported under the tag's name."""
        output = f"{SHA_2}\trefs/tags/v1.0\n{SHA_3}\trefs/tags/v1.0^{{}}\n"

        refs = parse_ls_remote_output(output)

        assert refs[1] == RemoteRef(name="refs/tags/v1.0", sha=SHA_3, peeled=True)
        assert refs[1].is_tag
        assert refs[1].short_name == "v1.0"

    def test_ignores_blank_and_malformed_lines(self) -> None:
        output = f"\nwarning: redirecting to https://example.com/\n{SHA_1}\trefs/heads/dev\n"

        assert parse_ls_remote_output(output) == [
            RemoteRef(name="refs/heads/dev", sha=SHA_1, peeled=False)
        ]

    def test_empty_repository(self) -> None:
        assert parse_ls_remote_output("") == []


class TestParsePushRefStatus:
    def test_finds_line_for_destination(self) -> None:
        output = (
            "To https://gitlab.example.com/prod/model.git\n"
            "=\trefs/heads/main:refs/heads/main\t[up to date]\n"
            "!\trefs/tags/v1.0:refs/tags/v1.0\t[rejected] (already exists)\n"
            "Done\n"
        )

        status = parse_push_ref_status(output, "refs/tags/v1.0")

        assert status == PushRefStatus(flag="!", summary="[rejected] (already exists)")
        assert status.reason == "already exists"

    def test_up_to_date_flag(self) -> None:
        output = "=\trefs/heads/main:refs/heads/main\t[up to date]\n"

        status = parse_push_ref_status(output, "refs/heads/main")

        assert status is not None
        assert status.flag == "="
        assert status.reason is None

    def test_missing_destination(self) -> None:
        output = "*\trefs/heads/a:refs/heads/a\t[new branch]\n"

        assert parse_push_ref_status(output, "refs/heads/b") is None

    @pytest.mark.parametrize(
        ("summary", "reason"),
        [
            ("[rejected] (non-fast-forward)", "non-fast-forward"),
            ("[remote rejected] (pre-receive hook declined)", "pre-receive hook declined"),
            ("[new tag]", None),
        ],
    )
    def test_reason(self, summary: str, reason: str | None) -> None:
        assert PushRefStatus(flag="!", summary=summary).reason == reason


class TestCopiedEnvForGitSubprocess:
    def test_disables_prompt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GIT_CONFIG_COUNT", raising=False)

        env = copied_env_for_git_subprocess()

        assert env["GIT_TERMINAL_PROMPT"] == "0"
        assert "GIT_CONFIG_COUNT" not in env

    def test_adds_config_entries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GIT_CONFIG_COUNT", raising=False)

        env = copied_env_for_git_subprocess(
            {"http.extraHeader": "Authorization: Basic abc", "http.sslVerify": "false"}
        )

        assert env["GIT_CONFIG_COUNT"] == "2"
        assert env["GIT_CONFIG_KEY_0"] == "http.extraHeader"
        assert env["GIT_CONFIG_VALUE_0"] == "Authorization: Basic abc"
        assert env["GIT_CONFIG_KEY_1"] == "http.sslVerify"

    def test_appends_after_existing_entries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Entries configured by the caller's environment are kept."""
        monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
        monkeypatch.setenv("GIT_CONFIG_KEY_0", "core.askPass")
        monkeypatch.setenv("GIT_CONFIG_VALUE_0", "")

        env = copied_env_for_git_subprocess({"http.sslVerify": "false"})

        assert env["GIT_CONFIG_COUNT"] == "2"
        assert env["GIT_CONFIG_KEY_0"] == "core.askPass"
        assert env["GIT_CONFIG_KEY_1"] == "http.sslVerify"
