"""Tests for the fork and list-projects commands."""

from click.testing import CliRunner

from gitlab_fork.cli.cli import cli
from gitlab_fork.cli.config import GlobalConfig
from gitlab_fork.core.context import CliContext
from gitlab_fork.gateway.gitlab.fake import FakeGitLab
from gitlab_fork.gateway.gitlab.types import GitLabProject
from gitlab_fork.gateway.secrets.fake import FakeClusterSecrets

CONFIG = GlobalConfig(
    secret_name="gitlab-token",
    secret_key="token",
    admin_namespace="admin",
    models_group="models",
)


def _project(project_id: int, name: str, group: str, visibility: str = "private") -> GitLabProject:
    return GitLabProject(
        id=project_id,
        name=name,
        path=name,
        name_with_namespace=f"{group} / {name}",
        path_with_namespace=f"{group}/{name}",
        visibility=visibility,
        web_url=f"https://gitlab.example.com/{group}/{name}",
    )


def _secrets() -> FakeClusterSecrets:
    return FakeClusterSecrets(
        namespaces={"dev", "prod", "admin"},
        secrets={
            ("dev", "gitlab-token", "token"): "dev-token",
            ("prod", "gitlab-token", "token"): "prod-token",
            ("admin", "gitlab-token", "token"): "admin-token",
        },
    )


def _context(gitlab: FakeGitLab, secrets: FakeClusterSecrets | None = None) -> CliContext:
    return CliContext.for_test(
        gitlab=gitlab,
        secrets=secrets if secrets is not None else _secrets(),
        config=CONFIG,
    )


class TestForkCommand:
    def test_fork_prints_details(self) -> None:
        gitlab = FakeGitLab(group_projects={"dev": [_project(7, "model", "dev")]})

        result = CliRunner().invoke(
            cli, ["fork", "-g", "dev", "-p", "model", "-t", "prod"], obj=_context(gitlab)
        )

        assert result.exit_code == 0, result.output
        assert "Project forked" in result.output
        assert "Path: prod/models/model" in result.output
        assert "Forked from: dev / model (ID: 7)" in result.output
        assert "https://gitlab.example.com/prod/models/model" in result.stdout
        assert gitlab.forks == [("admin-token", 7, "prod/models")]

    def test_fork_error_exit_code(self) -> None:
        gitlab = FakeGitLab(group_projects={"dev": [_project(7, "model", "dev")]})

        result = CliRunner().invoke(
            cli,
            ["fork", "--source-group", "dev", "--source-project", "nope", "--target-group", "prod"],
            obj=_context(gitlab),
        )

        assert result.exit_code == 1
        assert "Error: Project 'nope' was not found in group 'dev'" in result.output

    def test_fork_requires_all_options(self) -> None:
        result = CliRunner().invoke(cli, ["fork", "-g", "dev"], obj=_context(FakeGitLab()))

        assert result.exit_code == 2


class TestListProjectsCommand:
    def test_lists_projects(self) -> None:
        gitlab = FakeGitLab(
            group_projects={"dev": [_project(1, "alpha", "dev"), _project(2, "beta", "dev")]}
        )

        result = CliRunner().invoke(cli, ["list-projects", "-g", "dev"], obj=_context(gitlab))

        assert result.exit_code == 0, result.output
        assert "2 total" in result.output
        assert (
            "1. dev / alpha (ID: 1, path: dev/alpha, visibility: private)" in result.stdout
        )
        assert "2. dev / beta (ID: 2, path: dev/beta, visibility: private)" in result.stdout

    def test_visibility_is_case_insensitive(self) -> None:
        gitlab = FakeGitLab(
            group_projects={
                "dev": [_project(1, "alpha", "dev", "public"), _project(2, "beta", "dev")]
            }
        )

        result = CliRunner().invoke(
            cli, ["list-projects", "-g", "dev", "-v", "PUBLIC"], obj=_context(gitlab)
        )

        assert result.exit_code == 0, result.output
        assert "dev / alpha" in result.stdout
        assert "dev / beta" not in result.stdout

    def test_empty_group(self) -> None:
        result = CliRunner().invoke(
            cli, ["list-projects", "-g", "empty"], obj=_context(FakeGitLab())
        )

        assert result.exit_code == 0
        assert "No projects found in group 'empty' (visibility: all)" in result.output

    def test_invalid_visibility(self) -> None:
        result = CliRunner().invoke(
            cli, ["list-projects", "-g", "dev", "-v", "secret"], obj=_context(FakeGitLab())
        )

        assert result.exit_code == 2

    def test_missing_admin_token(self) -> None:
        result = CliRunner().invoke(
            cli,
            ["list-projects", "-g", "dev"],
            obj=_context(FakeGitLab(), FakeClusterSecrets(namespaces={"admin"})),
        )

        assert result.exit_code == 1
        assert "Could not read the admin token" in result.output
