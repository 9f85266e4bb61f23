"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from gitlab_fork.cli.config import GlobalConfig
from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.git.real import RealGit
from gitlab_fork.gateway.gitlab.abc import GitLab
from gitlab_fork.gateway.gitlab.real import RealGitLab
from gitlab_fork.gateway.secrets.abc import ClusterSecrets
from gitlab_fork.gateway.secrets.real import RealClusterSecrets
from gitlab_fork.gateway.time.abc import Time
from gitlab_fork.gateway.time.real import RealTime


@dataclass(frozen=True)
class CliContext:
    """Immutable context holding all dependencies for CLI commands.

    Created at the CLI entry point and threaded through the application.
    Satisfies both PromoteKit and ProjectKit structurally.
    """

    git: Git
    gitlab: GitLab
    secrets: ClusterSecrets
    time: Time
    config: GlobalConfig
    config_path: Path

    @staticmethod
    def for_test(
        git: Git | None = None,
        gitlab: GitLab | None = None,
        secrets: ClusterSecrets | None = None,
        time: Time | None = None,
        config: GlobalConfig | None = None,
        config_path: Path | None = None,
    ) -> "CliContext":
        """Create test context with fakes for every dependency not given.

        Example:
            >>> git = FakeGit(remotes={"https://src/repo.git": {"refs/tags/v1": "abc"}})
            >>> ctx = CliContext.for_test(git=git)
        """
        from gitlab_fork.gateway.git.fake import FakeGit
        from gitlab_fork.gateway.gitlab.fake import FakeGitLab
        from gitlab_fork.gateway.secrets.fake import FakeClusterSecrets
        from gitlab_fork.gateway.time.fake import FakeTime

        return CliContext(
            git=git if git is not None else FakeGit(),
            gitlab=gitlab if gitlab is not None else FakeGitLab(),
            secrets=secrets if secrets is not None else FakeClusterSecrets(),
            time=time if time is not None else FakeTime(),
            config=config if config is not None else GlobalConfig(),
            config_path=config_path if config_path is not None else Path("/test/config.toml"),
        )


def create_context(config: GlobalConfig, config_path: Path) -> CliContext:
    """Create the production context from effective configuration."""
    return CliContext(
        git=RealGit(timeout_seconds=config.git_timeout_seconds, insecure=config.insecure),
        gitlab=RealGitLab(base_url=config.base_url, insecure=config.insecure),
        secrets=RealClusterSecrets(),
        time=RealTime(),
        config=config,
        config_path=config_path,
    )
