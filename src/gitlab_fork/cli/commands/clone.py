"""Promote a tag or branch from one repository to another."""

from pathlib import Path

import click

from gitlab_fork.cli.render import render_events
from gitlab_fork.core.context import CliContext
from gitlab_fork.gateway.git.auth import auth_from_token
from gitlab_fork.naming import default_work_dir, format_run_suffix, new_run_token
from gitlab_fork.output.output import user_output
from gitlab_fork.promote.pipeline import execute_promote
from gitlab_fork.promote.types import (
    TAG_EXISTS_POLICIES,
    PromoteError,
    PromoteRequest,
    PromoteSkipped,
    PromoteSuccess,
    TagExistsPolicy,
)

# Exit status when the reference was already published and the policy is "skip".
# 2 is taken by click for usage errors.
EXIT_SKIPPED = 3


@click.command("clone")
@click.option("--from-repo-url", required=True, help="Source repository URL")
@click.option("--from-ref", required=True, help="Tag or branch to promote")
@click.option(
    "--from-token",
    envvar="GITLAB_FORK_FROM_TOKEN",
    show_envvar=True,
    default=None,
    help="Access token for the source (anonymous if omitted)",
)
@click.option("--to-repo-url", required=True, help="Destination repository URL")
@click.option(
    "--to-ref",
    "--to-tag",
    "to_ref",
    default=None,
    help="Name on the destination (defaults to the source name)",
)
@click.option(
    "--to-token",
    envvar="GITLAB_FORK_TO_TOKEN",
    show_envvar=True,
    default=None,
    help="Access token for the destination (anonymous if omitted)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Working directory for the local copy (defaults to a new temp directory)",
)
@click.option(
    "--on-tag-exists",
    type=click.Choice(TAG_EXISTS_POLICIES),
    default="error",
    show_default=True,
    help="What to do when the reference is already on the destination",
)
@click.option(
    "--remove-reused-dir",
    is_flag=True,
    help="Delete --output-dir afterwards even if it held a repository before this run",
)
@click.pass_obj
def clone_cmd(
    ctx: CliContext,
    from_repo_url: str,
    from_ref: str,
    from_token: str | None,
    to_repo_url: str,
    to_ref: str | None,
    to_token: str | None,
    output_dir: Path | None,
    on_tag_exists: TagExistsPolicy,
    remove_reused_dir: bool,
) -> None:
    """Copy a tag or branch, with the commits it needs, to another repository."""
    if output_dir is None:
        work_dir = default_work_dir(format_run_suffix(ctx.time.now(), new_run_token()))
    else:
        work_dir = output_dir.expanduser().absolute()

    request = PromoteRequest(
        source_url=from_repo_url,
        source_ref=from_ref,
        destination_url=to_repo_url,
        destination_ref=to_ref,
        work_dir=work_dir,
        on_tag_exists=on_tag_exists,
        default_branch=ctx.config.default_branch,
        remove_reused_work_dir=remove_reused_dir,
        source_auth=auth_from_token(from_token, username=ctx.config.git_username),
        destination_auth=auth_from_token(to_token, username=ctx.config.git_username),
    )

    outcome = render_events(execute_promote(ctx, request))
    if outcome is None:
        user_output(click.style("Error: promotion did not complete", fg="red", bold=True))
        raise SystemExit(1)

    if outcome.warnings:
        user_output(click.style(f"Finished with {len(outcome.warnings)} warning(s)", fg="yellow"))

    match outcome:
        case PromoteSuccess():
            user_output(click.style(f"✅ {outcome.message}", fg="green", bold=True))
        case PromoteSkipped():
            user_output(click.style(f"Skipped: {outcome.message}", fg="yellow"))
            raise SystemExit(EXIT_SKIPPED)
        case PromoteError():
            user_output(
                click.style(f"Error: {outcome.stage}: {outcome.message}", fg="red", bold=True)
            )
            raise SystemExit(1)
