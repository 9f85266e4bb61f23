"""Fork a GitLab project into the models group of a target namespace."""

import click

from gitlab_fork.cli.config import token_settings
from gitlab_fork.cli.render import render_events
from gitlab_fork.core.context import CliContext
from gitlab_fork.fork.operations import execute_fork
from gitlab_fork.fork.types import ForkRequest, ProjectOperationError
from gitlab_fork.output.output import machine_output, user_output


@click.command("fork")
@click.option("--source-group", "-g", required=True, help="Namespace (GitLab group) of the project")
@click.option("--source-project", "-p", required=True, help="Name of the project to fork")
@click.option("--target-group", "-t", required=True, help="Namespace receiving the fork")
@click.pass_obj
def fork_cmd(ctx: CliContext, source_group: str, source_project: str, target_group: str) -> None:
    """Fork a project from a development group into a production group.

    Tokens are read from the cluster secret of each namespace; the fork lands
    in <target-group>/<models_group>.
    """
    request = ForkRequest(
        source_group=source_group,
        source_project=source_project,
        target_group=target_group,
    )
    result = render_events(execute_fork(ctx, request, token_settings(ctx.config)))

    if result is None:
        user_output(click.style("Error: fork did not complete", fg="red", bold=True))
        raise SystemExit(1)
    if isinstance(result, ProjectOperationError):
        user_output(click.style(f"Error: {result.message}", fg="red", bold=True))
        raise SystemExit(1)

    fork = result.fork
    user_output(click.style("\n🎉 Project forked:", fg="green", bold=True))
    user_output(f"  ID: {fork.id}")
    user_output(f"  Name: {fork.name}")
    user_output(f"  Path: {fork.path_with_namespace}")
    user_output(f"  Web URL: {fork.web_url}")
    if fork.forked_from is not None:
        user_output(
            f"  Forked from: {fork.forked_from.name_with_namespace} (ID: {fork.forked_from.id})"
        )
    else:
        user_output("  Forked from: (not reported)")
    machine_output(fork.web_url)
