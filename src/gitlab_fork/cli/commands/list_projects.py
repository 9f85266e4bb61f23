"""List the projects of a GitLab group."""

import click

from gitlab_fork.cli.config import token_settings
from gitlab_fork.cli.render import render_events
from gitlab_fork.core.context import CliContext
from gitlab_fork.fork.operations import execute_list_projects
from gitlab_fork.fork.types import ProjectOperationError
from gitlab_fork.gateway.gitlab.types import VISIBILITIES, Visibility
from gitlab_fork.output.output import machine_output, user_output


@click.command("list-projects")
@click.option("--group", "-g", required=True, help="GitLab group path")
@click.option(
    "--visibility",
    "-v",
    type=click.Choice(VISIBILITIES, case_sensitive=False),
    default=None,
    help="Only list projects with this visibility",
)
@click.pass_obj
def list_projects_cmd(ctx: CliContext, group: str, visibility: Visibility | None) -> None:
    """List every project in a group, subgroups included."""
    settings = token_settings(ctx.config)
    result = render_events(execute_list_projects(ctx, group, visibility, settings))

    if result is None:
        user_output(click.style("Error: listing did not complete", fg="red", bold=True))
        raise SystemExit(1)
    if isinstance(result, ProjectOperationError):
        user_output(click.style(f"Error: {result.message}", fg="red", bold=True))
        raise SystemExit(1)

    scope = visibility or "all"
    if not result.projects:
        user_output(f"No projects found in group '{group}' (visibility: {scope})")
        return

    user_output(
        click.style(
            f"Projects in group '{group}' (visibility: {scope}, {len(result.projects)} total):",
            bold=True,
        )
    )
    for index, project in enumerate(result.projects, start=1):
        machine_output(
            f"{index}. {project.name_with_namespace} (ID: {project.id}, "
            f"path: {project.path_with_namespace}, visibility: {project.visibility})"
        )
