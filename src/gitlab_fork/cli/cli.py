import logging
from dataclasses import replace

import click

from gitlab_fork.cli.commands.clone import clone_cmd
from gitlab_fork.cli.commands.config import config_group
from gitlab_fork.cli.commands.fork import fork_cmd
from gitlab_fork.cli.commands.list_projects import list_projects_cmd
from gitlab_fork.cli.config import config_path, load_config
from gitlab_fork.core.context import create_context
from gitlab_fork.output.output import user_output

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="gitlab-fork-cli")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--base-url", "-u", default=None, help="GitLab instance URL (overrides config)")
@click.option(
    "--insecure",
    "-k",
    is_flag=True,
    help="Skip TLS certificate verification (overrides config)",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, base_url: str | None, insecure: bool) -> None:
    """Move GitLab projects, tags and branches between groups and instances."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is not None:
        return

    path = config_path()
    try:
        config = load_config(path)
    except ValueError as e:
        user_output(click.style(f"Error: invalid configuration: {e}", fg="red"))
        raise SystemExit(1) from e

    if base_url is not None:
        config = replace(config, base_url=base_url)
    if insecure:
        config = replace(config, insecure=True)
    ctx.obj = create_context(config, path)


cli.add_command(clone_cmd)
cli.add_command(config_group)
cli.add_command(fork_cmd)
cli.add_command(list_projects_cmd)


def main() -> None:
    """CLI entry point used by the `gitlab-fork-cli` script."""
    cli()
