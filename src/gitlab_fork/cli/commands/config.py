import click

from gitlab_fork.cli.config import get_config_keys, parse_config_value, write_config_value
from gitlab_fork.core.context import CliContext
from gitlab_fork.output.output import machine_output, user_output


def _format_config_value(value: object) -> str:
    """Format a config value for display."""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _ensure_known_key(key: str) -> None:
    if key not in get_config_keys():
        user_output(f"Invalid key: {key}")
        raise SystemExit(1)


@click.group("config")
def config_group() -> None:
    """Manage gitlab-fork-cli configuration."""


@config_group.command("keys")
def config_keys() -> None:
    """List all available configuration keys with descriptions."""
    formatter = click.HelpFormatter()
    user_output(click.style("Configuration keys:", bold=True))
    formatter.write_dl(list(get_config_keys().items()))
    user_output(formatter.getvalue().rstrip())


@config_group.command("list")
@click.pass_obj
def config_list(ctx: CliContext) -> None:
    """Print the effective configuration."""
    user_output(click.style(f"Configuration ({ctx.config_path}):", bold=True))
    if not ctx.config_path.exists():
        user_output("  (no config file - showing defaults)")
    for key in get_config_keys():
        user_output(f"  {key}={_format_config_value(getattr(ctx.config, key))}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: CliContext, key: str) -> None:
    """Print the value of a given configuration key."""
    _ensure_known_key(key)
    machine_output(_format_config_value(getattr(ctx.config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: CliContext, key: str, value: str) -> None:
    """Update the config file with a value for the given key."""
    _ensure_known_key(key)
    try:
        parsed = parse_config_value(key, value)
    except ValueError as e:
        user_output(str(e))
        raise SystemExit(1) from e

    write_config_value(ctx.config_path, key, parsed)
    user_output(f"Set {key}={_format_config_value(parsed)}")
